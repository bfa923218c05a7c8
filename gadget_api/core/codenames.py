"""Codename vocabulary and formatting for new gadgets."""

from __future__ import annotations

import random
import re

__all__ = ["CODENAME_NOUNS", "CODENAME_RE", "format_codename", "random_codename"]

CODENAME_NOUNS = (
    "Nightingale",
    "Kraken",
    "Phantom",
    "Vortex",
    "Specter",
    "Maverick",
    "Intruder",
    "Cipher",
    "Operative",
    "Shadow",
    "Saboteur",
    "Viper",
    "Agent",
    "Enigma",
)

CODENAME_RE = re.compile(r"^The \w+$")


def format_codename(noun: str) -> str:
    return f"The {noun}"


def random_codename(rng: random.Random | None = None) -> str:
    """Pick a noun at random and return it as ``The <Noun>``."""

    chooser = rng or random
    return format_codename(chooser.choice(CODENAME_NOUNS))
