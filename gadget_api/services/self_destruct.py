"""Pending self-destruct confirmation codes.

Each gadget has at most one outstanding code. Issuing a new code replaces the
previous one, and a successful confirmation removes it so a code can only be
used once. Codes live in process memory; a restart discards them and the
operator has to request a fresh one.
"""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable

CODE_MIN = 10000
CODE_MAX = 99999


class MissingCode(Exception):
    """No code is pending for the gadget (never issued, consumed, or expired)."""


class CodeMismatch(Exception):
    """A code is pending but the supplied value does not match it."""


@dataclass(frozen=True)
class PendingCode:
    code: str
    issued_at: float


def generate_code() -> str:
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


class PendingCodeStore:
    """Thread-safe map of gadget id to its pending confirmation code."""

    def __init__(
        self,
        ttl_seconds: int = 0,
        *,
        clock: Callable[[], float] = time.monotonic,
        code_factory: Callable[[], str] = generate_code,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._code_factory = code_factory
        self._lock = threading.Lock()
        self._pending: dict[str, PendingCode] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def _expired(self, entry: PendingCode) -> bool:
        return bool(self.ttl_seconds) and self._clock() - entry.issued_at > self.ttl_seconds

    def issue(self, gadget_id: str) -> str:
        """Create a fresh code for ``gadget_id``, replacing any pending one."""

        code = self._code_factory()
        with self._lock:
            self._pending[gadget_id] = PendingCode(code=code, issued_at=self._clock())
        return code

    def peek(self, gadget_id: str) -> str | None:
        with self._lock:
            entry = self._pending.get(gadget_id)
            if entry is None or self._expired(entry):
                return None
            return entry.code

    def _live_entry(self, gadget_id: str) -> PendingCode | None:
        entry = self._pending.get(gadget_id)
        if entry is not None and self._expired(entry):
            del self._pending[gadget_id]
            return None
        return entry

    @staticmethod
    def _matches(entry: PendingCode, code: object) -> bool:
        # Only an exact string match counts; a number never equals a code.
        if not isinstance(code, str):
            return False
        return secrets.compare_digest(entry.code.encode("utf-8"), code.encode("utf-8"))

    def verify(self, gadget_id: str, code: object) -> None:
        """Check ``code`` against the pending one without clearing it.

        Raises ``MissingCode`` when nothing is pending and ``CodeMismatch``
        when the values differ.
        """

        with self._lock:
            entry = self._live_entry(gadget_id)
            if entry is None:
                raise MissingCode(gadget_id)
            if not self._matches(entry, code):
                raise CodeMismatch(gadget_id)

    def discard(self, gadget_id: str, code: object) -> bool:
        """Remove the pending code only if it is still ``code``.

        A code re-issued in the meantime is left alone. Returns whether an
        entry was removed.
        """

        with self._lock:
            entry = self._pending.get(gadget_id)
            if entry is None or not self._matches(entry, code):
                return False
            del self._pending[gadget_id]
            return True


__all__ = [
    "CODE_MAX",
    "CODE_MIN",
    "CodeMismatch",
    "MissingCode",
    "PendingCode",
    "PendingCodeStore",
    "generate_code",
]
