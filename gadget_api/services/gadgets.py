"""Gadget lifecycle: codenames, status transitions and the self-destruct handshake.

Status moves freely between ``Available``, ``Deployed`` and
``Decommissioned`` through ``update_gadget``. ``Destroyed`` is reached only
through a confirmed self-destruct. Every status write keeps
``decommissioned_at`` consistent: it is stamped when a gadget becomes
``Decommissioned`` and cleared when it becomes anything else.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.codenames import random_codename
from ..core.config import settings
from ..core.errors import BadRequest, ExhaustedNamespace, Forbidden, NotFound
from ..core.gadget_status import STATUS_AVAILABLE, STATUS_DECOMMISSIONED, STATUS_DESTROYED
from ..crud import gadgets as repo
from ..models.gadget import Gadget
from .self_destruct import CodeMismatch, MissingCode, PendingCodeStore

logger = logging.getLogger("gadget_api.gadgets")

GADGET_NOT_FOUND = "Gadget not found"


def _log(event: str, gadget: Gadget, **fields: Any) -> None:
    data = {"gadget_id": gadget.id, "name": gadget.name, "status": gadget.status}
    data.update(fields)
    logger.info(event, extra={"extra_data": data})


def _require(db: Session, gadget_id: str) -> Gadget:
    gadget = repo.get_gadget(db, gadget_id)
    if gadget is None:
        raise NotFound(GADGET_NOT_FOUND)
    return gadget


def _status_changes(gadget: Gadget, status: str) -> dict[str, Any]:
    changes: dict[str, Any] = {"status": status}
    if status == STATUS_DECOMMISSIONED:
        if not gadget.decommissioned_at:
            changes["decommissioned_at"] = repo.utcnow_iso()
    else:
        changes["decommissioned_at"] = None
    return changes


def _commit(db: Session, gadget: Gadget, changes: dict[str, Any]) -> Gadget:
    try:
        return repo.save_gadget(db, gadget, changes)
    except IntegrityError as exc:
        db.rollback()
        raise BadRequest("name must be unique") from exc
    except SQLAlchemyError:
        db.rollback()
        raise


def annotate(gadget: Gadget, rng: random.Random | None = None) -> dict[str, Any]:
    """Attach a fresh mission success probability to a gadget.

    The value is drawn on every call and never stored.
    """

    probability = (rng or random).randint(1, 100)
    return {
        "id": gadget.id,
        "name": gadget.name,
        "status": gadget.status,
        "decommissioned_at": gadget.decommissioned_at,
        "created_at": gadget.created_at,
        "updated_at": gadget.updated_at,
        "success_probability": f"{probability}%",
        "display": f"{gadget.name} - {probability}% success probability",
    }


def list_gadgets(db: Session, status: str | None = None, rng: random.Random | None = None) -> list[dict[str, Any]]:
    return [annotate(gadget, rng) for gadget in repo.list_gadgets(db, status)]


def unique_codename(db: Session, max_attempts: int | None = None, rng: random.Random | None = None) -> str:
    attempts = max_attempts or settings.CODENAME_MAX_ATTEMPTS
    for _ in range(attempts):
        name = random_codename(rng)
        if not repo.name_exists(db, name):
            return name
    raise ExhaustedNamespace(f"No unique codename found after {attempts} attempts")


def create_gadget(db: Session, rng: random.Random | None = None) -> Gadget:
    name = unique_codename(db, rng=rng)
    try:
        gadget = repo.create_gadget(db, name, STATUS_AVAILABLE)
    except IntegrityError as exc:
        db.rollback()
        raise BadRequest(f"Codename {name!r} was taken concurrently; retry") from exc
    _log("gadget.created", gadget)
    return gadget


def update_gadget(db: Session, gadget_id: str, changes: dict[str, Any]) -> Gadget:
    """Apply a partial ``name``/``status`` change to an existing gadget."""

    gadget = _require(db, gadget_id)
    if not changes:
        return gadget
    data: dict[str, Any] = {}
    name = changes.get("name")
    if name is not None and name != gadget.name:
        if repo.name_exists(db, name, exclude_id=gadget.id):
            raise BadRequest("name must be unique")
        data["name"] = name
    data.update(_status_changes(gadget, changes.get("status") or gadget.status))
    gadget = _commit(db, gadget, data)
    _log("gadget.updated", gadget, fields=sorted(changes))
    return gadget


def decommission_gadget(db: Session, gadget_id: str) -> Gadget:
    # An already decommissioned gadget keeps its original timestamp.
    gadget = _require(db, gadget_id)
    gadget = _commit(db, gadget, _status_changes(gadget, STATUS_DECOMMISSIONED))
    _log("gadget.decommissioned", gadget, decommissioned_at=gadget.decommissioned_at)
    return gadget


def generate_self_destruct_code(db: Session, store: PendingCodeStore, gadget_id: str) -> str:
    gadget = _require(db, gadget_id)
    code = store.issue(gadget.id)
    _log("gadget.self_destruct.code_issued", gadget)
    return code


def confirm_self_destruct(db: Session, store: PendingCodeStore, gadget_id: str, code: str | int) -> Gadget:
    """Destroy the gadget if ``code`` matches its pending confirmation code.

    Checks happen in order: a code must be pending (``BadRequest``), it must
    match (``Forbidden``), and the gadget must exist (``NotFound``). The code
    is cleared only once the gadget has been written as destroyed.
    """

    try:
        store.verify(gadget_id, code)
    except MissingCode as exc:
        raise BadRequest("Confirmation code not generated. Please generate the code first.") from exc
    except CodeMismatch as exc:
        logger.warning("gadget.self_destruct.rejected", extra={"extra_data": {"gadget_id": gadget_id}})
        raise Forbidden("Invalid confirmation code") from exc
    gadget = _require(db, gadget_id)
    gadget = _commit(db, gadget, _status_changes(gadget, STATUS_DESTROYED))
    store.discard(gadget_id, code)
    _log("gadget.destroyed", gadget)
    return gadget


__all__ = [
    "GADGET_NOT_FOUND",
    "annotate",
    "confirm_self_destruct",
    "create_gadget",
    "decommission_gadget",
    "generate_self_destruct_code",
    "list_gadgets",
    "unique_codename",
    "update_gadget",
]
