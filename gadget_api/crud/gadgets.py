"""Persistence helpers for gadget rows."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.gadget_status import STATUS_AVAILABLE
from ..models.gadget import Gadget


def utcnow_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def list_gadgets(db: Session, status: str | None = None) -> list[Gadget]:
    """Return every gadget, restricted to an exact ``status`` match when given."""

    stmt = select(Gadget).order_by(Gadget.created_at, Gadget.id)
    if status:
        stmt = stmt.where(Gadget.status == status)
    return list(db.execute(stmt).scalars().all())


def get_gadget(db: Session, gadget_id: str) -> Gadget | None:
    return db.get(Gadget, gadget_id)


def name_exists(db: Session, name: str, *, exclude_id: str | None = None) -> bool:
    stmt = select(Gadget.id).where(Gadget.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Gadget.id != exclude_id)
    return db.execute(stmt).first() is not None


def create_gadget(db: Session, name: str, status: str = STATUS_AVAILABLE) -> Gadget:
    now = utcnow_iso()
    obj = Gadget(name=name, status=status, created_at=now, updated_at=now)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def save_gadget(db: Session, gadget: Gadget, changes: dict) -> Gadget:
    """Apply ``changes`` to ``gadget`` and commit. Unknown keys are ignored."""

    for key, value in changes.items():
        if not hasattr(gadget, key):
            continue
        setattr(gadget, key, value)
    gadget.updated_at = utcnow_iso()
    db.commit()
    db.refresh(gadget)
    return gadget
