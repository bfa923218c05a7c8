from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, String, Text

from ..core.gadget_status import STATUS_AVAILABLE, STATUS_CHOICES
from ..db.session import Base

_STATUS_SQL = ", ".join(f"'{value}'" for value in STATUS_CHOICES)


class Gadget(Base):
    """A piece of field equipment. Rows are never deleted, only retired."""

    __tablename__ = "gadgets"
    __table_args__ = (CheckConstraint(f"status IN ({_STATUS_SQL})", name="ck_gadgets_status"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(Text, nullable=False, unique=True, index=True)
    status = Column(Text, nullable=False, default=STATUS_AVAILABLE, index=True)
    decommissioned_at = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["Gadget"]
