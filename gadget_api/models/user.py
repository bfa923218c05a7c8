from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)


__all__ = ["User"]
