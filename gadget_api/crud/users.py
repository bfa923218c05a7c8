"""Credential store: user creation and lookup."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import BadRequest, Unauthenticated
from ..core.security import PASSWORD_MAX_BYTES, hash_password, issue_token, verify_password
from ..models.user import User
from .gadgets import utcnow_iso

logger = logging.getLogger("gadget_api.users")


def get_user_by_username(db: Session, username: str) -> User | None:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalars().first()


def create_user(db: Session, username: str, password: str) -> User:
    """Store a new user with a bcrypt hash of ``password``.

    Raises ``BadRequest`` when the username is already taken or the password
    is longer than bcrypt accepts.
    """

    username = (username or "").strip()
    if not username or not password:
        raise BadRequest("username and password are required")
    if get_user_by_username(db, username) is not None:
        raise BadRequest("username must be unique")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise BadRequest(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
    user = User(username=username, password_hash=hash_password(password), created_at=utcnow_iso())
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same name.
        db.rollback()
        raise BadRequest("username must be unique") from exc
    db.refresh(user)
    logger.info("user.registered", extra={"extra_data": {"user_id": user.id}})
    return user


def authenticate(db: Session, username: str, password: str) -> str:
    """Return a signed token for valid credentials, else raise ``Unauthenticated``."""

    user = get_user_by_username(db, (username or "").strip())
    if user is None or not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return issue_token(user.id)
