from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import settings

ALGORITHM = "HS256"
PASSWORD_MAX_BYTES = 72


class TokenPayload(BaseModel):
    id: int
    sub: str
    exp: datetime
    iat: datetime


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a password longer than bcrypt accepts.
        return False


def issue_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Sign a bearer token naming ``user_id`` that expires after the configured TTL."""

    now = _now()
    delta = expires_delta if expires_delta is not None else timedelta(minutes=settings.JWT_TTL_MIN)
    payload: dict[str, Any] = {
        "id": user_id,
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + delta).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    """Verify signature and expiry, raising ``ValueError`` on any failure."""

    try:
        decoded = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        return TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc
