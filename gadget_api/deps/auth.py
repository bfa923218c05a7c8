from __future__ import annotations

from fastapi import Header, Request
from fastapi.security.utils import get_authorization_scheme_param

from ..core.errors import Unauthenticated
from ..core.security import decode_token
from ..middlewares import principal_ctx_var


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


def extract_token(authorization: str | None) -> str | None:
    """Return the token from ``Bearer <token>`` or a bare ``<token>`` header."""

    if not authorization or not authorization.strip():
        return None
    scheme, credentials = get_authorization_scheme_param(authorization.strip())
    if scheme.lower() == "bearer":
        return credentials or None
    return authorization.strip()


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> int:
    """Resolve the caller's user id from the Authorization header or raise 401."""

    token = extract_token(authorization)
    if token is None:
        raise Unauthenticated("No token provided")
    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise Unauthenticated("Invalid token") from exc
    request.state.user_id = payload.id
    _set_principal(request, f"user:{payload.id}")
    return payload.id
