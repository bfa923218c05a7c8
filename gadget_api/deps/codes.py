from __future__ import annotations

from fastapi import Request

from ..services.self_destruct import PendingCodeStore


def get_code_store(request: Request) -> PendingCodeStore:
    """Return the process-wide pending confirmation code store."""

    return request.app.state.code_store
