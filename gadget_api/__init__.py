"""Application wiring for the gadget inventory API.

This module brings together configuration, database setup, the pending
confirmation code store, middleware, routers and error handling. Importing
it yields a ready-to-serve ``app``; ``create_app`` builds a fresh instance,
which tests use to get an isolated code store.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import (
    GadgetAPIError,
    database_error_handler,
    gadget_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware
from .services.self_destruct import PendingCodeStore

# Importing the SQLAlchemy models registers them with the metadata so
# ``Base.metadata.create_all`` knows about their tables.
from .models import gadget as _gadget  # noqa: F401
from .models import user as _user  # noqa: F401


def create_app(*, create_tables: bool = True) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, version="1.0.0")

    if create_tables:
        Base.metadata.create_all(bind=engine)

    # One store per application instance; pending codes vanish on restart.
    app.state.code_store = PendingCodeStore(ttl_seconds=settings.CONFIRMATION_CODE_TTL_SEC)

    app.add_middleware(RequestIdMiddleware)

    # Public routes
    from .routers import api_auth as api_auth_router

    app.include_router(api_auth_router.router)

    # Bearer-protected routes (dependency declared on the router)
    from .routers import api_gadgets as api_gadgets_router

    app.include_router(api_gadgets_router.router)

    app.add_exception_handler(GadgetAPIError, gadget_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    return app


app = create_app()


__all__ = ["app", "create_app"]
