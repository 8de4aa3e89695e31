from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from inkwell import __version__
from inkwell.authentication import (
    SessionAuthenticationBackend,
    SessionAuthenticationMiddleware,
    SessionStore,
)
from inkwell.core.config import InkwellSettings, inkwell_settings
from inkwell.core.exceptions import (
    InkwellError,
    NotFoundError,
    RenderError,
    StoreError,
    UnauthorizedError,
    ValidationFailure,
)
from inkwell.core.logging import setup_logging
from inkwell.db import close_db, create_all, init_db
from inkwell.stats import StatsAggregator

from .context import AppContext
from .middleware import RequestIdMiddleware
from .routes import api, pages
from .template_manager import TemplateManager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

# Status and public message per error kind; store and render failures
# stay opaque to the caller
ERROR_RESPONSES: dict[type[InkwellError], tuple[int, str | None]] = {
    NotFoundError: (status.HTTP_404_NOT_FOUND, "Not Found"),
    UnauthorizedError: (status.HTTP_401_UNAUTHORIZED, None),
    ValidationFailure: (status.HTTP_400_BAD_REQUEST, None),
    StoreError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
    RenderError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
}


def _error_response(exc: InkwellError) -> JSONResponse:
    for kind, (status_code, public_message) in ERROR_RESPONSES.items():
        if isinstance(exc, kind):
            break
    else:
        status_code, public_message = status.HTTP_500_INTERNAL_SERVER_ERROR, None
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s: %s", type(exc).__name__, exc)
    return JSONResponse(
        {"detail": public_message or str(exc)}, status_code=status_code
    )


async def handle_inkwell_error(_request: Request, exc: InkwellError) -> JSONResponse:
    return _error_response(exc)


async def handle_validation_error(
    _request: Request, exc: ValidationError
) -> JSONResponse:
    return JSONResponse(
        {"detail": exc.errors(include_url=False, include_context=False)},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    context: AppContext = app.state.context
    settings = context.settings
    engine, factory = init_db(settings.DATABASE_URL, echo=settings.DB_ECHO)
    context.engine = engine
    context.session_factory = factory
    await create_all(engine)
    logger.info("Inkwell %s started (%s)", __version__, settings.ENVIRONMENT)
    try:
        yield
    finally:
        context.engine = None
        context.session_factory = None
        await close_db(engine)


def create_app(
    settings: InkwellSettings | None = None,
    *,
    template_directories: Sequence[Path | str] | None = None,
    static_directory: Path | str | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the Inkwell application.

    Args:
        settings: Configuration; defaults to the environment-loaded settings.
        template_directories: Template overrides searched before the bundled set.
        static_directory: Served under `/static` when it exists.
        configure_logging: Install the root log handlers from `settings`.

    Example:
        >>> app = create_app(InkwellSettings(ADMIN_USER="me", ADMIN_PASSWORD="pw"))
    """
    settings = settings or inkwell_settings
    if configure_logging:
        setup_logging(settings)

    sessions = SessionStore(lock_timeout=settings.SESSION_LOCK_TIMEOUT)
    backend = SessionAuthenticationBackend(sessions, settings)
    templates = TemplateManager(
        extra_directories=template_directories,
        global_context={"site_name": "Inkwell", "version": __version__},
    )

    app = FastAPI(
        title="Inkwell",
        description="Personal blog and CMS backend",
        version=__version__,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.context = AppContext(
        settings=settings,
        sessions=sessions,
        backend=backend,
        engine=None,
        session_factory=None,
        templates=templates,
        stats=StatsAggregator(),
    )

    app.add_exception_handler(InkwellError, handle_inkwell_error)
    app.add_exception_handler(ValidationError, handle_validation_error)

    app.include_router(api.router)
    app.include_router(pages.router)

    static_path = Path(static_directory or "static")
    if static_path.is_dir():
        app.mount("/static", StaticFiles(directory=static_path), name="static")

    app.add_middleware(
        SessionAuthenticationMiddleware,  # ty:ignore[invalid-argument-type]
        backend=backend,
    )
    if settings.ENABLE_REQUEST_ID:
        app.add_middleware(RequestIdMiddleware)  # ty:ignore[invalid-argument-type]

    return app


__all__ = ["create_app", "lifespan"]
