"""Client Project Portal backend: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before any other portal import creates a logger
from portal.core.logging import configure_structlog
from portal.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.api.deps import build_blob_store
from portal.api.routes import api_router
from portal.core.config import get_settings
from portal.core.exceptions import (
    AuthenticationError,
    GatewayError,
    InvalidInputError,
    NotFoundError,
    PartialSequenceError,
    PortalError,
)
from portal.db import init_db, close_db, init_redis, close_redis
from portal.db.seed import seed_admin_user
from portal.middleware.correlation import (
    setup_correlation_middleware,
    get_correlation_id,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: database, Redis, bootstrap admin, blob store. Shutdown in reverse."""
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    await init_redis()
    if await seed_admin_user():
        logger.info("admin_user_seeded", email=settings.admin_email)

    app.state.blob_store = build_blob_store(settings)
    logger.info("startup_complete", storage_backend=settings.storage_backend)

    yield

    logger.info("shutdown_begin")
    await close_redis()
    await close_db()
    logger.info("shutdown_complete")


# Domain error -> HTTP status. Order matters: PartialSequenceError is a GatewayError.
_STATUS_BY_ERROR: tuple[tuple[type[PortalError], int, str | None], ...] = (
    (NotFoundError, 404, None),
    (InvalidInputError, 400, None),
    (AuthenticationError, 401, None),
    (PartialSequenceError, 500, "Operation partially completed"),
    (GatewayError, 500, "Storage error"),
)


def _status_for(exc: PortalError) -> tuple[int, str]:
    """HTTP status and client-facing detail; None means the exception's own message is safe to show."""
    for error_type, status_code, detail in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code, detail if detail is not None else str(exc)
    return 500, "Internal server error"


def _error_response(
    request: Request,
    event: str,
    status_code: int,
    detail,
    headers: dict | None = None,
    extra: dict | None = None,
    **log_fields,
) -> JSONResponse:
    """Log the failure under a fresh debug_id and answer {"detail", "debug_id", **extra}."""
    debug_id = str(uuid.uuid4())
    log = logger.error if status_code >= 500 else logger.warning
    log(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        admin_id=getattr(request.state, "admin_id", None),
        **log_fields,
    )
    content = {"detail": detail, "debug_id": debug_id, **(extra or {})}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def portal_exception_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Domain errors. Storage failures are answered generically; partial sequences
    also report which steps were committed and the id of the half-built project."""
    status_code, detail = _status_for(exc)
    extra = None
    if isinstance(exc, PartialSequenceError):
        extra = {"committed": exc.committed, "result_id": exc.result_id}
    return _error_response(
        request,
        "portal_exception",
        status_code,
        detail,
        extra=extra,
        error=str(exc),
        error_type=type(exc).__name__,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(
        request,
        "http_exception",
        exc.status_code,
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: full traceback in the log, generic 500 to the client."""
    return _error_response(
        request,
        "unhandled_exception",
        500,
        "Internal server error",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Client project portal: phase tracking, deliverables and onboarding",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url, "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_correlation_middleware(app)

    app.exception_handler(PortalError)(portal_exception_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("portal.main:app", host="0.0.0.0", port=8000, reload=True)
