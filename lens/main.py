"""SoloPreneur Lens backend: FastAPI application entry point."""

import uuid
from contextlib import asynccontextmanager

# configure_structlog MUST run before the other lens imports: structlog caches
# the processor chain on first use.
from lens.core.logging import configure_structlog
from lens.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lens.api.routes import api_router
from lens.core.config import get_settings
from lens.core.exceptions import AuthorizationFailure, GenerationError
from lens.db.redis import close_redis, init_redis
from lens.middleware.correlation import get_correlation_id, setup_correlation_middleware

logger = structlog.get_logger(__name__)

ACCESS_DENIED_MESSAGE = (
    "Access denied. The selected API key does not have access to the required models. "
    "Please select a project with billing enabled."
)
RETRY_MESSAGE = "The visual engine is temporarily unavailable. Please try again."


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    # Redis only backs saved preferences; generation works without it (non-fatal)
    try:
        await init_redis()
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning("redis_unavailable", error=str(e), error_type=type(e).__name__)

    yield

    logger.info("shutdown_begin")
    await close_redis()
    logger.info("shutdown_complete")


def _log_context(request: Request, debug_id: str) -> dict:
    return {
        "debug_id": debug_id,
        "correlation_id": get_correlation_id(),
        "path": request.url.path,
        "method": request.method,
    }


async def authorization_failure_handler(request: Request, exc: AuthorizationFailure) -> JSONResponse:
    """Entitlement failure: the shell must force key re-selection before generating again."""
    debug_id = str(uuid.uuid4())
    logger.warning("authorization_failure", error=str(exc), **_log_context(request, debug_id))
    return JSONResponse(
        status_code=403,
        content={"detail": ACCESS_DENIED_MESSAGE, "reauth_required": True, "debug_id": debug_id},
    )


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    """Backend, malformed-response and empty-payload failures: generic retry message, no retry."""
    debug_id = str(uuid.uuid4())
    logger.error(
        "generation_failed",
        error=str(exc),
        error_type=type(exc).__name__,
        **_log_context(request, debug_id),
    )
    return JSONResponse(
        status_code=502,
        content={"detail": RETRY_MESSAGE, "reauth_required": False, "debug_id": debug_id},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException with debug_id tracking."""
    debug_id = str(uuid.uuid4())
    logger.info("http_exception", status_code=exc.status_code, detail=exc.detail, **_log_context(request, debug_id))
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled errors: full traceback in the logs, generic 500 to the client."""
    debug_id = str(uuid.uuid4())
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
        **_log_context(request, debug_id),
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Business strategy visualisation for solo founders",
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

    # Correlation ID middleware (runs first on incoming requests)
    setup_correlation_middleware(app)

    app.exception_handler(AuthorizationFailure)(authorization_failure_handler)
    app.exception_handler(GenerationError)(generation_error_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lens.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
