"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Error mapping (domain exception → HTTP status):
- DomainValidationError → 400
- AccessDeniedError (InvalidSender, NotAMember) → 403
- EntityNotFoundError → 404
- ConflictError (AlreadyExists, AlreadyMember, NotMember) → 409
- UpstreamError (storage, push gateway) → 502
"""

import logging
import time
from contextlib import asynccontextmanager

from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from groupchat.config.logging_config import NO_CORRELATION_ID, correlation_id_var, setup_logging
from groupchat.config.settings import Config
from groupchat.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    DomainValidationError,
    EntityNotFoundError,
    UpstreamError,
)
from groupchat.observability.metrics import (
    MetricsErrorType,
    increment_error,
    observe_request_latency,
)
from groupchat.presentation.api import (
    conversations_router,
    messages_router,
    metrics_router,
    users_router,
)
from groupchat.setup.ioc.container import create_container

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (DomainValidationError, status.HTTP_400_BAD_REQUEST),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY),
)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", NO_CORRELATION_ID)

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """Records request latency per route template."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        observe_request_latency(
            request.method,
            getattr(route, "path", request.url.path),
            response.status_code,
            time.perf_counter() - started,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    - Startup: container already created and wired by create_fastapi_app()
    - Shutdown: close the container (drains in-process tasks, closes Redis)
    """
    logger.info("FastAPI application started. DI container initialized.")
    yield
    await app.state.dishka_container.close()
    logger.info("FastAPI application shutdown. DI container closed.")


def register_exception_handlers(app: FastAPI) -> None:
    def domain_error_handler(status_code: int):
        async def handler(request: Request, exc: Exception):
            if status_code >= 500:
                increment_error(MetricsErrorType.STORAGE_FAILED)
                logger.error(f"[HTTP {status_code}] {type(exc).__name__}: {exc}")
            else:
                logger.info(f"[HTTP {status_code}] {type(exc).__name__}: {exc}")
            return JSONResponse(status_code=status_code, content={"error": str(exc)})

        return handler

    for exc_type, status_code in _ERROR_STATUS:
        app.add_exception_handler(exc_type, domain_error_handler(status_code))

    # Validation error handler - shows detailed Pydantic errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "details": jsonable_errors(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def jsonable_errors(errors) -> list[dict]:
    """Pydantic error dicts may carry exception objects in ctx."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in errors
    ]


def create_fastapi_app() -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Each app gets its own DI container, so each app owns its own store
    and dispatcher.
    """
    app = FastAPI(
        title="Group Chat API",
        description="Users, conversations and messages with push notifications",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(create_container(), app)

    app.add_middleware(LatencyMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(users_router)
    app.include_router(conversations_router)
    app.include_router(messages_router)
    app.include_router(metrics_router)

    return app
