"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_management.api.models import HealthOut
from user_management.api.ui import router as ui_router
from user_management.api.users import failure_response
from user_management.api.users import router as users_router
from user_management.app_logging import configure_logging
from user_management.config import parse_cors_origins
from user_management.containers import AppContainer
from user_management.domain.users import InvalidInput, NotFound, ServerFailure


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    settings = container.settings
    configure_logging(settings.log_level, settings.log_file)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.user_service.ensure_schema()
        logger.info("Server running on port %s", settings.port)
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="User Management API", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000)
            logger.info(
                "%s %s - %s - %dms | user_agent=%s ip=%s",
                request.method,
                request.url.path,
                status_code,
                duration_ms,
                request.headers.get("user-agent"),
                request.client.host if request.client else None,
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        if any(error.get("loc", ("",))[0] == "path" for error in exc.errors()):
            logger.warning("Unparseable user id in %s", request.url.path)
            return failure_response(NotFound())
        logger.warning(
            "Invalid request body for %s %s", request.method, request.url.path
        )
        return failure_response(InvalidInput())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error for %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return failure_response(ServerFailure())

    app.include_router(users_router)
    app.include_router(ui_router)

    @app.get("/health", response_model=HealthOut)
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        logger.debug("Health check requested")
        return {"status": "OK", "timestamp": datetime.now(tz=UTC).isoformat()}

    return app
