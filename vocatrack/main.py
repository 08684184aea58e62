"""FastAPI application: entry point, middleware, and health endpoint.

Creates the VocaTrack analytics API with:
- API versioning via router prefix (/api/v1/)
- CORS middleware (origins from settings)
- Request logging middleware (raw ASGI, no response body buffering)
- Global exception handlers (HTTPException, validation, not-found, catch-all)
- Health endpoint

Run with: uvicorn vocatrack.main:app --reload

Tier 3 orchestration module: imports from config (Tier 2), deps (Tier 2),
schemas (Tier 1).
"""

from __future__ import annotations

import logging
import time
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from vocatrack.analytics.errors import RecordNotFoundError
from vocatrack.config import get_settings
from vocatrack.schemas import ApiError, ApiResponse

logger = logging.getLogger("vocatrack")


# ---------------------------------------------------------------------------
# Request logging middleware (raw ASGI)
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware:
    """Logs method, path, status code, and duration for every request.

    Path parameters resolved by routing (class_id, student_id) ride along
    as structured `extra` fields so dashboard requests can be grouped per
    class. Query strings (metric, period, scope) are left out, as are
    bodies, auth headers and client IPs.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.monotonic()
        status_code = 0

        async def capture_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            duration_ms = (time.monotonic() - start) * 1000
            # Routing fills path_params into this same scope dict.
            path_params = dict(scope.get("path_params") or {})
            logger.info(
                "%s %s %d %.1fms",
                scope.get("method", "?"),
                scope.get("path", "?"),
                status_code,
                duration_ms,
                extra={
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 1),
                    "path_params": path_params,
                },
            )


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _status_code_name(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).name
    except ValueError:
        return "HTTP_ERROR"


def _http_exception_response(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wraps HTTPException in ApiResponse envelope.

    Routes and deps raise with a ready envelope as detail. Framework errors
    (unknown path, wrong method) carry a plain string and get an error code
    named after the status, e.g. NOT_FOUND or METHOD_NOT_ALLOWED.
    """
    if isinstance(exc.detail, dict) and "ok" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)

    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse(
            ok=False,
            error=ApiError(code=_status_code_name(exc.status_code), message=str(exc.detail)),
        ).model_dump(),
        headers=exc.headers,
    )


def _validation_error_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Wraps Pydantic validation errors in ApiResponse envelope.

    Returns a human-readable summary without leaking internal details.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = " -> ".join(str(part) for part in first.get("loc", []))
        msg = first.get("msg", "Validation error")
        detail = f"{loc}: {msg}" if loc else msg
    else:
        detail = "Request validation failed."

    return JSONResponse(
        status_code=422,
        content=ApiResponse(
            ok=False,
            error=ApiError(code="VALIDATION_ERROR", message=detail),
        ).model_dump(),
    )


def _not_found_response(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    """Maps a strict lookup failure that no route handled to a 404."""
    return JSONResponse(
        status_code=404,
        content=ApiResponse(
            ok=False,
            error=ApiError(
                code=f"{exc.record_type.upper()}_NOT_FOUND",
                message=str(exc),
            ),
        ).model_dump(),
    )


def _unhandled_exception_response(request: Request, exc: Exception) -> JSONResponse:
    """Catches all unhandled exceptions: never leaks internals to client.

    Logs the full traceback server-side. Returns a generic 500 response.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=500,
        content=ApiResponse(
            ok=False,
            error=ApiError(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred.",
            ),
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# App creation
# ---------------------------------------------------------------------------


def _init_analytics_services() -> None:
    """Initializes the clock and leaderboard cache singletons at startup.

    The clock follows APP_TIMEZONE so calendar days match the school's
    local midnight. The cache is only created when LEADERBOARD_CACHE_SIZE
    is positive.
    """
    from vocatrack.analytics.cache import LeaderboardCache
    from vocatrack.api import deps
    from vocatrack.hooks.clock import SystemClock

    settings = get_settings()

    deps._clock = SystemClock(settings.timezone)
    deps._leaderboard_cache = (
        LeaderboardCache(settings.leaderboard_cache_size)
        if settings.leaderboard_cache_size > 0
        else None
    )

    logger.info(
        "Analytics services initialized: timezone=%s fanout_limit=%d read_timeout=%.1fs cache_size=%d",
        settings.timezone,
        settings.fanout_limit,
        settings.read_timeout_seconds,
        settings.leaderboard_cache_size,
    )


def create_app() -> FastAPI:
    """Creates and configures the FastAPI application."""
    settings = get_settings()

    # Configure logging level
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    application = FastAPI(
        title="VocaTrack",
        description="Progress analytics and leaderboards for vocabulary study",
        version="0.1.0",
    )

    # -- Middleware (order matters: last added = first executed) --

    # CORS: must be outermost to handle preflight before auth
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging: raw ASGI
    application.add_middleware(RequestLoggingMiddleware)

    # -- Exception handlers --
    application.add_exception_handler(StarletteHTTPException, _http_exception_response)
    application.add_exception_handler(RequestValidationError, _validation_error_response)
    application.add_exception_handler(RecordNotFoundError, _not_found_response)
    application.add_exception_handler(Exception, _unhandled_exception_response)

    # -- Routers --
    _register_routes(application)

    # -- Clock and cache --
    _init_analytics_services()

    return application


def _register_routes(application: FastAPI) -> None:
    """Registers all API routers on the application."""
    from fastapi import APIRouter

    v1 = APIRouter(prefix="/api/v1")

    @v1.get("/health")
    async def health() -> dict[str, Any]:
        return ApiResponse(ok=True, data={"status": "healthy"}).model_dump()

    # Sub-routers (BEFORE including v1 into the app):
    from vocatrack.api.leaderboard import router as leaderboard_router

    v1.include_router(leaderboard_router, prefix="/leaderboard", tags=["leaderboard"])

    from vocatrack.api.teacher import router as teacher_router

    v1.include_router(teacher_router, prefix="/teacher", tags=["teacher"])

    application.include_router(v1)


app = create_app()
