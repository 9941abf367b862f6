# main.py

"""FastAPI application for the feedback platform.

``create_app`` wires middleware, error envelopes and routers. The tenant
store and the organization cache are built from settings at startup unless
they were injected (tests do this).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import from_url
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import CacheBackend, Settings, get_settings
from .config.validate import validate_on_boot
from .db import FeedbackStore, create_engine_for, make_sessionmaker
from .middlewares import LoggingMiddleware, PrometheusMiddleware, RequestIdMiddleware
from .obs import capture_exception, init_sentry
from .obs.logging import configure_logging
from .routes_analytics import router as analytics_router
from .routes_feedback import router as feedback_router
from .routes_metrics import router as metrics_router
from .routes_surveys import router as surveys_router
from .utils.responses import err, ok
from .utils.ttl_cache import MemoryTTLCache, NullCache, RedisTTLCache, TTLCache

logger = logging.getLogger("api")


def build_org_cache(settings: Settings) -> TTLCache:
    """Return the organization lookup cache configured by ``settings``."""
    ttl = settings.org_cache_ttl_sec
    if ttl <= 0 or settings.org_cache_backend is CacheBackend.NONE:
        return NullCache()
    if settings.org_cache_backend is CacheBackend.REDIS:
        redis = from_url(settings.redis_url, decode_responses=True)
        return RedisTTLCache(redis, ttl)
    return MemoryTTLCache(ttl)


def create_app(
    settings: Settings | None = None,
    store: FeedbackStore | None = None,
    org_cache: TTLCache | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if getattr(app.state, "store", None) is None:
            validate_on_boot(settings)
            engine = create_engine_for(
                settings.database_url,
                pool_size=settings.db_pool_size,
                slow_query_ms=settings.slow_query_ms,
            )
            app.state.store = FeedbackStore(make_sessionmaker(engine))
        if getattr(app.state, "org_cache", None) is None:
            app.state.org_cache = build_org_cache(settings)
        try:
            yield
        finally:
            if engine is not None:
                await engine.dispose()

    app = FastAPI(title="Feedback API", version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.org_cache = org_cache

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            exc.detail,
            extra={
                "status": exc.status_code,
                "route": request.url.path,
                "tenant": request.headers.get("X-Org-Id"),
            },
        )
        return JSONResponse(
            err(exc.status_code, exc.detail), status_code=exc.status_code
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = {"errors": [e.get("msg") for e in exc.errors()]}
        return JSONResponse(err(422, "Invalid request", details), status_code=422)

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_error",
            extra={
                "status": 500,
                "route": request.url.path,
                "tenant": request.headers.get("X-Org-Id"),
            },
        )
        capture_exception(exc)
        return JSONResponse(err(500, "Internal Server Error"), status_code=500)

    @app.get("/health")
    async def health() -> dict:
        return ok({"status": "ok"})

    app.include_router(analytics_router)
    app.include_router(feedback_router)
    app.include_router(surveys_router)
    app.include_router(metrics_router)
    return app


def main_app() -> FastAPI:
    """Entry point for ``uvicorn --factory``; configures logging and Sentry."""
    settings = get_settings()
    configure_logging(settings.log_level)
    init_sentry(settings.error_dsn, settings.app_env)
    return create_app(settings)


__all__ = ["create_app", "build_org_cache", "main_app"]
