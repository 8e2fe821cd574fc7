"""Backend entrypoint – app factory and CLI runner."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from netspeed.config import Settings, configure_logging, get_settings
from netspeed.db import Database
from netspeed.repositories.core.exceptions import ValidationError
from netspeed.schemas import SpeedTestConfig
from netspeed.services import SampleProducer, SpeedTestService
from netspeed.startup import database as database_startup

from netspeed.routers.core.health import router as health_router
from netspeed.routers.speed_tests import router as speed_tests_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    producer: Optional[SampleProducer] = None,
    *,
    run_migrations: bool = True,
) -> FastAPI:  # noqa: D401
    """Return a fully configured FastAPI application instance.

    ``database`` and ``producer`` are built from ``settings`` when omitted.
    """

    started_at = time.time()
    settings = settings or get_settings()
    configure_logging(settings)

    database = database or Database(settings.sqlalchemy_url)
    service = SpeedTestService(
        database,
        producer=producer,
        config=SpeedTestConfig(
            test_file_size_mb=settings.test_file_size_mb,
            test_duration_seconds=settings.test_duration_seconds,
            concurrent_connections=settings.concurrent_connections,
        ),
    )

    # ---------------- Startup / shutdown ---------------------------------
    @asynccontextmanager
    async def _lifespan(_app: FastAPI):
        if run_migrations:
            await database_startup.apply_migrations(database)
        logger.info("Startup tasks done (%.3fs)", time.time() - started_at)
        yield
        database.dispose()

    app = FastAPI(title="NetSpeed Backend API", version="1.0.0", debug=settings.debug, lifespan=_lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.speed_test_service = service

    # ---------------- Middleware -----------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------- Routers --------------------------------------------
    router_specs = [
        (health_router, "/api", {}),
        (speed_tests_router, "/api", {}),
    ]
    for rtr, prefix, kw in router_specs:
        app.include_router(rtr, prefix=prefix, **kw)

    logger.info("Registered %d API routers", len(router_specs))

    # ---------------- Error mapping --------------------------------------
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):  # type: ignore[override]
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "fields": list(exc.fields), "errors": exc.errors},
        )

    # ---------------- Request logging middleware -------------------------
    @app.middleware("http")
    async def _log_requests(request: Request, call_next):  # type: ignore[override]
        start = time.time()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.time() - start) * 1000,
        )
        return response

    return app


# ---------------------------------------------------------------------------
# CLI runner (uvicorn)
# ---------------------------------------------------------------------------


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    uvicorn.run(
        "netspeed.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
