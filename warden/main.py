"""FastAPI application factory. No business logic; only wiring and middleware."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from warden.api.errors import register_exception_handlers
from warden.api.v1 import router as v1_router
from warden.container import Container, build_container
from warden.core.config import Settings, get_settings
from warden.models.base import Base
from warden.schemas.health import PingResponse

logger = logging.getLogger("warden.access")


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    """
    Build the application. The container is constructed here (or injected by
    tests) and shared by every request through app.state.container.
    """
    settings = settings or (container.settings if container else get_settings())
    container = container or build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.DATABASE_URL.startswith("sqlite"):
            # Postgres schemas are managed by Alembic.
            Base.metadata.create_all(container.engine)
        if settings.SEED_ADMIN_ON_STARTUP:
            container.seed_default_admin()
        logger.info("Warden started (env=%s)", settings.APP_ENV)
        yield
        container.close()
        logger.info("Warden shutdown complete")

    app = FastAPI(
        title="Warden API",
        description="User registration, login and JWT session authentication with role-based access.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # SlowAPI looks for app.state.limiter by convention.
    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.RATE_LIMIT],
        storage_uri="memory://",
        enabled=settings.RATE_LIMIT_ENABLED,
    )
    app.add_middleware(SlowAPIMiddleware)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        # An exception escaping call_next is rendered as a 500 further out.
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %d %.1fms %s",
                request.method,
                request.url.path,
                status_code,
                ms,
                request.client.host if request.client else "unknown",
            )

    register_exception_handlers(app, verbose_errors=settings.APP_ENV == "dev" and settings.DEBUG)

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/ping", response_model=PingResponse, tags=["health"])
    def ping() -> PingResponse:
        """Liveness check; does not touch the database."""
        return PingResponse(timestamp=datetime.now(UTC))

    return app
