"""FastAPI application factory and configuration.

Example:
    from mead.api import create_app

    app = create_app()

    # Run with uvicorn:
    # uvicorn mead.api.app:app --reload
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mead.api.dependencies import AppState, get_app_state
from mead.api.routes import explorer_router, health_router, records_router
from mead.api.sessions import DEFAULT_MAX_SESSIONS
from mead.core.errors import ConfigurationError
from mead.core.health import HealthChecker, source_check
from mead.core.logging import get_logger
from mead.core.pagination import DEFAULT_PAGE_SIZE

logger = get_logger(__name__)

# Application version
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")


def _int_setting(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", setting=name
        ) from None
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}", setting=name)
    return value


def _bool_setting(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _create_health_checker(app_state: AppState) -> HealthChecker:
    """One health check per upstream collection."""
    checker = HealthChecker(version=APP_VERSION)
    for name, source in app_state.sources.items():
        checker.add_check(name, source_check(source))
    return checker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the upstream sources on startup and close them on shutdown."""
    logger.info("api_starting")

    app_state = get_app_state()
    await app_state.initialize(
        conditions_base_url=os.getenv("CONDITIONS_API_BASE_URL"),
        geography_base_url=os.getenv("GEOGRAPHY_API_BASE_URL"),
        page_size=_int_setting("MEAD_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        adaptive_page_size=_bool_setting("MEAD_ADAPTIVE_PAGE_SIZE", True),
        max_sessions=_int_setting("MEAD_MAX_SESSIONS", DEFAULT_MAX_SESSIONS),
    )
    app.state.health_checker = _create_health_checker(app_state)

    logger.info("api_started", version=APP_VERSION)

    yield

    logger.info("api_shutting_down")
    await app_state.shutdown()
    logger.info("api_shutdown_complete")


def create_app(
    title: str = "MeAd Explorer API",
    description: str = "Search, browse and inspect medical conditions and regions",
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        title: API title for OpenAPI docs.
        description: API description for OpenAPI docs.
        cors_origins: Allowed CORS origins. Defaults to the comma separated
            CORS_ORIGINS env var, or ["*"].

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=title,
        description=description,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    if cors_origins is None:
        cors_origins_env = os.getenv("CORS_ORIGINS", "*")
        if cors_origins_env == "*":
            cors_origins = ["*"]
        else:
            cors_origins = [
                origin.strip() for origin in cors_origins_env.split(",") if origin.strip()
            ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(explorer_router)
    app.include_router(records_router)

    logger.info("app_configured", title=title, cors_origins=cors_origins)

    return app


# Default app instance for uvicorn
app = create_app()
