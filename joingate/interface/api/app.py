"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from joingate.config import Settings
from joingate.interface.api.routes import auth, health, index
from joingate.util.di.container import create_container, setup_di
from joingate.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(
    container: AsyncContainer | None = None, settings: Settings | None = None
) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container shared with the Telegram bot (built if omitted)
        settings: Application settings (loaded from environment if omitted)
    """
    settings = settings or Settings()

    if settings.observability.instrument:
        # Logfire must be configured before instrumentation
        instrument_httpx()

    app_instance = FastAPI(
        title="Joingate",
        description="Telegram join request verification through Discourse user API keys",
        version="0.1.0",
    )

    if settings.observability.instrument:
        instrument_fastapi(app_instance)

    container = container or create_container(settings)
    setup_di(app_instance, container)

    app_instance.include_router(health.router)
    app_instance.include_router(index.router)
    app_instance.include_router(auth.router)

    return app_instance
