#!/usr/bin/env python3
"""Start the callback server and the Telegram bot in one event loop.

Startup errors are logged to Logfire before the process exits.
"""

import asyncio
import contextlib
import sys

import logfire
import uvicorn
from telegram import Bot, Update

from joingate.config import Settings
from joingate.domain.repository import CorrelationStore
from joingate.domain.service import KeyPairProvider
from joingate.interface.api.app import create_app
from joingate.interface.bot import build_bot_application
from joingate.persistence.correlation import run_sweeper
from joingate.util.di.container import create_container
from joingate.util.error import ConfigurationError
from joingate.util.logging import setup_logging
from joingate.util.observability import configure_logfire


async def serve(settings: Settings) -> None:
    """Run the HTTP server, the bot poller and the sweeper until interrupted."""
    container = create_container(settings)
    try:
        # Fail fast: no key pair means no challenge can ever be answered
        key_pair_provider = await container.get(KeyPairProvider)
        key_pair_provider.get()

        store = await container.get(CorrelationStore)
        bot = await container.get(Bot)

        app = create_app(container=container, settings=settings)
        server = uvicorn.Server(
            uvicorn.Config(app, host=settings.host, port=settings.port, log_level="info")
        )
        bot_application = build_bot_application(bot, container)

        async with bot_application:
            await bot_application.start()
            await bot_application.updater.start_polling(
                allowed_updates=Update.ALL_TYPES
            )
            sweeper = asyncio.create_task(
                run_sweeper(store, settings.correlation.sweep_interval_seconds)
            )
            logfire.info(
                "Joingate started",
                host=settings.host,
                port=settings.port,
                allowed_chat_id=settings.telegram.allowed_chat_id,
            )

            try:
                # Returns on SIGINT/SIGTERM
                await server.serve()
            finally:
                sweeper.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sweeper
                await bot_application.updater.stop()
                await bot_application.stop()
    finally:
        await container.close()


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early to catch startup errors
    configure_logfire(settings)
    setup_logging(settings)

    try:
        if not settings.telegram.bot_token:
            raise ConfigurationError("TELEGRAM__BOT_TOKEN is not set")

        logfire.info("Starting Joingate")
        asyncio.run(serve(settings))

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
