"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Challenge issued", user_id=request.user_id, group_id=request.group_id)

    # Manual spans for critical operations
    with logfire.span("resolve_response", transport=transport.value):
        ...
"""

import logfire
from fastapi import FastAPI

from joingate.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Token Configuration:
    - Set OBSERVABILITY__LOGFIRE_TOKEN environment variable to enable cloud sending
    - If token is present, logs will be sent to Logfire cloud by default
    - Can be explicitly controlled with OBSERVABILITY__SEND_TO_LOGFIRE

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "joingate",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    The callback endpoint carries the encrypted payload in its query string,
    so request headers are not captured.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        """Keep method and path, drop query values."""
        result = {**attributes}
        result.pop("values", None)

        if hasattr(request, "method"):
            result["method"] = request.method

        if hasattr(request, "url"):
            result["path"] = request.url.path

        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host

        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_httpx() -> None:
    """Instrument httpx client with Logfire.

    Traces outbound calls to Discourse and the Telegram Bot API.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
