"""Telegram adapter."""

from .transport import (
    BotChatTransport,
    MockChatTransport,
    TelegramTransport,
    TelegramTransportError,
)

__all__ = [
    "BotChatTransport",
    "MockChatTransport",
    "TelegramTransport",
    "TelegramTransportError",
]
