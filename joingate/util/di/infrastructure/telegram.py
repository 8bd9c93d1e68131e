"""Telegram infrastructure providers."""

from dishka import Scope, provide
from telegram import Bot

from joingate.adapter.telegram import BotChatTransport
from joingate.config import Settings
from joingate.domain.service import ChatTransport
from joingate.util.di.base import ProviderBase
from joingate.util.error import ConfigurationError


class TelegramProvider(ProviderBase):
    """Telegram component base."""

    __mock_component__ = "telegram"


class ProdTelegramProvider(TelegramProvider):
    """Production Telegram provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_bot(self, settings: Settings) -> Bot:
        """Provide the Bot API client shared by the poller and the transport.

        Raises:
            ConfigurationError: If no bot token is configured
        """
        if not settings.telegram.bot_token:
            raise ConfigurationError("TELEGRAM__BOT_TOKEN is not set")
        return Bot(token=settings.telegram.bot_token)

    @provide(scope=Scope.APP)
    def get_chat_transport(self, bot: Bot) -> ChatTransport:
        """Provide chat transport backed by the Bot API."""
        return BotChatTransport(bot=bot)
