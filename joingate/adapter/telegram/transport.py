"""Telegram chat transport."""

import logging

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import TelegramError

from joingate.adapter.error import ProviderError
from joingate.domain.service.transport import ChatTransport
from joingate.domain.value import ChannelId, GroupId, LinkButton, UserId

logger = logging.getLogger(__name__)


class TelegramTransportError(ProviderError):
    """Telegram Bot API call failed."""

    pass


class TelegramTransport(ChatTransport):
    """Base class for Telegram transports.

    Provides type distinction for dependency injection.
    """

    pass


class BotChatTransport(TelegramTransport):
    """Chat transport backed by the Telegram Bot API."""

    def __init__(self, bot: Bot) -> None:
        """Initialize transport.

        Args:
            bot: python-telegram-bot Bot instance (shared with the poller)
        """
        self.bot = bot

    async def approve_join_request(self, group_id: GroupId, user_id: UserId) -> None:
        """Approve a join request via approveChatJoinRequest.

        Raises:
            TelegramTransportError: If Telegram refuses or the call fails
        """
        try:
            await self.bot.approve_chat_join_request(chat_id=group_id, user_id=user_id)
        except TelegramError as e:
            raise TelegramTransportError(
                f"Failed to approve join request of user {user_id} for chat {group_id}: {e}"
            ) from e
        logger.info(f"Approved join request: user={user_id}, chat={group_id}")

    async def send_message(
        self,
        channel_id: ChannelId | GroupId,
        text: str,
        button: LinkButton | None = None,
    ) -> None:
        """Send a message via sendMessage.

        Raises:
            TelegramTransportError: If the message could not be sent
        """
        reply_markup = None
        if button is not None:
            reply_markup = InlineKeyboardMarkup(
                [[InlineKeyboardButton(text=button.text, url=button.url)]]
            )
        try:
            await self.bot.send_message(
                chat_id=channel_id, text=text, reply_markup=reply_markup
            )
        except TelegramError as e:
            raise TelegramTransportError(
                f"Failed to send message to chat {channel_id}: {e}"
            ) from e


class MockChatTransport(TelegramTransport):
    """Mock transport that records outbound calls for development and testing."""

    def __init__(self) -> None:
        self.approvals: list[tuple[GroupId, UserId]] = []
        self.messages: list[tuple[int, str, LinkButton | None]] = []
        self.fail_approvals = False

    async def approve_join_request(self, group_id: GroupId, user_id: UserId) -> None:
        """Record an approval."""
        if self.fail_approvals:
            raise TelegramTransportError("Mock approval failure")
        self.approvals.append((group_id, user_id))

    async def send_message(
        self,
        channel_id: ChannelId | GroupId,
        text: str,
        button: LinkButton | None = None,
    ) -> None:
        """Record a message."""
        self.messages.append((channel_id, text, button))

    def messages_to(self, channel_id: int) -> list[str]:
        """Texts sent to one chat, oldest first."""
        return [text for chat, text, _ in self.messages if chat == channel_id]
