"""Unit tests for the Telegram update handlers."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
import pytest_asyncio
from telegram import Chat, ChatJoinRequest, Message, Update, User

from joingate.adapter.telegram import MockChatTransport
from joingate.config import TelegramSettings
from joingate.domain.repository import CorrelationStore
from joingate.domain.service import ChatTransport, KeyPairProvider
from joingate.domain.value import ChannelId
from joingate.interface.bot.handlers import (
    CONTAINER_KEY,
    on_join_request,
    on_private_text,
)
from tests.di import build_test_container, make_test_settings
from tests.helpers import encrypt_payload, make_payload

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)
ADA = User(id=42, first_name="Ada", is_bot=False)


def join_request_update(group_id: int = -1007) -> Update:
    return Update(
        update_id=1,
        chat_join_request=ChatJoinRequest(
            chat=Chat(id=group_id, type=Chat.SUPERGROUP),
            from_user=ADA,
            date=NOW,
            user_chat_id=100,
        ),
    )


def private_text_update(text: str, chat_id: int = 100) -> Update:
    return Update(
        update_id=2,
        message=Message(
            message_id=1,
            date=NOW,
            chat=Chat(id=chat_id, type=Chat.PRIVATE),
            from_user=ADA,
            text=text,
        ),
    )


@pytest_asyncio.fixture
async def container():
    container = build_test_container(
        settings=make_test_settings(telegram=TelegramSettings(allowed_chat_id=-1007))
    )
    yield container
    await container.close()


@pytest.fixture
def context(container):
    return SimpleNamespace(application=SimpleNamespace(bot_data={CONTAINER_KEY: container}))


class TestJoinRequestHandler:
    """Tests for on_join_request."""

    @pytest.mark.asyncio
    async def test_join_request_sends_challenge(self, container, context):
        """A join request for the gated group sends the requester a challenge."""
        # Act
        await on_join_request(join_request_update(), context)

        # Assert
        transport: MockChatTransport = await container.get(ChatTransport)
        store = await container.get(CorrelationStore)
        assert len(transport.messages_to(100)) == 1
        pending = await store.lookup_by_channel(ChannelId(100))
        assert pending.user_id == 42
        assert pending.group_id == -1007
        assert pending.user_display_name == "Ada"

    @pytest.mark.asyncio
    async def test_other_groups_are_ignored(self, container, context):
        """Join requests for other chats are not answered."""
        await on_join_request(join_request_update(group_id=-1008), context)

        transport: MockChatTransport = await container.get(ChatTransport)
        assert transport.messages == []


class TestPrivateTextHandler:
    """Tests for on_private_text."""

    @pytest.mark.asyncio
    async def test_pasted_payload_completes_verification(self, container, context):
        """A payload pasted into the private chat approves the join request."""
        await on_join_request(join_request_update(), context)
        store = await container.get(CorrelationStore)
        pending = await store.lookup_by_channel(ChannelId(100))
        transport: MockChatTransport = await container.get(ChatTransport)
        challenge_text, _, button = transport.messages[0]
        nonce = button.url.rsplit("nonce=", 1)[1]
        key_pair = (await container.get(KeyPairProvider)).get()

        await on_private_text(
            private_text_update(encrypt_payload(key_pair, make_payload(nonce))),
            context,
        )

        assert transport.approvals == [(pending.group_id, pending.user_id)]

    @pytest.mark.asyncio
    async def test_messages_without_pending_request_are_ignored(
        self, container, context
    ):
        """Chatter from users without a challenge gets no reply."""
        await on_private_text(private_text_update("hello"), context)

        transport: MockChatTransport = await container.get(ChatTransport)
        assert transport.messages == []
