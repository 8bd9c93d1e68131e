"""Unit tests for CompleteVerificationUseCase."""

import pytest
from dishka import AsyncContainer

from joingate.adapter.telegram import MockChatTransport
from joingate.application.usecase.join import (
    CompleteVerificationUseCase,
    IssueChallengeUseCase,
)
from joingate.application.usecase.join.complete_verification import (
    CompleteVerificationRequest,
)
from joingate.application.usecase.join.issue_challenge import IssueChallengeRequest
from joingate.domain.repository import CorrelationStore
from joingate.domain.service import ChatTransport, KeyPairProvider
from joingate.domain.value import (
    ChannelId,
    FailureReason,
    GroupId,
    ResponseTransport,
    UserId,
)
from tests.di import make_test_settings
from tests.harness import create_env_fixture
from tests.helpers import encrypt_payload, make_payload

unit_env = create_env_fixture()
debug_env = create_env_fixture(settings=make_test_settings(debug=True))


async def issue(env: AsyncContainer) -> str:
    """Issue a challenge for user 42 / group 7 and return its nonce."""
    use_case = await env.get(IssueChallengeUseCase)
    response = await use_case.execute(
        IssueChallengeRequest(
            user_id=UserId(42), group_id=GroupId(7), channel_id=ChannelId(100)
        )
    )
    return str(response.challenge.nonce)


async def payload_for(env: AsyncContainer, nonce: str, key: str = "sk_live") -> str:
    key_pair = (await env.get(KeyPairProvider)).get()
    return encrypt_payload(key_pair, make_payload(nonce, key=key))


def chat(payload: str, channel_id: int = 100) -> CompleteVerificationRequest:
    return CompleteVerificationRequest(
        payload=payload, transport=ResponseTransport.CHAT, channel_id=ChannelId(channel_id)
    )


def http(payload: str) -> CompleteVerificationRequest:
    return CompleteVerificationRequest(payload=payload, transport=ResponseTransport.HTTP)


class TestCompleteVerificationUseCase:
    """Tests for CompleteVerificationUseCase."""

    @pytest.mark.asyncio
    async def test_chat_reply_approves_join_request(self, unit_env: AsyncContainer):
        """A valid chat reply approves the join request once and greets the user."""
        # Arrange
        nonce = await issue(unit_env)
        payload = await payload_for(unit_env, nonce)
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)

        # Act
        response = await use_case.execute(chat(payload))

        # Assert
        assert response.decision.approved is True
        assert transport.approvals == [(7, 42)]
        assert response.platform_user.username == "mock_user"
        assert "mock_user" in transport.messages_to(100)[-1]
        assert response.debug is None

    @pytest.mark.asyncio
    async def test_http_redirect_approves_join_request(self, unit_env: AsyncContainer):
        """The HTTP transport reaches the same approval."""
        nonce = await issue(unit_env)
        payload = await payload_for(unit_env, nonce)
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)

        response = await use_case.execute(http(payload))

        assert response.decision.approved is True
        assert transport.approvals == [(7, 42)]
        # The user is told in their private chat as well
        assert "mock_user" in transport.messages_to(100)[-1]

    @pytest.mark.asyncio
    async def test_second_response_is_rejected(self, unit_env: AsyncContainer):
        """A consumed challenge cannot approve twice."""
        nonce = await issue(unit_env)
        payload = await payload_for(unit_env, nonce)
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)

        await use_case.execute(http(payload))
        response = await use_case.execute(http(payload))

        assert response.decision.approved is False
        assert response.decision.failure == FailureReason.EXPIRED_OR_UNKNOWN_NONCE
        assert transport.approvals == [(7, 42)]

    @pytest.mark.asyncio
    async def test_unknown_nonce_is_reported_over_chat(self, unit_env: AsyncContainer):
        """Failures on the chat transport are answered in the chat."""
        await issue(unit_env)
        payload = await payload_for(unit_env, "xyz999")
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)

        response = await use_case.execute(chat(payload))

        assert response.decision.approved is False
        assert response.decision.failure == FailureReason.EXPIRED_OR_UNKNOWN_NONCE
        assert transport.approvals == []
        assert transport.messages_to(100)[-1] == response.message
        assert response.message.startswith("Verification failed")

    @pytest.mark.asyncio
    async def test_http_failure_is_not_sent_to_chat(self, unit_env: AsyncContainer):
        """HTTP failures are only shown on the result page."""
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)

        response = await use_case.execute(http("garbage"))

        assert response.decision.failure == FailureReason.DECRYPTION_FAILED
        assert transport.messages == []

    @pytest.mark.asyncio
    async def test_rejected_key_can_be_retried(self, unit_env: AsyncContainer):
        """After a failed verification the same challenge can still succeed."""
        nonce = await issue(unit_env)
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)

        failed = await use_case.execute(
            chat(await payload_for(unit_env, nonce, key="invalid"))
        )
        succeeded = await use_case.execute(chat(await payload_for(unit_env, nonce)))

        assert failed.decision.failure == FailureReason.VERIFICATION_FAILED
        assert succeeded.decision.approved is True
        assert transport.approvals == [(7, 42)]

    @pytest.mark.asyncio
    async def test_approval_failure_is_reported(self, unit_env: AsyncContainer):
        """If Telegram refuses the approval the decision carries the failure."""
        nonce = await issue(unit_env)
        payload = await payload_for(unit_env, nonce)
        use_case = await unit_env.get(CompleteVerificationUseCase)
        transport: MockChatTransport = await unit_env.get(ChatTransport)
        store = await unit_env.get(CorrelationStore)
        transport.fail_approvals = True

        response = await use_case.execute(chat(payload))

        assert response.decision.approved is False
        assert response.decision.failure == FailureReason.APPROVAL_FAILED
        assert response.decision.user_id == 42
        assert transport.messages_to(100)[-1] == response.message
        # The challenge was consumed by the successful verification
        assert await store.lookup_by_channel(ChannelId(100)) is None

    @pytest.mark.asyncio
    async def test_debug_mode_includes_safe_details(self, debug_env: AsyncContainer):
        """Debug output carries the failure detail but never the secret."""
        nonce = await issue(debug_env)
        payload = await payload_for(debug_env, nonce, key="sk_very_secret")
        use_case = await debug_env.get(CompleteVerificationUseCase)

        response = await use_case.execute(http(payload))

        assert response.debug["approved"] is True
        assert response.debug["payload"]["nonce"] == nonce
        assert "sk_very_secret" not in str(response.debug)

    @pytest.mark.asyncio
    async def test_is_awaiting_response(self, unit_env: AsyncContainer):
        """Only channels with a live challenge are awaiting a response."""
        use_case = await unit_env.get(CompleteVerificationUseCase)
        assert await use_case.is_awaiting_response(ChannelId(100)) is False

        await issue(unit_env)

        assert await use_case.is_awaiting_response(ChannelId(100)) is True

    def test_chat_request_requires_channel(self):
        """Chat replies without their channel are rejected at the boundary."""
        with pytest.raises(ValueError):
            CompleteVerificationRequest(payload="x", transport=ResponseTransport.CHAT)
