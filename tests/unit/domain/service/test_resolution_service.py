"""Unit tests for ResolutionService."""

import asyncio
from datetime import timedelta

import pytest

from joingate.adapter.crypto.keypair import RSAKeyPair
from joingate.adapter.discourse import MockDiscourseClient
from joingate.domain.error import (
    DecryptionFailedError,
    ExpiredOrUnknownNonceError,
    MalformedPayloadError,
    NonceMismatchError,
    VerificationFailedError,
)
from joingate.domain.model import PendingRequest
from joingate.domain.service import PayloadService, ResolutionService
from joingate.domain.value import ChannelId, FailureReason, GroupId, Nonce, UserId
from joingate.persistence.correlation import InMemoryCorrelationStore
from tests.helpers import FakeClock, FixedKeyPairProvider, encrypt_payload, make_payload

TTL = timedelta(minutes=10)

PENDING = PendingRequest(
    user_id=UserId(42), chat_channel_id=ChannelId(100), group_id=GroupId(7)
)


@pytest.fixture
def store(clock: FakeClock) -> InMemoryCorrelationStore:
    return InMemoryCorrelationStore(ttl=TTL, clock=clock)


@pytest.fixture
def platform_client() -> MockDiscourseClient:
    return MockDiscourseClient()


@pytest.fixture
def resolution_service(store, platform_client, key_pair: RSAKeyPair) -> ResolutionService:
    return ResolutionService(
        correlation_store=store,
        payload_service=PayloadService(FixedKeyPairProvider(key_pair)),
        platform_client=platform_client,
    )


class SlowDiscourseClient(MockDiscourseClient):
    """Mock client whose verification call takes a moment."""

    async def verify(self, secret: str):
        await asyncio.sleep(0.01)
        return await super().verify(secret)


async def register(store, nonce: str = "abc123", pending: PendingRequest = PENDING):
    await store.register_by_nonce(Nonce(nonce), pending)
    await store.register_by_channel(pending.chat_channel_id, pending)


class TestResolve:
    """Tests for ResolutionService.resolve."""

    @pytest.mark.asyncio
    async def test_chat_reply_is_approved_and_consumed(
        self, resolution_service, store, key_pair
    ):
        """A valid chat reply approves user 42 for group 7 and clears both indices."""
        # Arrange
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        # Act
        decision, secret = await resolution_service.resolve(payload, ChannelId(100))

        # Assert
        assert decision.approved is True
        assert decision.group_id == 7
        assert decision.user_id == 42
        assert decision.chat_channel_id == 100
        assert secret.secret == "sk_live"
        assert await store.lookup_by_nonce(Nonce("abc123")) is None
        assert await store.lookup_by_channel(ChannelId(100)) is None

    @pytest.mark.asyncio
    async def test_http_redirect_resolves_by_nonce_alone(
        self, resolution_service, store, key_pair
    ):
        """Without a channel the nonce in the payload finds the request."""
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        decision, _ = await resolution_service.resolve(payload)

        assert decision.approved is True
        assert await store.lookup_by_channel(ChannelId(100)) is None

    @pytest.mark.asyncio
    async def test_unknown_nonce_fails(
        self, resolution_service, store, key_pair, platform_client
    ):
        """A payload for a nonce that was never issued is rejected before verification."""
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("xyz999"))

        with pytest.raises(ExpiredOrUnknownNonceError) as exc_info:
            await resolution_service.resolve(payload, ChannelId(100))

        assert exc_info.value.reason == FailureReason.EXPIRED_OR_UNKNOWN_NONCE
        assert platform_client.verified_secrets == []
        assert await store.lookup_by_nonce(Nonce("abc123")) == PENDING

    @pytest.mark.asyncio
    async def test_expired_nonce_fails(self, resolution_service, store, key_pair, clock):
        """After the TTL the response is rejected as expired."""
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        clock.advance(minutes=10, seconds=1)

        with pytest.raises(ExpiredOrUnknownNonceError):
            await resolution_service.resolve(payload, ChannelId(100))

    @pytest.mark.asyncio
    async def test_consumed_nonce_cannot_be_reused(
        self, resolution_service, store, key_pair
    ):
        """The second resolution of a nonce fails."""
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("abc123"))
        await resolution_service.resolve(payload)

        with pytest.raises(ExpiredOrUnknownNonceError):
            await resolution_service.resolve(payload)

    @pytest.mark.asyncio
    async def test_reply_from_other_channel_is_a_mismatch(
        self, resolution_service, store, key_pair
    ):
        """A nonce issued to user 42 cannot be redeemed from user 43's chat."""
        await register(store)
        other = PendingRequest(
            user_id=UserId(43), chat_channel_id=ChannelId(101), group_id=GroupId(7)
        )
        await register(store, nonce="def456", pending=other)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        with pytest.raises(NonceMismatchError):
            await resolution_service.resolve(payload, ChannelId(101))

        assert await store.lookup_by_nonce(Nonce("abc123")) == PENDING

    @pytest.mark.asyncio
    async def test_reply_from_channel_without_request_fails(
        self, resolution_service, store, key_pair
    ):
        """A chat reply from a channel with no pending request is rejected."""
        await store.register_by_nonce(Nonce("abc123"), PENDING)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        with pytest.raises(ExpiredOrUnknownNonceError):
            await resolution_service.resolve(payload, ChannelId(100))

    @pytest.mark.asyncio
    async def test_failed_verification_keeps_request(
        self, resolution_service, store, key_pair
    ):
        """A rejected key leaves the request in place for a retry."""
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("abc123", key="invalid"))

        with pytest.raises(VerificationFailedError):
            await resolution_service.resolve(payload, ChannelId(100))

        assert await store.lookup_by_nonce(Nonce("abc123")) == PENDING
        assert await store.lookup_by_channel(ChannelId(100)) == PENDING

    @pytest.mark.asyncio
    async def test_wrong_key_fails_before_lookup(
        self, resolution_service, store, other_key_pair
    ):
        """Ciphertext for another key never reaches correlation."""
        await register(store)
        payload = encrypt_payload(other_key_pair, make_payload("abc123"))

        with pytest.raises(DecryptionFailedError):
            await resolution_service.resolve(payload, ChannelId(100))

        assert await store.lookup_by_nonce(Nonce("abc123")) == PENDING

    @pytest.mark.asyncio
    async def test_malformed_payload_fails(self, resolution_service, store, key_pair):
        """A payload without a key is malformed."""
        await register(store)
        payload = encrypt_payload(key_pair, {"nonce": "abc123", "push": False})

        with pytest.raises(MalformedPayloadError):
            await resolution_service.resolve(payload, ChannelId(100))

    @pytest.mark.asyncio
    async def test_concurrent_resolutions_approve_at_most_once(self, store, key_pair):
        """Racing resolutions of one nonce produce a single approved decision."""
        # Verification yields, so every resolution passes lookup before any consumes
        resolution_service = ResolutionService(
            correlation_store=store,
            payload_service=PayloadService(FixedKeyPairProvider(key_pair)),
            platform_client=SlowDiscourseClient(),
        )
        await register(store)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        results = await asyncio.gather(
            resolution_service.resolve(payload, ChannelId(100)),
            resolution_service.resolve(payload),
            resolution_service.resolve(payload),
            return_exceptions=True,
        )

        approved = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(approved) == 1
        assert all(isinstance(e, ExpiredOrUnknownNonceError) for e in failed)

    @pytest.mark.asyncio
    async def test_channel_reissued_to_new_request_is_kept(
        self, resolution_service, store, key_pair, clock
    ):
        """Consuming an old nonce does not clear a newer request on the channel."""
        await store.register_by_nonce(Nonce("abc123"), PENDING)
        newer = PendingRequest(
            user_id=UserId(42), chat_channel_id=ChannelId(100), group_id=GroupId(8)
        )
        await store.register_by_channel(ChannelId(100), newer)
        payload = encrypt_payload(key_pair, make_payload("abc123"))

        decision, _ = await resolution_service.resolve(payload)

        assert decision.group_id == 7
        assert await store.lookup_by_channel(ChannelId(100)) == newer


class TestIsAwaitingResponse:
    """Tests for ResolutionService.is_awaiting_response."""

    @pytest.mark.asyncio
    async def test_reports_live_channels(self, resolution_service, store, clock):
        """Only channels with a live request are awaiting a response."""
        await register(store)

        assert await resolution_service.is_awaiting_response(ChannelId(100)) is True
        assert await resolution_service.is_awaiting_response(ChannelId(5)) is False

        clock.advance(minutes=11)
        assert await resolution_service.is_awaiting_response(ChannelId(100)) is False
