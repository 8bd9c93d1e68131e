"""Challenge response resolution domain service."""

import logging

import logfire

from joingate.domain.error import (
    ExpiredOrUnknownNonceError,
    NonceMismatchError,
    VerificationFailedError,
)
from joingate.domain.model import ApprovalDecision, DecryptedSecret, PendingRequest
from joingate.domain.repository import CorrelationStore
from joingate.domain.service.base import Service
from joingate.domain.service.payload_service import PayloadService
from joingate.domain.service.platform import CommunityPlatformClient
from joingate.domain.value import ChannelId, Nonce
from joingate.util.logging import redact_nonce

logger = logging.getLogger(__name__)


class ResolutionService(Service):
    """Resolves encrypted challenge responses into approval decisions.

    Both response transports end up here. A chat reply carries the channel
    it was sent from as a correlation hint; an HTTP redirect carries
    nothing but the payload, so the nonce inside it is the only key.

    A pending request moves from awaiting a response to approved (consumed
    from both indices) or stays in place after a failure so the user can
    retry until it expires.
    """

    def __init__(
        self,
        correlation_store: CorrelationStore,
        payload_service: PayloadService,
        platform_client: CommunityPlatformClient,
    ) -> None:
        """Initialize resolution service.

        Args:
            correlation_store: Store for pending requests
            payload_service: Decrypts and parses payloads
            platform_client: Community platform client (verification call)
        """
        self.correlation_store = correlation_store
        self.payload_service = payload_service
        self.platform_client = platform_client

    async def is_awaiting_response(self, channel_id: ChannelId) -> bool:
        """Check whether a channel has a live pending request."""
        return await self.correlation_store.lookup_by_channel(channel_id) is not None

    async def resolve(
        self, encrypted_payload: str, channel_id: ChannelId | None = None
    ) -> tuple[ApprovalDecision, DecryptedSecret]:
        """Resolve a challenge response.

        Steps:
        1. Decrypt and parse the payload
        2. Find the pending request by nonce (and channel, for chat replies)
        3. Verify the secret with the community platform
        4. Consume the pending request from both indices

        Args:
            encrypted_payload: Base64 encoded ciphertext from the user
            channel_id: Channel the reply came from, None for HTTP redirects

        Returns:
            Approved decision and the decrypted secret

        Raises:
            DecryptionFailedError: If the payload cannot be decrypted
            MalformedPayloadError: If the plaintext is not a valid payload
            ExpiredOrUnknownNonceError: If no live request matches
            NonceMismatchError: If channel and nonce point at different requests
            VerificationFailedError: If the platform does not accept the secret
        """
        secret = self.payload_service.open(encrypted_payload)

        pending = await self._correlate(secret.nonce, channel_id)

        outcome = await self.platform_client.verify(secret.secret)
        if not outcome.verified:
            logfire.warn(
                "Verification failed",
                user_id=pending.user_id,
                status_code=outcome.status_code,
                error=outcome.error,
            )
            raise VerificationFailedError(outcome.error)

        consumed = await self._consume(secret.nonce, pending)

        logfire.info(
            "Challenge response accepted",
            user_id=consumed.user_id,
            group_id=consumed.group_id,
            nonce=redact_nonce(str(secret.nonce)),
        )

        decision = ApprovalDecision(
            approved=True,
            group_id=consumed.group_id,
            user_id=consumed.user_id,
            chat_channel_id=consumed.chat_channel_id,
            user_display_name=consumed.user_display_name,
            nonce=secret.nonce,
        )
        return decision, secret

    async def _correlate(
        self, nonce: Nonce, channel_id: ChannelId | None
    ) -> PendingRequest:
        """Find the pending request a response belongs to."""
        by_nonce = await self.correlation_store.lookup_by_nonce(nonce)
        if by_nonce is None:
            raise ExpiredOrUnknownNonceError(
                f"No pending request for nonce {redact_nonce(str(nonce))}"
            )

        if channel_id is None:
            return by_nonce

        by_channel = await self.correlation_store.lookup_by_channel(channel_id)
        if by_channel is None:
            raise ExpiredOrUnknownNonceError(
                f"No pending request for channel {channel_id}"
            )
        if by_channel != by_nonce:
            logger.warning(
                f"Nonce {redact_nonce(str(nonce))} does not belong to channel {channel_id}"
            )
            raise NonceMismatchError(
                f"Nonce belongs to user {by_nonce.user_id}, "
                f"reply came from channel {channel_id}"
            )
        return by_channel

    async def _consume(self, nonce: Nonce, pending: PendingRequest) -> PendingRequest:
        """Remove a verified request from both indices.

        Removing the nonce entry is the single point where concurrent
        resolutions of one nonce are ordered: only the caller that removes
        the live entry proceeds to approval.
        """
        consumed = await self.correlation_store.remove_nonce(nonce)
        if consumed is None:
            raise ExpiredOrUnknownNonceError(
                f"Nonce {redact_nonce(str(nonce))} was consumed or expired during verification"
            )

        # Only clear the channel index if it still points at this request
        by_channel = await self.correlation_store.lookup_by_channel(
            pending.chat_channel_id
        )
        if by_channel == consumed:
            await self.correlation_store.remove_channel(pending.chat_channel_id)

        return consumed
