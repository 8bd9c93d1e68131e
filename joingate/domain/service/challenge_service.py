"""Challenge issuance domain service."""

import logging
import secrets
from datetime import timedelta

import logfire

from joingate.domain.model import Challenge, JoinRequest, PendingRequest
from joingate.domain.repository import CorrelationStore
from joingate.domain.service.base import Service
from joingate.domain.service.crypto import KeyPairProvider
from joingate.domain.service.platform import CommunityPlatformClient
from joingate.domain.value import Nonce
from joingate.util.clock import Clock, utc_now
from joingate.util.logging import redact_nonce

logger = logging.getLogger(__name__)

# 16 bytes = 128 bits of entropy, hex encoded to 32 characters
NONCE_BYTES = 16


def generate_nonce() -> Nonce:
    """Generate a fresh, unguessable nonce."""
    return Nonce(secrets.token_hex(NONCE_BYTES))


class ChallengeService(Service):
    """Issues challenges for join requests.

    A challenge is an authorization URL on the community platform carrying
    the process public key and a fresh nonce. Issuing one registers the
    pending request under both the nonce and the requester's private
    channel, with TTL windows that start at issuance.
    """

    def __init__(
        self,
        correlation_store: CorrelationStore,
        key_pair_provider: KeyPairProvider,
        platform_client: CommunityPlatformClient,
        ttl: timedelta,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize challenge service.

        Args:
            correlation_store: Store for pending requests
            key_pair_provider: Provider of the process key pair
            platform_client: Community platform client (builds the URL)
            ttl: How long the challenge stays answerable
            clock: Source of the current time
        """
        self.correlation_store = correlation_store
        self.key_pair_provider = key_pair_provider
        self.platform_client = platform_client
        self.ttl = ttl
        self.clock = clock

    async def issue(self, join_request: JoinRequest) -> Challenge:
        """Issue a challenge for a join request.

        Args:
            join_request: Incoming join request

        Returns:
            Challenge with authorization URL and nonce
        """
        issued_at = self.clock()
        nonce = generate_nonce()
        public_key_pem = self.key_pair_provider.get().public_key_pem

        authorization_url = self.platform_client.build_authorization_url(
            nonce, public_key_pem
        )

        pending = PendingRequest.from_join_request(join_request)
        await self.correlation_store.register_by_nonce(nonce, pending)
        channel_registered = await self.correlation_store.register_by_channel(
            join_request.channel_id, pending
        )
        if not channel_registered:
            # A previous challenge for this channel is still live and keeps
            # its own window; the new nonce is still answerable over HTTP.
            logger.info(
                f"Channel {join_request.channel_id} already has a live pending request"
            )

        logfire.info(
            "Challenge issued",
            user_id=join_request.user_id,
            group_id=join_request.group_id,
            nonce=redact_nonce(str(nonce)),
        )

        return Challenge(
            authorization_url=authorization_url,
            nonce=nonce,
            expires_at=issued_at + self.ttl,
        )
