"""Domain layer DI providers."""

from datetime import timedelta

from dishka import Scope, provide

from joingate.config import Settings
from joingate.domain.repository import CorrelationStore
from joingate.domain.service import (
    ChallengeService,
    CommunityPlatformClient,
    KeyPairProvider,
    PayloadService,
    ResolutionService,
)
from joingate.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped; the state they operate on (store and
    key pair) is APP-scoped, so every request sees the same pending requests.
    """

    scope = Scope.REQUEST

    @provide
    def get_payload_service(self, key_pair_provider: KeyPairProvider) -> PayloadService:
        """Provide payload decryption domain service."""
        return PayloadService(key_pair_provider=key_pair_provider)

    @provide
    def get_challenge_service(
        self,
        correlation_store: CorrelationStore,
        key_pair_provider: KeyPairProvider,
        platform_client: CommunityPlatformClient,
        settings: Settings,
    ) -> ChallengeService:
        """Provide challenge domain service."""
        return ChallengeService(
            correlation_store=correlation_store,
            key_pair_provider=key_pair_provider,
            platform_client=platform_client,
            ttl=timedelta(seconds=settings.correlation.ttl_seconds),
        )

    @provide
    def get_resolution_service(
        self,
        correlation_store: CorrelationStore,
        payload_service: PayloadService,
        platform_client: CommunityPlatformClient,
    ) -> ResolutionService:
        """Provide resolution domain service."""
        return ResolutionService(
            correlation_store=correlation_store,
            payload_service=payload_service,
            platform_client=platform_client,
        )
