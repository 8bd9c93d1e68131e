"""Application layer DI providers."""

from dishka import Scope, provide

from joingate.application.usecase.join import (
    CompleteVerificationUseCase,
    IssueChallengeUseCase,
)
from joingate.config import Settings
from joingate.domain.service import (
    ChallengeService,
    ChatTransport,
    CommunityPlatformClient,
    ResolutionService,
)
from joingate.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_issue_challenge_use_case(
        self,
        challenge_service: ChallengeService,
        chat_transport: ChatTransport,
        settings: Settings,
    ) -> IssueChallengeUseCase:
        """Provide issue challenge use case."""
        return IssueChallengeUseCase(
            challenge_service=challenge_service,
            chat_transport=chat_transport,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_complete_verification_use_case(
        self,
        resolution_service: ResolutionService,
        platform_client: CommunityPlatformClient,
        chat_transport: ChatTransport,
        settings: Settings,
    ) -> CompleteVerificationUseCase:
        """Provide complete verification use case."""
        return CompleteVerificationUseCase(
            resolution_service=resolution_service,
            platform_client=platform_client,
            chat_transport=chat_transport,
            settings=settings,
        )
