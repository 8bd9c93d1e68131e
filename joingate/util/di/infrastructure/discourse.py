"""Discourse infrastructure providers."""

from dishka import Scope, provide

from joingate.adapter.discourse import RealDiscourseClient
from joingate.config import DiscourseSettings
from joingate.domain.service import CommunityPlatformClient
from joingate.util.di.base import ProviderBase


class DiscourseProvider(ProviderBase):
    """Discourse component base."""

    __mock_component__ = "discourse"


class ProdDiscourseProvider(DiscourseProvider):
    """Production Discourse provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_platform_client(
        self, discourse_settings: DiscourseSettings
    ) -> CommunityPlatformClient:
        """Provide Discourse client for key issuance and verification."""
        return RealDiscourseClient(settings=discourse_settings)
