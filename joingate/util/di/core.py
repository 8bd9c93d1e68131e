"""Core DI providers (non-mockable)."""

from datetime import timedelta

from dishka import Scope, from_context, provide

from joingate.adapter.crypto.keypair import ProcessKeyPairProvider
from joingate.application.messages import Messages
from joingate.config import DiscourseSettings, Settings
from joingate.domain.repository import CorrelationStore
from joingate.domain.service import KeyPairProvider
from joingate.persistence.correlation import InMemoryCorrelationStore
from joingate.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are passed in as container context, loaded from environment
    variables and .env file when the container is created.
    """

    settings = from_context(provides=Settings, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def provide_discourse_settings(self, settings: Settings) -> DiscourseSettings:
        """Provide Discourse settings."""
        return settings.discourse

    @provide(scope=Scope.APP)
    def provide_messages(self, settings: Settings) -> Messages:
        """Provide message catalog in the configured locale."""
        return Messages(settings.locale)


class ProdStateProvider(ProviderBase):
    """Process-wide state shared by the bot and the HTTP server.

    Both live for the lifetime of the process: pending requests are only
    answerable by the process that issued them.
    """

    @provide(scope=Scope.APP)
    def provide_key_pair_provider(self) -> KeyPairProvider:
        """Provide the lazily generated process key pair."""
        return ProcessKeyPairProvider()

    @provide(scope=Scope.APP)
    def provide_correlation_store(self, settings: Settings) -> CorrelationStore:
        """Provide the in-memory pending request store."""
        return InMemoryCorrelationStore(
            ttl=timedelta(seconds=settings.correlation.ttl_seconds)
        )
