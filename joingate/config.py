"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TelegramSettings(BaseModel):
    """Telegram bot configuration."""

    # Bot token from @BotFather (required at startup)
    bot_token: str = ""

    # Only join requests for this chat are gated
    # 0 means join requests for any chat the bot administers are handled
    allowed_chat_id: int = 0

    # Post a short notice in the group when a challenge is sent
    announce_in_group: bool = True


class DiscourseSettings(BaseModel):
    """Discourse (community platform) configuration."""

    site_url: str = "https://example.com"

    # Where Discourse redirects after the user authorizes the key
    # When unset, Discourse shows the encrypted payload for copy/paste instead
    auth_redirect_url: str | None = None

    client_id: str = "joingate"
    application_name: str = "Telegram Group Verification Bot"
    scopes: str = "read"

    # Topic fetched with the user API key to prove the key works
    check_topic_id: int = 10

    timeout_seconds: float = 10.0

    # Status codes that count as an explicit rejection of the key
    rejected_status_codes: list[int] = [401]

    # When True, only 2xx responses from the check topic verify the key
    strict_verification: bool = False

    @property
    def base_url(self) -> str:
        """Site URL without a trailing slash."""
        return self.site_url.rstrip("/")


class CorrelationSettings(BaseModel):
    """Pending request correlation configuration."""

    # How long a challenge stays answerable (10 minutes)
    ttl_seconds: int = 600

    # Background eviction interval for expired entries
    sweep_interval_seconds: int = 60


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None

    # Instrument FastAPI and httpx when the app is created
    instrument: bool = True


class Settings(BaseSettings):
    """Application settings.

    Values are read from the environment (and an optional .env file).
    Nested settings use a double underscore, for example:

        TELEGRAM__BOT_TOKEN=123:abc
        TELEGRAM__ALLOWED_CHAT_ID=-1001234567890
        DISCOURSE__SITE_URL=https://forum.example.com
        DISCOURSE__AUTH_REDIRECT_URL=https://bot.example.com/auth
        DISCOURSE__CLIENT_ID=joingate
        DISCOURSE__CHECK_TOPIC_ID=10
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Language used for user-facing messages and pages
    locale: Literal["en", "zh"] = "en"

    # Git commit SHA (loaded from version.txt file or defaults to "unknown")
    git_sha: str = "unknown"

    # HTTP callback server
    host: str = "0.0.0.0"
    port: int = 8083

    telegram: TelegramSettings = TelegramSettings()
    discourse: DiscourseSettings = DiscourseSettings()
    correlation: CorrelationSettings = CorrelationSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def initialize_git_sha(self) -> "Settings":
        """Load the git SHA from the version file when not set explicitly."""
        if self.git_sha == "unknown":
            self.git_sha = self._load_git_sha()
        return self

    @staticmethod
    def _load_git_sha() -> str:
        """Load git SHA from version file.

        Returns:
            Git SHA if version file exists, otherwise "unknown"
        """
        version_file = Path("/app/version.txt")
        if version_file.exists():
            try:
                return version_file.read_text().strip()
            except OSError:
                return "unknown"
        return "unknown"
