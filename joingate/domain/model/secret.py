"""Decrypted user API key payload."""

from pydantic import ConfigDict, Field

from joingate.domain.model.common import DomainModel
from joingate.domain.value import Nonce


class DecryptedSecret(DomainModel):
    """Plaintext of an encrypted user API key payload.

    Discourse encrypts ``{"key", "nonce", "push", "api"}``; the fields are
    exposed under descriptive names and parsed from the wire aliases.

    ``secret`` is a live credential for the user's forum account. It must
    never be logged or rendered.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    secret: str = Field(alias="key", min_length=1, repr=False)
    nonce: Nonce
    push_enabled: bool = Field(alias="push", default=False)
    api_identifier: str | int | None = Field(alias="api", default=None)

    def debug_view(self) -> dict[str, object]:
        """Fields that are safe to show in a debug section."""
        return {
            "nonce": str(self.nonce),
            "push": self.push_enabled,
            "api": self.api_identifier,
        }
