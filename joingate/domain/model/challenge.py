"""Challenge entity."""

from datetime import datetime

from joingate.domain.model.common import DomainModel
from joingate.domain.value import Nonce


class Challenge(DomainModel):
    """Outbound authorization request shown to the user.

    ``authorization_url`` points at the platform's key issuance page and
    embeds the process public key and ``nonce``. The challenge can be
    answered once, until ``expires_at``.
    """

    authorization_url: str
    nonce: Nonce
    expires_at: datetime
