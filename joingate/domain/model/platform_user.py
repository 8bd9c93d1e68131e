"""Community platform user."""

from joingate.domain.model.common import DomainModel


class PlatformUser(DomainModel):
    """Forum account the user authorized with."""

    username: str
    name: str | None = None
