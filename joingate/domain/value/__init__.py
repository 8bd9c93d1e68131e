"""Domain value objects for joingate."""

from joingate.domain.value.identifiers import ChannelId, GroupId, UserId
from joingate.domain.value.types import (
    FailureReason,
    LinkButton,
    Nonce,
    ResponseTransport,
)

__all__ = [
    # Identifiers
    "ChannelId",
    "GroupId",
    "UserId",
    # Types
    "FailureReason",
    "LinkButton",
    "Nonce",
    "ResponseTransport",
]
