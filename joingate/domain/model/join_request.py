"""Join request entity."""

from joingate.domain.model.common import DomainModel
from joingate.domain.value import ChannelId, GroupId, UserId


class JoinRequest(DomainModel):
    """A user asking to join the gated group.

    Arrives from the chat transport. ``channel_id`` is the private chat the
    bot may use to talk to the requester while the request is pending.
    """

    user_id: UserId
    group_id: GroupId
    channel_id: ChannelId
    user_display_name: str | None = None
