"""Pending request entity.

A pending request is the in-memory record of a join request that is
waiting for proof of a community platform account. It is written once when
the challenge is issued and then only read until it is consumed by a
successful response or expires.
"""

from joingate.domain.model.common import DomainModel
from joingate.domain.model.join_request import JoinRequest
from joingate.domain.value import ChannelId, GroupId, UserId


class PendingRequest(DomainModel):
    """Join request awaiting a challenge response.

    Two pending requests are the same request when all fields match, so a
    user re-requesting the same group maps onto the same logical request.
    """

    user_id: UserId
    chat_channel_id: ChannelId
    group_id: GroupId
    user_display_name: str | None = None

    @classmethod
    def from_join_request(cls, join_request: JoinRequest) -> "PendingRequest":
        """Build the pending record for a join request."""
        return cls(
            user_id=join_request.user_id,
            chat_channel_id=join_request.channel_id,
            group_id=join_request.group_id,
            user_display_name=join_request.user_display_name,
        )
