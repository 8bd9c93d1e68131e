"""Chat transport interface."""

from joingate.domain.value import ChannelId, GroupId, LinkButton, UserId


class ChatTransport:
    """Outbound side of the chat bot.

    Approving a join request is the privileged action of the handshake and
    is only invoked after a successful resolution.
    """

    async def approve_join_request(self, group_id: GroupId, user_id: UserId) -> None:
        """Approve a pending join request.

        Args:
            group_id: Group the request targets
            user_id: Requesting user
        """
        raise NotImplementedError

    async def send_message(
        self,
        channel_id: ChannelId | GroupId,
        text: str,
        button: LinkButton | None = None,
    ) -> None:
        """Send a text message, optionally with a URL button.

        Args:
            channel_id: Chat to post into
            text: Message text
            button: Optional inline link button
        """
        raise NotImplementedError
