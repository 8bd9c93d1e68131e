"""Issue challenge use case."""

import logfire
from pydantic import BaseModel

from joingate.adapter.error import ProviderError
from joingate.application.messages import Messages
from joingate.application.usecase.base import BaseUseCase
from joingate.config import Settings
from joingate.domain.model import Challenge, JoinRequest
from joingate.domain.service import ChallengeService, ChatTransport
from joingate.domain.value import ChannelId, GroupId, LinkButton, UserId


class IssueChallengeRequest(BaseModel):
    """Join request event from the chat transport."""

    user_id: UserId
    group_id: GroupId
    channel_id: ChannelId  # Private chat with the requester
    user_display_name: str | None = None


class IssueChallengeResponse(BaseModel):
    """Issue challenge response."""

    handled: bool  # False when the group is not gated by this bot
    challenge: Challenge | None = None
    delivered: bool = False  # Whether the challenge reached the user


class IssueChallengeUseCase(BaseUseCase):
    """Use case for answering a join request with a verification challenge."""

    def __init__(
        self,
        challenge_service: ChallengeService,
        chat_transport: ChatTransport,
        settings: Settings,
    ) -> None:
        """Initialize issue challenge use case.

        Args:
            challenge_service: Challenge domain service
            chat_transport: Outbound chat transport
            settings: Application settings
        """
        self.challenge_service = challenge_service
        self.chat_transport = chat_transport
        self.settings = settings
        self.messages = Messages(settings.locale)

    async def execute(self, request: IssueChallengeRequest) -> IssueChallengeResponse:
        """Issue a challenge and send it to the requester.

        Steps:
        1. Ignore join requests for groups this bot does not gate
        2. Issue the challenge (registers the pending request)
        3. Send the authorization link to the requester's private chat
        4. Optionally announce the pending verification in the group

        Args:
            request: Join request event

        Returns:
            Whether the request was handled and the issued challenge
        """
        allowed_chat_id = self.settings.telegram.allowed_chat_id
        if allowed_chat_id and allowed_chat_id != request.group_id:
            logfire.info(
                "Join request ignored for ungated chat",
                group_id=request.group_id,
                user_id=request.user_id,
            )
            return IssueChallengeResponse(handled=False)

        name = request.user_display_name or str(request.user_id)

        with logfire.span(
            "issue_challenge", user_id=request.user_id, group_id=request.group_id
        ):
            challenge = await self.challenge_service.issue(
                JoinRequest(
                    user_id=request.user_id,
                    group_id=request.group_id,
                    channel_id=request.channel_id,
                    user_display_name=request.user_display_name,
                )
            )

            minutes = max(1, self.settings.correlation.ttl_seconds // 60)
            delivered = await self._send(
                request.channel_id,
                self.messages.text("challenge", name=name, minutes=minutes),
                LinkButton(
                    text=self.messages.text("challenge_button"),
                    url=challenge.authorization_url,
                ),
            )

            if self.settings.telegram.announce_in_group:
                await self._send(
                    request.group_id, self.messages.text("group_notice", name=name)
                )

        return IssueChallengeResponse(
            handled=True, challenge=challenge, delivered=delivered
        )

    async def _send(
        self, chat_id: int, text: str, button: LinkButton | None = None
    ) -> bool:
        """Send a message, logging instead of raising on transport failure."""
        try:
            await self.chat_transport.send_message(chat_id, text, button)
            return True
        except ProviderError as e:
            logfire.error("Failed to send message", chat_id=chat_id, error=str(e))
            return False
