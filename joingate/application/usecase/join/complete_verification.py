"""Complete verification use case."""

from typing import Any

import logfire
from pydantic import BaseModel, model_validator

from joingate.adapter.error import ProviderError
from joingate.application.messages import Messages
from joingate.application.usecase.base import BaseUseCase
from joingate.config import Settings
from joingate.domain.error import HandshakeError
from joingate.domain.model import ApprovalDecision, DecryptedSecret, PlatformUser
from joingate.domain.service import (
    ChatTransport,
    CommunityPlatformClient,
    ResolutionService,
)
from joingate.domain.value import ChannelId, FailureReason, ResponseTransport


class CompleteVerificationRequest(BaseModel):
    """Challenge response received over either transport."""

    payload: str
    transport: ResponseTransport
    channel_id: ChannelId | None = None  # Required for chat replies

    @model_validator(mode="after")
    def check_channel(self) -> "CompleteVerificationRequest":
        if self.transport == ResponseTransport.CHAT and self.channel_id is None:
            raise ValueError("Chat replies must carry the channel they came from")
        return self


class CompleteVerificationResponse(BaseModel):
    """Complete verification response."""

    decision: ApprovalDecision
    message: str  # Localized text shown to the user
    platform_user: PlatformUser | None = None
    debug: dict[str, Any] | None = None  # Only populated in debug mode


class CompleteVerificationUseCase(BaseUseCase):
    """Use case for turning a challenge response into an approved join request."""

    def __init__(
        self,
        resolution_service: ResolutionService,
        platform_client: CommunityPlatformClient,
        chat_transport: ChatTransport,
        settings: Settings,
    ) -> None:
        """Initialize complete verification use case.

        Args:
            resolution_service: Resolution domain service
            platform_client: Community platform client (profile lookup)
            chat_transport: Outbound chat transport (approval and replies)
            settings: Application settings
        """
        self.resolution_service = resolution_service
        self.platform_client = platform_client
        self.chat_transport = chat_transport
        self.settings = settings
        self.messages = Messages(settings.locale)

    async def is_awaiting_response(self, channel_id: ChannelId) -> bool:
        """Check whether a private chat has a live pending request."""
        return await self.resolution_service.is_awaiting_response(channel_id)

    async def execute(
        self, request: CompleteVerificationRequest
    ) -> CompleteVerificationResponse:
        """Resolve a challenge response and approve the join request.

        Steps:
        1. Resolve the payload to a decision (decrypt, correlate, verify, consume)
        2. Approve the join request through the chat transport
        3. Tell the user the outcome in their private chat

        Failures never raise: the response carries a rejected decision with
        the reason, and chat replies also receive the failure message.

        Args:
            request: Challenge response

        Returns:
            Decision and the localized message for the user
        """
        with logfire.span(
            "complete_verification", transport=request.transport.value
        ):
            try:
                decision, secret = await self.resolution_service.resolve(
                    request.payload,
                    request.channel_id
                    if request.transport == ResponseTransport.CHAT
                    else None,
                )
            except HandshakeError as e:
                logfire.info(
                    "Challenge response rejected",
                    reason=e.reason.value,
                    transport=request.transport.value,
                    channel_id=request.channel_id,
                )
                return await self._reject(request, e.reason, e.detail)

            try:
                await self.chat_transport.approve_join_request(
                    decision.group_id, decision.user_id
                )
            except ProviderError as e:
                logfire.error(
                    "Join request approval failed",
                    user_id=decision.user_id,
                    group_id=decision.group_id,
                    error=str(e),
                )
                failed = decision.model_copy(
                    update={
                        "approved": False,
                        "failure": FailureReason.APPROVAL_FAILED,
                        "detail": str(e),
                    }
                )
                message = self.messages.failure(FailureReason.APPROVAL_FAILED)
                await self._notify(decision.chat_channel_id, message)
                return CompleteVerificationResponse(
                    decision=failed,
                    message=message,
                    debug=self._debug(failed, secret),
                )

            platform_user = await self.platform_client.fetch_current_user(
                secret.secret
            )
            if platform_user:
                message = self.messages.text(
                    "approved_as", username=platform_user.username
                )
            else:
                message = self.messages.text("approved")

            await self._notify(decision.chat_channel_id, message)

            logfire.info(
                "Join request approved",
                user_id=decision.user_id,
                group_id=decision.group_id,
                transport=request.transport.value,
            )

        return CompleteVerificationResponse(
            decision=decision,
            message=message,
            platform_user=platform_user,
            debug=self._debug(decision, secret),
        )

    async def _reject(
        self,
        request: CompleteVerificationRequest,
        reason: FailureReason,
        detail: str | None,
    ) -> CompleteVerificationResponse:
        decision = ApprovalDecision.rejected(reason, detail)
        message = self.messages.failure(reason)

        # HTTP callers see the failure page; only chat replies get a message back
        if request.transport == ResponseTransport.CHAT:
            await self._notify(request.channel_id, message)

        return CompleteVerificationResponse(
            decision=decision, message=message, debug=self._debug(decision)
        )

    async def _notify(self, channel_id: ChannelId | None, text: str) -> None:
        if channel_id is None:
            return
        try:
            await self.chat_transport.send_message(channel_id, text)
        except ProviderError as e:
            logfire.error("Failed to notify user", channel_id=channel_id, error=str(e))

    def _debug(
        self, decision: ApprovalDecision, secret: DecryptedSecret | None = None
    ) -> dict[str, Any] | None:
        if not self.settings.debug:
            return None
        debug: dict[str, Any] = {
            "approved": decision.approved,
            "failure": decision.failure.value if decision.failure else None,
            "detail": decision.detail,
        }
        if secret is not None:
            debug["payload"] = secret.debug_view()
        return debug
