"""Outcomes of verification and resolution."""

from joingate.domain.model.common import DomainModel
from joingate.domain.value import ChannelId, FailureReason, GroupId, Nonce, UserId


class VerificationOutcome(DomainModel):
    """Result of the remote verification call.

    Transport failures are represented here rather than raised, so the
    resolver only ever sees a typed outcome.
    """

    verified: bool
    status_code: int | None = None
    error: str | None = None


class ApprovalDecision(DomainModel):
    """Authorization decision for one challenge response.

    On success names the group and user to approve. On failure carries the
    reason for user-facing display and a technical detail for debugging.
    """

    approved: bool
    group_id: GroupId | None = None
    user_id: UserId | None = None
    chat_channel_id: ChannelId | None = None
    user_display_name: str | None = None
    nonce: Nonce | None = None
    failure: FailureReason | None = None
    detail: str | None = None

    @classmethod
    def rejected(
        cls,
        reason: FailureReason,
        detail: str | None = None,
        nonce: Nonce | None = None,
    ) -> "ApprovalDecision":
        """Build a failed decision."""
        return cls(approved=False, failure=reason, detail=detail, nonce=nonce)
