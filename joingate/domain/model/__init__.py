"""Domain models."""

from joingate.domain.model.challenge import Challenge
from joingate.domain.model.decision import ApprovalDecision, VerificationOutcome
from joingate.domain.model.join_request import JoinRequest
from joingate.domain.model.pending_request import PendingRequest
from joingate.domain.model.platform_user import PlatformUser
from joingate.domain.model.secret import DecryptedSecret

__all__ = [
    "ApprovalDecision",
    "Challenge",
    "DecryptedSecret",
    "JoinRequest",
    "PendingRequest",
    "PlatformUser",
    "VerificationOutcome",
]
