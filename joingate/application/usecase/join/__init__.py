"""Join verification use cases."""

from .complete_verification import CompleteVerificationUseCase
from .issue_challenge import IssueChallengeUseCase

__all__ = ["CompleteVerificationUseCase", "IssueChallengeUseCase"]
