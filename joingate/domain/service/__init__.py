"""Domain services."""

from .base import Service
from .challenge_service import ChallengeService, generate_nonce
from .crypto import KeyPair, KeyPairProvider
from .payload_service import PayloadService
from .platform import CommunityPlatformClient
from .resolution_service import ResolutionService
from .transport import ChatTransport

__all__ = [
    "ChallengeService",
    "ChatTransport",
    "CommunityPlatformClient",
    "KeyPair",
    "KeyPairProvider",
    "PayloadService",
    "ResolutionService",
    "Service",
    "generate_nonce",
]
