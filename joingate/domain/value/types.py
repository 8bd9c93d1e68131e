"""Domain value objects for joingate.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from joingate.domain.value.common import RootValueObject, ValueObject


class ResponseTransport(str, Enum):
    """Channel a challenge response arrived through."""

    CHAT = "chat"  # Payload pasted into the private chat with the bot
    HTTP = "http"  # Payload delivered by the Discourse auth_redirect


class FailureReason(str, Enum):
    """Why a challenge response was not accepted."""

    DECRYPTION_FAILED = "decryption_failed"
    MALFORMED_PAYLOAD = "malformed_payload"
    NONCE_MISMATCH = "nonce_mismatch"
    EXPIRED_OR_UNKNOWN_NONCE = "expired_or_unknown_nonce"
    VERIFICATION_FAILED = "verification_failed"
    APPROVAL_FAILED = "approval_failed"


class Nonce(RootValueObject[str]):
    """Single-use correlation token binding a challenge to its response.

    Issued nonces are 32 lowercase hex characters (128 bits). Nonces read
    back from a payload are only checked for a sane URL-safe shape here;
    whether they were ever issued is decided by the correlation store.
    """

    @field_validator("root")
    @classmethod
    def validate_nonce_format(cls, v: str) -> str:
        """Validate nonce is a non-empty URL-safe token."""
        if not re.match(r"^[A-Za-z0-9_-]{1,128}$", v):
            raise ValueError("Nonce must be 1-128 URL-safe characters")
        return v


class LinkButton(ValueObject):
    """Inline button that opens a URL, attached to an outgoing message."""

    text: str
    url: str
