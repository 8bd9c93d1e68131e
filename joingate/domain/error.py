"""Domain layer errors."""

from joingate.domain.value import FailureReason


class DomainError(Exception):
    """Base domain error."""

    pass


class KeyGenerationError(DomainError):
    """Raised when the process key pair cannot be generated.

    Fatal: the process must not start without a key pair.
    """

    pass


class HandshakeError(DomainError):
    """Base error for a failed challenge response.

    Every handshake failure is recoverable: the pending request stays in
    place and the user may retry until the challenge expires.

    Attributes:
        reason: Failure category shown to the user
        detail: Technical detail, only for debug output
    """

    reason: FailureReason

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(detail or self.reason.value)


class DecryptionFailedError(HandshakeError):
    """Raised when the payload cannot be decrypted with the private key."""

    reason = FailureReason.DECRYPTION_FAILED


class MalformedPayloadError(HandshakeError):
    """Raised when decrypted plaintext is not a valid user API key payload."""

    reason = FailureReason.MALFORMED_PAYLOAD


class NonceMismatchError(HandshakeError):
    """Raised when the replying channel and the payload nonce disagree."""

    reason = FailureReason.NONCE_MISMATCH


class ExpiredOrUnknownNonceError(HandshakeError):
    """Raised when no live pending request matches the nonce."""

    reason = FailureReason.EXPIRED_OR_UNKNOWN_NONCE


class VerificationFailedError(HandshakeError):
    """Raised when the community platform does not accept the secret."""

    reason = FailureReason.VERIFICATION_FAILED
