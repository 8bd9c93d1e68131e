"""Community platform client interface."""

from joingate.domain.model import PlatformUser, VerificationOutcome
from joingate.domain.value import Nonce


class CommunityPlatformClient:
    """Interface to the community platform's user API key endpoints."""

    def build_authorization_url(self, nonce: Nonce, public_key_pem: str) -> str:
        """Build the key issuance URL the user must visit.

        Args:
            nonce: Nonce echoed back inside the encrypted payload
            public_key_pem: Public key the platform encrypts the payload with

        Returns:
            Authorization URL
        """
        raise NotImplementedError

    async def verify(self, secret: str) -> VerificationOutcome:
        """Check that a user API key is accepted by the platform.

        Never raises for network problems; they are reported as an
        unverified outcome.

        Args:
            secret: Decrypted user API key

        Returns:
            Verification outcome
        """
        raise NotImplementedError

    async def fetch_current_user(self, secret: str) -> PlatformUser | None:
        """Fetch the account the user API key belongs to.

        Args:
            secret: Decrypted user API key

        Returns:
            Platform user, or None if it could not be fetched
        """
        raise NotImplementedError
