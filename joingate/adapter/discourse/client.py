"""Discourse user API key client.

Implements the two halves of the Discourse user API key flow that the
handshake needs: building the key issuance URL and proving that a
decrypted key works.
"""

from urllib.parse import urlencode

import httpx
import logfire

from joingate.adapter.error import RemoteTransportError
from joingate.config import DiscourseSettings
from joingate.domain.model import PlatformUser, VerificationOutcome
from joingate.domain.service.platform import CommunityPlatformClient
from joingate.domain.value import Nonce


class DiscourseClient(CommunityPlatformClient):
    """Base class for Discourse clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealDiscourseClient(DiscourseClient):
    """Discourse client talking to a real forum over HTTPS."""

    def __init__(
        self,
        settings: DiscourseSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Discourse client.

        Args:
            settings: Discourse settings (site URL, client id, check topic)
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings
        self._transport = transport

        self.key_issuance_url = f"{settings.base_url}/user-api-key/new"
        self.check_url = f"{settings.base_url}/t/{settings.check_topic_id}.json"
        self.current_user_url = f"{settings.base_url}/session/current.json"

    def build_authorization_url(self, nonce: Nonce, public_key_pem: str) -> str:
        """Build the user API key issuance URL.

        Args:
            nonce: Nonce echoed back in the encrypted payload
            public_key_pem: PKCS#1 PEM public key

        Returns:
            Authorization URL
        """
        params = {
            "application_name": self.settings.application_name,
            "scopes": self.settings.scopes,
            "client_id": self.settings.client_id,
            "public_key": public_key_pem,
        }
        if self.settings.auth_redirect_url:
            params["auth_redirect"] = self.settings.auth_redirect_url
        params["nonce"] = str(nonce)

        return f"{self.key_issuance_url}?{urlencode(params)}"

    async def verify(self, secret: str) -> VerificationOutcome:
        """Fetch the check topic with the user API key.

        A response that arrives with a JSON body counts as verified unless
        its status is an explicit rejection (by default 401, an invalid or
        revoked key). With strict verification only 2xx responses verify.

        Args:
            secret: Decrypted user API key

        Returns:
            Verification outcome
        """
        try:
            response = await self._get(self.check_url, secret)
        except RemoteTransportError as e:
            logfire.warn("Discourse verification call failed", error=str(e))
            return VerificationOutcome(verified=False, error=str(e))

        status_code = response.status_code
        if status_code in self.settings.rejected_status_codes:
            return VerificationOutcome(
                verified=False,
                status_code=status_code,
                error=f"Discourse rejected the key (HTTP {status_code})",
            )

        if self.settings.strict_verification and not response.is_success:
            return VerificationOutcome(
                verified=False,
                status_code=status_code,
                error=f"Discourse returned HTTP {status_code}",
            )

        try:
            response.json()
        except ValueError:
            return VerificationOutcome(
                verified=False,
                status_code=status_code,
                error=f"Discourse returned a non-JSON response (HTTP {status_code})",
            )

        logfire.info("Discourse verification call completed", status_code=status_code)
        return VerificationOutcome(verified=True, status_code=status_code)

    async def fetch_current_user(self, secret: str) -> PlatformUser | None:
        """Fetch the forum account behind the user API key.

        Args:
            secret: Decrypted user API key

        Returns:
            Platform user, or None on any failure
        """
        try:
            response = await self._get(self.current_user_url, secret)
            response.raise_for_status()
            data = response.json()
        except (RemoteTransportError, httpx.HTTPStatusError, ValueError) as e:
            logfire.warn("Failed to fetch Discourse user", error=str(e))
            return None

        user = data.get("current_user") if isinstance(data, dict) else None
        if not isinstance(user, dict) or not user.get("username"):
            logfire.warn("Discourse session response has no current user")
            return None

        return PlatformUser(username=user["username"], name=user.get("name") or None)

    async def _get(self, url: str, secret: str) -> httpx.Response:
        """GET a Discourse URL authenticated with a user API key.

        Raises:
            RemoteTransportError: If the request could not be completed
        """
        headers = {
            "User-Api-Key": secret,
            "User-Api-Client-Id": self.settings.client_id,
            "Accept": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self._transport
            ) as client:
                return await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteTransportError(
                f"Request to {url} failed: {type(e).__name__}: {e}"
            ) from e


class MockDiscourseClient(DiscourseClient):
    """Mock Discourse client for development and testing.

    Accepts every key except "invalid" and "unreachable".
    """

    def __init__(self, site_url: str = "https://forum.example.com") -> None:
        """Initialize mock client without network access."""
        self.site_url = site_url
        self.verified_secrets: list[str] = []

    def build_authorization_url(self, nonce: Nonce, public_key_pem: str) -> str:
        """Get mock authorization URL."""
        params = {"mock": "true", "public_key": public_key_pem, "nonce": str(nonce)}
        return f"{self.site_url}/user-api-key/new?{urlencode(params)}"

    async def verify(self, secret: str) -> VerificationOutcome:
        """Verify mock key."""
        self.verified_secrets.append(secret)
        if secret == "unreachable":
            return VerificationOutcome(verified=False, error="ConnectError: mock")
        if secret == "invalid":
            return VerificationOutcome(
                verified=False,
                status_code=401,
                error="Discourse rejected the key (HTTP 401)",
            )
        return VerificationOutcome(verified=True, status_code=200)

    async def fetch_current_user(self, secret: str) -> PlatformUser | None:
        """Fetch mock forum user."""
        if secret in ("invalid", "unreachable"):
            return None
        return PlatformUser(username="mock_user", name="Mock User")
