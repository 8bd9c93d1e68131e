"""RSA key pair for receiving encrypted user API keys."""

import logging
import threading

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from joingate.domain.error import DecryptionFailedError, KeyGenerationError
from joingate.domain.service.crypto import KeyPair, KeyPairProvider

logger = logging.getLogger(__name__)

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


class RSAKeyPair(KeyPair):
    """RSA-2048 key pair with PKCS#1 v1.5 encryption padding.

    Discourse encrypts the user API key payload with the public key sent in
    the authorization URL, using PKCS#1 v1.5 padding. The public key is
    exported as a PKCS#1 PEM ("BEGIN RSA PUBLIC KEY"). The private key never
    leaves this object.
    """

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        """Wrap an existing private key.

        Args:
            private_key: RSA private key
        """
        self._private_key = private_key
        self._public_key_pem = (
            private_key.public_key()
            .public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.PKCS1,
            )
            .decode("ascii")
        )

    @classmethod
    def generate(cls) -> "RSAKeyPair":
        """Generate a new RSA-2048 key pair."""
        private_key = rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=RSA_KEY_SIZE,
        )
        return cls(private_key)

    @property
    def public_key_pem(self) -> str:
        """Public key as PKCS#1 PEM."""
        return self._public_key_pem

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt PKCS#1 v1.5 ciphertext.

        Raises:
            DecryptionFailedError: If the ciphertext cannot be decrypted
        """
        try:
            return self._private_key.decrypt(ciphertext, padding.PKCS1v15())
        except ValueError as e:
            raise DecryptionFailedError(f"RSA decryption failed: {e}") from e

    def __repr__(self) -> str:
        return f"RSAKeyPair(key_size={self._private_key.key_size})"


class ProcessKeyPairProvider(KeyPairProvider):
    """Holds one key pair for the whole process lifetime.

    The key pair is generated on first use (or eagerly at startup) and is
    never rotated, persisted or logged.
    """

    def __init__(self) -> None:
        self._key_pair: RSAKeyPair | None = None
        self._lock = threading.Lock()

    def get(self) -> RSAKeyPair:
        """Return the process key pair, generating it once.

        Raises:
            KeyGenerationError: If generation fails
        """
        if self._key_pair is not None:
            return self._key_pair

        with self._lock:
            if self._key_pair is None:
                logger.info(f"Generating RSA-{RSA_KEY_SIZE} key pair")
                try:
                    self._key_pair = RSAKeyPair.generate()
                except Exception as e:
                    raise KeyGenerationError(
                        f"Failed to generate RSA key pair: {e}"
                    ) from e
            return self._key_pair
