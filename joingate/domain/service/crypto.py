"""Key pair interfaces."""

from abc import ABC, abstractmethod


class KeyPair(ABC):
    """Asymmetric key pair used to receive encrypted user API keys."""

    @property
    @abstractmethod
    def public_key_pem(self) -> str:
        """Public key in the PEM encoding expected by the platform."""
        pass

    @abstractmethod
    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt ciphertext produced with the public key.

        Raises:
            DecryptionFailedError: If the ciphertext cannot be decrypted
        """
        pass


class KeyPairProvider(ABC):
    """Owns the single key pair of the process."""

    @abstractmethod
    def get(self) -> KeyPair:
        """Return the process key pair, generating it on first use.

        Raises:
            KeyGenerationError: If the key pair cannot be generated
        """
        pass
