"""Encrypted payload decoding."""

import binascii
import logging
from base64 import b64decode

from pydantic import ValidationError

from joingate.domain.error import DecryptionFailedError, MalformedPayloadError
from joingate.domain.model import DecryptedSecret
from joingate.domain.service.base import Service
from joingate.domain.service.crypto import KeyPairProvider

logger = logging.getLogger(__name__)


class PayloadService(Service):
    """Opens encrypted user API key payloads with the process key pair."""

    def __init__(self, key_pair_provider: KeyPairProvider) -> None:
        """Initialize payload service.

        Args:
            key_pair_provider: Provider of the process key pair
        """
        self.key_pair_provider = key_pair_provider

    def open(self, encrypted_payload: str) -> DecryptedSecret:
        """Decrypt and parse an encrypted payload.

        The payload is the base64 text Discourse shows to the user or
        appends to the auth redirect. Line breaks from copy/paste are
        ignored, and spaces are read back as "+" because an unescaped
        query string turns "+" into a space.

        Args:
            encrypted_payload: Base64 encoded RSA ciphertext

        Returns:
            Decrypted secret

        Raises:
            DecryptionFailedError: If the payload is not ciphertext for our key
            MalformedPayloadError: If the plaintext is not a valid payload
        """
        ciphertext = self._decode(encrypted_payload)
        plaintext = self.key_pair_provider.get().decrypt(ciphertext)

        # Discourse always encrypts a JSON object; anything else means the
        # ciphertext was not produced for this key.
        try:
            text = plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionFailedError("Plaintext is not UTF-8") from e
        if not text.lstrip().startswith("{"):
            raise DecryptionFailedError("Plaintext is not a JSON object")

        try:
            return DecryptedSecret.model_validate_json(text)
        except ValidationError as e:
            logger.info(f"Decrypted payload rejected: {e.error_count()} error(s)")
            raise MalformedPayloadError(
                f"Invalid payload fields: {', '.join(_error_locations(e))}"
            ) from e

    @staticmethod
    def _decode(encrypted_payload: str) -> bytes:
        """Decode base64 payload text to ciphertext bytes."""
        cleaned = "".join(encrypted_payload.split("\n"))
        cleaned = cleaned.replace("\r", "").replace("\t", "").strip()
        cleaned = cleaned.replace(" ", "+")
        if not cleaned:
            raise DecryptionFailedError("Empty payload")

        padding = -len(cleaned) % 4
        try:
            return b64decode(cleaned + "=" * padding, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecryptionFailedError(f"Payload is not valid base64: {e}") from e


def _error_locations(error: ValidationError) -> list[str]:
    """Field names of validation errors, without the offending values."""
    locations = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "payload"
        locations.append(location)
    return locations
