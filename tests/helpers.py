"""Helpers shared by tests."""

import json
from base64 import b64encode
from datetime import datetime, timedelta, timezone

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding

from joingate.domain.service import KeyPair, KeyPairProvider


def encrypt_payload(key_pair: KeyPair, data: dict | str) -> str:
    """Encrypt a payload the way Discourse does.

    Loads the PKCS#1 PEM public key, encrypts with PKCS#1 v1.5 padding and
    base64 encodes the ciphertext.
    """
    plaintext = data if isinstance(data, str) else json.dumps(data)
    public_key = serialization.load_pem_public_key(key_pair.public_key_pem.encode())
    ciphertext = public_key.encrypt(plaintext.encode("utf-8"), padding.PKCS1v15())
    return b64encode(ciphertext).decode("ascii")


def make_payload(nonce: str, key: str = "sk_live", api: str = "c1") -> dict:
    """Plaintext payload as Discourse encrypts it."""
    return {"key": key, "nonce": nonce, "push": False, "api": api}


class FixedKeyPairProvider(KeyPairProvider):
    """Key pair provider returning a pre-built key pair."""

    def __init__(self, key_pair: KeyPair) -> None:
        self.key_pair = key_pair

    def get(self) -> KeyPair:
        return self.key_pair


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)
