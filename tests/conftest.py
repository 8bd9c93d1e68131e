"""Test configuration and fixtures."""

import pytest

from joingate.adapter.crypto.keypair import RSAKeyPair
from tests.helpers import FakeClock


@pytest.fixture(scope="session")
def key_pair() -> RSAKeyPair:
    """One RSA key pair for the whole test session (generation is slow)."""
    return RSAKeyPair.generate()


@pytest.fixture(scope="session")
def other_key_pair() -> RSAKeyPair:
    """A second, unrelated key pair."""
    return RSAKeyPair.generate()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
