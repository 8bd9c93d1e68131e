"""Mock providers for testing."""

from .discourse import MockDiscourseProvider
from .telegram import MockTelegramProvider
from .container import build_test_container, make_test_settings

__all__ = [
    "MockDiscourseProvider",
    "MockTelegramProvider",
    "build_test_container",
    "make_test_settings",
]
