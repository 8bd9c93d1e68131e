"""Infrastructure providers."""

# Import bases
from .discourse import DiscourseProvider
from .telegram import TelegramProvider

# Import implementations (needed for __subclasses__())
from .discourse import ProdDiscourseProvider  # noqa: F401
from .telegram import ProdTelegramProvider  # noqa: F401

__all__ = [
    "DiscourseProvider",
    "ProdDiscourseProvider",
    "ProdTelegramProvider",
    "TelegramProvider",
]
