"""API routes."""

from . import auth, health, index

__all__ = ["auth", "health", "index"]
