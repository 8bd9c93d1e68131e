"""Telegram bot interface."""

from .handlers import build_bot_application, register_handlers

__all__ = ["build_bot_application", "register_handlers"]
