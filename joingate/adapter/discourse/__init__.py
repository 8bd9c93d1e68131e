"""Discourse adapter."""

from .client import DiscourseClient, MockDiscourseClient, RealDiscourseClient

__all__ = ["DiscourseClient", "MockDiscourseClient", "RealDiscourseClient"]
