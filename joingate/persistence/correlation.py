"""In-memory correlation store."""

import asyncio
import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from joingate.domain.model import PendingRequest
from joingate.domain.repository import CorrelationStore
from joingate.domain.value import ChannelId, Nonce
from joingate.util.clock import Clock, utc_now

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class _Entry:
    request: PendingRequest
    expires_at: datetime


class _ExpiringIndex(Generic[K]):
    """Single index of the store: key -> entry with an expiry timestamp.

    Not thread-safe on its own; the store serializes access.
    """

    def __init__(self) -> None:
        self._entries: dict[K, _Entry] = {}

    def put_if_absent(self, key: K, entry: _Entry, now: datetime) -> bool:
        existing = self._entries.get(key)
        if existing is not None and existing.expires_at > now:
            return False
        self._entries[key] = entry
        return True

    def get(self, key: K, now: datetime) -> PendingRequest | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= now:
            # Lazily evict on read
            del self._entries[key]
            return None
        return entry.request

    def pop(self, key: K, now: datetime) -> PendingRequest | None:
        entry = self._entries.pop(key, None)
        if entry is None or entry.expires_at <= now:
            return None
        return entry.request

    def evict_expired(self, now: datetime) -> int:
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class InMemoryCorrelationStore(CorrelationStore):
    """In-memory correlation store with lazy TTL expiry.

    Sufficient because pending requests are short-lived (10 minutes) and
    don't need to survive restarts - users simply send a new join request.

    Every entry stores its own expiry timestamp, checked on each read, so
    an entry is unreachable as soon as its window closes even if it has
    not been evicted yet. ``sweep`` (driven by ``run_sweeper``) removes
    expired entries to bound memory.

    Attributes:
        _by_nonce: Nonce index
        _by_channel: Private channel index
    """

    def __init__(self, ttl: timedelta, clock: Clock = utc_now) -> None:
        """Initialize empty store.

        Args:
            ttl: Lifetime of each registration
            clock: Source of the current time
        """
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._by_nonce: _ExpiringIndex[Nonce] = _ExpiringIndex()
        self._by_channel: _ExpiringIndex[ChannelId] = _ExpiringIndex()

    async def register_by_nonce(self, nonce: Nonce, request: PendingRequest) -> bool:
        """Register a pending request under its nonce."""
        return self._register(self._by_nonce, nonce, request)

    async def register_by_channel(
        self, channel_id: ChannelId, request: PendingRequest
    ) -> bool:
        """Register a pending request under the requester's private channel."""
        return self._register(self._by_channel, channel_id, request)

    async def lookup_by_nonce(self, nonce: Nonce) -> PendingRequest | None:
        """Find a live pending request by nonce."""
        with self._lock:
            return self._by_nonce.get(nonce, self._clock())

    async def lookup_by_channel(self, channel_id: ChannelId) -> PendingRequest | None:
        """Find a live pending request by private channel."""
        with self._lock:
            return self._by_channel.get(channel_id, self._clock())

    async def remove_nonce(self, nonce: Nonce) -> PendingRequest | None:
        """Remove the nonce entry, returning it if it was live."""
        with self._lock:
            return self._by_nonce.pop(nonce, self._clock())

    async def remove_channel(self, channel_id: ChannelId) -> PendingRequest | None:
        """Remove the channel entry, returning it if it was live."""
        with self._lock:
            return self._by_channel.pop(channel_id, self._clock())

    async def sweep(self) -> int:
        """Evict expired entries from both indices."""
        with self._lock:
            now = self._clock()
            evicted = self._by_nonce.evict_expired(now)
            evicted += self._by_channel.evict_expired(now)
        if evicted:
            logger.debug(f"Evicted {evicted} expired correlation entries")
        return evicted

    def __len__(self) -> int:
        """Number of stored entries across both indices, live or not."""
        with self._lock:
            return len(self._by_nonce) + len(self._by_channel)

    def _register(
        self, index: _ExpiringIndex, key: Hashable, request: PendingRequest
    ) -> bool:
        with self._lock:
            now = self._clock()
            entry = _Entry(request=request, expires_at=now + self._ttl)
            return index.put_if_absent(key, entry, now)


async def run_sweeper(store: CorrelationStore, interval_seconds: float) -> None:
    """Periodically evict expired entries until cancelled.

    Args:
        store: Store to sweep
        interval_seconds: Delay between sweeps
    """
    logger.info(f"Correlation sweeper started (interval={interval_seconds}s)")
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            await store.sweep()
    except asyncio.CancelledError:
        logger.info("Correlation sweeper stopped")
        raise
