"""Correlation store interface."""

from abc import ABC, abstractmethod

from joingate.domain.model import PendingRequest
from joingate.domain.value import ChannelId, Nonce


class CorrelationStore(ABC):
    """Ephemeral, TTL-bounded registry of pending requests.

    Each pending request is reachable through two independent indices: the
    nonce embedded in its challenge and the requester's private channel.
    Entries are write-once and read-many until they expire or are removed.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def register_by_nonce(self, nonce: Nonce, request: PendingRequest) -> bool:
        """Register a pending request under its nonce.

        Args:
            nonce: Freshly issued nonce
            request: Pending request to register

        Returns:
            True if stored, False if a live entry already holds the nonce
        """
        pass

    @abstractmethod
    async def register_by_channel(
        self, channel_id: ChannelId, request: PendingRequest
    ) -> bool:
        """Register a pending request under the requester's private channel.

        Args:
            channel_id: Private channel of the requester
            request: Pending request to register

        Returns:
            True if stored, False if a live entry already holds the channel
        """
        pass

    @abstractmethod
    async def lookup_by_nonce(self, nonce: Nonce) -> PendingRequest | None:
        """Find a live pending request by nonce.

        Returns:
            The pending request if registered and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def lookup_by_channel(self, channel_id: ChannelId) -> PendingRequest | None:
        """Find a live pending request by private channel.

        Returns:
            The pending request if registered and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def remove_nonce(self, nonce: Nonce) -> PendingRequest | None:
        """Remove the nonce index entry.

        Removing an absent entry is a no-op. Exactly one of several
        concurrent callers receives the live request.

        Returns:
            The removed request if it was live, None otherwise
        """
        pass

    @abstractmethod
    async def remove_channel(self, channel_id: ChannelId) -> PendingRequest | None:
        """Remove the channel index entry.

        Returns:
            The removed request if it was live, None otherwise
        """
        pass

    @abstractmethod
    async def sweep(self) -> int:
        """Evict expired entries from both indices.

        Returns:
            Number of entries evicted
        """
        pass
