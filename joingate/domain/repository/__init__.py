"""Domain repository interfaces."""

from joingate.domain.repository.correlation import CorrelationStore

__all__ = ["CorrelationStore"]
