"""Core: signal state, reducer, store, metrics and structured logging."""

from intersection.core.reducer import reduce
from intersection.core.store import Store

__all__ = ["reduce", "Store"]
