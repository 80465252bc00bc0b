"""Kernel storage – Backend port and the in-memory implementation."""
from cachepool.kernel.storage.backend import (
    NODE_NAMESPACE,
    TAG_NAMESPACE,
    Backend,
    SetRef,
    StoreEntry,
    WriteBatch,
)
from cachepool.kernel.storage.memory import InMemoryBackend

__all__ = [
    "Backend",
    "InMemoryBackend",
    "NODE_NAMESPACE",
    "SetRef",
    "StoreEntry",
    "TAG_NAMESPACE",
    "WriteBatch",
]
