"""Kernel storage – InMemoryBackend."""
from __future__ import annotations

from collections.abc import Sequence

from cachepool.kernel.storage.backend import Backend, SetRef, StoreEntry, WriteBatch


class InMemoryBackend(Backend):
    """Dict-backed back-end; the default for a pool and for unit tests.

    Two pools sharing one instance see each other's committed writes, which
    is how the "new pool instance" behaviour is exercised without a server.
    """

    name = "memory"

    def __init__(self) -> None:
        self._entries: dict[str, StoreEntry] = {}
        self._sets: dict[SetRef, set[str]] = {}

    def read(self, keys: Sequence[str]) -> dict[str, StoreEntry]:
        return {key: self._entries[key] for key in keys if key in self._entries}

    def members(self, namespace: str, name: str) -> set[str]:
        return set(self._sets.get((namespace, name), ()))

    def apply(self, batch: WriteBatch) -> None:
        for ref in batch.dropped:
            self._sets.pop(ref, None)
        for ref, members in batch.removed.items():
            current = self._sets.get(ref)
            if current is None:
                continue
            current.difference_update(members)
            if not current:
                del self._sets[ref]
        for ref, members in batch.added.items():
            if members:
                self._sets.setdefault(ref, set()).update(members)
        for key in batch.deletes:
            self._entries.pop(key, None)
        self._entries.update(batch.puts)

    def clear(self) -> None:
        self._entries.clear()
        self._sets.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InMemoryBackend"]
