"""Kernel storage – Backend port, StoreEntry and WriteBatch.

A back-end is the durable key/value substrate behind a pool.  It holds three
logical namespaces:

* entries – ``key -> StoreEntry``
* tag sets – ``("tag", tag) -> {key, ...}``
* hierarchy node sets – ``("node", path) -> {child path, ...}``

Mutations are grouped in a :class:`WriteBatch` and handed to
:meth:`Backend.apply`, which must apply all of it or none of it.
"""
from __future__ import annotations

import abc
import dataclasses
from collections.abc import Iterable, Sequence
from typing import Any

from cachepool.kernel.codec import Payload

TAG_NAMESPACE = "tag"
NODE_NAMESPACE = "node"

SetRef = tuple[str, str]


@dataclasses.dataclass(frozen=True, slots=True)
class StoreEntry:
    """A persisted value with its absolute expiry (POSIX seconds) and tags."""

    payload: Payload
    expires_at: float | None = None
    tags: frozenset[str] = frozenset()

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now


@dataclasses.dataclass
class WriteBatch:
    """Accumulates mutations for one atomic :meth:`Backend.apply` call.

    The last change staged for an entry key or a set member wins.  Back-ends
    apply set drops first, then member removals, then member additions, so
    a member added after its set was dropped survives.
    """

    puts: dict[str, StoreEntry] = dataclasses.field(default_factory=dict)
    deletes: set[str] = dataclasses.field(default_factory=set)
    added: dict[SetRef, set[str]] = dataclasses.field(default_factory=dict)
    removed: dict[SetRef, set[str]] = dataclasses.field(default_factory=dict)
    dropped: set[SetRef] = dataclasses.field(default_factory=set)

    def put(self, key: str, entry: StoreEntry) -> None:
        self.deletes.discard(key)
        self.puts[key] = entry

    def delete(self, key: str) -> None:
        self.puts.pop(key, None)
        self.deletes.add(key)

    def add_member(self, namespace: str, name: str, member: str) -> None:
        ref = (namespace, name)
        self.removed.get(ref, set()).discard(member)
        self.added.setdefault(ref, set()).add(member)

    def remove_member(self, namespace: str, name: str, member: str) -> None:
        ref = (namespace, name)
        self.added.get(ref, set()).discard(member)
        self.removed.setdefault(ref, set()).add(member)

    def drop_set(self, namespace: str, name: str) -> None:
        ref = (namespace, name)
        self.added.pop(ref, None)
        self.removed.pop(ref, None)
        self.dropped.add(ref)

    @property
    def is_empty(self) -> bool:
        return not (
            self.puts
            or self.deletes
            or self.dropped
            or any(self.added.values())
            or any(self.removed.values())
        )

    def summary(self) -> dict[str, Any]:
        """Counts suitable for structured log events."""
        return {
            "puts": len(self.puts),
            "deletes": len(self.deletes),
            "set_drops": len(self.dropped),
            "member_adds": sum(len(m) for m in self.added.values()),
            "member_removals": sum(len(m) for m in self.removed.values()),
        }


class Backend(abc.ABC):
    """Port: durable key/value substrate for a cache pool.

    Concrete implementations live in ``kernel/storage/memory.py``,
    ``adapters/redis`` and ``adapters/sqlalchemy``.  Implementations raise
    :class:`~cachepool.kernel.errors.BackendError` for driver failures and
    must leave their state untouched when :meth:`apply` fails.
    """

    name: str = "backend"

    @abc.abstractmethod
    def read(self, keys: Sequence[str]) -> dict[str, StoreEntry]:
        """Return the physically present entries among *keys* (expired or not)."""

    @abc.abstractmethod
    def members(self, namespace: str, name: str) -> set[str]: ...

    def members_many(self, namespace: str, names: Iterable[str]) -> dict[str, set[str]]:
        return {name: self.members(namespace, name) for name in names}

    @abc.abstractmethod
    def apply(self, batch: WriteBatch) -> None: ...

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove every entry and every index set."""

    def close(self) -> None:
        """Release driver resources; a no-op by default."""

    def __enter__(self) -> "Backend":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


__all__ = [
    "Backend",
    "NODE_NAMESPACE",
    "SetRef",
    "StoreEntry",
    "TAG_NAMESPACE",
    "WriteBatch",
]
