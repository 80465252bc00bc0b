"""Application pool – DeferredQueue."""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator

from cachepool.kernel.storage import StoreEntry


@dataclasses.dataclass(frozen=True, slots=True)
class Put:
    """Staged write of an already-encoded entry."""

    entry: StoreEntry


@dataclasses.dataclass(frozen=True, slots=True)
class Delete:
    """Staged removal of a key."""


Operation = Put | Delete


class DeferredQueue:
    """Uncommitted writes/deletes, at most one per key.

    Staging a key again replaces its pending operation and moves it to the
    end of the queue, so :meth:`drain` yields operations in the order their
    latest version was staged.  Entries are already encoded, which makes the
    staged value immune to later changes of the caller's object.
    """

    def __init__(self) -> None:
        self._ops: dict[str, Operation] = {}

    def stage(self, key: str, operation: Operation) -> None:
        self._ops.pop(key, None)
        self._ops[key] = operation

    def peek(self, key: str) -> Operation | None:
        return self._ops.get(key)

    def discard(self, key: str) -> Operation | None:
        return self._ops.pop(key, None)

    def drain(self) -> list[tuple[str, Operation]]:
        """Return every pending operation in staging order and empty the queue."""
        drained = list(self._ops.items())
        self._ops.clear()
        return drained

    def restore(self, operations: Iterable[tuple[str, Operation]]) -> None:
        """Put drained operations back in front of anything staged since."""
        newer = self._ops
        self._ops = dict(operations)
        for key, operation in newer.items():
            self.stage(key, operation)

    def discard_all(self) -> None:
        self._ops.clear()

    def keys(self) -> list[str]:
        return list(self._ops)

    def __contains__(self, key: object) -> bool:
        return key in self._ops

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ops))

    def __len__(self) -> int:
        return len(self._ops)


__all__ = ["Delete", "DeferredQueue", "Operation", "Put"]
