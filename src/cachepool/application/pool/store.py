"""Application pool – Store."""
from __future__ import annotations

from collections.abc import Callable, Sequence

from cachepool.kernel.errors import BackendError
from cachepool.kernel.storage import Backend, StoreEntry, WriteBatch
from cachepool.kernel.time import Clock
from cachepool.observability.logging import get_logger

ExpiredHandler = Callable[[dict[str, StoreEntry]], None]

_log = get_logger(__name__)


class Store:
    """Authoritative ``key -> StoreEntry`` view over a back-end.

    Expiry is lazy: an entry whose ``expires_at`` has passed may still be
    physically present, but :meth:`get` and :meth:`get_many` report it as
    absent and hand it to ``on_expired`` so the owner can evict it together
    with its tag and hierarchy bookkeeping.
    """

    def __init__(
        self,
        backend: Backend,
        clock: Clock,
        on_expired: ExpiredHandler | None = None,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._on_expired = on_expired

    @property
    def backend(self) -> Backend:
        return self._backend

    def get(self, key: str) -> StoreEntry | None:
        return self.get_many([key]).get(key)

    def get_many(self, keys: Sequence[str]) -> dict[str, StoreEntry]:
        """Return the live entries among *keys*."""
        if not keys:
            return {}
        now = self._clock.timestamp()
        live: dict[str, StoreEntry] = {}
        expired: dict[str, StoreEntry] = {}
        for key, entry in self.peek(keys).items():
            if entry.is_expired(now):
                expired[key] = entry
            else:
                live[key] = entry
        if expired and self._on_expired is not None:
            self._on_expired(expired)
        return live

    def peek(self, keys: Sequence[str]) -> dict[str, StoreEntry]:
        """Raw read: physically present entries, expired ones included."""
        if not keys:
            return {}
        return self._backend.read(list(keys))

    def put(self, key: str, entry: StoreEntry, batch: WriteBatch) -> None:
        batch.put(key, entry)

    def delete(self, key: str, batch: WriteBatch) -> None:
        batch.delete(key)

    def apply(self, batch: WriteBatch) -> None:
        if batch.is_empty:
            return
        try:
            self._backend.apply(batch)
        except BackendError as exc:
            _log.warning(
                "cache.batch_rejected",
                backend=self._backend.name,
                retryable=exc.retryable,
                error=exc,
                **batch.summary(),
            )
            raise

    def clear(self) -> None:
        """Wipe entries, tag sets and hierarchy nodes in the back-end."""
        self._backend.clear()


__all__ = ["ExpiredHandler", "Store"]
