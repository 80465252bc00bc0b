"""Application pool – CachePool façade."""
from __future__ import annotations

from collections.abc import Iterable

from cachepool.application.pool.deferred import Delete, DeferredQueue, Put
from cachepool.application.pool.hierarchy import HierarchyIndex
from cachepool.application.pool.item import CacheItem
from cachepool.application.pool.store import Store
from cachepool.application.pool.tags import TagIndex
from cachepool.kernel.codec import Codec, PickleCodec
from cachepool.kernel.errors import ApplicationError, BackendError
from cachepool.kernel.keys import DEFAULT_MAX_KEY_LENGTH, RESERVED_CHARACTERS, KeyValidator
from cachepool.kernel.storage import Backend, InMemoryBackend, StoreEntry, WriteBatch
from cachepool.kernel.time import Clock, SystemClock
from cachepool.observability.logging import get_logger


class PoolClosedError(ApplicationError):
    """A deferred write was staged on a pool that was already closed."""

    default_code = "pool_closed"


class CachePool:
    """Cache-item pool with deferred writes, tags and hierarchical keys.

    Reads consult the deferred queue before the store.  Every mutating call
    validates all of its keys first and then hands exactly one
    :class:`~cachepool.kernel.storage.WriteBatch` to the back-end, so a
    failure leaves both the back-end and the in-memory queue unchanged.

    The pool is a context manager; leaving the ``with`` block (normally or
    through an exception) commits whatever is still deferred::

        with CachePool(backend) as pool:
            pool.save_deferred(pool.get_item("key").set("value"))
        # committed here

    Not thread-safe: share one pool per writer.
    """

    def __init__(
        self,
        backend: Backend | None = None,
        *,
        clock: Clock | None = None,
        codec: Codec | None = None,
        hierarchy_delimiter: str | None = "|",
        max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
    ) -> None:
        if hierarchy_delimiter and hierarchy_delimiter in RESERVED_CHARACTERS:
            raise ValueError(f"hierarchy_delimiter {hierarchy_delimiter!r} is a reserved key character")
        self._backend = backend if backend is not None else InMemoryBackend()
        self._clock: Clock = clock or SystemClock()
        self._codec = codec or PickleCodec()
        self._validator = KeyValidator(max_key_length)
        self._store = Store(self._backend, self._clock, on_expired=self._evict)
        self._deferred = DeferredQueue()
        self._tags = TagIndex(self._backend)
        self._hierarchy = HierarchyIndex(self._backend, hierarchy_delimiter) if hierarchy_delimiter else None
        self._closed = False
        self._log = get_logger(__name__, backend=self._backend.name)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def hierarchy_delimiter(self) -> str | None:
        return self._hierarchy.delimiter if self._hierarchy is not None else None

    @property
    def pending(self) -> int:
        """Number of deferred operations waiting for :meth:`commit`."""
        return len(self._deferred)

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> CacheItem:
        """Return the item for *key*; a miss is an item with ``is_hit`` false."""
        key = self._validator.validate(key)
        return self._load([key])[key]

    def get_items(self, keys: Iterable[str]) -> dict[str, CacheItem]:
        """Return ``{key: item}`` in input order; one bad key fails the call."""
        return self._load(self._validator.validate_many(keys))

    def has_item(self, key: str) -> bool:
        key = self._validator.validate(key)
        return self._resolve([key])[key] is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, item: CacheItem) -> bool:
        """Persist *item* immediately.

        An item whose expiry has already passed removes the key instead;
        that still counts as success.
        """
        key = self._validator.validate(item.key)
        if item.is_expired(self._clock.timestamp()):
            self._remove_all({key})
            return True
        entry = self._encode(item)
        previous = self._store.peek([key]).get(key)
        batch = WriteBatch()
        self._write(key, entry, previous, batch)
        self._store.apply(batch)
        self._forget([key])
        return True

    def save_deferred(self, item: CacheItem) -> bool:
        """Stage *item* for the next :meth:`commit`; visible to reads at once."""
        if self._closed:
            raise PoolClosedError("Cannot defer writes on a closed pool", detail={"key": item.key})
        key = self._validator.validate(item.key)
        if item.is_expired(self._clock.timestamp()):
            self._deferred.stage(key, Delete())
            self._tags.unstage(key)
            return True
        entry = self._encode(item)
        self._deferred.stage(key, Put(entry))
        self._tags.set_tags(key, entry.tags)
        return True

    def commit(self) -> bool:
        """Apply every deferred operation in staging order.

        Returns ``True`` even when nothing was deferred.  If the back-end
        rejects the batch the operations go back into the queue.
        """
        operations = self._deferred.drain()
        if not operations:
            return True
        now = self._clock.timestamp()
        batch = WriteBatch()
        try:
            current = self._store.peek([key for key, _ in operations])
            stripped: list[str] = []
            for key, operation in operations:
                previous = current.get(key)
                if isinstance(operation, Put) and not operation.entry.is_expired(now):
                    self._write(key, operation.entry, previous, batch)
                elif previous is not None:
                    self._strip(key, previous, batch)
                    stripped.append(key)
            self._prune(stripped, batch)
            self._store.apply(batch)
        except BackendError:
            self._deferred.restore(operations)
            raise
        for key, _ in operations:
            self._tags.unstage(key)
        self._log.debug("cache.commit", operations=len(operations), **batch.summary())
        return True

    def delete_item(self, key: str) -> bool:
        """Delete *key*; for a hierarchical key, everything under it too.

        Deleting a key that does not exist succeeds.
        """
        key = self._validator.validate(key)
        self._delete([key])
        return True

    def delete_items(self, keys: Iterable[str]) -> bool:
        self._delete(self._validator.validate_many(keys))
        return True

    def clear(self) -> bool:
        """Remove everything, including deferred items and tag bookkeeping."""
        self._store.clear()
        self._deferred.discard_all()
        self._tags.reset()
        self._log.debug("cache.cleared")
        return True

    def invalidate_tag(self, tag: str) -> bool:
        return self.invalidate_tags([tag])

    def invalidate_tags(self, tags: Iterable[str]) -> bool:
        """Delete every item carrying any of *tags*; unknown tags are a no-op."""
        tags = self._validator.validate_tags(tags)
        keys = self._tags.keys_for(tags)
        batch = WriteBatch()
        removed = self._remove_keys(keys, batch)
        self._tags.drop(tags, batch)
        self._store.apply(batch)
        self._forget(keys)
        self._log.debug("cache.tags_invalidated", tags=sorted(tags), removed=removed)
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Commit outstanding deferred items; safe to call more than once."""
        if self._closed:
            return
        try:
            self.commit()
        finally:
            self._closed = True

    def __enter__(self) -> "CachePool":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve(self, keys: list[str]) -> dict[str, StoreEntry | None]:
        now = self._clock.timestamp()
        resolved: dict[str, StoreEntry | None] = {}
        stored: list[str] = []
        for key in dict.fromkeys(keys):
            operation = self._deferred.peek(key)
            if operation is None:
                stored.append(key)
            elif isinstance(operation, Put) and not operation.entry.is_expired(now):
                resolved[key] = operation.entry
            else:
                resolved[key] = None
        live = self._store.get_many(stored)
        for key in stored:
            resolved[key] = live.get(key)
        return {key: resolved[key] for key in keys}

    def _load(self, keys: list[str]) -> dict[str, CacheItem]:
        return {key: self._item(key, entry) for key, entry in self._resolve(keys).items()}

    def _item(self, key: str, entry: StoreEntry | None) -> CacheItem:
        if entry is None:
            return CacheItem(key, clock=self._clock, validator=self._validator)
        return CacheItem(
            key,
            clock=self._clock,
            validator=self._validator,
            value=self._codec.decode(entry.payload),
            hit=True,
            expiry=entry.expires_at,
            previous_tags=entry.tags,
        )

    def _encode(self, item: CacheItem) -> StoreEntry:
        return StoreEntry(
            payload=self._codec.encode(item.get()),
            expires_at=item.expiry_timestamp,
            tags=item.tags,
        )

    def _write(self, key: str, entry: StoreEntry, previous: StoreEntry | None, batch: WriteBatch) -> None:
        self._store.put(key, entry, batch)
        self._tags.attach_on_save(key, entry.tags, previous.tags if previous else frozenset(), batch)
        if self._hierarchy is not None and self._hierarchy.is_hierarchical(key):
            self._hierarchy.register(key, batch)

    def _strip(self, key: str, entry: StoreEntry, batch: WriteBatch) -> None:
        self._store.delete(key, batch)
        self._tags.remove(key, entry.tags, batch)

    def _prune(self, keys: Iterable[str], batch: WriteBatch) -> None:
        if self._hierarchy is not None:
            self._hierarchy.prune(keys, batch)

    def _remove_keys(self, keys: set[str], batch: WriteBatch) -> int:
        """Stage removal of *keys* from the store; returns how many existed.

        Keys present only as deferred puts never reach the store; they are
        dropped from the queue by :meth:`_forget` once the batch is applied.
        """
        entries = self._store.peek(sorted(keys))
        removed = 0
        for key in keys:
            entry = entries.get(key)
            if entry is not None:
                self._strip(key, entry, batch)
            if entry is not None or isinstance(self._deferred.peek(key), Put):
                removed += 1
        self._prune(keys, batch)
        return removed

    def _remove_all(self, keys: set[str]) -> int:
        batch = WriteBatch()
        removed = self._remove_keys(keys, batch)
        self._store.apply(batch)
        self._forget(keys)
        return removed

    def _delete(self, keys: list[str]) -> None:
        batch = WriteBatch()
        doomed: set[str] = set()
        for key in keys:
            if self._hierarchy is not None and self._hierarchy.is_hierarchical(key):
                subtree = self._hierarchy.collect(key, self._deferred.keys())
                self._hierarchy.detach(subtree, batch)
                doomed |= subtree
            else:
                doomed.add(key)
        removed = self._remove_keys(doomed, batch)
        self._store.apply(batch)
        self._forget(doomed)
        self._log.debug("cache.deleted", requested=len(keys), removed=removed)

    def _forget(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._deferred.discard(key)
            self._tags.unstage(key)

    def _evict(self, expired: dict[str, StoreEntry]) -> None:
        batch = WriteBatch()
        for key, entry in expired.items():
            self._strip(key, entry, batch)
        self._prune(expired, batch)
        self._store.apply(batch)
        self._log.debug("cache.expired_evicted", count=len(expired))

    def __repr__(self) -> str:
        return f"CachePool(backend={self._backend.name!r}, pending={len(self._deferred)})"


__all__ = ["CachePool", "PoolClosedError"]
