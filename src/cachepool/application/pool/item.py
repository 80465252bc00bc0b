"""Application pool – CacheItem."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from cachepool.kernel.keys import KeyValidator
from cachepool.kernel.time import Clock


class CacheItem:
    """Value + metadata returned by a pool read.

    An item is a detached value object: it holds no reference to the pool
    that produced it, never re-reads storage, and nothing done to it is
    persisted until it is passed to ``save()`` or ``save_deferred()``.

    ``is_hit`` and ``previous_tags`` are fixed when the item is loaded.
    ``tags`` starts empty and is what the next save will persist.
    """

    __slots__ = ("_clock", "_expiry", "_hit", "_key", "_previous_tags", "_tags", "_validator", "_value")

    def __init__(
        self,
        key: str,
        *,
        clock: Clock,
        validator: KeyValidator,
        value: Any = None,
        hit: bool = False,
        expiry: float | None = None,
        previous_tags: Iterable[str] = (),
    ) -> None:
        self._key = key
        self._clock = clock
        self._validator = validator
        self._hit = hit
        self._value = value if hit else None
        self._expiry = expiry if hit else None
        self._previous_tags = frozenset(previous_tags)
        self._tags: frozenset[str] = frozenset()

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_hit(self) -> bool:
        return self._hit

    def get(self) -> Any:
        """Return the value, or ``None`` for a miss."""
        return self._value

    def set(self, value: Any) -> "CacheItem":
        self._value = value
        return self

    def expires_at(self, when: datetime | None) -> "CacheItem":
        """Set an absolute expiry; ``None`` means the item never expires.

        Naive datetimes are interpreted as UTC.
        """
        if when is None:
            self._expiry = None
        else:
            if when.tzinfo is None:
                when = when.replace(tzinfo=UTC)
            self._expiry = when.timestamp()
        return self

    def expires_after(self, ttl: int | float | timedelta | None) -> "CacheItem":
        """Set a relative expiry from the current clock time.

        ``0`` or a negative TTL makes the item already expired, so saving
        it removes the key.
        """
        if ttl is None:
            self._expiry = None
        else:
            seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
            self._expiry = self._clock.timestamp() + seconds
        return self

    @property
    def expiration(self) -> datetime | None:
        if self._expiry is None:
            return None
        return datetime.fromtimestamp(self._expiry, tz=UTC)

    @property
    def expiry_timestamp(self) -> float | None:
        return self._expiry

    def is_expired(self, now: float) -> bool:
        return self._expiry is not None and self._expiry <= now

    def set_tags(self, tags: Iterable[str]) -> "CacheItem":
        """Replace the tags the next save will persist (duplicates collapse)."""
        self._tags = self._validator.validate_tags(tags)
        return self

    @property
    def tags(self) -> frozenset[str]:
        return self._tags

    @property
    def previous_tags(self) -> frozenset[str]:
        return self._previous_tags

    def __repr__(self) -> str:
        return f"CacheItem(key={self._key!r}, hit={self._hit}, expiration={self.expiration!r})"


__all__ = ["CacheItem"]
