"""Application simple – SimpleCache key/value façade."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from cachepool.application.pool import CachePool

Ttl = int | float | timedelta | None


class SimpleCache:
    """Plain ``get``/``set`` access on top of a :class:`CachePool`.

    Keys follow the pool's rules; anything that is not a non-empty string
    raises :class:`~cachepool.kernel.errors.InvalidKeyError`.  Batch methods
    validate every key before writing anything.  A ``ttl`` of zero or less
    deletes the key.
    """

    def __init__(self, pool: CachePool) -> None:
        self._pool = pool

    @property
    def pool(self) -> CachePool:
        return self._pool

    def get(self, key: str, default: Any = None) -> Any:
        item = self._pool.get_item(key)
        return item.get() if item.is_hit else default

    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        item = self._pool.get_item(key).set(value).expires_after(ttl)
        return self._pool.save(item)

    def delete(self, key: str) -> bool:
        return self._pool.delete_item(key)

    def clear(self) -> bool:
        return self._pool.clear()

    def has(self, key: str) -> bool:
        return self._pool.has_item(key)

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Return ``{key: value-or-default}`` in input order.

        *keys* may be any iterable, generators included.
        """
        items = self._pool.get_items(list(keys))
        return {key: item.get() if item.is_hit else default for key, item in items.items()}

    def set_multiple(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]], ttl: Ttl = None) -> bool:
        pairs = list(values.items()) if isinstance(values, Mapping) else list(values)
        # get_items validates every key before the first write
        items = self._pool.get_items([key for key, _ in pairs])
        for key, value in pairs:
            self._pool.save(items[key].set(value).expires_after(ttl))
        return True

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        return self._pool.delete_items(list(keys))


__all__ = ["SimpleCache", "Ttl"]
