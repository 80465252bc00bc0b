"""Application pool – item pool engine (deferred writes, tags, hierarchy)."""
from cachepool.application.pool.deferred import Delete, DeferredQueue, Operation, Put
from cachepool.application.pool.hierarchy import HierarchyIndex
from cachepool.application.pool.item import CacheItem
from cachepool.application.pool.pool import CachePool, PoolClosedError
from cachepool.application.pool.store import Store
from cachepool.application.pool.tags import TagIndex

__all__ = [
    "CacheItem",
    "CachePool",
    "Delete",
    "DeferredQueue",
    "HierarchyIndex",
    "Operation",
    "PoolClosedError",
    "Put",
    "Store",
    "TagIndex",
]
