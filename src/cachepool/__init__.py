"""
cachepool – cache-pool engine with deferred writes, tags and hierarchical keys.

Import path convention::

    from cachepool.application.pool import CachePool
    from cachepool.kernel.storage import InMemoryBackend
    from cachepool.adapters.redis import RedisBackend
    from cachepool.testing.contracts import CachePoolContract
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
