"""Testing contracts – conformance suites any back-end can be run against.

Subclass a contract in a ``test_*.py`` module and implement
``create_backend``::

    from cachepool.testing.contracts import CachePoolContract

    class TestSqlitePool(CachePoolContract):
        skipped_tests = {"test_binary_data": "driver mangles bytes"}

        def create_backend(self):
            backend = SqlAlchemyBackend("sqlite://")
            backend.create_schema()
            return backend
"""
from cachepool.testing.contracts.base import PoolContractBase, reserved_character_keys
from cachepool.testing.contracts.hierarchical import HierarchicalCachePoolContract
from cachepool.testing.contracts.pool import INVALID_KEYS, CachePoolContract
from cachepool.testing.contracts.simple import SimpleCacheContract
from cachepool.testing.contracts.taggable import TaggableCachePoolContract

__all__ = [
    "CachePoolContract",
    "HierarchicalCachePoolContract",
    "INVALID_KEYS",
    "PoolContractBase",
    "SimpleCacheContract",
    "TaggableCachePoolContract",
    "reserved_character_keys",
]
