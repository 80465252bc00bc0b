"""Testing fixtures – pytest fixtures for pools and fake doubles.

Register them in your ``conftest.py``::

    pytest_plugins = ["cachepool.testing.fixtures"]
"""
from cachepool.testing.fixtures.clock import fake_clock
from cachepool.testing.fixtures.pool import cache_pool, failing_backend, memory_backend, simple_cache

__all__ = [
    "cache_pool",
    "failing_backend",
    "fake_clock",
    "memory_backend",
    "simple_cache",
]
