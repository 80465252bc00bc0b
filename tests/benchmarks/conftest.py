"""conftest.py for benchmarks.

Provides in-memory pools on a frozen clock so timings measure the engine
and not the back-end or the wall clock.
"""

from __future__ import annotations

import pytest

from cachepool.application.pool import CachePool
from cachepool.kernel.storage import InMemoryBackend
from cachepool.testing.fakes import FakeClock


@pytest.fixture
def bench_pool():
    """Empty in-memory pool."""
    return CachePool(InMemoryBackend(), clock=FakeClock())


@pytest.fixture
def filled_pool(bench_pool):
    """Pool holding 1 000 flat keys tagged by parity."""
    for i in range(1_000):
        tag = "even" if i % 2 == 0 else "odd"
        bench_pool.save_deferred(bench_pool.get_item(f"key{i}").set({"n": i}).set_tags([tag]))
    bench_pool.commit()
    return bench_pool
