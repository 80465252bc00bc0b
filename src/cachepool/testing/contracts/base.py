"""Testing contracts – shared plumbing for the conformance suites."""
from __future__ import annotations

import abc
from collections.abc import Iterator
from typing import Any, ClassVar

import pytest

from cachepool.application.pool import CachePool
from cachepool.kernel.keys import RESERVED_CHARACTERS
from cachepool.kernel.storage import Backend
from cachepool.kernel.time import FrozenClock
from cachepool.testing.fakes import FakeClock


def reserved_character_keys() -> list[Any]:
    """Each reserved character alone and at the start, middle and end of a key."""
    params = []
    for char in sorted(RESERVED_CHARACTERS):
        params += [
            pytest.param(char, id=f"{char}-only"),
            pytest.param(f"{char}foo", id=f"{char}-begin"),
            pytest.param(f"foo{char}bar", id=f"{char}-middle"),
            pytest.param(f"foo{char}", id=f"{char}-end"),
        ]
    return params


class PoolContractBase(abc.ABC):
    """Fixtures shared by every contract.

    Subclasses implement :meth:`create_backend` and may override
    :meth:`create_pool`.  Tests listed in ``skipped_tests`` (method name to
    reason) are skipped for back-ends that cannot honour them.  Time is a
    :class:`~cachepool.kernel.time.FrozenClock`; tests move it with
    ``clock.advance(...)`` instead of sleeping.
    """

    skipped_tests: ClassVar[dict[str, str]] = {}

    @abc.abstractmethod
    def create_backend(self) -> Backend: ...

    def create_pool(self, backend: Backend, clock: FrozenClock) -> CachePool:
        return CachePool(backend, clock=clock)

    @pytest.fixture(autouse=True)
    def _skip_listed(self, request: pytest.FixtureRequest) -> None:
        reason = self.skipped_tests.get(request.function.__name__)
        if reason:
            pytest.skip(reason)

    @pytest.fixture
    def clock(self) -> FrozenClock:
        return FakeClock()

    @pytest.fixture
    def backend(self) -> Iterator[Backend]:
        backend = self.create_backend()
        yield backend
        backend.clear()
        backend.close()

    @pytest.fixture
    def pool(self, backend: Backend, clock: FrozenClock) -> CachePool:
        return self.create_pool(backend, clock)


__all__ = ["PoolContractBase", "reserved_character_keys"]
