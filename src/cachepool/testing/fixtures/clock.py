"""Testing fixtures – fake_clock."""
from __future__ import annotations

import pytest

from cachepool.kernel.time import FrozenClock
from cachepool.testing.fakes import FakeClock


@pytest.fixture
def fake_clock() -> FrozenClock:
    """Pytest fixture: returns a FakeClock pinned to 2026-01-01 12:00 UTC."""
    return FakeClock()


__all__ = ["fake_clock"]
