"""Testing fakes – deterministic doubles for the clock and back-end ports."""
from cachepool.kernel.time import FrozenClock
from cachepool.testing.fakes.backend import FailingBackend
from cachepool.testing.fakes.clock import FakeClock

__all__ = ["FailingBackend", "FakeClock", "FrozenClock"]
