"""Kernel time – Clock protocol + implementations.

Expiry comparisons inside the pool use :meth:`Clock.timestamp` (POSIX
seconds); :meth:`Clock.now` is used where callers deal in datetimes.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: source of wall time, replaceable for deterministic tests."""

    def now(self) -> datetime: ...
    def timestamp(self) -> float: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def timestamp(self) -> float:
        return datetime.now(UTC).timestamp()


class FrozenClock:
    """Test clock pinned to a fixed point in time.

    Time only moves when :meth:`advance` or :meth:`travel_to` is called, so
    TTL behaviour can be exercised without sleeping.
    """

    def __init__(self, fixed: datetime | None = None) -> None:
        self._fixed = _as_aware(fixed or datetime(2026, 1, 1, 12, 0, tzinfo=UTC))

    def now(self) -> datetime:
        return self._fixed

    def timestamp(self) -> float:
        return self._fixed.timestamp()

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        self._fixed += timedelta(**kwargs)

    def travel_to(self, when: datetime) -> None:
        self._fixed = _as_aware(when)


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


def _as_aware(value: datetime) -> datetime:
    # naive datetimes are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
