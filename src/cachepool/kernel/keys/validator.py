"""Kernel keys – KeyValidator.

A key (or tag) is a non-empty ``str`` that contains none of the reserved
characters and is no longer than the configured bound.  Every pool
operation that accepts keys validates all of them before touching storage.
"""
from __future__ import annotations

from collections.abc import Iterable

from cachepool.kernel.errors import InvalidKeyError

RESERVED_CHARACTERS = frozenset("{}()/\\@:")

MIN_SUPPORTED_KEY_LENGTH = 300
DEFAULT_MAX_KEY_LENGTH = 512


class KeyValidator:
    """Validates cache keys and tags."""

    def __init__(self, max_length: int = DEFAULT_MAX_KEY_LENGTH) -> None:
        if max_length < MIN_SUPPORTED_KEY_LENGTH:
            raise ValueError(
                f"max_length must be at least {MIN_SUPPORTED_KEY_LENGTH}, got {max_length}"
            )
        self._max_length = max_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def validate(self, key: object) -> str:
        """Return *key* unchanged or raise :class:`InvalidKeyError`."""
        if not isinstance(key, str):
            raise InvalidKeyError(key, f"expected str, got {type(key).__name__}")
        if not key:
            raise InvalidKeyError(key, "must not be empty")
        if len(key) > self._max_length:
            raise InvalidKeyError(key, f"longer than {self._max_length} characters")
        reserved = RESERVED_CHARACTERS.intersection(key)
        if reserved:
            raise InvalidKeyError(key, f"contains reserved characters {''.join(sorted(reserved))!r}")
        return key

    def validate_many(self, keys: Iterable[object]) -> list[str]:
        """Validate every key before returning any of them.

        The whole batch fails on the first bad key, so callers can rely on
        "all or nothing" before they start mutating state.
        """
        if isinstance(keys, str):
            raise InvalidKeyError(keys, "expected an iterable of keys, got a single str")
        return [self.validate(key) for key in list(keys)]

    def validate_tags(self, tags: Iterable[object]) -> frozenset[str]:
        return frozenset(self.validate_many(tags))


__all__ = [
    "DEFAULT_MAX_KEY_LENGTH",
    "KeyValidator",
    "MIN_SUPPORTED_KEY_LENGTH",
    "RESERVED_CHARACTERS",
]
