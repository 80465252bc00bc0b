"""Kernel keys – validation rules and key builders."""
from cachepool.kernel.keys.builder import CacheKey
from cachepool.kernel.keys.validator import (
    DEFAULT_MAX_KEY_LENGTH,
    MIN_SUPPORTED_KEY_LENGTH,
    RESERVED_CHARACTERS,
    KeyValidator,
)

__all__ = [
    "CacheKey",
    "DEFAULT_MAX_KEY_LENGTH",
    "KeyValidator",
    "MIN_SUPPORTED_KEY_LENGTH",
    "RESERVED_CHARACTERS",
]
