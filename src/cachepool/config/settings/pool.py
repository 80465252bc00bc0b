"""Config settings – CachePoolSettings."""
from __future__ import annotations

import dataclasses

from cachepool.config.settings.base import Settings
from cachepool.config.validation import InvalidSettingValueError
from cachepool.kernel.keys import DEFAULT_MAX_KEY_LENGTH, MIN_SUPPORTED_KEY_LENGTH, RESERVED_CHARACTERS

BACKENDS = ("memory", "redis", "sqlalchemy")
CODECS = ("pickle", "json")


@dataclasses.dataclass
class CachePoolSettings(Settings):
    """Settings for :func:`~cachepool.config.build_pool`, read from ``CACHEPOOL_*``.

    ``hierarchy_delimiter=""`` turns hierarchical keys off.  ``native_ttl``
    only matters for the Redis back-end.
    """

    _prefix: dataclasses.ClassVar[str] = "CACHEPOOL"

    backend: str = "memory"
    redis_url: str | None = None
    database_url: str | None = None
    namespace: str = "cachepool"
    hierarchy_delimiter: str = "|"
    max_key_length: int = DEFAULT_MAX_KEY_LENGTH
    codec: str = "pickle"
    native_ttl: bool = True

    def _validate(self) -> None:
        if self.backend not in BACKENDS:
            raise InvalidSettingValueError("backend", self.backend, f"expected one of {', '.join(BACKENDS)}")
        if self.codec not in CODECS:
            raise InvalidSettingValueError("codec", self.codec, f"expected one of {', '.join(CODECS)}")
        if self.backend == "redis" and not self.redis_url:
            raise InvalidSettingValueError("redis_url", self.redis_url, "required when backend is 'redis'")
        if self.backend == "sqlalchemy" and not self.database_url:
            raise InvalidSettingValueError("database_url", self.database_url, "required when backend is 'sqlalchemy'")
        if not self.namespace or ":" in self.namespace:
            raise InvalidSettingValueError("namespace", self.namespace, "must be non-empty and free of ':'")
        if len(self.hierarchy_delimiter) > 1:
            raise InvalidSettingValueError("hierarchy_delimiter", self.hierarchy_delimiter, "must be one character")
        if self.hierarchy_delimiter and self.hierarchy_delimiter in RESERVED_CHARACTERS:
            raise InvalidSettingValueError("hierarchy_delimiter", self.hierarchy_delimiter, "is a reserved key character")
        if self.max_key_length < MIN_SUPPORTED_KEY_LENGTH:
            raise InvalidSettingValueError(
                "max_key_length", self.max_key_length, f"must be at least {MIN_SUPPORTED_KEY_LENGTH}"
            )


__all__ = ["BACKENDS", "CODECS", "CachePoolSettings"]
