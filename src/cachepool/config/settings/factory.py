"""Config settings – build_backend, build_pool."""
from __future__ import annotations

from cachepool.application.pool import CachePool
from cachepool.config.settings.pool import CachePoolSettings
from cachepool.kernel.codec import codec_for
from cachepool.kernel.storage import Backend, InMemoryBackend
from cachepool.kernel.time import Clock
from cachepool.observability.logging import get_logger

_log = get_logger(__name__)


def build_backend(settings: CachePoolSettings) -> Backend:
    """Instantiate the back-end named by ``settings.backend``.

    The SQLAlchemy back-end creates its tables when they do not exist yet.
    """
    if settings.backend == "redis":
        from cachepool.adapters.redis import RedisBackend

        return RedisBackend(settings.redis_url, namespace=settings.namespace, native_ttl=settings.native_ttl)
    if settings.backend == "sqlalchemy":
        from cachepool.adapters.sqlalchemy import SqlAlchemyBackend

        backend = SqlAlchemyBackend(
            settings.database_url,
            table_prefix=f"{settings.namespace}_",
            key_length=settings.max_key_length,
        )
        backend.create_schema()
        return backend
    return InMemoryBackend()


def build_pool(settings: CachePoolSettings, clock: Clock | None = None) -> CachePool:
    pool = CachePool(
        build_backend(settings),
        clock=clock,
        codec=codec_for(settings.codec),
        hierarchy_delimiter=settings.hierarchy_delimiter or None,
        max_key_length=settings.max_key_length,
    )
    _log.info("cache.pool_configured", **settings.as_log_fields())
    return pool


__all__ = ["build_backend", "build_pool"]
