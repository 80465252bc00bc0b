"""Redis adapter – RedisBackend."""
from cachepool.adapters.redis.backend import RedisBackend

__all__ = ["RedisBackend"]
