"""Application simple – key/value cache façade."""
from cachepool.application.simple.simple_cache import SimpleCache, Ttl

__all__ = ["SimpleCache", "Ttl"]
