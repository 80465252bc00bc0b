"""Application – the cache-pool engine and the key/value façade built on it."""
