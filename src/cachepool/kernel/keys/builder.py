"""Kernel keys – CacheKey builder."""
from __future__ import annotations

import hashlib
import json

__all__ = ["CacheKey"]


class CacheKey:
    """Factory for deterministic cache key strings.

    The produced keys never contain reserved characters, so they pass
    :class:`~cachepool.kernel.keys.KeyValidator` unchanged.
    """

    @staticmethod
    def for_resource(resource_type: str, resource_id: str | int) -> str:
        return f"{resource_type}.{resource_id}"

    @staticmethod
    def for_query(query_type: str, **kwargs: object) -> str:
        # deterministic: sort kwargs, JSON-encode, SHA-256 first 16 hex chars
        canonical = json.dumps(kwargs, sort_keys=True, default=str)
        digest = hashlib.sha256(canonical.encode()).hexdigest()[:16]
        return f"query.{query_type}.{digest}"

    @staticmethod
    def for_path(*segments: str | int, delimiter: str = "|") -> str:
        """Build a hierarchical key: ``for_path("users", 4711)`` -> ``|users|4711``."""
        if not segments:
            return delimiter
        return delimiter + delimiter.join(str(segment) for segment in segments)

    @staticmethod
    def for_subtree(*segments: str | int, delimiter: str = "|") -> str:
        """Path with a trailing delimiter: deleting it removes what lies under
        ``for_path(*segments)`` but keeps that key itself.
        """
        if not segments:
            return delimiter
        return CacheKey.for_path(*segments, delimiter=delimiter) + delimiter
