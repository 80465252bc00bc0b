"""Observability – structured logging helpers."""
from cachepool.observability.logging.factory import JsonLoggerFactory
from cachepool.observability.logging.processors import get_logger, render_cache_error

__all__ = ["JsonLoggerFactory", "get_logger", "render_cache_error"]
