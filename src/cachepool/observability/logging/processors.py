"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from cachepool.kernel.errors import BaseError


def render_cache_error(
    logger: Any,       # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor: replace a bound ``error=`` :class:`BaseError`
    with its ``to_dict()`` so JSON log lines stay queryable."""
    error = event_dict.get("error")
    if isinstance(error, BaseError):
        event_dict["error"] = error.to_dict()
    return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["get_logger", "render_cache_error"]
