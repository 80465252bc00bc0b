"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from cachepool.observability.logging.processors import render_cache_error


class JsonLoggerFactory:
    """Configure structlog + stdlib logging for JSON output."""

    @staticmethod
    def configure(level: int = logging.INFO, logger_name: str | None = None) -> None:
        """Route structlog events through a JSON-rendering stdlib handler.

        ``logger_name`` limits the handler to one logger tree (for example
        ``"cachepool"``); by default the root logger is configured.
        """
        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            render_cache_error,
        ]
        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        target = logging.getLogger(logger_name)
        target.handlers.clear()
        target.addHandler(handler)
        target.setLevel(level)


__all__ = ["JsonLoggerFactory"]
