"""Domain errors – rejected input that never reaches a backend."""

from __future__ import annotations

from typing import Any

from cachepool.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a caller-supplied value breaks a pool rule."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of per-value validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidKeyError(ValidationError, KeyError):
    """A cache key or tag is malformed.

    Subclasses the builtin :class:`KeyError` so callers that already guard
    mapping lookups keep working; a *miss* is never reported this way.
    """

    default_code = "invalid_key"

    def __init__(self, key: object, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid cache key {key!r}: {reason}",
            errors=[{"key": repr(key), "reason": reason}],
            **kwargs,
        )
        self.key = key
        self.reason = reason


__all__ = ["DomainError", "InvalidKeyError", "ValidationError"]
