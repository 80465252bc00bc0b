"""Infrastructure errors – storage back-end and payload codec failures."""

from __future__ import annotations

from typing import Any

from cachepool.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a validation problem."""

    default_code = "infrastructure_error"


class BackendError(InfrastructureError):
    """The storage back-end rejected or could not complete an operation.

    Raised after the back-end guaranteed that nothing from the failed batch
    was applied.
    """

    default_code = "backend_error"

    def __init__(
        self,
        backend: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Cache backend '{backend}' failed", **kwargs)
        self.backend = backend


class SerializationError(InfrastructureError):
    """Failed to encode or decode a cached payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = ["BackendError", "InfrastructureError", "SerializationError"]
