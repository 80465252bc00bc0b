"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError            (domain.py)
    │   └── ValidationError
    │       └── InvalidKeyError   (also a builtin KeyError)
    ├── ApplicationError       (application.py)
    └── InfrastructureError    (infrastructure.py)
        ├── BackendError
        └── SerializationError
"""

from cachepool.kernel.errors.application import ApplicationError
from cachepool.kernel.errors.base import BaseError
from cachepool.kernel.errors.domain import DomainError, InvalidKeyError, ValidationError
from cachepool.kernel.errors.infrastructure import (
    BackendError,
    InfrastructureError,
    SerializationError,
)

__all__ = [
    "ApplicationError",
    "BackendError",
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "InvalidKeyError",
    "SerializationError",
    "ValidationError",
]
