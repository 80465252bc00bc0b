"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any
from urllib.parse import urlsplit, urlunsplit


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix`` (the environment-variable prefix) and may
    override :meth:`_validate`, which runs right after construction.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def as_log_fields(self) -> dict[str, Any]:
        """Field values safe to log: passwords inside ``*_url`` fields are masked."""
        fields: dict[str, Any] = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if field.name.endswith("_url") and isinstance(value, str):
                value = _mask_password(value)
            fields[field.name] = value
        return fields


def _mask_password(url: str) -> str:
    parts = urlsplit(url)
    if not parts.password:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


__all__ = ["Settings"]
