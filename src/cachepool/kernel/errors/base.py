"""Kernel errors – BaseError, root of every error a pool raises."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Root of the cachepool error hierarchy.

    Besides the message every error carries a ``code`` slug for log
    queries and a ``retryable`` flag.  The flag answers the one question a
    cache caller has after a failure: can the same call succeed if repeated
    (a dropped back-end connection) or will it fail again however often it
    is tried (a malformed key, an undecodable payload)?

    ``str()`` renders :meth:`to_dict` as JSON so a caught error can be
    logged verbatim.
    """

    default_code: str = "cachepool_error"
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if retryable is not None:
            self.retryable = retryable
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form used by the structlog error processor."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        flag = ", retryable=True" if self.retryable else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{flag})"


__all__ = ["BaseError"]
