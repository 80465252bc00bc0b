"""Kernel codec – serialization boundary between cached values and storage.

The engine never stores caller objects directly: values are encoded into a
:class:`Payload` (opaque bytes plus a type tag) when they are saved and
decoded into a fresh object on every read.  This also guarantees that a
caller mutating an object after saving it cannot change the cached copy.
"""
from __future__ import annotations

import abc
import json
import pickle
from dataclasses import dataclass
from typing import Any

from cachepool.kernel.errors import SerializationError

__all__ = ["Codec", "JsonCodec", "Payload", "PickleCodec", "codec_for"]


@dataclass(frozen=True, slots=True)
class Payload:
    """Encoded value as persisted by a back-end."""

    type_tag: str
    data: bytes


class Codec(abc.ABC):
    """Port: encode/decode cached values."""

    type_tag: str = ""

    @abc.abstractmethod
    def encode(self, value: Any) -> Payload: ...

    @abc.abstractmethod
    def decode(self, payload: Payload) -> Any: ...

    def _check_tag(self, payload: Payload) -> None:
        if payload.type_tag != self.type_tag:
            raise SerializationError(
                f"{type(self).__name__} cannot decode a {payload.type_tag!r} payload",
                payload_type=payload.type_tag,
            )


class PickleCodec(Codec):
    """Round-trips any picklable Python object (the default)."""

    type_tag = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def encode(self, value: Any) -> Payload:
        try:
            return Payload(self.type_tag, pickle.dumps(value, protocol=self._protocol))
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise SerializationError(
                f"Cannot pickle value of type {type(value).__name__}",
                payload_type=type(value).__name__,
                cause=exc,
            ) from exc

    def decode(self, payload: Payload) -> Any:
        self._check_tag(payload)
        try:
            return pickle.loads(payload.data)  # noqa: S301 – payloads are written by this engine
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as exc:
            raise SerializationError("Corrupt pickle payload", payload_type=self.type_tag, cause=exc) from exc


class JsonCodec(Codec):
    """JSON codec for values that must stay readable by non-Python clients.

    Only JSON types survive a round trip (``tuple`` comes back as ``list``,
    non-string mapping keys come back as strings).
    """

    type_tag = "json"

    def encode(self, value: Any) -> Payload:
        try:
            return Payload(self.type_tag, json.dumps(value, ensure_ascii=False).encode())
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Value of type {type(value).__name__} is not JSON serialisable",
                payload_type=type(value).__name__,
                cause=exc,
            ) from exc

    def decode(self, payload: Payload) -> Any:
        self._check_tag(payload)
        try:
            return json.loads(payload.data)
        except ValueError as exc:
            raise SerializationError("Corrupt JSON payload", payload_type=self.type_tag, cause=exc) from exc


_CODECS: dict[str, type[Codec]] = {
    PickleCodec.type_tag: PickleCodec,
    JsonCodec.type_tag: JsonCodec,
}


def codec_for(name: str) -> Codec:
    """Return a codec instance by its type tag (``"pickle"`` or ``"json"``)."""
    try:
        return _CODECS[name]()
    except KeyError:
        raise ValueError(f"Unknown codec {name!r}; expected one of {sorted(_CODECS)}") from None
