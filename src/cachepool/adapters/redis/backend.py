"""Redis adapter – RedisBackend."""
from __future__ import annotations

import contextlib
import json
import re
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from cachepool.kernel.codec import Payload
from cachepool.kernel.errors import BackendError
from cachepool.kernel.storage import Backend, SetRef, StoreEntry, WriteBatch
from cachepool.observability.logging import get_logger

_log = get_logger(__name__)

_CLEAR_CHUNK = 500

_TOMBSTONE = Payload("", b"")


def _require_redis() -> Any:
    try:
        import redis
        return redis
    except ImportError as exc:
        raise ImportError("Install 'cachepool[redis]' to use the Redis backend") from exc


class RedisBackend(Backend):
    """Redis-backed storage.

    Layout under ``namespace`` (user keys cannot contain ``:``, so the
    prefixes cannot collide with them)::

        <ns>:e:<key>          hash   t=type tag, p=payload, x=expires_at, g=tags (JSON)
        <ns>:g:<key>          string tags (JSON) of an entry under native expiry
        <ns>:tag:<tag>        set    keys carrying the tag
        <ns>:node:<path>      set    child paths of a hierarchy node

    :meth:`apply` queues the whole batch in one ``MULTI``/``EXEC``
    pipeline.  With ``native_ttl`` entries also get ``PEXPIREAT`` so Redis
    reclaims memory for keys nobody reads again; leave it off when the pool
    runs on a non-wall clock.  Such entries also keep their tags in a
    companion ``g`` key without TTL: once Redis has dropped the hash,
    :meth:`read` reports the key as an already expired entry carrying those
    tags, so the pool strips the tag memberships Redis cannot know about.
    """

    name = "redis"

    def __init__(
        self,
        url: str | None = None,
        *,
        client: Any = None,
        namespace: str = "cachepool",
        native_ttl: bool = True,
        **kwargs: Any,
    ) -> None:
        redis = _require_redis()
        if client is None:
            if url is None:
                raise ValueError("RedisBackend needs either a url or a client")
            client = redis.Redis.from_url(url, **kwargs)
        self._client = client
        self._errors: type[BaseException] = redis.exceptions.RedisError
        self._transient = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)
        self._ns = namespace
        self._native_ttl = native_ttl

    # ------------------------------------------------------------------
    # Key layout
    # ------------------------------------------------------------------

    def _entry_key(self, key: str) -> str:
        return f"{self._ns}:e:{key}"

    def _tags_key(self, key: str) -> str:
        return f"{self._ns}:g:{key}"

    def _set_key(self, namespace: str, name: str) -> str:
        return f"{self._ns}:{namespace}:{name}"

    # ------------------------------------------------------------------
    # Backend port
    # ------------------------------------------------------------------

    def read(self, keys: Sequence[str]) -> dict[str, StoreEntry]:
        if not keys:
            return {}
        with self._translate("read"):
            pipe = self._client.pipeline(transaction=False)
            for key in keys:
                pipe.hgetall(self._entry_key(key))
            rows = pipe.execute()
            entries = {key: _decode_entry(raw) for key, raw in zip(keys, rows) if raw}
            missing = [key for key in dict.fromkeys(keys) if key not in entries]
            if self._native_ttl and missing:
                entries.update(self._read_expired(missing))
        return entries

    def members(self, namespace: str, name: str) -> set[str]:
        with self._translate("members"):
            raw = self._client.smembers(self._set_key(namespace, name))
        return {_text(member) for member in raw}

    def members_many(self, namespace: str, names: Iterable[str]) -> dict[str, set[str]]:
        names = list(names)
        if not names:
            return {}
        with self._translate("members"):
            pipe = self._client.pipeline(transaction=False)
            for name in names:
                pipe.smembers(self._set_key(namespace, name))
            rows = pipe.execute()
        return {name: {_text(member) for member in raw} for name, raw in zip(names, rows)}

    def apply(self, batch: WriteBatch) -> None:
        with self._translate("apply"):
            pipe = self._client.pipeline(transaction=True)
            for ref in batch.dropped:
                pipe.delete(self._set_key(*ref))
            for ref, members in _non_empty(batch.removed):
                pipe.srem(self._set_key(*ref), *sorted(members))
            for ref, members in _non_empty(batch.added):
                pipe.sadd(self._set_key(*ref), *sorted(members))
            if batch.deletes:
                doomed = sorted(batch.deletes)
                pipe.delete(*map(self._entry_key, doomed), *map(self._tags_key, doomed))
            for key, entry in batch.puts.items():
                entry_key, tags_key = self._entry_key(key), self._tags_key(key)
                pipe.delete(entry_key, tags_key)
                pipe.hset(entry_key, mapping=_encode_entry(entry))
                if self._native_ttl and entry.expires_at is not None:
                    pipe.pexpireat(entry_key, int(entry.expires_at * 1000))
                    pipe.set(tags_key, _encode_tags(entry.tags))
            pipe.execute()

    def clear(self) -> None:
        pattern = f"{_glob_escape(self._ns)}:*"
        with self._translate("clear"):
            chunk: list[Any] = []
            for redis_key in self._client.scan_iter(match=pattern, count=_CLEAR_CHUNK):
                chunk.append(redis_key)
                if len(chunk) >= _CLEAR_CHUNK:
                    self._client.delete(*chunk)
                    chunk = []
            if chunk:
                self._client.delete(*chunk)

    def close(self) -> None:
        self._client.close()

    def _read_expired(self, keys: list[str]) -> dict[str, StoreEntry]:
        """Entries Redis expired by itself, as tombstones carrying their tags."""
        pipe = self._client.pipeline(transaction=False)
        for key in keys:
            pipe.get(self._tags_key(key))
        rows = pipe.execute()
        return {
            key: StoreEntry(_TOMBSTONE, expires_at=0.0, tags=frozenset(json.loads(raw)))
            for key, raw in zip(keys, rows)
            if raw is not None
        }

    @contextlib.contextmanager
    def _translate(self, operation: str) -> Iterator[None]:
        try:
            yield
        except self._errors as exc:
            retryable = isinstance(exc, self._transient)
            _log.warning(
                "cache.backend_error", backend=self.name, operation=operation, retryable=retryable, exc_info=exc
            )
            raise BackendError(
                self.name, f"Redis {operation} failed: {exc}", cause=exc, retryable=retryable
            ) from exc


def _encode_entry(entry: StoreEntry) -> dict[str, Any]:
    mapping: dict[str, Any] = {
        "t": entry.payload.type_tag,
        "p": entry.payload.data,
        "g": _encode_tags(entry.tags),
    }
    if entry.expires_at is not None:
        mapping["x"] = repr(entry.expires_at)
    return mapping


def _encode_tags(tags: frozenset[str]) -> str:
    return json.dumps(sorted(tags))


def _decode_entry(raw: dict[bytes, bytes]) -> StoreEntry:
    expires = raw.get(b"x")
    return StoreEntry(
        payload=Payload(_text(raw[b"t"]), bytes(raw[b"p"])),
        expires_at=float(expires) if expires is not None else None,
        tags=frozenset(json.loads(raw.get(b"g", b"[]"))),
    )


def _text(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


def _non_empty(groups: dict[SetRef, set[str]]) -> Iterator[tuple[SetRef, set[str]]]:
    return ((ref, members) for ref, members in groups.items() if members)


def _glob_escape(value: str) -> str:
    return re.sub(r"([*?\[\]\\])", r"\\\1", value)


__all__ = ["RedisBackend"]
