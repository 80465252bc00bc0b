"""SQLAlchemy adapter – SqlAlchemyBackend."""
from __future__ import annotations

import contextlib
from collections import defaultdict
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from cachepool.kernel.codec import Payload
from cachepool.kernel.errors import BackendError
from cachepool.kernel.keys import DEFAULT_MAX_KEY_LENGTH
from cachepool.kernel.storage import Backend, StoreEntry, WriteBatch
from cachepool.observability.logging import get_logger

_log = get_logger(__name__)

# Keeps IN (...) lists below the bound-parameter limits of SQLite and friends.
_CHUNK = 500


def _require_sqlalchemy() -> None:
    try:
        import sqlalchemy  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'cachepool[sqlalchemy]' to use the SQLAlchemy backend") from exc


def _chunks(items: Sequence[str], size: int = _CHUNK) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def build_tables(table_prefix: str = "cachepool_", key_length: int = DEFAULT_MAX_KEY_LENGTH) -> tuple[Any, Any, Any]:
    """Return ``(metadata, entries, members)`` for the given table prefix.

    ``members`` stores both tag sets and hierarchy node sets, told apart by
    the ``namespace`` column.
    """
    _require_sqlalchemy()
    from sqlalchemy import JSON, Column, Float, LargeBinary, MetaData, String, Table  # type: ignore[import-untyped]

    metadata = MetaData()
    entries = Table(
        f"{table_prefix}entries",
        metadata,
        Column("key", String(key_length), primary_key=True),
        Column("type_tag", String(32), nullable=False),
        Column("payload", LargeBinary, nullable=False),
        Column("expires_at", Float, nullable=True),
        Column("tags", JSON, nullable=False),
    )
    members = Table(
        f"{table_prefix}members",
        metadata,
        Column("namespace", String(16), primary_key=True),
        Column("name", String(key_length), primary_key=True),
        Column("member", String(key_length), primary_key=True),
    )
    return metadata, entries, members


class SqlAlchemyBackend(Backend):
    """Relational storage through SQLAlchemy Core.

    Every :meth:`apply` runs inside a single ``engine.begin()`` transaction,
    so a failing statement rolls the whole batch back.  Call
    :meth:`create_schema` once, or manage the tables through migrations
    using :func:`build_tables`.
    """

    name = "sqlalchemy"

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: Any = None,
        table_prefix: str = "cachepool_",
        key_length: int = DEFAULT_MAX_KEY_LENGTH,
        **engine_kwargs: Any,
    ) -> None:
        _require_sqlalchemy()
        from sqlalchemy import create_engine  # type: ignore[import-untyped]
        from sqlalchemy.exc import (  # type: ignore[import-untyped]
            DisconnectionError,
            SQLAlchemyError,
            TimeoutError as PoolTimeoutError,
        )

        if engine is None:
            if database_url is None:
                raise ValueError("SqlAlchemyBackend needs either a database_url or an engine")
            engine = create_engine(database_url, **engine_kwargs)
            self._owns_engine = True
        else:
            self._owns_engine = False
        self._engine = engine
        self._errors: type[BaseException] = SQLAlchemyError
        self._transient = (DisconnectionError, PoolTimeoutError)
        self._metadata, self._entries, self._members = build_tables(table_prefix, key_length)

    @property
    def engine(self) -> Any:
        return self._engine

    def create_schema(self) -> None:
        with self._translate("create_schema"):
            self._metadata.create_all(self._engine)

    def drop_schema(self) -> None:
        with self._translate("drop_schema"):
            self._metadata.drop_all(self._engine)

    # ------------------------------------------------------------------
    # Backend port
    # ------------------------------------------------------------------

    def read(self, keys: Sequence[str]) -> dict[str, StoreEntry]:
        from sqlalchemy import select  # type: ignore[import-untyped]

        found: dict[str, StoreEntry] = {}
        unique = list(dict.fromkeys(keys))
        if not unique:
            return found
        table = self._entries
        with self._translate("read"), self._engine.connect() as conn:
            for chunk in _chunks(unique):
                for row in conn.execute(select(table).where(table.c.key.in_(chunk))):
                    found[row.key] = StoreEntry(
                        payload=Payload(row.type_tag, bytes(row.payload)),
                        expires_at=row.expires_at,
                        tags=frozenset(row.tags or ()),
                    )
        return found

    def members(self, namespace: str, name: str) -> set[str]:
        return self.members_many(namespace, [name]).get(name, set())

    def members_many(self, namespace: str, names: Iterable[str]) -> dict[str, set[str]]:
        from sqlalchemy import select  # type: ignore[import-untyped]

        unique = list(dict.fromkeys(names))
        result: dict[str, set[str]] = {name: set() for name in unique}
        if not unique:
            return result
        table = self._members
        with self._translate("members"), self._engine.connect() as conn:
            for chunk in _chunks(unique):
                query = select(table.c.name, table.c.member).where(
                    table.c.namespace == namespace, table.c.name.in_(chunk)
                )
                for row in conn.execute(query):
                    result[row.name].add(row.member)
        return result

    def apply(self, batch: WriteBatch) -> None:
        from sqlalchemy import delete, insert  # type: ignore[import-untyped]

        members, entries = self._members, self._entries
        with self._translate("apply"), self._engine.begin() as conn:
            dropped: dict[str, list[str]] = defaultdict(list)
            for namespace, name in batch.dropped:
                dropped[namespace].append(name)
            for namespace, names in dropped.items():
                for chunk in _chunks(names):
                    conn.execute(delete(members).where(members.c.namespace == namespace, members.c.name.in_(chunk)))
            for (namespace, name), doomed in batch.removed.items():
                for chunk in _chunks(sorted(doomed)):
                    conn.execute(
                        delete(members).where(
                            members.c.namespace == namespace,
                            members.c.name == name,
                            members.c.member.in_(chunk),
                        )
                    )
            rows = []
            for (namespace, name), added in batch.added.items():
                # delete-then-insert gives set semantics without dialect-specific upserts
                for chunk in _chunks(sorted(added)):
                    conn.execute(
                        delete(members).where(
                            members.c.namespace == namespace,
                            members.c.name == name,
                            members.c.member.in_(chunk),
                        )
                    )
                rows.extend({"namespace": namespace, "name": name, "member": member} for member in added)
            if rows:
                conn.execute(insert(members), rows)
            stale = sorted(batch.deletes | batch.puts.keys())
            for chunk in _chunks(stale):
                conn.execute(delete(entries).where(entries.c.key.in_(chunk)))
            if batch.puts:
                conn.execute(
                    insert(entries),
                    [
                        {
                            "key": key,
                            "type_tag": entry.payload.type_tag,
                            "payload": entry.payload.data,
                            "expires_at": entry.expires_at,
                            "tags": sorted(entry.tags),
                        }
                        for key, entry in batch.puts.items()
                    ],
                )

    def clear(self) -> None:
        from sqlalchemy import delete  # type: ignore[import-untyped]

        with self._translate("clear"), self._engine.begin() as conn:
            conn.execute(delete(self._members))
            conn.execute(delete(self._entries))

    def close(self) -> None:
        if self._owns_engine:
            self._engine.dispose()

    @contextlib.contextmanager
    def _translate(self, operation: str) -> Iterator[None]:
        try:
            yield
        except self._errors as exc:
            # a dropped connection surfaces as DBAPIError with connection_invalidated set
            retryable = isinstance(exc, self._transient) or bool(getattr(exc, "connection_invalidated", False))
            _log.warning(
                "cache.backend_error", backend=self.name, operation=operation, retryable=retryable, exc_info=exc
            )
            raise BackendError(
                self.name, f"SQL {operation} failed: {exc}", cause=exc, retryable=retryable
            ) from exc


__all__ = ["SqlAlchemyBackend", "build_tables"]
