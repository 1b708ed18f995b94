"""SQLite-backed document store.

Each store owns one table of JSON documents::

    CREATE TABLE "<name>" (id TEXT PRIMARY KEY, doc TEXT NOT NULL)

Filters and sorts compile to ``json_extract`` expressions (SQLite JSON1,
built into every modern SQLite). Operations on one store are serialized
through an ``anyio.Lock`` so the lazy first connect happens once and
read-modify-write updates and pops are not interleaved.
"""

import json
import re
import sqlite3
import sys
import time
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, Self

import anyio

from conceptkit.errors import ConfigurationError
from conceptkit.store._sqlite import AsyncConnection, connect
from conceptkit.store.errors import DuplicateIdError, QueryError, StoreError
from conceptkit.store.filters import Filter, SortSpec, compile_filter, compile_sort
from conceptkit.store.ids import DocumentId, parse_id
from conceptkit.store.memory import prepare_insert, prepare_patch
from conceptkit.store.protocol import ID_FIELD

_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _dumps(document: Mapping[str, Any]) -> str:
    try:
        return json.dumps(document, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        msg = f"Document is not JSON-serializable: {exc}"
        raise StoreError(msg) from exc


class SQLiteStore:
    """``DocumentStore`` persisted in a SQLite database file.

    Usage::

        async with SQLiteStore("posts", "app.db") as store:
            _id = await store.create_one({"title": "x"})

    The connection opens lazily on first use if ``connect()`` was not
    called. ``path`` may be ``":memory:"``.
    """

    __slots__ = ("_clock", "_conn", "_echo", "_lock", "_name", "_path")

    def __init__(
        self,
        name: str,
        path: str = ":memory:",
        *,
        clock: Callable[[], float] = time.time,
        echo: bool = False,
    ) -> None:
        if not _TABLE_RE.match(name):
            msg = f"Store name {name!r} is not a valid table name."
            raise ConfigurationError(msg)
        self._name = name
        self._path = path
        self._clock = clock
        self._echo = echo
        self._conn: AsyncConnection | None = None
        self._lock: anyio.Lock | None = None  # Created lazily on first use

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        return self._path

    # -- Lifecycle --

    def _get_lock(self) -> anyio.Lock:
        # Created lazily: no event loop exists in __init__
        if self._lock is None:
            self._lock = anyio.Lock()
        return self._lock

    async def _open(self) -> AsyncConnection:
        """Return the connection, opening it and creating the table if needed.

        Caller holds the store lock, so concurrent first uses open exactly
        one connection.
        """
        conn = self._conn
        if conn is None:
            conn = await connect(self._path)
            await conn.execute(f'CREATE TABLE IF NOT EXISTS "{self._name}" (id TEXT PRIMARY KEY, doc TEXT NOT NULL)')
            self._conn = conn
        return conn

    async def connect(self) -> None:
        """Open the connection and create the table if needed. Idempotent."""
        async with self._get_lock():
            await self._open()

    async def disconnect(self) -> None:
        async with self._get_lock():
            if self._conn is not None:
                await self._conn.close()
                self._conn = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    # -- Internals --

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        """Hold the store lock and yield the (lazily opened) connection."""
        async with self._get_lock():
            yield await self._open()

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        """Log a query to stderr when echo is enabled."""
        if not self._echo:
            return
        ms = elapsed * 1000
        param_str = f"  params={list(params)!r}" if params else ""
        print(f"[conceptkit.store] {ms:6.1f}ms  {sql}{param_str}", file=sys.stderr)

    async def _run(self, conn: AsyncConnection, method: str, sql: str, params: Sequence[Any] = ()) -> Any:
        t0 = time.perf_counter()
        try:
            return await getattr(conn, method)(sql, params)
        except sqlite3.IntegrityError as exc:
            msg = f"Document already exists in {self._name!r}: {exc}"
            raise DuplicateIdError(msg) from exc
        except sqlite3.Error as exc:
            raise QueryError(str(exc)) from exc
        finally:
            self._log_query(sql, params, time.perf_counter() - t0)

    async def _select_one(self, conn: AsyncConnection, _id: DocumentId) -> dict[str, Any] | None:
        row = await self._run(conn, "fetchone", f'SELECT doc FROM "{self._name}" WHERE id = ?', (_id,))
        return json.loads(row[0]) if row is not None else None

    # -- DocumentStore --

    async def create_one(self, document: Mapping[str, Any]) -> DocumentId:
        stored = prepare_insert(document, self._clock())
        payload = _dumps(stored)
        async with self._connection() as conn:
            await self._run(
                conn,
                "execute",
                f'INSERT INTO "{self._name}" (id, doc) VALUES (?, ?)',
                (stored[ID_FIELD], payload),
            )
        return stored[ID_FIELD]

    async def read_many(self, filter: Filter | None = None, sort: SortSpec = ()) -> list[dict[str, Any]]:
        where, params = compile_filter(filter)
        order = compile_sort(sort)
        sql = f'SELECT doc FROM "{self._name}" WHERE {where} ORDER BY {order}'
        async with self._connection() as conn:
            rows = await self._run(conn, "fetchall", sql, params)
        return [json.loads(row[0]) for row in rows]

    async def update_one_by_id(self, id: DocumentId, partial: Mapping[str, Any]) -> bool:
        _id = parse_id(id)
        patch = prepare_patch(partial, self._clock())
        async with self._connection() as conn:
            stored = await self._select_one(conn, _id)
            if stored is None:
                return False
            stored.update(patch)
            updated = await self._run(
                conn,
                "execute",
                f'UPDATE "{self._name}" SET doc = ? WHERE id = ?',
                (_dumps(stored), _id),
            )
        return updated == 1

    async def read_one_by_id(self, id: DocumentId) -> dict[str, Any] | None:
        _id = parse_id(id)
        async with self._connection() as conn:
            return await self._select_one(conn, _id)

    async def pop_one_by_id(self, id: DocumentId) -> dict[str, Any] | None:
        _id = parse_id(id)
        async with self._connection() as conn:
            stored = await self._select_one(conn, _id)
            if stored is None:
                return None
            deleted = await self._run(conn, "execute", f'DELETE FROM "{self._name}" WHERE id = ?', (_id,))
        return stored if deleted == 1 else None
