"""Async SQLite wrapper using stdlib sqlite3 + anyio.

Runs all blocking sqlite3 calls in a worker thread via ``anyio.to_thread``.

Uses Python 3.12+ features:
    - ``check_same_thread=False``: safe for anyio's thread pool dispatch
    - ``autocommit=True``: individual statements auto-commit
"""

import sqlite3
from collections.abc import Callable, Sequence
from typing import Any

import anyio
import anyio.to_thread


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    """Run blocking call in anyio worker thread."""
    return anyio.to_thread.run_sync(func, *args)  # type: ignore[union-attr]


class AsyncConnection:
    """Async wrapper around ``sqlite3.Connection``.

    Query methods fetch eagerly inside the worker thread so no cursor
    outlives the call.
    """

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a statement and return the affected row count."""
        return await _run_sync(lambda: self._conn.execute(sql, params).rowcount)

    async def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[Any]:
        return await _run_sync(lambda: self._conn.execute(sql, params).fetchall())

    async def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Any:
        return await _run_sync(lambda: self._conn.execute(sql, params).fetchone())

    async def close(self) -> None:
        await _run_sync(self._conn.close)


async def connect(path: str) -> AsyncConnection:
    """Open an async SQLite connection.

    Uses ``autocommit=True`` so individual statements commit immediately.
    Uses ``check_same_thread=False`` for safe use with anyio's thread pool.
    """
    conn = await _run_sync(lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False))
    return AsyncConnection(conn)
