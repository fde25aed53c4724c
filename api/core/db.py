"""
Async database access helpers (raw SQL).

This module owns the active store backend. FastAPI initializes it on startup
and closes it on shutdown (see `api/main.py`).

Two backends implement the same contract:
- PostgresStore: asyncpg connection pool (DATABASE_URL=postgresql://...)
- SqliteStore: aiosqlite, one connection per call (DATABASE_URL=sqlite:///path)

SQL parameter style:
- write SQL once with asyncpg's positional placeholders: $1, $2, $3, ...
- the SQLite backend rewrites them to ?1, ?2, ?3, ...
"""

from __future__ import annotations

import logging
import os
import re
import sqlite3
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, AsyncIterator, Awaitable, Callable, Iterator, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiosqlite
import asyncpg

from .errors import DatabaseError
from .settings import env_int

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PLACEHOLDER = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class ExecResult:
    inserted_id: int | None
    rows_affected: int


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _rows_affected(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 3" or "INSERT 0 1".
    tail = (status or "").rsplit(" ", 1)[-1]
    return int(tail) if tail.isdigit() else 0


class _PostgresExecutor:
    """
    Runs statements on one acquired asyncpg connection.
    """

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        row = await self._conn.fetchrow(sql, *args)
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        rows = await self._conn.fetch(sql, *args)
        return [dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> ExecResult:
        status = await self._conn.execute(sql, *args)
        rows_affected = _rows_affected(status)
        inserted_id = None
        if status.startswith("INSERT") and rows_affected > 0:
            # Every table keys on a BIGSERIAL id; lastval() is per session.
            inserted_id = await self._conn.fetchval("SELECT lastval()")
        return ExecResult(inserted_id=inserted_id, rows_affected=rows_affected)


class PostgresStore:
    dialect = "postgres"

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None

    async def open(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=env_int("DB_POOL_MIN", 1),
            max_size=env_int("DB_POOL_MAX", 5),
            command_timeout=30,
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call init_store() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        row = await self.pool().fetchrow(sql, *args)
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        rows = await self.pool().fetch(sql, *args)
        return [dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> ExecResult:
        async with self.pool().acquire() as conn:  # type: asyncpg.Connection
            return await _PostgresExecutor(conn).execute(sql, *args)

    async def execute_script(self, script: str) -> None:
        async with self.pool().acquire() as conn:  # type: asyncpg.Connection
            await conn.execute(script)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_PostgresExecutor]:
        async with self.pool().acquire() as conn:  # type: asyncpg.Connection
            async with conn.transaction():
                yield _PostgresExecutor(conn)


def _register_sqlite_types() -> None:
    # Declared column types DATE / TIMESTAMP / BOOLEAN come back as Python objects.
    sqlite3.register_adapter(date, lambda v: v.isoformat())
    sqlite3.register_adapter(datetime, lambda v: v.isoformat())
    sqlite3.register_converter("DATE", lambda b: date.fromisoformat(b.decode()))
    sqlite3.register_converter("TIMESTAMP", lambda b: datetime.fromisoformat(b.decode()))
    sqlite3.register_converter("BOOLEAN", lambda b: bool(int(b)))


_register_sqlite_types()


def _sqlite_sql(sql: str) -> str:
    return _PLACEHOLDER.sub(r"?\1", sql)


class _SqliteExecutor:
    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with self._conn.execute(_sqlite_sql(sql), args) as cursor:
            row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with self._conn.execute(_sqlite_sql(sql), args) as cursor:
            rows = await cursor.fetchall()
        return [dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> ExecResult:
        async with self._conn.execute(_sqlite_sql(sql), args) as cursor:
            return ExecResult(inserted_id=cursor.lastrowid, rows_affected=max(cursor.rowcount, 0))


class SqliteStore:
    dialect = "sqlite"

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def open(self) -> None:
        if self._path != ":memory:":
            parent = os.path.dirname(os.path.abspath(self._path))
            os.makedirs(parent, exist_ok=True)

    async def close(self) -> None:
        return None

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        # Autocommit mode: transactions are opened explicitly with BEGIN.
        async with aiosqlite.connect(
            self._path,
            isolation_level=None,
            detect_types=sqlite3.PARSE_DECLTYPES,
        ) as conn:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys = ON")
            yield conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with self._connect() as conn:
            return await _SqliteExecutor(conn).fetch_one(sql, *args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with self._connect() as conn:
            return await _SqliteExecutor(conn).fetch_all(sql, *args)

    async def execute(self, sql: str, *args: Any) -> ExecResult:
        async with self._connect() as conn:
            return await _SqliteExecutor(conn).execute(sql, *args)

    async def execute_script(self, script: str) -> None:
        async with self._connect() as conn:
            await conn.executescript(script)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_SqliteExecutor]:
        async with self._connect() as conn:
            await conn.execute("BEGIN")
            try:
                yield _SqliteExecutor(conn)
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")


Store = PostgresStore | SqliteStore

_store: Store | None = None


def create_store(url: str) -> Store:
    scheme = urlsplit(url).scheme.lower()
    if scheme in {"postgres", "postgresql"}:
        return PostgresStore(url)
    if scheme == "sqlite":
        # sqlite:///relative.db, sqlite:////abs/path.db, sqlite:///:memory:
        path = url.split("://", 1)[1]
        if path.startswith("/"):
            path = path[1:]
        return SqliteStore(path or ":memory:")
    raise RuntimeError(f"Unsupported DATABASE_URL scheme '{scheme}'.")


async def init_store(url: str | None = None) -> Store:
    global _store
    if _store is not None:
        return _store
    candidate = create_store(url or database_url())
    await candidate.open()
    _store = candidate
    return _store


async def close_store() -> None:
    global _store
    if _store is None:
        return None
    await _store.close()
    _store = None


def store() -> Store:
    if _store is None:
        raise RuntimeError("Store is not initialized. Call init_store() on startup.")
    return _store


_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, sqlite3.Error)


@contextmanager
def _driver_errors(sql: str) -> Iterator[None]:
    # Driver failures surface as the taxonomy's DatabaseError; everything else passes through.
    try:
        yield
    except _DRIVER_ERRORS as exc:
        logger.error("db_error error=%s sql=%s", exc, " ".join(sql.split())[:200])
        raise DatabaseError() from exc


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    with _driver_errors(sql):
        return await store().fetch_one(sql, *args)


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    with _driver_errors(sql):
        return await store().fetch_all(sql, *args)


async def execute(sql: str, *args: Any) -> ExecResult:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL).
    """
    with _driver_errors(sql):
        return await store().execute(sql, *args)


@asynccontextmanager
async def transaction() -> AsyncIterator[Any]:
    """
    Hold one connection for the block; commit on exit, roll back on any error.
    """
    with _driver_errors("transaction"):
        async with store().transaction() as tx:
            yield tx


async def with_transaction(fn: Callable[[Any], Awaitable[T]]) -> T:
    async with transaction() as tx:
        return await fn(tx)
