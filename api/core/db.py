"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. The app factory creates one handle,
opens it in the lifespan hook and closes it on shutdown (see `api/main.py`).
Handlers reach it through `request.app.state.database`, never a module global.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver errors are translated here, once:
- unique-constraint violations -> UniqueViolation
- anything else from the driver or the socket -> DatabaseError
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config

logger = logging.getLogger(__name__)


class DatabaseError(RuntimeError):
    pass


class UniqueViolation(DatabaseError):
    def __init__(self, message: str, *, constraint: str | None = None) -> None:
        super().__init__(message)
        self.constraint = constraint


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = config.env_str("DATABASE_URL", "")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


@asynccontextmanager
async def translate_errors() -> AsyncIterator[None]:
    """
    Re-raise driver failures as DatabaseError / UniqueViolation.

    Classification goes by exception type (SQLSTATE 23505), not message text.
    """
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        raise UniqueViolation(str(exc), constraint=getattr(exc, "constraint_name", None)) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
        raise DatabaseError(str(exc)) from exc


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, dsn: str | None = None) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        dsn = self._dsn or database_url()
        logger.info("connecting_to_database")
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=config.env_int("DB_POOL_MIN_SIZE", 1),
            max_size=config.env_int("DB_POOL_MAX_SIZE", 5),
            command_timeout=config.env_int("DB_COMMAND_TIMEOUT", 30),
        )
        logger.info("database_connected")

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with translate_errors():
            row = await self.pool().fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with translate_errors():
            rows = await self.pool().fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]
