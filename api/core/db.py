"""
Postgres access for the document catalog (raw SQL over asyncpg).

The pool is process-wide: `main.lifespan` opens it on startup and closes it
on shutdown. Queries use asyncpg's positional placeholders ($1, $2, ...).
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

_pool: asyncpg.Pool | None = None


def _strip_sslmode(url: str) -> str:
    # libpq's `sslmode` is not understood by asyncpg's DSN parser.
    parts = urlsplit(url)
    if not parts.query:
        return url
    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL", "")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _strip_sslmode(url)


async def init_pool() -> asyncpg.Pool:
    global _pool
    if _pool is None:
        min_size = max(settings.env_int("DB_POOL_MIN_SIZE", 1), 1)
        _pool = await asyncpg.create_pool(
            dsn=database_url(),
            min_size=min_size,
            max_size=max(settings.env_int("DB_POOL_MAX_SIZE", 5), min_size),
            command_timeout=settings.env_int("DB_COMMAND_TIMEOUT_S", 30),
        )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return
    pool, _pool = _pool, None
    await pool.close()


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Return the first row as a dict, or None when the query matched nothing.
    """
    row = await pool().fetchrow(sql, *args)
    return dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    return [dict(r) for r in await pool().fetch(sql, *args)]


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement and return asyncpg's status tag (e.g. "DELETE 1").
    """
    return await pool().execute(sql, *args)
