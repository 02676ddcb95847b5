"""
PostgreSQL access for the feature repositories (raw SQL over asyncpg).

The pool is created in the app lifespan (`api/main.py`). Repositories call
`fetch_one` / `fetch_all` / `execute` with positional placeholders ($1, $2, ...)
and build partial UPDATEs with `set_clause`; batch lookups pass a list of ids
as `= ANY($1::uuid[])`.
"""

from __future__ import annotations

import os
from typing import Any, Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from core.logging_config import get_logger
from core.settings import env_int

logger = get_logger("database")

_pool: asyncpg.Pool | None = None


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


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=env_int("DB_POOL_MIN_SIZE", 1),
        max_size=env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=env_int("DB_COMMAND_TIMEOUT", 30),
    )
    logger.info("Database pool initialized")


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("Database pool closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL) and return asyncpg's status tag,
    e.g. "DELETE 1".
    """
    return await pool().execute(sql, *args)


def affected_rows(status_tag: str) -> int:
    """
    Parse the row count out of a command status tag ("UPDATE 3" -> 3).
    """
    try:
        return int((status_tag or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0


def set_clause(
    fields: dict[str, Any],
    *,
    allowed: Iterable[str],
    first_placeholder: int = 2,
) -> tuple[str, list[Any]]:
    """
    Build the SET part of a partial UPDATE.

    Only whitelisted column names are accepted; values are passed as
    positional parameters starting at `$first_placeholder` ($1 is usually the
    row id). Returns ("col_a = $2, col_b = $3", [value_a, value_b]).
    """
    allowed_set = set(allowed)
    unknown = sorted(set(fields) - allowed_set)
    if unknown:
        raise ValueError(f"Columns not allowed in update: {unknown}")

    parts: list[str] = []
    args: list[Any] = []
    for offset, (column, value) in enumerate(fields.items()):
        parts.append(f"{column} = ${first_placeholder + offset}")
        args.append(value)
    return ", ".join(parts), args


def unique_ids(values: Iterable[Any]) -> list[Any]:
    """
    Drop None and duplicates (compared as strings), keeping first-seen order.
    Used to build `= ANY($1::uuid[])` batch parameters.
    """
    seen: dict[str, Any] = {}
    for value in values:
        if value is None:
            continue
        seen.setdefault(str(value), value)
    return list(seen.values())
