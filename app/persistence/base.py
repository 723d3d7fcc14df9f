"""Shared query execution helpers for repositories."""

import time
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.metrics import jobly_db_query_failures_total, jobly_db_query_latency_seconds

logger = structlog.get_logger(__name__)


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert a SQLAlchemy row to a plain dict keyed by column label."""
    return dict(row._mapping)


async def _timed(query_name: str, pending: Awaitable[Result]) -> list[dict[str, Any]]:
    started = time.perf_counter()
    try:
        result = await pending
    except Exception:
        jobly_db_query_failures_total.labels(query_name=query_name).inc()
        logger.exception("Database query failed", query_name=query_name)
        raise
    jobly_db_query_latency_seconds.labels(query_name=query_name).observe(
        time.perf_counter() - started
    )
    if not result.returns_rows:
        return []
    return [row_to_dict(row) for row in result.fetchall()]


async def fetch_named(
    session: AsyncSession,
    query_name: str,
    sql: str,
    params: Mapping[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Run a fixed statement with ``:name`` parameters."""
    return await _timed(query_name, session.execute(text(sql), dict(params or {})))


async def fetch_positional(
    session: AsyncSession,
    query_name: str,
    sql: str,
    values: Sequence[Any],
) -> list[dict[str, Any]]:
    """Run a statement with ``$N`` placeholders straight through the driver.

    Used for statements assembled by the clause builders, whose fragments
    are numbered positionally.
    """
    conn = await session.connection()
    return await _timed(query_name, conn.exec_driver_sql(sql, tuple(values)))
