"""
Database helper functions: schedule lookup and the bulk table export.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import ScheduleEntry

logger = logging.getLogger(__name__)

EXPORT_HEADER = {
    "type": "header",
    "version": "5.2.1",
    "comment": "Export to JSON plugin for PHPMyAdmin",
}


async def fetch_schedule(session: AsyncSession, student_id: int) -> List[Dict[str, Any]]:
    """Return the courses of one student as ``{course_name, course_time}`` rows."""
    result = await session.execute(
        select(ScheduleEntry.course_name, ScheduleEntry.course_time)
        .where(ScheduleEntry.student_id == student_id)
        .order_by(ScheduleEntry.id)
    )
    return [dict(row) for row in result.mappings()]


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


async def _select_all(
    session_factory: async_sessionmaker[AsyncSession],
    table: str,
) -> List[Dict[str, Any]]:
    # One session per table: an AsyncSession must not be shared between
    # concurrently running queries.
    async with session_factory() as session:
        quoted = session.bind.dialect.identifier_preparer.quote(table)
        result = await session.execute(text(f"SELECT * FROM {quoted}"))
        return [
            {key: _jsonable(value) for key, value in row.items()}
            for row in result.mappings()
        ]


async def export_tables(
    session_factory: async_sessionmaker[AsyncSession],
    tables: Sequence[str],
    database: str,
) -> Dict[str, Any]:
    """
    Dump every table in ``tables`` into one phpMyAdmin-style JSON document.

    The ``SELECT *`` queries run concurrently; the first failure aborts the
    whole export.
    """
    results = await asyncio.gather(*(_select_all(session_factory, t) for t in tables))
    logger.info("Exported %d tables (%d rows)", len(tables), sum(len(r) for r in results))
    return {
        **EXPORT_HEADER,
        "data": [
            {"type": "table", "name": table, "database": database, "data": rows}
            for table, rows in zip(tables, results)
        ],
    }
