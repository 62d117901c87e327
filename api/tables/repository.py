"""
Read-only table dumps (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database

# Tables the dump endpoint may read. Never `users`.
DUMPABLE_TABLES = frozenset(
    {
        "events",
        "organizers",
        "categories",
        "event_types",
        "age_groups",
    }
)


def is_dumpable(table: str) -> bool:
    return table in DUMPABLE_TABLES


async def dump_table(database: Database, table: str) -> list[dict[str, Any]]:
    """
    Return every row of `table`.

    Identifiers cannot be bound as parameters, so the name is checked against
    DUMPABLE_TABLES before it is quoted into the statement.
    """
    if not is_dumpable(table):
        raise ValueError(f"Table {table!r} cannot be dumped.")
    return await database.fetch_all(f'SELECT * FROM "{table}" ORDER BY 1')
