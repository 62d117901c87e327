"""
Events SQL (raw).
"""

from __future__ import annotations

from typing import Any

from core.db import Database

from . import query


async def search_events(
    database: Database,
    *,
    categories: list[str],
    event_types: list[str],
    organizers: list[str],
    age_groups: list[str],
) -> list[dict[str, Any]]:
    sql, args = query.build_events_query(
        categories=categories,
        event_types=event_types,
        organizers=organizers,
        age_groups=age_groups,
    )
    return await database.fetch_all(sql, *args)


async def list_organizers(database: Database) -> list[dict[str, Any]]:
    return await database.fetch_all(
        """
        SELECT id, name, address, parking, disabled_access, pets_allowed
        FROM organizers
        ORDER BY id
        """
    )
