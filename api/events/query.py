"""
Events read query.

Builds `SELECT * FROM events` with one `IN (...)` clause per non-empty filter
dimension. Values are always bound as asyncpg parameters ($1, $2, ...).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)

BASE_EVENTS_QUERY = "SELECT * FROM events"

# Filter dimension -> column on the events table.
FILTER_COLUMNS = (
    ("categories", "category"),
    ("event_types", "type"),
    ("organizers", "organizer"),
)


def _unique(values: Iterable[str] | None) -> list[str]:
    seen: dict[str, None] = {}
    for value in values or ():
        seen.setdefault(str(value), None)
    return list(seen)


def build_events_query(
    *,
    categories: Iterable[str] | None = None,
    event_types: Iterable[str] | None = None,
    organizers: Iterable[str] | None = None,
    age_groups: Iterable[str] | None = None,
) -> tuple[str, list[Any]]:
    """
    Return `(sql, args)` for the filtered events query.

    AND across dimensions, OR (set membership) within one.

    Age groups do not filter anything: the events table has no age-group
    column, and the age-group name lives on a table this query never joins.
    """
    dimensions = {
        "categories": _unique(categories),
        "event_types": _unique(event_types),
        "organizers": _unique(organizers),
    }

    clauses: list[str] = []
    args: list[Any] = []
    for name, column in FILTER_COLUMNS:
        values = dimensions[name]
        if not values:
            continue
        placeholders = ", ".join(f"${len(args) + i}" for i in range(1, len(values) + 1))
        clauses.append(f"{column} IN ({placeholders})")
        args.extend(values)

    requested_age_groups = _unique(age_groups)
    if requested_age_groups:
        logger.warning("age_group_filter_ignored age_groups=%s", requested_age_groups)

    sql = BASE_EVENTS_QUERY
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    return sql, args
