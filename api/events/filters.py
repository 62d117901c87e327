"""
Post-query filters over fetched event rows.

- date range: inclusive, date-only comparison on the event start
- accessibility: joins each event to its organizer by name and checks flags
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import date
from typing import Any

from .dates import MalformedDateError, parse_event_date

logger = logging.getLogger(__name__)

# Request tag -> organizer column. A non-null column value means "yes".
ACCESSIBILITY_FLAGS = {
    "kids": "parking",
    "disabled": "disabled_access",
    "pets": "pets_allowed",
}


def index_organizers(organizers: Iterable[Mapping[str, Any]]) -> dict[str, Mapping[str, Any]]:
    """
    Map organizer name -> organizer row. The first row wins on duplicate names.
    """
    by_name: dict[str, Mapping[str, Any]] = {}
    for organizer in organizers:
        name = organizer.get("name")
        if name is not None and name not in by_name:
            by_name[name] = organizer
    return by_name


def filter_by_date_range(
    events: Iterable[Mapping[str, Any]],
    *,
    start: date | None = None,
    end: date | None = None,
) -> Iterator[Mapping[str, Any]]:
    """
    Lazily keep events whose start date falls inside [start, end].

    Missing bounds are open. When at least one bound is given, events with an
    unparseable start date are dropped.
    """
    for event in events:
        if start is None and end is None:
            yield event
            continue

        try:
            day = parse_event_date(event.get("start_date")).date()
        except MalformedDateError as exc:
            logger.warning("event_date_unparseable event_id=%s error=%s", event.get("id"), exc)
            continue

        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        yield event


def filter_by_accessibility(
    events: Iterable[Mapping[str, Any]],
    tags: Iterable[str],
    organizers: Mapping[str, Mapping[str, Any]],
) -> Iterator[Mapping[str, Any]]:
    """
    Keep events whose organizer has every requested accessibility flag set.

    Events whose organizer is not in `organizers` are always dropped, so only
    call this when at least one tag was requested.
    """
    columns = [ACCESSIBILITY_FLAGS[tag] for tag in dict.fromkeys(tags)]
    for event in events:
        organizer = organizers.get(event.get("organizer"))
        if organizer is None:
            continue
        if all(organizer.get(column) is not None for column in columns):
            yield event
