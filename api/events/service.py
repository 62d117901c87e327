"""
Event search service (orchestration).

This is where we:
- fetch candidate rows with the filtered events query (repository)
- take one organizer snapshot for the whole request
- narrow by date range and, if requested, accessibility
- geocode organizer addresses, then sort
"""

from __future__ import annotations

import logging
from typing import Any

from core.context import AppContext

from . import enrichment, filters, repository, schemas, sorting

logger = logging.getLogger(__name__)


async def search_events(context: AppContext, request: schemas.SearchRequest) -> list[dict[str, Any]]:
    """
    Run the whole search pipeline and return enriched, sorted events.

    Raises core.db.StoreQueryError if events or organizers cannot be fetched.
    """
    rows = await repository.search_events(
        context.database,
        categories=request.categories,
        event_types=request.event_types,
        organizers=request.organizers,
        age_groups=request.age_groups,
    )
    organizers = filters.index_organizers(await repository.list_organizers(context.database))

    candidates = filters.filter_by_date_range(rows, start=request.start_date, end=request.end_date)
    if request.accessibility:
        candidates = filters.filter_by_accessibility(candidates, request.accessibility, organizers)
    events = list(candidates)

    logger.info(
        "search_filtered fetched=%s kept=%s accessibility=%s",
        len(rows),
        len(events),
        request.accessibility,
    )

    enriched = await enrichment.enrich_with_locations(
        events,
        organizers,
        geocoder=context.geocoder,
        concurrency=context.settings.geocode_concurrency,
    )
    return sorting.sort_events(
        enriched,
        param=request.sort.param,
        reverse=request.sort.reverse,
        latitude=request.sort.latitude,
        longitude=request.sort.longitude,
    )
