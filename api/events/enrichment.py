"""
Location enrichment.

Every event gets a `location` built from its organizer's address. The
address is geocoded concurrently for all events; a failed lookup only costs
that event its coordinates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from core.geocoding import Coordinates, GeocodeError, Geocoder

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


async def _locate(
    event: Mapping[str, Any],
    organizers: Mapping[str, Mapping[str, Any]],
    *,
    geocoder: Geocoder,
    semaphore: asyncio.Semaphore,
) -> dict[str, Any]:
    organizer = organizers.get(event.get("organizer"))
    address = organizer.get("address") if organizer is not None else None
    location: dict[str, Any] = {"address": address}

    if organizer is None:
        logger.debug("organizer_not_found event_id=%s organizer=%s", event.get("id"), event.get("organizer"))
    elif address and str(address).strip():
        coords: Coordinates | None = None
        async with semaphore:
            try:
                coords = await geocoder.geocode(str(address))
            except GeocodeError as exc:
                logger.warning("geocode_failed event_id=%s address=%s error=%s", event.get("id"), address, exc)
        if coords is not None:
            location["latitude"] = coords.latitude
            location["longitude"] = coords.longitude

    enriched = dict(event)
    enriched["location"] = location
    return enriched


async def enrich_with_locations(
    events: Sequence[Mapping[str, Any]],
    organizers: Mapping[str, Mapping[str, Any]],
    *,
    geocoder: Geocoder,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[dict[str, Any]]:
    """
    Return copies of `events` with a `location` attached, in input order.

    Returns only after every geocode call has finished or failed.
    """
    if not events:
        return []

    semaphore = asyncio.Semaphore(max(1, concurrency))
    tasks = [
        _locate(event, organizers, geocoder=geocoder, semaphore=semaphore)
        for event in events
    ]
    enriched = await asyncio.gather(*tasks)

    located = sum(1 for event in enriched if "latitude" in event["location"])
    logger.info("enrichment_complete events=%s located=%s", len(enriched), located)
    return list(enriched)
