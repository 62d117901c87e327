"""
Result ordering: chronological or by distance from a reference point.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from .dates import MalformedDateError, parse_event_date

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Zagreb city centre.
DEFAULT_LATITUDE = 45.815
DEFAULT_LONGITUDE = 15.9819

SORT_EARLIEST = "earliest"
SORT_LOCATION = "location"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _coordinates(event: Mapping[str, Any]) -> tuple[float, float] | None:
    location = event.get("location") or {}
    lat = location.get("latitude")
    lon = location.get("longitude")
    if lat is None or lon is None:
        return None
    return float(lat), float(lon)


def _start(event: Mapping[str, Any]) -> datetime | None:
    try:
        return parse_event_date(event.get("start_date"))
    except MalformedDateError as exc:
        logger.warning("event_date_unparseable event_id=%s error=%s", event.get("id"), exc)
        return None


def sort_by_earliest(events: Iterable[dict[str, Any]], *, reverse: bool = False) -> list[dict[str, Any]]:
    """
    Order by full start timestamp. Unparseable dates always go last.
    """
    dated: list[tuple[datetime, dict[str, Any]]] = []
    undated: list[dict[str, Any]] = []
    for event in events:
        start = _start(event)
        if start is None:
            undated.append(event)
        else:
            dated.append((start, event))

    dated.sort(key=lambda item: item[0], reverse=reverse)
    return [event for _, event in dated] + undated


def sort_by_distance(
    events: Iterable[dict[str, Any]],
    *,
    latitude: float = DEFAULT_LATITUDE,
    longitude: float = DEFAULT_LONGITUDE,
    reverse: bool = False,
) -> list[dict[str, Any]]:
    """
    Order by great-circle distance from (latitude, longitude).

    Events without coordinates always go last and keep their relative order.
    """
    located: list[tuple[float, dict[str, Any]]] = []
    unlocated: list[dict[str, Any]] = []
    for event in events:
        coords = _coordinates(event)
        if coords is None:
            unlocated.append(event)
        else:
            located.append((haversine_km(latitude, longitude, coords[0], coords[1]), event))

    located.sort(key=lambda item: item[0], reverse=reverse)
    return [event for _, event in located] + unlocated


def sort_events(
    events: Iterable[dict[str, Any]],
    *,
    param: str = SORT_EARLIEST,
    reverse: bool = False,
    latitude: float | None = None,
    longitude: float | None = None,
) -> list[dict[str, Any]]:
    if param == SORT_LOCATION:
        return sort_by_distance(
            events,
            latitude=DEFAULT_LATITUDE if latitude is None else latitude,
            longitude=DEFAULT_LONGITUDE if longitude is None else longitude,
            reverse=reverse,
        )
    return sort_by_earliest(events, reverse=reverse)
