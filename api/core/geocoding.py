"""
Geocoding HTTP client.

Talks to a Nominatim-compatible search API:
- GET /search?q=<address>&format=json&limit=1 -> [{"lat": "45.81", "lon": "15.98", ...}]

LocationIQ and similar hosted providers speak the same protocol and take an
API key as the `key` query parameter.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import Any

import httpx


# Geocoding failures are explicit and separable from other runtime errors.
class GeocodeError(RuntimeError):
    pass


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise GeocodeError("GEOCODER_BASE_URL is empty.")
    return base_url.rstrip("/")


def parse_search_payload(data: Any) -> Coordinates | None:
    """
    Pick the best (first) match out of a search response.

    An empty list means "no match" and returns None.
    """
    if not isinstance(data, list):
        raise GeocodeError("Geocoder returned a non-list payload.")
    if not data:
        return None

    best = data[0]
    if not isinstance(best, dict):
        raise GeocodeError("Geocoder returned a malformed match.")
    try:
        lat = float(best["lat"])
        lon = float(best["lon"])
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodeError("Geocoder returned a match without numeric lat/lon.") from e

    # float() also accepts "nan" and "inf".
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise GeocodeError(f"Geocoder returned non-finite coordinates: {lat}, {lon}.")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise GeocodeError(f"Geocoder returned out-of-range coordinates: {lat}, {lon}.")
    return Coordinates(latitude=lat, longitude=lon)


class Geocoder:
    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        user_agent: str = "events-catalog-api/0.1",
        timeout_s: float = 5.0,
        min_interval_s: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._min_interval_s = max(0.0, min_interval_s)
        self._throttle = asyncio.Lock()
        self._last_request_at: float | None = None
        self._client = httpx.AsyncClient(
            base_url=_normalize_base_url(base_url),
            timeout=timeout_s,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _wait_turn(self) -> None:
        # Requests to one host start at least min_interval_s apart.
        if self._min_interval_s <= 0:
            return
        loop = asyncio.get_running_loop()
        async with self._throttle:
            if self._last_request_at is not None:
                delay = self._last_request_at + self._min_interval_s - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
            self._last_request_at = loop.time()

    async def geocode(self, address: str) -> Coordinates | None:
        """
        Resolve a free-text address to its best-matching coordinates.
        """
        address = (address or "").strip()
        if not address:
            raise GeocodeError("Address is empty.")

        params: dict[str, Any] = {"q": address, "format": "json", "limit": 1}
        if self._api_key:
            params["key"] = self._api_key

        await self._wait_turn()
        try:
            resp = await self._client.get("/search", params=params)
        except httpx.TimeoutException as exc:
            raise GeocodeError(f"Geocoder request timed out for {address!r}.") from exc
        except httpx.HTTPError as exc:
            raise GeocodeError(f"Geocoder request failed: {exc}") from exc

        if resp.status_code == 404:
            # LocationIQ answers "Unable to geocode" with a 404.
            return None
        if resp.status_code != 200:
            body = resp.text[:300]
            raise GeocodeError(f"Geocoder request failed: {resp.status_code} {body}")

        try:
            data = resp.json()
        except ValueError as e:
            raise GeocodeError("Geocoder returned invalid JSON.") from e
        return parse_search_payload(data)
