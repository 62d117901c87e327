import asyncio
import time

import httpx
import pytest

from core.geocoding import Coordinates, GeocodeError, Geocoder, parse_search_payload


def _geocoder(handler, **kwargs):
    return Geocoder(
        base_url="https://geo.example.test/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_returns_first_match():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["agent"] = request.headers["user-agent"]
        return httpx.Response(
            200,
            json=[
                {"lat": "45.8131", "lon": "15.9772", "display_name": "Ilica 1"},
                {"lat": "1.0", "lon": "2.0"},
            ],
        )

    geocoder = _geocoder(handler, user_agent="test-agent")
    try:
        coords = await geocoder.geocode("Ilica 1, Zagreb")
    finally:
        await geocoder.aclose()

    assert coords == Coordinates(latitude=45.8131, longitude=15.9772)
    assert seen["url"].path == "/search"
    assert seen["url"].params["q"] == "Ilica 1, Zagreb"
    assert seen["url"].params["format"] == "json"
    assert seen["url"].params["limit"] == "1"
    assert "key" not in seen["url"].params
    assert seen["agent"] == "test-agent"


@pytest.mark.asyncio
async def test_sends_api_key_when_configured():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(200, json=[])

    geocoder = _geocoder(handler, api_key="secret")
    try:
        assert await geocoder.geocode("Ilica 1") is None
    finally:
        await geocoder.aclose()

    assert seen["params"]["key"] == "secret"


@pytest.mark.asyncio
async def test_not_found_status_means_no_match():
    geocoder = _geocoder(lambda request: httpx.Response(404, json={"error": "Unable to geocode"}))
    try:
        assert await geocoder.geocode("Nowhere 0") is None
    finally:
        await geocoder.aclose()


@pytest.mark.asyncio
async def test_server_error_raises():
    geocoder = _geocoder(lambda request: httpx.Response(503, text="busy"))
    try:
        with pytest.raises(GeocodeError, match="503"):
            await geocoder.geocode("Ilica 1")
    finally:
        await geocoder.aclose()


@pytest.mark.asyncio
async def test_timeout_raises_geocode_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    geocoder = _geocoder(handler)
    try:
        with pytest.raises(GeocodeError, match="timed out"):
            await geocoder.geocode("Ilica 1")
    finally:
        await geocoder.aclose()


@pytest.mark.asyncio
async def test_connection_error_raises_geocode_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    geocoder = _geocoder(handler)
    try:
        with pytest.raises(GeocodeError):
            await geocoder.geocode("Ilica 1")
    finally:
        await geocoder.aclose()


@pytest.mark.asyncio
async def test_invalid_json_raises():
    geocoder = _geocoder(lambda request: httpx.Response(200, text="<html>"))
    try:
        with pytest.raises(GeocodeError):
            await geocoder.geocode("Ilica 1")
    finally:
        await geocoder.aclose()


@pytest.mark.asyncio
async def test_empty_address_raises():
    geocoder = _geocoder(lambda request: httpx.Response(200, json=[]))
    try:
        with pytest.raises(GeocodeError):
            await geocoder.geocode("   ")
    finally:
        await geocoder.aclose()


def test_parse_payload_rejects_non_list():
    with pytest.raises(GeocodeError):
        parse_search_payload({"lat": "1", "lon": "2"})


def test_parse_payload_rejects_missing_coordinates():
    with pytest.raises(GeocodeError):
        parse_search_payload([{"display_name": "somewhere"}])


def test_parse_payload_empty_list_is_no_match():
    assert parse_search_payload([]) is None


def test_empty_base_url_rejected():
    with pytest.raises(GeocodeError):
        Geocoder(base_url="  ")


@pytest.mark.parametrize(
    "match",
    [
        {"lat": "nan", "lon": "nan"},
        {"lat": "45.8", "lon": "inf"},
        {"lat": "-inf", "lon": "16.0"},
        {"lat": "123.4", "lon": "16.0"},
        {"lat": "45.8", "lon": "-181"},
    ],
)
def test_parse_payload_rejects_unusable_coordinates(match):
    with pytest.raises(GeocodeError):
        parse_search_payload([match])


def test_parse_payload_accepts_boundary_coordinates():
    assert parse_search_payload([{"lat": "-90", "lon": "180"}]) == Coordinates(latitude=-90.0, longitude=180.0)


@pytest.mark.asyncio
async def test_nan_match_is_a_geocode_error():
    geocoder = _geocoder(lambda request: httpx.Response(200, json=[{"lat": "nan", "lon": "nan"}]))
    try:
        with pytest.raises(GeocodeError, match="non-finite"):
            await geocoder.geocode("Ilica 1")
    finally:
        await geocoder.aclose()


@pytest.mark.asyncio
async def test_min_interval_spaces_out_requests():
    started = []

    def handler(request: httpx.Request) -> httpx.Response:
        started.append(time.monotonic())
        return httpx.Response(200, json=[])

    geocoder = _geocoder(handler, min_interval_s=0.05)
    try:
        await asyncio.gather(*(geocoder.geocode(f"Ilica {i}") for i in range(3)))
    finally:
        await geocoder.aclose()

    assert len(started) == 3
    gaps = [b - a for a, b in zip(started, started[1:])]
    assert all(gap >= 0.045 for gap in gaps)
