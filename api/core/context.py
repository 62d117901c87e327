"""
Application context: the explicitly constructed handles a request needs.

One `AppContext` lives on `app.state.context` for the lifetime of the
process. Route handlers get it through the `get_context` dependency, and
tests build one around fake collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request

from .config import Settings
from .db import Database
from .geocoding import Geocoder


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    database: Database
    geocoder: Geocoder


def build_context(settings: Settings) -> AppContext:
    return AppContext(
        settings=settings,
        database=Database(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout_s,
        ),
        geocoder=Geocoder(
            base_url=settings.geocoder_base_url,
            api_key=settings.geocoder_api_key,
            user_agent=settings.geocoder_user_agent,
            timeout_s=settings.geocode_timeout_s,
            min_interval_s=settings.geocode_min_interval_s,
        ),
    )


async def open_context(context: AppContext) -> None:
    await context.database.connect()


async def close_context(context: AppContext) -> None:
    try:
        await context.geocoder.aclose()
    finally:
        await context.database.close()


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=500, detail="Application context not configured.")
    return context
