"""
Events API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from core.context import AppContext, get_context
from core.db import StoreQueryError

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/events/search", response_model=schemas.SearchResponse)
async def search_events(
    payload: schemas.SearchRequest,
    context: AppContext = Depends(get_context),
):
    try:
        events = await service.search_events(context, payload)
    except StoreQueryError:
        logger.exception("event_search_failed")
        body = schemas.SearchResponse(success=False, message="Failed to fetch events.")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=jsonable_encoder(body),
        )

    return schemas.SearchResponse(
        success=True,
        message="Events fetched successfully.",
        events=events,
    )
