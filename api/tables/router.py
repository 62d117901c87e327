"""
Lookup/dump API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from core.context import AppContext, get_context
from core.db import StoreQueryError

from . import repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/data/{table}")
async def dump_table(
    table: str,
    context: AppContext = Depends(get_context),
) -> list[dict]:
    if not repository.is_dumpable(table):
        raise HTTPException(status_code=404, detail=f"Unknown table '{table}'.")

    try:
        return await repository.dump_table(context.database, table)
    except StoreQueryError as exc:
        logger.exception("table_dump_failed table=%s", table)
        raise HTTPException(status_code=500, detail="Failed to execute query.") from exc
