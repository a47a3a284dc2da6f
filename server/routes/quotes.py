"""Quote history endpoint - recently processed quotes, newest first."""

import asyncio

from fastapi import APIRouter, Depends, Query, Request

from config.config import Config
from models.errors import PersistenceFailed
from server.dependencies import get_config
from server.schemas.responses import QuoteSummaryDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Quotes"])


def _load_recent_quotes(limit: int) -> list[dict]:
    from db import get_db, list_recent_quotes

    db_gen = get_db()
    db = next(db_gen)
    try:
        return list_recent_quotes(db, limit=limit)
    finally:
        db_gen.close()


@router.get("/quotes", response_model=list[QuoteSummaryDTO])
async def list_quotes(
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    config: Config = Depends(get_config),
):
    """Return recently processed quotes. Empty when persistence is disabled."""
    if not config.persistence_enabled:
        return []

    try:
        rows = await asyncio.to_thread(_load_recent_quotes, limit)
    except Exception as e:
        logger.error(
            f"Failed to load quote history: {e}",
            extra={"extra_fields": {"request_id": getattr(request.state, "request_id", None)}},
        )
        raise PersistenceFailed("Failed to load quote history", details=str(e)) from e

    return [QuoteSummaryDTO(**row) for row in rows]
