"""
Repository layer for the quote store.
CRUD functions using SQLAlchemy Core.

Design principles:
- Query functions do NOT commit - caller commits for transaction control
- save_quote_record() owns its session and is used as the orchestrator's record sink
"""

import json
from typing import Any

from sqlalchemy import desc, insert, select
from sqlalchemy.orm import Session

from db.session import get_db
from db.tables import quotes
from models.errors import PersistenceFailed
from models.quote import QuoteRecord
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 20
MAX_LIST_LIMIT = 100


def create_quote_record(db: Session, record: QuoteRecord) -> int:
    """
    Insert a processed quote.

    Args:
        db: SQLAlchemy session
        record: Flattened quote record

    Returns:
        int: ID of the inserted row (caller must commit)
    """
    result = db.execute(insert(quotes).values(**record.to_row()))
    quote_id = result.inserted_primary_key[0]

    logger.debug(
        "Quote record created",
        extra={"extra_fields": {"quote_id": quote_id, "content_length": record.content_length}},
    )
    return quote_id


def _decode_json_column(value: str | None) -> Any:
    if not value:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def list_recent_quotes(db: Session, limit: int = DEFAULT_LIST_LIMIT) -> list[dict]:
    """
    Get the most recently processed quotes, newest first.

    The raw content is left out; JSON columns are decoded.
    """
    limit = max(1, min(int(limit), MAX_LIST_LIMIT))
    stmt = (
        select(
            quotes.c.id,
            quotes.c.total_quote,
            quotes.c.guestroom_total,
            quotes.c.meeting_room_total,
            quotes.c.food_beverage_total,
            quotes.c.confidence,
            quotes.c.ai_notes,
            quotes.c.has_linked_content,
            quotes.c.linked_content_fetched,
            quotes.c.linked_content_errors,
            quotes.c.content_length,
            quotes.c.processed_at,
            quotes.c.calculation_breakdown,
        )
        .order_by(desc(quotes.c.id))
        .limit(limit)
    )

    rows = []
    for row in db.execute(stmt).mappings():
        item = dict(row)
        item["linked_content_errors"] = _decode_json_column(item["linked_content_errors"]) or []
        item["calculation_breakdown"] = _decode_json_column(item["calculation_breakdown"])
        rows.append(item)
    return rows


def save_quote_record(record: QuoteRecord) -> int:
    """
    Persist one quote record in its own transaction.

    Raises:
        PersistenceFailed: The insert or commit failed (the transaction is rolled back)
    """
    db_gen = get_db()
    db = next(db_gen)
    try:
        quote_id = create_quote_record(db, record)
        db.commit()
        return quote_id
    except Exception as exc:
        db.rollback()
        raise PersistenceFailed(details=str(exc)) from exc
    finally:
        db_gen.close()
