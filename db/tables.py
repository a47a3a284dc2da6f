"""
SQLAlchemy Core table definitions for the quote store.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
)

from db.engine import get_engine
from utils.logger import get_logger

logger = get_logger(__name__)

metadata = MetaData()

quotes = Table(
    "quotes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("raw_content", Text, nullable=False),
    Column("total_quote", Float),
    Column("guestroom_total", Float),
    Column("meeting_room_total", Float),
    Column("food_beverage_total", Float),
    Column("confidence", Float),
    Column("ai_notes", Text),
    Column("has_linked_content", Boolean, nullable=False, default=False),
    Column("linked_content_fetched", Integer, nullable=False, default=0),
    Column("linked_content_errors", Text),
    Column("content_length", Integer, nullable=False),
    Column("processed_at", String(40), nullable=False),
    Column("calculation_breakdown", Text),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)


def init_db() -> None:
    """Create the quote tables if they don't exist."""
    engine = get_engine()
    metadata.create_all(engine, tables=[quotes])
    logger.info("Database initialised", extra={"extra_fields": {"tables": [quotes.name]}})
