"""
Database package for the quote parser.
Provides SQLAlchemy engine, session management, the quotes table, and repository functions.
"""

from db.engine import get_engine
from db.repository import create_quote_record, list_recent_quotes, save_quote_record
from db.session import SessionLocal, get_db
from db.tables import init_db, metadata, quotes

__all__ = [
    "SessionLocal",
    "create_quote_record",
    "get_db",
    "get_engine",
    "init_db",
    "list_recent_quotes",
    "metadata",
    "quotes",
    "save_quote_record",
]
