import json

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import db.repository as repo
from db.tables import metadata, quotes
from models.errors import PersistenceFailed
from models.quote import (
    CalculationBreakdown,
    CombinedText,
    ExtractionResult,
    ProcessedQuote,
    QuoteRecord,
)

pytestmark = pytest.mark.integration


def _engine(with_tables: bool = True):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if with_tables:
        metadata.create_all(engine)
    return engine


def _record(total=80000, raw="Group rate $200", errors=None, limit=50000) -> QuoteRecord:
    quote = ProcessedQuote(
        result=ExtractionResult(
            guestroom_total=30000,
            meeting_room_total=None,
            food_beverage_total=50000,
            confidence=0.9,
            ai_notes="ok",
            calculation_breakdown=CalculationBreakdown(200, 50, 3, 30000),
        ),
        total_quote=total,
        combined_text=CombinedText(text=raw),
        has_linked_content=bool(errors),
        linked_content_errors=errors or [],
        processed_at="2025-03-01T12:00:00.000Z",
    )
    return QuoteRecord.from_processed(quote, raw_content_limit=limit)


def _use_engine(monkeypatch, engine):
    def fake_get_db():
        db = Session(engine)
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(repo, "get_db", fake_get_db)


def test_record_truncates_raw_content_only():
    record = _record(raw="x" * 60000)
    assert len(record.raw_content) == 50000
    assert record.content_length == 60000


def test_create_quote_record_does_not_commit():
    engine = _engine()
    with Session(engine) as db:
        quote_id = repo.create_quote_record(db, _record())
        assert quote_id == 1
        db.rollback()

    with Session(engine) as db:
        assert db.execute(select(quotes.c.id)).all() == []


def test_save_quote_record_commits(monkeypatch):
    engine = _engine()
    _use_engine(monkeypatch, engine)

    errors = [{"url": "https://a.example", "message": "Content too short"}]
    quote_id = repo.save_quote_record(_record(errors=errors))

    with Session(engine) as db:
        row = db.execute(select(quotes).where(quotes.c.id == quote_id)).mappings().one()
    assert row["total_quote"] == 80000
    assert row["meeting_room_total"] is None
    assert row["has_linked_content"] is True
    assert json.loads(row["linked_content_errors"]) == errors
    assert json.loads(row["calculation_breakdown"])["roomRate"] == 200
    assert row["processed_at"] == "2025-03-01T12:00:00.000Z"


def test_save_quote_record_failure_raises_persistence_failed(monkeypatch):
    _use_engine(monkeypatch, _engine(with_tables=False))
    with pytest.raises(PersistenceFailed):
        repo.save_quote_record(_record())


def test_list_recent_quotes_newest_first():
    engine = _engine()
    with Session(engine) as db:
        for total in (100, 200, 300):
            repo.create_quote_record(db, _record(total=total))
        db.commit()

        rows = repo.list_recent_quotes(db, limit=2)

    assert [r["total_quote"] for r in rows] == [300, 200]
    assert rows[0]["linked_content_errors"] == []
    assert rows[0]["calculation_breakdown"]["calculatedTotal"] == 30000
    assert "raw_content" not in rows[0]
