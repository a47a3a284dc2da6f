"""
SQLAlchemy session management.
Provides get_db() for FastAPI dependencies and the quote sink.

The session factory is bound to the engine lazily, when the first session is made.
"""

from collections.abc import Generator

from sqlalchemy.orm import Session, sessionmaker

from db.engine import get_engine

_SessionFactory = sessionmaker(autocommit=False, autoflush=False)


def SessionLocal() -> Session:
    """
    Lazy session factory that binds the engine on first use.

    Usage:
        session = SessionLocal()
        try:
            ...
        finally:
            session.close()
    """
    _SessionFactory.configure(bind=get_engine())
    return _SessionFactory()


def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session and close it afterwards.

    Usage:
        db_gen = get_db()
        db = next(db_gen)
        try:
            ...
            db.commit()
        finally:
            db_gen.close()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
