import os

# main.py reads its configuration on import; skip App setup and rate limiting
os.environ.setdefault("TEST_MODE", "true")

import pytest
from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker

from database import db_schemas  # noqa: F401  (registers the tables)
from database.db import Base


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """
    File-backed SQLite engine with the full schema. A file is used instead of
    ":memory:" so that facet worker threads all see the same database.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'analytics.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def event_count(db_session):
    """Callable returning the number of stored analytics events."""

    def count() -> int:
        return db_session.query(func.count(db_schemas.AnalyticsEvent.event_id)).scalar()

    return count
