"""Shared fixtures. Points the app at an in-memory SQLite database before anything imports it."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_STRATEGY", "per_event")
os.environ.setdefault("DEFAULT_STORAGE_PATH", "/var/cache/zoneminder/events")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables
from app.models.monitor import Monitor


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def add_events(db):
    """Insert events (and the monitors they reference) and return them."""
    def _add(*events):
        for monitor_id in {e.monitor_id for e in events}:
            if db.get(Monitor, monitor_id) is None:
                db.add(Monitor(id=monitor_id, name=f"Camera {monitor_id}"))
        db.add_all(events)
        db.commit()
        return list(events)
    return _add
