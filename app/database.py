# app/database.py
"""
Database connection and session management.
The Events, Monitors and Storage tables belong to ZoneMinder; this service
only reads them. create_tables() is for development and test databases.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,          # Auto-reconnect if DB connection drops
    echo=False,                  # Set True to log all SQL queries (debug only)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates the ZoneMinder tables this service reads. Safe to call multiple times.
    Never needed against a real ZoneMinder database.
    """
    from app.models.storage import Storage    # noqa
    from app.models.monitor import Monitor    # noqa
    from app.models.event import Event        # noqa

    Base.metadata.create_all(bind=bind or engine)
