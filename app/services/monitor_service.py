# app/services/monitor_service.py
"""Monitor listing — the cameras configured on this ZoneMinder instance."""

from sqlalchemy.orm import Session
from app.models.monitor import Monitor


class MonitorService:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Monitor]:
        return self.db.query(Monitor).order_by(Monitor.id.asc()).all()
