# app/models/monitor.py
"""ZoneMinder monitors (cameras). Only the id and display name are used here."""

from sqlalchemy import Column, Integer, String
from app.database import Base


class Monitor(Base):
    __tablename__ = "Monitors"

    id = Column("Id", Integer, primary_key=True, autoincrement=True)
    name = Column("Name", String(64), nullable=False, default="")

    def __repr__(self):
        return f"<Monitor {self.id} name={self.name}>"
