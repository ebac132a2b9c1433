# app/models/event.py
"""
ZoneMinder events table.
One row per continuously recorded segment. Written by ZoneMinder's recorder,
read-only for this service. Segments of the same monitor may overlap when the
recorder glitches and leaves short duplicate stubs behind.
"""

from sqlalchemy import Column, Integer, BigInteger, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Event(Base):
    __tablename__ = "Events"

    id = Column("Id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    monitor_id = Column("MonitorId", Integer, ForeignKey("Monitors.Id"), nullable=False, index=True)
    start = Column("StartDateTime", DateTime, nullable=False, index=True)
    end = Column("EndDateTime", DateTime)
    frames = Column("Frames", Integer, nullable=False, default=0)
    disk_space = Column("DiskSpace", BigInteger)
    length = Column("Length", Numeric(10, 2), nullable=False, default=0)
    storage_id = Column("StorageId", Integer, ForeignKey("Storage.Id"))

    storage = relationship("Storage", lazy="joined")

    @property
    def size(self) -> int:
        return int(self.disk_space or 0)

    @property
    def duration(self) -> float:
        return float(self.length or 0)

    def __repr__(self):
        return f"<Event {self.id} monitor={self.monitor_id} start={self.start} frames={self.frames}>"
