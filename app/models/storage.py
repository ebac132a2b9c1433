# app/models/storage.py
"""
ZoneMinder storage areas. An event points at one of these through StorageId.
Name is used by the named media-root scheme, Path by the per-event scheme.
"""

from sqlalchemy import Column, Integer, String
from app.database import Base


class Storage(Base):
    __tablename__ = "Storage"

    id = Column("Id", Integer, primary_key=True, autoincrement=True)
    name = Column("Name", String(64), nullable=False, default="")
    path = Column("Path", String(64))

    def __repr__(self):
        return f"<Storage {self.id} name={self.name} path={self.path}>"
