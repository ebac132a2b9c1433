# app/schemas/event.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class EventOut(BaseModel):
    id: int
    monitor_id: int
    start: datetime
    end: Optional[datetime]
    frames: int
    size: int
    duration: float

    class Config:
        from_attributes = True
