# app/schemas/monitor.py
from pydantic import BaseModel


class MonitorOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
