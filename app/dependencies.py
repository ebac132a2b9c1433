# app/dependencies.py
"""
FastAPI dependencies that assemble the review core for one request.
The locator and decoder are built once at startup and live on app.state;
the Event Index is bound to the request's DB session.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from app.database import get_db
from app.services.event_index import EventIndex
from app.services.frame_extractor import FrameExtractor
from app.services.monitor_service import MonitorService
from app.services.review_service import ReviewService


def get_review_service(request: Request, db: Session = Depends(get_db)) -> ReviewService:
    state = request.app.state
    event_index = EventIndex(db, state.event_timezone)
    extractor = FrameExtractor(event_index, state.locator, state.decoder, state.event_timezone)
    return ReviewService(event_index, state.locator, extractor, MonitorService(db))
