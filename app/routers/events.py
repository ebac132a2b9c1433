# app/routers/events.py
"""
Event endpoints.
GET /event                                  — events in a time range, optional monitor filter
GET /event/{event_id}                       — one event
GET /event/{event_id}/export                — raw mp4 of the event
GET /event/{event_id}/thumbnail             — snapshot.jpg of the event
GET /event/frame/{monitor_id}/{timestamp}   — decoded JPEG frame at an instant
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import FileResponse
from app.dependencies import get_review_service
from app.schemas.common import ListResponse
from app.schemas.event import EventOut
from app.services.review_service import ReviewService
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/event", response_model=ListResponse[EventOut], summary="Events in a time range")
def list_events(
    after: datetime,
    before: datetime,
    monitor: Optional[list[int]] = Query(None, description="Repeat to filter by several monitors"),
    service: ReviewService = Depends(get_review_service),
):
    """Events whose start time lies strictly between `after` and `before`, oldest first."""
    return {"results": service.list_events(after, before, monitor)}


@router.get("/event/frame/{monitor_id}/{timestamp}", summary="Frame recorded at an instant",
            response_class=Response, responses={200: {"content": {"image/jpeg": {}}}})
async def get_frame(monitor_id: int, timestamp: datetime,
                    service: ReviewService = Depends(get_review_service)):
    image = await service.resolve_frame(monitor_id, timestamp)
    return Response(content=image, media_type="image/jpeg")


@router.get("/event/{event_id}", response_model=EventOut, summary="Event by id")
def get_event(event_id: int, service: ReviewService = Depends(get_review_service)):
    return service.get_event(event_id)


@router.get("/event/{event_id}/export", summary="Download event video", response_class=FileResponse)
def export_event(event_id: int, service: ReviewService = Depends(get_review_service)):
    path = service.video_path_for(event_id)
    logger.info(f"[EXPORT] Event {event_id} → {path}")
    return FileResponse(path, media_type="video/mp4", filename=f"{event_id}-video.mp4")


@router.get("/event/{event_id}/thumbnail", summary="Event snapshot", response_class=FileResponse)
def event_thumbnail(event_id: int, service: ReviewService = Depends(get_review_service)):
    return FileResponse(service.thumbnail_path_for(event_id), media_type="image/jpeg")
