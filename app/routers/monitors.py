# app/routers/monitors.py
"""Monitors configured on this ZoneMinder instance."""

from fastapi import APIRouter, Depends
from app.dependencies import get_review_service
from app.schemas.common import ListResponse
from app.schemas.monitor import MonitorOut
from app.services.review_service import ReviewService

router = APIRouter()


@router.get("/monitor", response_model=ListResponse[MonitorOut], summary="All monitors")
def list_monitors(service: ReviewService = Depends(get_review_service)):
    return {"results": service.list_monitors()}
