# app/services/review_service.py
"""
Review Service — the single entry point the HTTP layer and scripts call.
Composes the Event Index, Storage Locator and Frame Extractor that it is given;
it never builds or looks them up itself.
"""

import os
from datetime import datetime
from typing import Iterable, Optional
from app.errors import NotFoundError
from app.models.event import Event
from app.models.monitor import Monitor
from app.services.event_index import EventIndex
from app.services.frame_extractor import FrameExtractor
from app.services.monitor_service import MonitorService
from app.services.storage_locator import StorageLocator
from app.utils.logger import get_logger

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, event_index: EventIndex, locator: StorageLocator,
                 extractor: FrameExtractor, monitors: MonitorService):
        self.event_index = event_index
        self.locator = locator
        self.extractor = extractor
        self.monitors = monitors

    def list_events(self, after: datetime, before: datetime,
                    monitors: Optional[Iterable[int]] = None) -> list[Event]:
        return self.event_index.list_in_range(after, before, monitors)

    def get_event(self, event_id: int) -> Event:
        return self.event_index.get_by_id(event_id)

    def video_path_for(self, event_id: int) -> str:
        """Path of the event's video, for export. The file must exist."""
        event = self.event_index.get_by_id(event_id)
        return self._existing(self.locator.video_path(event), event, "Video")

    def thumbnail_path_for(self, event_id: int) -> str:
        event = self.event_index.get_by_id(event_id)
        return self._existing(self.locator.thumbnail_path(event), event, "Thumbnail")

    async def resolve_frame(self, monitor_id: int, timestamp: datetime) -> bytes:
        return await self.extractor.resolve_frame(monitor_id, timestamp)

    def list_monitors(self) -> list[Monitor]:
        return self.monitors.get_all()

    @staticmethod
    def _existing(path: str, event: Event, object_type: str) -> str:
        if not os.path.isfile(path):
            logger.warning(f"[EXPORT] Event {event.id} exists but {object_type.lower()} is missing: {path}")
            raise NotFoundError(f"{object_type} file for event is missing", event.id, object_type)
        return path
