# app/services/event_index.py
"""
Event Index — time-range and point-in-time queries over ZoneMinder events.
Read-only. Bound to one DB session, so build one per request.
"""

from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from app.errors import NotFoundError, ValidationError
from app.models.event import Event
from app.utils.logger import get_logger
from app.utils.timeutil import to_event_time

logger = get_logger(__name__)


class EventIndex:
    def __init__(self, db: Session, event_timezone: str = "UTC"):
        self.db = db
        self.event_timezone = event_timezone

    def list_in_range(self, after: datetime, before: datetime,
                      monitors: Optional[Iterable[int]] = None) -> list[Event]:
        """
        Events that started strictly between `after` and `before`, oldest first.
        monitors=None means every monitor; an empty collection matches nothing.
        Aware bounds are converted into the event time zone before comparing.
        """
        after = to_event_time(after, self.event_timezone)
        before = to_event_time(before, self.event_timezone)
        if after > before:
            raise ValidationError("Start date is after end date", "after", after)

        q = self.db.query(Event).filter(Event.start > after, Event.start < before)
        if monitors is not None:
            monitor_ids = sorted(set(monitors))
            if not monitor_ids:
                return []
            q = q.filter(Event.monitor_id.in_(monitor_ids))

        events = q.order_by(Event.start.asc(), Event.id.asc()).all()
        logger.debug(f"{len(events)} events between {after} and {before} (monitors={monitors})")
        return events

    def get_by_id(self, event_id: int) -> Event:
        event = self.db.query(Event).filter(Event.id == event_id).first()
        if not event:
            raise NotFoundError("Event not found", event_id)
        return event

    def get_covering(self, monitor_id: int, instant: datetime) -> Optional[Event]:
        """
        The event of `monitor_id` whose [start, end) contains `instant`, or None.

        Aborted recordings leave short stubs that overlap the real segment, so the
        candidate with the most frames wins; equal frame counts go to the lowest id.
        """
        instant = to_event_time(instant, self.event_timezone)
        return (
            self.db.query(Event)
            .filter(
                Event.monitor_id == monitor_id,
                Event.start <= instant,
                Event.end > instant,
            )
            .order_by(Event.frames.desc(), Event.id.asc())
            .first()
        )
