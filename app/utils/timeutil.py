# app/utils/timeutil.py
"""
Time helpers shared by the event index and the frame extractor.
ZoneMinder writes StartDateTime/EndDateTime as naive wall-clock values in the
server's zone, so every instant is compared in that zone, without tzinfo.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo


def to_event_time(instant: datetime, zone: str = "UTC") -> datetime:
    """
    Normalise an instant for comparison against stored event times.
    Naive values are assumed to already be in `zone`; aware values are converted.
    """
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(ZoneInfo(zone)).replace(tzinfo=None)


def microseconds_between(start: datetime, instant: datetime) -> int:
    """Exact microsecond distance from start to instant (integer arithmetic, no floats)."""
    delta: timedelta = instant - start
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
