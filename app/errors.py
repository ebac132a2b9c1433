# app/errors.py
"""
Error taxonomy for the review core.

Every expected failure is a ReviewError tagged with one ErrorKind. The HTTP
layer maps each kind to exactly one status code; the core never decides that.
UnexpectedStateError is not a ReviewError: it marks a broken invariant and
propagates to the global handler as a 500.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFIGURATION = "configuration"
    EXTRACTION = "extraction"


class ReviewError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def detail(self) -> dict:
        """Structured description of this failure for API error payloads."""
        return {"message": self.message}


class ValidationError(ReviewError):
    """A query parameter was rejected. Carries the offending field and value."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str, value: Any):
        super().__init__(message)
        self.field = field
        self.value = value

    def detail(self) -> dict:
        return {"message": self.message, "field": self.field, "rejected_value": _jsonable(self.value)}


class NotFoundError(ReviewError):
    """An event, a covering event or a backing file does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, requested: Any, object_type: str = "Event"):
        super().__init__(message)
        self.requested = requested
        self.object_type = object_type

    def detail(self) -> dict:
        return {
            "message": self.message,
            "requested_object": _jsonable(self.requested),
            "object_type": self.object_type,
        }


class ConfigurationError(ReviewError):
    """A storage reference names a media root the deployment does not configure."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, storage_name: Optional[str] = None):
        super().__init__(message)
        self.storage_name = storage_name

    def detail(self) -> dict:
        return {"message": self.message, "storage_name": self.storage_name}


class ExtractionError(ReviewError):
    """Opening, seeking or decoding a video container failed."""

    kind = ErrorKind.EXTRACTION

    def __init__(self, message: str, path: Optional[str] = None, offset_us: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.offset_us = offset_us

    def detail(self) -> dict:
        return {"message": self.message, "offset_us": self.offset_us}


class UnexpectedStateError(RuntimeError):
    """A value the data model guarantees was missing or out of range."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def _jsonable(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return sorted(value)
    return value
