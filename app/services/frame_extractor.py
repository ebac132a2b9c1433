# app/services/frame_extractor.py
"""
Frame Extractor — returns the JPEG frame a monitor recorded at a given instant.

Flow per request:
  1. Event Index finds the event covering (monitor, instant)
  2. Storage Locator turns it into a video path
  3. FrameDecoder opens the container, seeks to instant - event.start,
     decodes one frame and encodes it as JPEG

Every request opens its own container and closes it before returning, whether
the decode succeeded or not. Nothing is cached between requests.
FrameDecoder is shared by the whole process and bounds how many decodes run at
once; FrameExtractor itself is cheap and built per request.
"""

import asyncio
import io
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from fractions import Fraction
from typing import Optional

import av
from av.error import FFmpegError

from app.errors import ExtractionError, NotFoundError, UnexpectedStateError
from app.models.event import Event
from app.services.event_index import EventIndex
from app.services.storage_locator import StorageLocator
from app.utils.logger import get_logger
from app.utils.timeutil import microseconds_between, to_event_time

logger = get_logger(__name__)

DEFAULT_MAX_WORKERS = 4
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_JPEG_QUALITY = 85


class DecodeCancelled(Exception):
    """Raised inside a worker when its request timed out or went away."""


class FrameDecoder:
    """
    Bounded pool for open → seek → decode → encode.

    Attributes:
        max_workers: Maximum number of decodes running at the same time
        timeout: Seconds a single decode may take before it is abandoned
        jpeg_quality: Pillow JPEG quality, 1-95
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.timeout = timeout
        self.jpeg_quality = jpeg_quality
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="frame_decoder")
        self._slots = asyncio.Semaphore(max_workers)

        logger.info(
            f"FrameDecoder ready: workers={max_workers} timeout={timeout}s quality={jpeg_quality}"
        )

    async def decode(self, video_path: str, offset_us: int) -> bytes:
        """
        Decode the frame at `offset_us` off the event loop.
        Raises ExtractionError on any decoder failure or when the timeout expires.
        """
        cancelled = threading.Event()
        loop = asyncio.get_running_loop()

        async with self._slots:
            job = loop.run_in_executor(self._executor, self.extract_jpeg, video_path, offset_us, cancelled)
            try:
                return await asyncio.wait_for(job, timeout=self.timeout)
            except asyncio.TimeoutError:
                cancelled.set()
                logger.warning(f"[DECODE] Timed out after {self.timeout}s: {video_path} @ {offset_us}us")
                raise ExtractionError(
                    f"Decoding took longer than {self.timeout} seconds", video_path, offset_us
                )
            except asyncio.CancelledError:
                # Caller went away; let the worker stop at the next packet
                cancelled.set()
                raise

    def extract_jpeg(self, video_path: str, offset_us: int,
                     cancelled: Optional[threading.Event] = None) -> bytes:
        """Synchronous decode. The container is closed on every exit path."""
        try:
            with av.open(video_path) as container:
                frame = self._grab_frame(container, offset_us, cancelled)
                image = frame.to_image()
            return self._encode(image)
        except DecodeCancelled:
            raise ExtractionError("Decoding was cancelled", video_path, offset_us)
        except (FFmpegError, OSError, ValueError) as e:
            logger.error(f"[DECODE] {video_path} @ {offset_us}us failed: {e}")
            raise ExtractionError(f"Could not decode frame: {e}", video_path, offset_us) from e

    def _grab_frame(self, container, offset_us: int, cancelled: Optional[threading.Event]):
        """
        Seek to the keyframe at or before the offset, then decode forward to the
        first frame at or after it. An offset past the last frame yields the last one.
        """
        if not container.streams.video:
            raise ValueError("container has no video stream")
        stream = container.streams.video[0]
        stream.thread_type = "AUTO"

        time_base = stream.time_base or Fraction(1, 1_000_000)
        first_pts = stream.start_time or 0
        target_pts = first_pts + int(Fraction(offset_us, 1_000_000) / time_base)
        logger.debug(f"[DECODE] Seeking to pts {target_pts} (time_base={time_base})")

        container.seek(target_pts, stream=stream, backward=True, any_frame=False)

        last = None
        for frame in container.decode(stream):
            if cancelled is not None and cancelled.is_set():
                raise DecodeCancelled()
            last = frame
            if frame.pts is None or frame.pts >= target_pts:
                return frame

        if last is None:
            raise ValueError("no frame could be decoded after seeking")
        return last

    def _encode(self, image) -> bytes:
        buffer = io.BytesIO()
        image.convert("RGB").save(buffer, format="JPEG", quality=self.jpeg_quality)
        return buffer.getvalue()

    def shutdown(self):
        self._executor.shutdown(wait=False, cancel_futures=True)


class FrameExtractor:
    def __init__(self, event_index: EventIndex, locator: StorageLocator, decoder: FrameDecoder,
                 event_timezone: str = "UTC"):
        self.event_index = event_index
        self.locator = locator
        self.decoder = decoder
        self.event_timezone = event_timezone

    def locate(self, monitor_id: int, timestamp: datetime) -> tuple[Event, str, int]:
        """Find (event, video path, offset in µs) for a frame request without decoding."""
        instant = to_event_time(timestamp, self.event_timezone)
        logger.debug(f"Fetching frame at {instant} for monitor {monitor_id}")

        event = self.event_index.get_covering(monitor_id, instant)
        if event is None:
            logger.info(f"[FRAME] No event covers monitor {monitor_id} at {instant}")
            raise NotFoundError("No event covering the requested time period exists", instant)

        video_path = self.locator.video_path(event)
        if not os.path.isfile(video_path):
            logger.warning(f"[FRAME] Event {event.id} exists but its video is missing: {video_path}")
            raise NotFoundError("Video file for event is missing", event.id, "Video")

        offset_us = microseconds_between(event.start, instant)
        if offset_us < 0:
            raise UnexpectedStateError(
                f"Covering event {event.id} starts after the requested instant", "start"
            )
        logger.debug(f"Using video at {video_path}, offset {offset_us}us")
        return event, video_path, offset_us

    async def resolve_frame(self, monitor_id: int, timestamp: datetime) -> bytes:
        _, video_path, offset_us = self.locate(monitor_id, timestamp)
        return await self.decoder.decode(video_path, offset_us)
