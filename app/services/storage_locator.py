# app/services/storage_locator.py
"""
Storage Locator — turns an event into the paths of its video and thumbnail.

ZoneMinder deployments have used three ways of finding an event's root:
  fixed      one configured root for every event
  per_event  Storage.Path of the event's storage row, else the default root
  named      Storage.Name (or "default") looked up in MEDIA_ROOTS

Only the root differs between them. The directory layout below the root is a
separate, also pluggable, PathLayout. New schemes register in STRATEGIES /
LAYOUTS and nothing else in the service has to change.
"""

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Protocol
from app.errors import ConfigurationError
from app.models.event import Event
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_STORAGE_NAME = "default"


@dataclass(frozen=True)
class ResolvedLocation:
    video_path: str
    thumbnail_path: str


class RootStrategy(Protocol):
    """Resolves the storage root directory for an event."""

    def root_for(self, event: Event) -> str:
        ...


class PathLayout(Protocol):
    """Naming convention for files below a storage root."""

    def locate(self, root: str, event: Event) -> ResolvedLocation:
        ...


class FixedRootStrategy:
    def __init__(self, base_path: str):
        self.base_path = base_path

    def root_for(self, event: Event) -> str:
        return self.base_path


class PerEventRootStrategy:
    def __init__(self, default_path: str):
        self.default_path = default_path

    def root_for(self, event: Event) -> str:
        storage = event.storage
        if storage is not None and storage.path:
            return storage.path
        return self.default_path


class NamedRootStrategy:
    def __init__(self, media_roots: Mapping[str, str]):
        # Snapshot: later changes to the source dict are not seen mid-request
        self.media_roots = MappingProxyType(dict(media_roots))

    def root_for(self, event: Event) -> str:
        storage = event.storage
        name = storage.name if storage is not None and storage.name else DEFAULT_STORAGE_NAME
        root = self.media_roots.get(name)
        if root is None:
            logger.error(
                f"[STORAGE] Event {event.id} uses storage '{name}' but no media root is configured "
                f"for it (configured: {sorted(self.media_roots)})"
            )
            raise ConfigurationError(f"No media root configured for storage '{name}'", name)
        return root


class ZoneMinderLayout:
    """<root>/<monitor>/<YYYY-MM-DD>/<event>/<event>-video.mp4 with snapshot.jpg alongside."""

    video_suffix = "-video.mp4"
    thumbnail_name = "snapshot.jpg"

    def event_dir(self, root: str, event: Event) -> str:
        return os.path.join(root, str(event.monitor_id), event.start.date().isoformat(), str(event.id))

    def locate(self, root: str, event: Event) -> ResolvedLocation:
        event_dir = self.event_dir(root, event)
        return ResolvedLocation(
            video_path=os.path.join(event_dir, f"{event.id}{self.video_suffix}"),
            thumbnail_path=os.path.join(event_dir, self.thumbnail_name),
        )


STRATEGIES: dict[str, Callable[..., RootStrategy]] = {
    "fixed": lambda default_path, media_roots: FixedRootStrategy(default_path),
    "per_event": lambda default_path, media_roots: PerEventRootStrategy(default_path),
    "named": lambda default_path, media_roots: NamedRootStrategy(media_roots),
}

LAYOUTS: dict[str, Callable[[], PathLayout]] = {
    "zoneminder": ZoneMinderLayout,
}


class StorageLocator:
    def __init__(self, strategy: RootStrategy, layout: Optional[PathLayout] = None):
        self.strategy = strategy
        self.layout = layout or ZoneMinderLayout()

    def resolve(self, event: Event) -> ResolvedLocation:
        """Raises ConfigurationError when the event's storage cannot be mapped to a root."""
        root = self.strategy.root_for(event)
        return self.layout.locate(root, event)

    def video_path(self, event: Event) -> str:
        return self.resolve(event).video_path

    def thumbnail_path(self, event: Event) -> str:
        return self.resolve(event).thumbnail_path


def build_locator(strategy: str, default_path: str, media_roots: Mapping[str, str],
                  layout: str = "zoneminder") -> StorageLocator:
    """Build a locator from configuration values. Unknown names fail at startup."""
    if strategy not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown storage strategy '{strategy}' (expected one of {sorted(STRATEGIES)})"
        )
    if layout not in LAYOUTS:
        raise ConfigurationError(f"Unknown path layout '{layout}' (expected one of {sorted(LAYOUTS)})")

    logger.info(f"[STORAGE] Strategy={strategy} layout={layout}")
    return StorageLocator(STRATEGIES[strategy](default_path, media_roots), LAYOUTS[layout]())
