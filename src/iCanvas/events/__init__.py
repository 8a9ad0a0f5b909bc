"""Event bus and viewer events."""

from .bus import Event, EventBus, Subscription
from .viewer_events import CropCommittedEvent, ImageLoadedEvent

__all__ = [
    "CropCommittedEvent",
    "Event",
    "EventBus",
    "ImageLoadedEvent",
    "Subscription",
]
