"""Events published by :class:`iCanvas.session.ViewerSession`."""

from __future__ import annotations

from dataclasses import dataclass

from .bus import Event


@dataclass(kw_only=True)
class ImageLoadedEvent(Event):
    """A decoded bitmap became the session's working image."""

    generation: int
    width: int
    height: int


@dataclass(kw_only=True)
class CropCommittedEvent(Event):
    """A destructive crop replaced the working bitmap."""

    region: tuple[int, int, int, int]
    width: int
    height: int
