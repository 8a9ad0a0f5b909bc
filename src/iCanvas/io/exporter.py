"""Encode bitmaps for download or save them to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, Qt
from PySide6.QtGui import QImage, QPainter

from ..config import DEFAULT_JPEG_QUALITY, EXPORT_FORMATS
from ..domain.bitmap import SourceBitmap
from ..errors import ExportError

_LOGGER = logging.getLogger(__name__)

_QT_FORMATS = {"png": "PNG", "jpeg": "JPEG"}
_SUFFIXES = {"png": ".png", "jpeg": ".jpg"}


def normalise_format(fmt: str) -> str:
    value = fmt.strip().lower()
    if value == "jpg":
        value = "jpeg"
    if value not in EXPORT_FORMATS:
        raise ExportError(f"unsupported export format: {fmt!r}")
    return value


def _flatten(image: QImage) -> QImage:
    """Composite *image* onto white; JPEG has no alpha channel."""
    flat = QImage(image.size(), QImage.Format.Format_RGB32)
    flat.fill(Qt.GlobalColor.white)
    painter = QPainter(flat)
    try:
        painter.drawImage(0, 0, image)
    finally:
        painter.end()
    return flat


def encode(bitmap: SourceBitmap, fmt: str = "png", quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Return *bitmap* encoded as PNG or JPEG bytes."""

    fmt = normalise_format(fmt)
    image = bitmap.image
    if fmt == "jpeg":
        image = _flatten(image)
        quality = max(1, min(100, int(quality)))
    else:
        quality = -1

    payload = QByteArray()
    buffer = QBuffer(payload)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    try:
        ok = image.save(buffer, _QT_FORMATS[fmt], quality)
    finally:
        buffer.close()
    if not ok:
        raise ExportError(f"failed to encode {bitmap.width}x{bitmap.height} bitmap as {fmt}")
    return bytes(payload.data())


def get_unique_destination(destination: Path) -> Path:
    """Return *destination* or a variant with a counter if it exists."""
    if not destination.exists():
        return destination

    parent = destination.parent
    stem = destination.stem
    suffix = destination.suffix
    counter = 1
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def save(
    bitmap: SourceBitmap,
    destination: Path,
    fmt: str | None = None,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    """Write *bitmap* next to *destination* without overwriting anything.

    The format defaults to the one implied by the file suffix.  Returns the
    path actually written.
    """

    destination = Path(destination)
    if fmt is None:
        fmt = destination.suffix.lstrip(".") or "png"
    fmt = normalise_format(fmt)
    suffix = destination.suffix.lower()
    if suffix != _SUFFIXES[fmt] and not (fmt == "jpeg" and suffix == ".jpeg"):
        destination = destination.with_suffix(_SUFFIXES[fmt])

    data = encode(bitmap, fmt, quality)
    final_dest = get_unique_destination(destination)
    try:
        final_dest.parent.mkdir(parents=True, exist_ok=True)
        final_dest.write_bytes(data)
    except OSError as exc:
        raise ExportError(f"could not write {final_dest}: {exc}") from exc
    _LOGGER.info("Exported %dx%d bitmap to %s", bitmap.width, bitmap.height, final_dest)
    return final_dest
