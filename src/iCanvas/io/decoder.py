"""Decode uploaded bytes into a :class:`SourceBitmap`."""

from __future__ import annotations

import logging
import mimetypes
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError
from PIL.ImageQt import ImageQt
from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage, QImageReader

from ..domain.bitmap import SourceBitmap
from ..errors import DecodeError

_LOGGER = logging.getLogger(__name__)


def looks_like_image(name: str, mime_type: str | None = None) -> bool:
    """Return True when an upload advertises an ``image/*`` type.

    An explicit *mime_type* wins; otherwise the type is guessed from the file
    name.
    """

    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(name)
    return bool(mime_type) and mime_type.strip().lower().startswith("image/")


def _decode_with_qt(data: bytes) -> QImage | None:
    payload = QByteArray(data)
    buffer = QBuffer(payload)
    buffer.open(QIODevice.OpenModeFlag.ReadOnly)
    try:
        reader = QImageReader(buffer)
        # Apply EXIF orientation so rotated camera JPEGs load upright
        reader.setAutoTransform(True)
        image = reader.read()
    finally:
        buffer.close()
    if image.isNull():
        _LOGGER.debug("Qt could not decode %d bytes: %s", len(data), reader.errorString())
        return None
    return image


def _decode_with_pillow(data: bytes) -> QImage | None:
    try:
        with Image.open(BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            qt_image = ImageQt(img.convert("RGBA"))
    except Image.DecompressionBombError as exc:
        raise DecodeError(f"image is too large to decode: {exc}") from exc
    except (UnidentifiedImageError, OSError, ValueError):
        _LOGGER.debug("Pillow could not decode %d bytes", len(data))
        return None
    # ``ImageQt`` only keeps its pixel buffer alive while it exists
    return QImage(qt_image).copy()


def decode(data: bytes) -> SourceBitmap:
    """Return the bitmap encoded in *data*.

    Qt's image reader is tried first, honouring EXIF orientation; Pillow
    handles formats Qt was built without.  Raises :class:`DecodeError` when
    neither can read the bytes or the image is too large to decode.
    """

    if not data:
        raise DecodeError("no image data")
    image = _decode_with_qt(data)
    if image is None:
        image = _decode_with_pillow(data)
    if image is None or image.isNull() or image.width() <= 0 or image.height() <= 0:
        raise DecodeError("data is not a supported image")
    return SourceBitmap.from_qimage(image)
