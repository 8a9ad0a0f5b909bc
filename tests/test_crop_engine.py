import pytest

from PySide6.QtGui import QColor, QImage

from iCanvas.core.crop import CropEngine, CropState
from iCanvas.domain.bitmap import SourceBitmap
from iCanvas.domain.selection import NormalisedRect
from iCanvas.domain.transform import TransformState

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def _two_tone(width: int = 40, height: int = 20) -> SourceBitmap:
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(QColor(*RED))
    blue = QColor(*BLUE)
    for x in range(width // 2, width):
        for y in range(height):
            image.setPixelColor(x, y, blue)
    return SourceBitmap.from_qimage(image)


def _rgb(image: QImage, x: int, y: int) -> tuple[int, int, int]:
    color = image.pixelColor(x, y)
    return (color.red(), color.green(), color.blue())


def _select(engine: CropEngine, start, end, surface=(40, 20)) -> None:
    assert engine.begin(*start, surface)
    engine.update(*end)
    engine.end()


def test_selection_lifecycle() -> None:
    engine = CropEngine()
    assert engine.state is CropState.IDLE
    assert engine.preview_rect() is None

    assert engine.begin(50, 50, (100, 100))
    assert engine.is_selecting()
    assert engine.preview_rect() is None

    engine.update(30, 80)
    assert engine.preview_rect() == NormalisedRect(30, 50, 20, 30)

    engine.end()
    assert engine.state is CropState.IDLE
    assert engine.preview_rect() == NormalisedRect(30, 50, 20, 30)

    # Moves after release do not resize the rectangle
    assert not engine.update(90, 90)
    assert engine.preview_rect() == NormalisedRect(30, 50, 20, 30)

    engine.cancel()
    assert engine.selection is None


def test_press_outside_surface_is_ignored() -> None:
    engine = CropEngine()
    assert not engine.begin(-1, 5, (40, 20))
    assert not engine.begin(10, 21, (40, 20))
    assert engine.state is CropState.IDLE
    assert engine.selection is None


def test_new_press_replaces_selection() -> None:
    engine = CropEngine()
    _select(engine, (0, 0), (10, 10))
    engine.begin(20, 5, (40, 20))
    assert engine.is_selecting()
    assert engine.preview_rect() is None
    engine.update(30, 15)
    assert engine.preview_rect() == NormalisedRect(20, 5, 10, 10)


def test_commit_without_selection_is_noop(qapp) -> None:
    assert CropEngine().commit(_two_tone(), TransformState(), (600, 400)) is None


@pytest.mark.parametrize("end", [(10, 30), (10.3, 15), (10, 10)])
def test_degenerate_commit_is_noop(qapp, end) -> None:
    engine = CropEngine()
    _select(engine, (10, 10), end)
    selection = engine.selection
    assert engine.commit(_two_tone(), TransformState(), (600, 400)) is None
    assert engine.selection is selection
    assert engine.state is CropState.IDLE


def test_full_view_crop_reproduces_bitmap(qapp) -> None:
    bitmap = _two_tone()
    engine = CropEngine()
    _select(engine, (0, 0), (40, 20))

    outcome = engine.commit(bitmap, TransformState(), (600, 400))

    assert outcome is not None
    assert outcome.region == (0, 0, 40, 20)
    assert outcome.bitmap.image == bitmap.image
    assert engine.selection is None


def test_crop_cuts_what_is_seen_after_rotation(qapp) -> None:
    engine = CropEngine()
    # The rotated view is 20x40 with the red half on top
    _select(engine, (0, 0), (20, 20), surface=(20, 40))

    outcome = engine.commit(_two_tone(), TransformState(rotation=90), (100, 100))

    assert outcome is not None
    assert outcome.bitmap.size == (20, 20)
    assert _rgb(outcome.bitmap.image, 0, 0) == RED
    assert _rgb(outcome.bitmap.image, 19, 19) == RED
    assert outcome.transform.rotation == 0
    assert outcome.transform.scale == 1.0


def test_selection_is_clipped_to_surface(qapp) -> None:
    engine = CropEngine()
    _select(engine, (30, 10), (60, 30))
    outcome = engine.commit(_two_tone(), TransformState(), (600, 400))
    assert outcome is not None
    assert outcome.region == (30, 10, 10, 10)
    assert _rgb(outcome.bitmap.image, 5, 5) == BLUE


def test_commit_keeps_color_and_resets_geometry(qapp) -> None:
    engine = CropEngine()
    state = TransformState(flip_horizontal=-1, brightness=50, hue=45)
    _select(engine, (0, 0), (10, 10))

    outcome = engine.commit(_two_tone(), state, (600, 400))

    assert outcome is not None
    assert outcome.transform.brightness == 50
    assert outcome.transform.hue == 45
    assert outcome.transform.flip_horizontal == 1
    # Mirrored view: the left edge shows the blue half, at full intensity
    assert _rgb(outcome.bitmap.image, 2, 2) == BLUE


def test_commit_refits_into_container(qapp) -> None:
    engine = CropEngine()
    _select(engine, (0, 0), (20, 20))
    outcome = engine.commit(_two_tone(), TransformState(), (10, 10))
    assert outcome is not None
    assert outcome.transform.scale == 0.5


def test_preview_region_matches_commit(qapp) -> None:
    engine = CropEngine()
    _select(engine, (30.4, 10.6), (60, 30))

    region = engine.preview_region((40, 20))
    outcome = engine.commit(_two_tone(), TransformState(), (600, 400))

    assert region == (30, 11, 10, 9)
    assert outcome is not None
    assert outcome.region == region
    assert engine.preview_region((40, 20)) is None


def test_preview_region_is_none_for_degenerate_selection() -> None:
    engine = CropEngine()
    _select(engine, (10, 10), (10.3, 15))
    assert engine.preview_region((40, 20)) is None
