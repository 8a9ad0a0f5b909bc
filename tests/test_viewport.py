import pytest

from PySide6.QtGui import QColor, QImage

from iCanvas.core import viewport
from iCanvas.domain.bitmap import SourceBitmap
from iCanvas.domain.transform import Rotate, TransformState, reduce
from iCanvas.errors import InvalidGeometryError


def test_fit_scale_shrinks_large_bitmap() -> None:
    assert viewport.fit_scale(400, 300, 800, 600) == 0.5


def test_fit_scale_never_enlarges() -> None:
    assert viewport.fit_scale(1000, 1000, 200, 100) == 1.0


def test_fit_scale_uses_tighter_axis() -> None:
    assert viewport.fit_scale(400, 50, 800, 200) == 0.25
    assert viewport.fit_scale(100, 400, 400, 200) == 0.25


@pytest.mark.parametrize("dims", [(0, 300, 800, 600), (400, 0, 800, 600), (400, 300, 0, 600), (400, 300, 800, -1)])
def test_fit_scale_rejects_empty_dimensions(dims) -> None:
    with pytest.raises(InvalidGeometryError):
        viewport.fit_scale(*dims)


def test_surface_size_follows_scale() -> None:
    assert viewport.surface_size(800, 600, 0, 0.5) == (400, 300)


def test_surface_size_swaps_for_quarter_turns() -> None:
    assert viewport.surface_size(800, 600, 90, 0.5) == (300, 400)
    assert viewport.surface_size(800, 600, 180, 0.5) == (400, 300)
    assert viewport.surface_size(800, 600, 270, 0.5) == (300, 400)


def test_surface_size_rounds_half_up() -> None:
    # 1.5 and 2.5 both round away from zero
    assert viewport.surface_size(3, 5, 0, 0.5) == (2, 3)


def test_surface_size_is_at_least_one_pixel() -> None:
    assert viewport.surface_size(10, 10, 0, 0.01) == (1, 1)


def test_surface_size_rejects_zero_scale() -> None:
    with pytest.raises(InvalidGeometryError):
        viewport.surface_size(10, 10, 0, 0.0)


def test_four_rotations_restore_extent() -> None:
    image = QImage(800, 600, QImage.Format.Format_ARGB32)
    image.fill(QColor("#336699"))
    bitmap = SourceBitmap.from_qimage(image)
    state = TransformState(scale=0.5)
    extents = []
    for _ in range(4):
        state = reduce(state, Rotate())
        extents.append(viewport.extent_for(bitmap, state))
    assert extents == [(300, 400), (400, 300), (300, 400), (400, 300)]
