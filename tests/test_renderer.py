import pytest

from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QImage, QTransform

from iCanvas.core import viewport
from iCanvas.core.renderer import Renderer, build_affine, build_view_transform
from iCanvas.core.surface import RenderSurface
from iCanvas.domain.bitmap import SourceBitmap
from iCanvas.domain.transform import FlipHorizontal, Rotate, TransformState, reduce

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def _two_tone(width: int = 40, height: int = 20) -> SourceBitmap:
    """Red on the left half, blue on the right half."""
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


def _render(bitmap: SourceBitmap, state: TransformState) -> QImage:
    surface = RenderSurface(*viewport.extent_for(bitmap, state))
    Renderer().render(surface, bitmap, state)
    return surface.snapshot()


def _mapped(transform: QTransform, x: float, y: float) -> tuple[float, float]:
    point = transform.map(QPointF(x, y))
    return (point.x(), point.y())


def test_identity_affine_maps_corners_onto_themselves() -> None:
    affine = build_affine((40, 20), (40, 20), TransformState())
    assert _mapped(affine, 0, 0) == pytest.approx((0, 0))
    assert _mapped(affine, 40, 20) == pytest.approx((40, 20))


def test_view_transform_centres_origin() -> None:
    transform = build_view_transform((30, 10), TransformState(scale=0.5))
    assert _mapped(transform, 0, 0) == pytest.approx((15, 5))
    assert _mapped(transform, 10, 0) == pytest.approx((20, 5))


def test_quarter_turn_moves_top_left_to_top_right() -> None:
    affine = build_affine((2, 4), (4, 2), TransformState(rotation=90))
    assert _mapped(affine, 0, 0) == pytest.approx((2, 0))


def test_scale_is_applied_before_rotation_in_matrix_order() -> None:
    state = TransformState(rotation=90, flip_horizontal=-1)
    affine = build_affine((2, 4), (4, 2), state)
    # Rotating and then mirroring horizontally transposes the image
    assert _mapped(affine, 0, 0) == pytest.approx((0, 0))

    swapped = QTransform()
    swapped.translate(1, 2)
    swapped.rotate(90)
    swapped.scale(-1, 1)
    swapped.translate(-2, -1)
    assert _mapped(swapped, 0, 0) == pytest.approx((2, 4))


def test_identity_render_reproduces_bitmap(qapp) -> None:
    bitmap = _two_tone()
    rendered = _render(bitmap, TransformState())
    assert rendered.convertToFormat(QImage.Format.Format_ARGB32) == bitmap.image


def test_quarter_turn_puts_left_half_on_top(qapp) -> None:
    rendered = _render(_two_tone(), TransformState(rotation=90))
    assert (rendered.width(), rendered.height()) == (20, 40)
    assert _rgb(rendered, 10, 5) == RED
    assert _rgb(rendered, 10, 35) == BLUE


def test_half_turn_swaps_halves(qapp) -> None:
    rendered = _render(_two_tone(), TransformState(rotation=180))
    assert _rgb(rendered, 5, 10) == BLUE
    assert _rgb(rendered, 35, 10) == RED


def test_horizontal_flip_mirrors(qapp) -> None:
    rendered = _render(_two_tone(), reduce(TransformState(), FlipHorizontal()))
    assert _rgb(rendered, 5, 10) == BLUE
    assert _rgb(rendered, 35, 10) == RED


@pytest.mark.parametrize("scale", [1.0, 0.5])
def test_flipping_twice_is_pixel_identical(qapp, scale) -> None:
    bitmap = _two_tone()
    state = TransformState(scale=scale, rotation=90)
    twice = reduce(reduce(state, FlipHorizontal()), FlipHorizontal())
    assert _render(bitmap, twice) == _render(bitmap, state)


def test_four_quarter_turns_are_pixel_identical(qapp) -> None:
    bitmap = _two_tone()
    state = TransformState()
    for _ in range(4):
        state = reduce(state, Rotate())
    assert _render(bitmap, state) == _render(bitmap, TransformState())


def test_scaled_render_fills_smaller_surface(qapp) -> None:
    rendered = _render(_two_tone(), TransformState(scale=0.5))
    assert (rendered.width(), rendered.height()) == (20, 10)
    assert _rgb(rendered, 2, 5) == RED
    assert _rgb(rendered, 17, 5) == BLUE


def test_color_filter_is_applied(qapp) -> None:
    rendered = _render(_two_tone(), TransformState(brightness=0))
    assert _rgb(rendered, 5, 5) == (0, 0, 0)
    assert rendered.pixelColor(5, 5).alpha() == 255


def test_geometry_render_ignores_color(qapp) -> None:
    bitmap = _two_tone()
    surface = RenderSurface(40, 20)
    Renderer().render_geometry(surface, bitmap, TransformState(brightness=0))
    assert _rgb(surface.snapshot(), 5, 5) == RED


def test_render_clears_previous_content(qapp) -> None:
    surface = RenderSurface(60, 20)
    renderer = Renderer()
    renderer.render(surface, _two_tone(60, 20), TransformState())
    renderer.render(surface, _two_tone(40, 20), TransformState())
    assert surface.snapshot().pixelColor(2, 10).alpha() == 0
    assert _rgb(surface.snapshot(), 15, 10) == RED
