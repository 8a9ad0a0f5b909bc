"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table
from PySide6.QtGui import QGuiApplication

from .config import DEFAULT_CONTAINER_SIZE
from .core import viewport
from .errors import ICanvasError
from .io import decoder, exporter
from .session import ViewerSession
from .settings import SettingsManager
from .utils.console_logger import ensure_console_logger

app = typer.Typer(help="Rotate, flip, zoom, color-adjust and crop raster images")

_PACKAGE_LOGGER = logging.getLogger("iCanvas")
_QT_APP: QGuiApplication | None = None


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ICanvasError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _ensure_qt_app() -> None:
    """Painting needs a ``QGuiApplication``; create a headless one if missing."""

    global _QT_APP
    if QGuiApplication.instance() is None:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        _QT_APP = QGuiApplication([])


def _parse_size(value: Optional[str]) -> Optional[tuple[int, int]]:
    if value is None:
        return None
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise typer.BadParameter("expected WIDTHxHEIGHT, e.g. 600x400") from None
    if width <= 0 or height <= 0:
        raise typer.BadParameter("width and height must be positive")
    return (width, height)


def _parse_crop(value: Optional[str]) -> Optional[tuple[float, float, float, float]]:
    if value is None:
        return None
    parts = value.split(",")
    if len(parts) != 4:
        raise typer.BadParameter("expected X,Y,WIDTH,HEIGHT")
    try:
        x, y, width, height = (float(part) for part in parts)
    except ValueError:
        raise typer.BadParameter("crop values must be numbers") from None
    return (x, y, width, height)


def _load_settings(path: Optional[Path]) -> SettingsManager | None:
    if path is None:
        return None
    manager = SettingsManager(path)
    manager.load()
    return manager


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")) -> None:
    ensure_console_logger(
        _PACKAGE_LOGGER,
        "icanvas-cli",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@app.command()
@_handle_errors
def info(
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    container: Optional[str] = typer.Option(None, help="Container size as WIDTHxHEIGHT"),
    settings: Optional[Path] = typer.Option(None, help="Settings JSON file"),
) -> None:
    """Show the image size and how it fits into the viewer."""

    _ensure_qt_app()
    manager = _load_settings(settings)
    container_size = _parse_size(container) or (
        manager.container_size() if manager else DEFAULT_CONTAINER_SIZE
    )
    bitmap = decoder.decode(image.read_bytes())
    scale = viewport.fit_scale(*container_size, bitmap.width, bitmap.height)

    table = Table(title=image.name, show_header=False)
    table.add_row("Image", f"{bitmap.width} x {bitmap.height}")
    table.add_row("Container", f"{container_size[0]} x {container_size[1]}")
    table.add_row("Fit scale", f"{scale:.4f}")
    for rotation in (0, 90):
        width, height = viewport.surface_size(bitmap.width, bitmap.height, rotation, scale)
        table.add_row(f"Surface @ {rotation}°", f"{width} x {height}")
    print(table)


@app.command()
@_handle_errors
def render(
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    output: Path = typer.Argument(...),
    container: Optional[str] = typer.Option(None, help="Container size as WIDTHxHEIGHT"),
    rotate: int = typer.Option(0, min=0, help="Quarter turns clockwise"),
    flip_h: bool = typer.Option(False, "--flip-h", help="Mirror horizontally"),
    flip_v: bool = typer.Option(False, "--flip-v", help="Mirror vertically"),
    zoom: Optional[float] = typer.Option(None, help="Scale relative to the fitted view"),
    brightness: Optional[float] = typer.Option(None, help="Percent, 0-200"),
    saturation: Optional[float] = typer.Option(None, help="Percent, 0-200"),
    contrast: Optional[float] = typer.Option(None, help="Percent, 0-200"),
    hue: Optional[float] = typer.Option(None, help="Degrees, -180-180"),
    crop: Optional[str] = typer.Option(None, help="X,Y,WIDTH,HEIGHT in view pixels"),
    fmt: Optional[str] = typer.Option(None, "--format", help="png or jpeg"),
    quality: Optional[int] = typer.Option(None, min=1, max=100, help="JPEG quality"),
    settings: Optional[Path] = typer.Option(None, help="Settings JSON file"),
) -> None:
    """Apply a transform pipeline to IMAGE and write the result to OUTPUT."""

    _ensure_qt_app()
    manager = _load_settings(settings)
    kwargs = {}
    container_size = _parse_size(container) or (manager.container_size() if manager else None)
    if container_size is not None:
        kwargs["container_size"] = container_size
    if manager is not None:
        kwargs["zoom_step"] = manager.zoom_step()
    session = ViewerSession(**kwargs)
    session.load_bitmap(decoder.decode(image.read_bytes()))

    for _ in range(rotate % 4):
        session.rotate()
    if flip_h:
        session.flip_horizontal()
    if flip_v:
        session.flip_vertical()
    if zoom is not None:
        session.set_scale(session.transform.scale * zoom)
    for name, value in (
        ("brightness", brightness),
        ("saturation", saturation),
        ("contrast", contrast),
        ("hue", hue),
    ):
        if value is not None:
            session.set_color(name, value)

    region = _parse_crop(crop)
    if region is not None:
        x, y, width, height = region
        session.pointer_press(x, y)
        session.pointer_move(x + width, y + height)
        session.pointer_release()
        if not session.commit_crop():
            print("[yellow]Crop selection is empty or outside the view; skipped")

    export_format = fmt or (manager.export_format() if manager else None)
    jpeg_quality = quality or (manager.jpeg_quality() if manager else None)
    save_kwargs = {}
    if jpeg_quality is not None:
        save_kwargs["quality"] = jpeg_quality
    written = exporter.save(session.render_output(), output, export_format, **save_kwargs)
    width, height = session.extent
    print(f"[green]Wrote {width} x {height} image to {written}")


if __name__ == "__main__":  # pragma: no cover
    app()
