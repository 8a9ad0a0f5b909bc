from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtTest", reason="Qt test helpers not available", exc_type=ImportError)

from PySide6.QtTest import QSignalSpy

from iCanvas.errors import SettingsLoadError, SettingsValidationError
from iCanvas.settings import DEFAULT_SETTINGS, SettingsManager, merge_with_defaults


def test_settings_manager_creates_defaults(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    manager = SettingsManager(path=settings_path)
    manager.load()
    assert settings_path.exists()
    assert manager.container_size() == (600, 400)
    assert manager.zoom_step() == pytest.approx(1.1)
    assert manager.export_format() == "png"
    assert manager.get("viewer.missing", "fallback") == "fallback"


def test_settings_manager_roundtrip(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    manager = SettingsManager(path=settings_path)
    manager.load()
    spy = QSignalSpy(manager.settingsChanged)

    manager.set("export.jpeg_quality", 80)

    assert spy.count() == 1
    assert manager.jpeg_quality() == 80
    stored = json.loads(settings_path.read_text(encoding="utf-8"))
    assert stored["export"]["jpeg_quality"] == 80
    assert stored["export"]["format"] == "png"

    reloaded = SettingsManager(path=settings_path)
    reloaded.load()
    assert reloaded.jpeg_quality() == 80


def test_invalid_value_is_rejected(tmp_path: Path, qapp) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    with pytest.raises(SettingsValidationError):
        manager.set("viewer.container_width", 0)
    with pytest.raises(SettingsValidationError):
        manager.set("export.format", "gif")
    assert manager.container_size() == (600, 400)
    assert manager.export_format() == "png"


def test_partial_file_is_merged_with_defaults(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"viewer": {"container_width": 1024}}), encoding="utf-8")
    manager = SettingsManager(path=settings_path)
    manager.load()
    assert manager.container_size() == (1024, 400)


def test_corrupt_file_raises_load_error(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path=settings_path).load()


def test_non_object_file_raises_load_error(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path=settings_path).load()


def test_invalid_file_raises_validation_error(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"viewer": {"zoom_step": 0.5}}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path=settings_path).load()


def test_merge_does_not_mutate_defaults() -> None:
    merged = merge_with_defaults({"export": {"format": "jpeg"}})
    assert merged["export"]["format"] == "jpeg"
    assert DEFAULT_SETTINGS["export"]["format"] == "png"
