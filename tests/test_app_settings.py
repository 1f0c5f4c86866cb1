import sys
import os
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QSettings

from conftest import T0
from nexia.app_settings import (
    SettingsKeys,
    get_bool,
    initial_state,
    last_notebook_path,
    remember_notebook_path,
    remember_ui_flags,
)
from nexia.core import messages as m
from nexia.core.messages import ViewMode
from nexia.core.reducer import apply


def _settings(tmp_path) -> QSettings:
    return QSettings(str(tmp_path / "nexia.ini"), QSettings.IniFormat)


def test_defaults_when_empty(qapp, tmp_path):
    s = initial_state(_settings(tmp_path), T0)
    assert s.view_mode is ViewMode.LIST
    assert s.sidebar_open is True
    assert s.notebook.name == "Untitled"
    assert len(s.notebook) == 0


def test_ui_flags_round_trip(qapp, tmp_path):
    settings = _settings(tmp_path)
    state = apply(apply(initial_state(settings, T0), m.SetViewMode(ViewMode.GRAPH)), m.ToggleSidebar())
    remember_ui_flags(settings, state)
    settings.sync()

    restored = initial_state(_settings(tmp_path), T0)
    assert restored.view_mode is ViewMode.GRAPH
    assert restored.sidebar_open is False


def test_garbage_values_fall_back(qapp, tmp_path):
    settings = _settings(tmp_path)
    settings.setValue(SettingsKeys.VIEW_MODE, "hologram")
    settings.setValue(SettingsKeys.SIDEBAR_OPEN, "maybe")
    s = initial_state(settings, T0)
    assert s.view_mode is ViewMode.LIST
    assert get_bool(settings, SettingsKeys.SIDEBAR_OPEN, True) is True


def test_notebook_path(qapp, tmp_path):
    settings = _settings(tmp_path)
    assert last_notebook_path(settings) is None
    remember_notebook_path(settings, Path("/tmp/notes.json"))
    assert last_notebook_path(settings) == Path("/tmp/notes.json")
    remember_notebook_path(settings, None)
    assert last_notebook_path(settings) is None
