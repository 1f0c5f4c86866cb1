from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from PySide6.QtCore import QSettings

from nexia.core.messages import ViewMode
from nexia.core.state import AppState, initial_state as _initial_state
from nexia.settings import APP_NAME, DEFAULT_NOTEBOOK_NAME

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsKeys:
    VIEW_MODE: str = "ui/view_mode"
    SIDEBAR_OPEN: str = "ui/sidebar_open"
    LAST_PATH: str = "notebook/last_path"
    DEFAULT_NAME: str = "notebook/default_name"


def open_settings() -> QSettings:
    # QSettings picks the platform-specific location
    return QSettings(APP_NAME, APP_NAME)


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_bool(settings: QSettings, key: str, default: bool) -> bool:
    # INI backends hand booleans back as "true"/"false"
    try:
        val = settings.value(key, default)
    except Exception:
        return default
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        lowered = val.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    return default


def get_view_mode(settings: QSettings, key: str, default: ViewMode) -> ViewMode:
    raw = get_str(settings, key, default.value).strip().lower()
    try:
        return ViewMode(raw)
    except ValueError:
        return default


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort QSettings write; never raises."""
    try:
        settings.setValue(key, value)
    except Exception:
        log.exception("Failed to write setting %s", key)


def initial_state(settings: QSettings, now: datetime) -> AppState:
    """Empty notebook with the UI flags remembered from the last session."""
    return _initial_state(
        now,
        name=get_str(settings, SettingsKeys.DEFAULT_NAME, DEFAULT_NOTEBOOK_NAME),
        view_mode=get_view_mode(settings, SettingsKeys.VIEW_MODE, ViewMode.LIST),
        sidebar_open=get_bool(settings, SettingsKeys.SIDEBAR_OPEN, True),
    )


def remember_ui_flags(settings: QSettings, state: AppState) -> None:
    safe_set_setting(settings, SettingsKeys.VIEW_MODE, state.view_mode.value)
    safe_set_setting(settings, SettingsKeys.SIDEBAR_OPEN, bool(state.sidebar_open))


def remember_notebook_path(settings: QSettings, path: Path | None) -> None:
    safe_set_setting(settings, SettingsKeys.LAST_PATH, str(path) if path is not None else "")


def last_notebook_path(settings: QSettings) -> Path | None:
    raw = get_str(settings, SettingsKeys.LAST_PATH, "").strip()
    return Path(raw) if raw else None
