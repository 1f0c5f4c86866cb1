from __future__ import annotations
from pathlib import Path

APP_NAME = "nexia"
APP_DIR = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_DIR / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
RECOVERY_DIR = APP_DIR / "recovery"

DEFAULT_NOTEBOOK_NAME = "Untitled"
NEW_NOTE_TITLE = "New Note"

ZOOM_MIN = 0.1
ZOOM_MAX = 5.0
