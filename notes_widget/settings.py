from __future__ import annotations
from pathlib import Path

APP_NAME = "notes-widget"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

# Keys in the key-value store
NOTES_KEY = "notes-app-data"
THEME_KEY = "notes-app-theme"

PLACEHOLDER_TITLE = "Untitled Note"

AUTOSAVE_DEBOUNCE_MS = 1000
# How long "Last saved: ..." stays visible before the status goes neutral
SAVED_STATUS_MS = 2000
