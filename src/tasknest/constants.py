"""Shared constants for the TaskNest board engine."""

from __future__ import annotations

STATE_DIR_NAME = ".tasknest"
CONFIG_FILE = "config.yaml"

STORE_FILENAME = "board.yaml"
LOCK_FILENAME = "board.lock"
STORE_VERSION = 1

PREFERENCES_FILENAME = "preferences.yaml"
PREFERENCES_LOCK_FILENAME = "preferences.lock"

EVENTS_RELPATH = "artifacts/board_events.jsonl"

WINDOWS_LOCK_BYTES = 1

# Selection sentinel for the cross-folder urgency view.
DASHBOARD_VIEW = "dashboard"
DEFAULT_DASHBOARD_WINDOW_DAYS = 2

THEMES = ("light", "dark")
DEFAULT_THEME = "light"

DEFAULT_LOG_LEVEL = "INFO"
