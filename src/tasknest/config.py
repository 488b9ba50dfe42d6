"""Load optional board configuration from `.tasknest/config.yaml`."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .constants import (
    CONFIG_FILE,
    DEFAULT_DASHBOARD_WINDOW_DAYS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_THEME,
    THEMES,
)
from .io_utils import _load_yaml_with_error

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def load_board_config(state_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        state_dir: The `.tasknest/` directory holding the board files.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = state_dir / CONFIG_FILE
    if not path.exists():
        return {}, None
    data, err = _load_yaml_with_error(path, {})
    if err:
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def get_log_level(config: dict[str, Any]) -> str:
    """Return the configured loguru level, or the default when unset or invalid."""
    raw = _get_nested(config, "logging", "level")
    if isinstance(raw, str) and raw.upper() in VALID_LOG_LEVELS:
        return raw.upper()
    return DEFAULT_LOG_LEVEL


def get_dashboard_window(config: dict[str, Any]) -> int:
    """Return how many days ahead the dashboard looks for due tasks."""
    raw = _get_nested(config, "dashboard", "window_days")
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        return DEFAULT_DASHBOARD_WINDOW_DAYS
    return raw


def get_default_theme(config: dict[str, Any]) -> str:
    raw = _get_nested(config, "theme", "default")
    if isinstance(raw, str) and raw in THEMES:
        return raw
    return DEFAULT_THEME
