"""Configure loguru and summarize board operations for log lines."""

from __future__ import annotations

import sys
from typing import Any, Iterable

from loguru import logger

from .constants import DEFAULT_LOG_LEVEL


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )


def summarize_assignments(assignments: Iterable[Any], sample: int = 3) -> dict[str, Any]:
    """Render a compact, JSON-friendly summary of a move plan.

    Args:
        assignments: ``OrderAssignment`` objects (anything with ``entity_id``,
            ``order`` and ``group`` attributes).
        sample: Maximum number of assignments echoed verbatim.

    Returns:
        A dictionary with the write count, touched groups, and a sample.
    """
    items = list(assignments)
    groups: list[str] = []
    for item in items:
        group = getattr(item, "group", None)
        label = "-" if group is None else str(getattr(group, "value", group))
        if label not in groups:
            groups.append(label)
    return {
        "writes": len(items),
        "groups": groups,
        "sample": [
            f"{getattr(item, 'entity_id', '?')}@{getattr(item, 'order', '?')}"
            for item in items[:sample]
        ],
    }

