"""Provide utility helpers for timestamps and calendar dates."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _today() -> date:
    return datetime.now().date()


def _parse_date(value: Optional[DateLike]) -> Optional[date]:
    """Coerce *value* to a calendar date, dropping any time component.

    Accepts ``date``/``datetime`` objects and ISO strings (``YYYY-MM-DD`` or a
    full ISO timestamp). Empty values return ``None``; malformed strings raise
    :class:`ValueError`.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()
