"""Deadline-driven urgency: days remaining and the priority tier."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..utils import DateLike, _parse_date, _today
from .model import Priority

HIGH_BELOW_DAYS = 3
MEDIUM_UP_TO_DAYS = 7


def days_remaining(deadline: Optional[DateLike], today: Optional[date] = None) -> Optional[int]:
    """Whole calendar days from *today* until *deadline*.

    Both ends are reduced to calendar dates before subtracting, so the result
    is already the ceiling of the midnight-to-midnight difference. Returns
    ``None`` when there is no deadline; negative values mean overdue.
    """
    due = _parse_date(deadline)
    if due is None:
        return None
    start = _parse_date(today) if today is not None else _today()
    return (due - start).days


def priority_for(remaining: Optional[int]) -> Priority:
    if remaining is None:
        return Priority.LOW
    if remaining < HIGH_BELOW_DAYS:
        return Priority.HIGH
    if remaining <= MEDIUM_UP_TO_DAYS:
        return Priority.MEDIUM
    return Priority.LOW


def urgency(deadline: Optional[DateLike], today: Optional[date] = None) -> tuple[Optional[int], Priority]:
    """Return ``(days_remaining, priority)`` computed together from one deadline."""
    remaining = days_remaining(deadline, today)
    return remaining, priority_for(remaining)
