"""Task and folder records for the board.

Only source-of-truth fields are persisted. ``days_remaining`` and
``priority`` are derived from ``deadline`` every time a task is read (see
:mod:`tasknest.board.priority`), so a task's urgency advances with the
calendar without any edit.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from ..utils import _now_iso, _parse_date


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    """Board column a task lives in."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class Priority(str, Enum):
    """Urgency tier derived from the days left until the deadline."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


STATUSES: tuple[TaskStatus, ...] = (TaskStatus.TODO, TaskStatus.DOING, TaskStatus.DONE)

# Keys older records persisted alongside the deadline; derived now, ignored on load.
_DERIVED_KEYS = ("priority", "days_remaining", "daysRemaining")


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _generate_id(prefix: str) -> str:
    """Short opaque ID: ``<prefix>-<8hex>``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _task_id() -> str:
    return _generate_id("task")


def _folder_id() -> str:
    return _generate_id("folder")


def _coerce_deadline(raw: Any) -> Optional[str]:
    try:
        parsed = _parse_date(raw)
    except (TypeError, ValueError):
        return None
    return parsed.isoformat() if parsed else None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class Task:
    """A card on one folder's board.

    ``order`` is only meaningful within the ``(folder_id, status)``
    partition; orders of tasks in other columns or folders are unrelated.
    """

    id: str = field(default_factory=_task_id)
    title: str = ""
    folder_id: str = ""
    status: TaskStatus = TaskStatus.TODO
    deadline: Optional[str] = None  # ISO calendar date, no time component
    order: int = 0
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    @classmethod
    def validate_dict(cls, data: dict[str, Any]) -> list[str]:
        """Check a raw task record, returning a list of error strings (empty = valid)."""
        errors: list[str] = []
        if not isinstance(data, dict):
            return ["Expected a dict"]
        if not str(data.get("title") or "").strip():
            errors.append("'title' is required and must be non-empty")
        if not (data.get("folder_id") or data.get("folderId")):
            errors.append("'folder_id' is required")
        status = data.get("status")
        if status is not None:
            valid = {s.value for s in TaskStatus}
            if status not in valid:
                errors.append(f"'status' must be one of {sorted(valid)}, got '{status}'")
        deadline = data.get("deadline")
        if deadline is not None and _coerce_deadline(deadline) is None:
            errors.append(f"'deadline' must be an ISO date, got '{deadline}'")
        order = data.get("order")
        if order is not None and (isinstance(order, bool) or not isinstance(order, int) or order < 0):
            errors.append("'order' must be a non-negative integer")
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for YAML persistence."""
        data: dict[str, Any] = {}
        for k, v in asdict(self).items():
            data[k] = v.value if isinstance(v, Enum) else v
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize from a plain dict, coercing the status gracefully."""
        d = dict(data)
        for key in _DERIVED_KEYS:
            d.pop(key, None)
        raw_status = d.pop("status", None)
        try:
            status = TaskStatus(str(raw_status)) if raw_status is not None else TaskStatus.TODO
        except ValueError:
            status = TaskStatus.TODO
        return cls(
            id=str(d.pop("id", None) or _task_id()),
            title=str(d.pop("title", "")),
            folder_id=str(d.pop("folder_id", None) or d.pop("folderId", "") or ""),
            status=status,
            deadline=_coerce_deadline(d.pop("deadline", None)),
            order=int(d.pop("order", 0) or 0),
            created_at=str(d.pop("created_at", None) or _now_iso()),
            updated_at=str(d.pop("updated_at", None) or _now_iso()),
        )

    def touch(self) -> None:
        """Bump ``updated_at`` to now."""
        self.updated_at = _now_iso()


@dataclass
class Folder:
    """A named board shown in the sidebar, ordered globally."""

    id: str = field(default_factory=_folder_id)
    name: str = ""
    order: int = 0
    created_at: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Folder":
        return cls(
            id=str(data.get("id") or _folder_id()),
            name=str(data.get("name", "")),
            order=int(data.get("order", 0) or 0),
            created_at=str(data.get("created_at") or _now_iso()),
        )
