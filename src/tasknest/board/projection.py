"""Read-only views over task records: one folder's board and the dashboard.

Both views compute ``days_remaining`` and ``priority`` at read time from the
stored deadline and the supplied ``today``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from ..constants import DEFAULT_DASHBOARD_WINDOW_DAYS
from .model import STATUSES, Folder, Priority, Task, TaskStatus
from .priority import urgency

UNKNOWN_FOLDER = "Unknown Folder"


@dataclass(frozen=True)
class TaskCard:
    """A task as displayed, with its urgency derived for a given day."""

    task: Task
    days_remaining: Optional[int]
    priority: Priority

    @classmethod
    def for_task(cls, task: Task, today: Optional[date] = None) -> "TaskCard":
        remaining, priority = urgency(task.deadline, today)
        return cls(task=task, days_remaining=remaining, priority=priority)

    def to_dict(self) -> dict[str, Any]:
        data = self.task.to_dict()
        data["days_remaining"] = self.days_remaining
        data["priority"] = self.priority.value
        return data


@dataclass
class Board:
    folder_id: str
    columns: dict[TaskStatus, list[TaskCard]] = field(
        default_factory=lambda: {status: [] for status in STATUSES}
    )

    def column(self, status: TaskStatus | str) -> list[TaskCard]:
        return self.columns[TaskStatus(status)]

    def ids(self, status: TaskStatus | str) -> list[str]:
        return [card.task.id for card in self.column(status)]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {status.value: [card.to_dict() for card in cards] for status, cards in self.columns.items()}


def project_board(tasks: Iterable[Task], folder_id: str, today: Optional[date] = None) -> Board:
    """Partition one folder's tasks into the three status columns, sorted by order."""
    board = Board(folder_id=folder_id)
    for task in tasks:
        if task.folder_id != folder_id:
            continue
        board.columns[task.status].append(TaskCard.for_task(task, today))
    for cards in board.columns.values():
        cards.sort(key=lambda card: card.task.order)
    return board


def due_label(days: int) -> str:
    if days < 0:
        return f"Overdue by {abs(days)} days"
    if days == 0:
        return "Due Today"
    if days == 1:
        return "Due Tomorrow"
    return f"{days} days left"


@dataclass(frozen=True)
class DashboardEntry:
    card: TaskCard
    folder_name: str

    @property
    def label(self) -> str:
        return due_label(self.card.days_remaining or 0)


def dashboard(
    tasks: Iterable[Task],
    folders: Iterable[Folder],
    today: Optional[date] = None,
    window_days: int = DEFAULT_DASHBOARD_WINDOW_DAYS,
) -> list[DashboardEntry]:
    """Unfinished tasks that are overdue or due within *window_days*, most urgent first."""
    names = {folder.id: folder.name for folder in folders}
    entries: list[DashboardEntry] = []
    for task in tasks:
        if task.status == TaskStatus.DONE or not task.deadline:
            continue
        card = TaskCard.for_task(task, today)
        if card.days_remaining is None or card.days_remaining > window_days:
            continue
        entries.append(DashboardEntry(card=card, folder_name=names.get(task.folder_id, UNKNOWN_FOLDER)))
    entries.sort(key=lambda entry: entry.card.days_remaining)
    return entries
