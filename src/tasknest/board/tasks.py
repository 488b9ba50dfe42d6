"""Task CRUD and drag-and-drop moves on top of :class:`BoardStore`.

Every operation re-reads the board inside its own transaction, computes the
new state from that fresh snapshot, and commits all affected records in one
batch. Ids that vanished since the caller's last read are treated as a
silent no-op.
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from ..errors import BatchWriteError, BoardValidationError, StoreWriteError
from ..logging_utils import summarize_assignments
from .commands import TaskDraft, TaskEdit, parse_command
from .model import Task, TaskStatus
from .ordering import MoveIntent, OrderAssignment, compact, next_order, plan_move
from .store import BoardStore


def _status_of(task: Task) -> TaskStatus:
    return task.status


def _coerce_group(group: Any) -> TaskStatus:
    try:
        return TaskStatus(getattr(group, "value", group))
    except ValueError:
        valid = [s.value for s in TaskStatus]
        raise BoardValidationError([f"target_group: must be one of {valid}, got '{group}'"]) from None


class TaskService:
    """Owns task records: create, edit, move, delete."""

    def __init__(self, store: BoardStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, task_id: str) -> Optional[Task]:
        return self.store.get_task(task_id)

    def list_all(self) -> list[Task]:
        return self.store.read_snapshot().tasks

    def list_for_folder(self, folder_id: str) -> list[Task]:
        with self.store.transaction() as tx:
            return tx.tasks.sorted_by(tx.tasks.find(folder_id=folder_id), "order")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, folder_id: str, title: str, deadline: Any = None) -> Optional[Task]:
        """Append a new task to the end of the folder's todo column.

        Returns ``None`` when the folder no longer exists.
        """
        draft = parse_command(TaskDraft, title=title, deadline=deadline)
        try:
            with self.store.transaction() as tx:
                if tx.folders.get(folder_id) is None:
                    logger.debug("Skipping task create for missing folder {}", folder_id)
                    return None
                siblings = tx.tasks.find(folder_id=folder_id, status=TaskStatus.TODO)
                task = Task(
                    title=draft.title,
                    folder_id=folder_id,
                    status=TaskStatus.TODO,
                    deadline=draft.deadline.isoformat() if draft.deadline else None,
                    order=next_order(siblings, TaskStatus.TODO, _status_of),
                )
                tx.tasks.insert(task)
        except StoreWriteError as exc:
            raise BatchWriteError("create", folder_id, exc) from exc
        logger.info("Created task {} in folder {}: {}", task.id, folder_id, task.title)
        return task

    def update(self, task_id: str, changes: dict[str, Any]) -> Optional[Task]:
        """Apply a partial edit (``title`` and/or ``deadline``).

        Returns the updated task, or ``None`` when it no longer exists.
        """
        edit = parse_command(TaskEdit, **changes)
        fields = edit.changes()
        try:
            with self.store.transaction() as tx:
                if not fields:
                    return tx.tasks.get(task_id)
                task = tx.tasks.update(task_id, fields)
        except StoreWriteError as exc:
            raise BatchWriteError("update", task_id, exc) from exc
        if task is None:
            logger.debug("Skipping update of missing task {}", task_id)
            return None
        logger.info("Updated task {} ({})", task_id, ", ".join(sorted(fields)))
        return task

    def move(self, task_id: str, intent: MoveIntent) -> list[OrderAssignment]:
        """Apply a drop to the task's folder board and return the written plan.

        An empty list means nothing changed: a drop onto the current
        position, or a task/target deleted in the meantime.
        """
        if intent.entity_id != task_id:
            raise ValueError(f"Move intent is for {intent.entity_id}, not {task_id}")
        if intent.drops_on_group:
            intent = MoveIntent.onto_group(task_id, _coerce_group(intent.target_group))
        try:
            with self.store.transaction() as tx:
                task = tx.tasks.get(task_id)
                if task is None:
                    logger.debug("Dropping stale move of task {}", task_id)
                    return []
                board = tx.tasks.find(folder_id=task.folder_id)
                plan = plan_move(board, intent, _status_of)
                # Index order within each group keeps the write sequence deterministic.
                for assignment in plan:
                    tx.tasks.update(
                        assignment.entity_id,
                        {"order": assignment.order, "status": assignment.group},
                    )
        except StoreWriteError as exc:
            raise BatchWriteError("move", task_id, exc) from exc
        if plan:
            logger.info("Moved task {}: {}", task_id, summarize_assignments(plan))
        return plan

    def delete(self, task_id: str) -> bool:
        """Remove a task and close the gap it leaves in its column."""
        try:
            with self.store.transaction() as tx:
                task = tx.tasks.get(task_id)
                if task is None:
                    return False
                tx.tasks.delete(task_id)
                column = tx.tasks.find(folder_id=task.folder_id, status=task.status)
                for assignment in compact(column, _status_of):
                    tx.tasks.update(assignment.entity_id, {"order": assignment.order})
        except StoreWriteError as exc:
            raise BatchWriteError("delete", task_id, exc) from exc
        logger.info("Deleted task {} from folder {}", task_id, task.folder_id)
        return True
