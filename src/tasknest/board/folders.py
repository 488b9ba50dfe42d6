"""Folder CRUD, sidebar reordering, and the cascading folder delete."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from ..errors import BatchWriteError, CascadeDeleteError, StoreWriteError
from ..logging_utils import summarize_assignments
from .commands import FolderDraft, parse_command
from .model import Folder
from .ordering import MoveIntent, OrderAssignment, compact, plan_move
from .store import BoardStore


class FolderService:
    """Owns folder records and their single global ordering."""

    def __init__(self, store: BoardStore) -> None:
        self.store = store

    def get(self, folder_id: str) -> Optional[Folder]:
        return self.store.get_folder(folder_id)

    def list_folders(self) -> list[Folder]:
        with self.store.transaction() as tx:
            return tx.folders.sorted_by(tx.folders.list_all(), "order")

    def create(self, name: str) -> Folder:
        draft = parse_command(FolderDraft, name=name)
        try:
            with self.store.transaction() as tx:
                folder = Folder(name=draft.name, order=tx.folders.count())
                tx.folders.insert(folder)
        except StoreWriteError as exc:
            raise BatchWriteError("create", draft.name, exc) from exc
        logger.info("Created folder {}: {}", folder.id, folder.name)
        return folder

    def rename(self, folder_id: str, name: str) -> Optional[Folder]:
        draft = parse_command(FolderDraft, name=name)
        try:
            with self.store.transaction() as tx:
                folder = tx.folders.update(folder_id, {"name": draft.name})
        except StoreWriteError as exc:
            raise BatchWriteError("rename", folder_id, exc) from exc
        if folder is None:
            logger.debug("Skipping rename of missing folder {}", folder_id)
        return folder

    def move(self, folder_id: str, intent: MoveIntent) -> list[OrderAssignment]:
        """Reorder a folder by dropping it onto another folder.

        Folders share one group, so dropping onto the list container is
        always a no-op.
        """
        if intent.entity_id != folder_id:
            raise ValueError(f"Move intent is for {intent.entity_id}, not {folder_id}")
        if intent.drops_on_group:
            return []
        try:
            with self.store.transaction() as tx:
                plan = plan_move(tx.folders.list_all(), intent)
                for assignment in plan:
                    tx.folders.update(assignment.entity_id, {"order": assignment.order})
        except StoreWriteError as exc:
            raise BatchWriteError("move", folder_id, exc) from exc
        if plan:
            logger.info("Moved folder {}: {}", folder_id, summarize_assignments(plan))
        return plan

    def delete(self, folder_id: str) -> Optional[list[str]]:
        """Delete a folder together with every task it holds.

        Returns the ids of the removed tasks, or ``None`` if the folder no
        longer exists. Raises :class:`CascadeDeleteError` when the combined
        commit fails, in which case neither the folder nor its tasks are gone.
        """
        try:
            with self.store.transaction() as tx:
                if tx.folders.get(folder_id) is None:
                    logger.debug("Skipping delete of missing folder {}", folder_id)
                    return None
                removed = tx.tasks.delete_many(t.id for t in tx.tasks.find(folder_id=folder_id))
                tx.folders.delete(folder_id)
                for assignment in compact(tx.folders.list_all()):
                    tx.folders.update(assignment.entity_id, {"order": assignment.order})
        except StoreWriteError as exc:
            logger.error("Cascading delete of folder {} failed", folder_id)
            raise CascadeDeleteError(folder_id, exc) from exc
        logger.info("Deleted folder {} and {} task(s)", folder_id, len(removed))
        return removed
