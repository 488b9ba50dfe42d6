"""Board engine: the entry point the interaction layer talks to.

Wraps :class:`BoardStore` with the folder and task services, the read
projections, the request/confirm deletion protocol, persisted view and theme
preferences, and an append-only event journal.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from .board.confirmations import DeletionKind, DeletionRequest, PendingDeletions
from .board.folders import FolderService
from .board.model import Folder, Task
from .board.ordering import MoveIntent, OrderAssignment
from .board.projection import Board, DashboardEntry, TaskCard, dashboard, project_board
from .board.store import BoardStore
from .board.tasks import TaskService
from .config import get_dashboard_window, get_default_theme, get_log_level, load_board_config
from .constants import DASHBOARD_VIEW, EVENTS_RELPATH, STATE_DIR_NAME, THEMES
from .errors import BoardValidationError
from .io_utils import _append_event, _read_events_tail
from .logging_utils import configure_logging
from .preferences import LAST_VIEW_KEY, THEME_KEY, Preferences
from .utils import _today


class BoardEngine:
    """Manage folders, task boards, and UI state for one local datastore.

    Parameters
    ----------
    state_dir:
        Path to the ``.tasknest/`` directory.
    config:
        Parsed configuration; loaded from ``state_dir/config.yaml`` when omitted.
    today:
        Optional clock returning the current calendar date.
    """

    def __init__(
        self,
        state_dir: Path,
        config: Optional[dict[str, Any]] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        if config is None:
            config, err = load_board_config(state_dir)
            if err:
                logger.warning("Ignoring invalid board config: {}", err)
        self.config = config
        self.store = BoardStore(state_dir)
        self.tasks = TaskService(self.store)
        self.folders = FolderService(self.store)
        self.preferences = Preferences(state_dir)
        self.deletions = PendingDeletions()
        self._clock = today or _today
        self._events_path = state_dir / EVENTS_RELPATH

    @classmethod
    def open(cls, project_dir: Path, today: Optional[Callable[[], date]] = None) -> "BoardEngine":
        """Open the board under ``project_dir/.tasknest`` and configure logging from its config."""
        state_dir = project_dir / STATE_DIR_NAME
        config, err = load_board_config(state_dir)
        configure_logging(get_log_level(config))
        if err:
            logger.warning("Ignoring invalid board config: {}", err)
        return cls(state_dir, config=config, today=today)

    def today(self) -> date:
        return self._clock()

    def _emit_event(self, event_type: str, entity_id: str, **details: Any) -> None:
        """Append a board event; journal failures never fail the mutation."""
        payload: dict[str, Any] = {"type": event_type, "entity_id": entity_id}
        if details:
            payload["details"] = details
        try:
            _append_event(self._events_path, payload)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to append board event {} for {}", event_type, entity_id)

    def recent_events(self, limit: int = 100) -> list[dict[str, Any]]:
        return _read_events_tail(self._events_path, limit)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list_folders(self) -> list[Folder]:
        return self.folders.list_folders()

    def create_folder(self, name: str) -> Folder:
        folder = self.folders.create(name)
        self._emit_event("folder.created", folder.id, name=folder.name, order=folder.order)
        return folder

    def rename_folder(self, folder_id: str, name: str) -> Optional[Folder]:
        folder = self.folders.rename(folder_id, name)
        if folder is not None:
            self._emit_event("folder.renamed", folder_id, name=folder.name)
        return folder

    def move_folder(self, folder_id: str, intent: MoveIntent) -> list[OrderAssignment]:
        plan = self.folders.move(folder_id, intent)
        if plan:
            self._emit_event("folder.moved", folder_id, writes=len(plan))
        return plan

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(self, folder_id: str, title: str, deadline: Any = None) -> Optional[Task]:
        task = self.tasks.create(folder_id, title, deadline)
        if task is not None:
            self._emit_event("task.created", task.id, folder_id=folder_id, deadline=task.deadline)
        return task

    def update_task(self, task_id: str, changes: dict[str, Any]) -> Optional[Task]:
        task = self.tasks.update(task_id, changes)
        if task is not None and changes:
            self._emit_event("task.updated", task_id, fields=sorted(changes.keys()))
        return task

    def move_task(self, task_id: str, intent: MoveIntent) -> list[OrderAssignment]:
        plan = self.tasks.move(task_id, intent)
        if plan:
            # The moved task itself is absent from the plan when only its siblings shift.
            moved = self.tasks.get(task_id)
            self._emit_event(
                "task.moved",
                task_id,
                writes=len(plan),
                status=moved.status.value if moved else None,
            )
        return plan

    def get_task(self, task_id: str) -> Optional[TaskCard]:
        task = self.tasks.get(task_id)
        return TaskCard.for_task(task, self.today()) if task else None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def board(self, folder_id: str) -> Board:
        """Current columns of one folder, read fresh from the store."""
        return project_board(self.tasks.list_for_folder(folder_id), folder_id, self.today())

    def dashboard(self) -> list[DashboardEntry]:
        snapshot = self.store.read_snapshot()
        return dashboard(
            snapshot.tasks,
            snapshot.folders,
            self.today(),
            window_days=get_dashboard_window(self.config),
        )

    def select_view(self, view: str) -> bool:
        """Remember a folder id or the dashboard sentinel as the current view.

        Returns ``False`` (and changes nothing) for a folder that no longer exists.
        """
        if view != DASHBOARD_VIEW and self.folders.get(view) is None:
            logger.debug("Ignoring selection of missing folder {}", view)
            return False
        self.preferences.set(LAST_VIEW_KEY, view)
        return True

    def current_view(self) -> Optional[str]:
        """Restore the saved view.

        Falls back to the dashboard when the saved folder is gone, and to
        ``None`` when there are no folders at all.
        """
        folders = self.list_folders()
        if not folders:
            return None
        saved = self.preferences.get(LAST_VIEW_KEY)
        if saved == DASHBOARD_VIEW:
            return DASHBOARD_VIEW
        if saved and any(folder.id == saved for folder in folders):
            return saved
        return DASHBOARD_VIEW

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def theme(self) -> str:
        saved = self.preferences.get(THEME_KEY)
        return saved if saved in THEMES else get_default_theme(self.config)

    def set_theme(self, theme: str) -> str:
        if theme not in THEMES:
            raise BoardValidationError([f"theme: must be one of {list(THEMES)}, got '{theme}'"])
        self.preferences.set(THEME_KEY, theme)
        return theme

    def toggle_theme(self) -> str:
        return self.set_theme("light" if self.theme() == "dark" else "dark")

    # ------------------------------------------------------------------
    # Deletion protocol
    # ------------------------------------------------------------------

    def request_task_delete(self, task_id: str) -> Optional[DeletionRequest]:
        task = self.tasks.get(task_id)
        if task is None:
            return None
        return self.deletions.request(DeletionKind.TASK, task_id, task.title)

    def request_folder_delete(self, folder_id: str) -> Optional[DeletionRequest]:
        folder = self.folders.get(folder_id)
        if folder is None:
            return None
        return self.deletions.request(DeletionKind.FOLDER, folder_id, folder.name)

    def cancel_delete(self, request_id: str) -> bool:
        return self.deletions.take(request_id) is not None

    def confirm_delete(self, request_id: str) -> bool:
        """Carry out a pending deletion. Returns whether anything was removed."""
        req = self.deletions.take(request_id)
        if req is None:
            logger.debug("Ignoring unknown deletion request {}", request_id)
            return False
        if req.kind == DeletionKind.TASK:
            deleted = self.tasks.delete(req.entity_id)
            if deleted:
                self._emit_event("task.deleted", req.entity_id)
            return deleted

        removed = self.folders.delete(req.entity_id)
        if removed is None:
            return False
        self._emit_event("folder.deleted", req.entity_id, task_ids=removed)
        try:
            if self.preferences.get(LAST_VIEW_KEY) == req.entity_id:
                self.preferences.set(LAST_VIEW_KEY, None)
        except OSError:
            logger.exception("Failed to reset saved view after deleting folder {}", req.entity_id)
        return True
