"""File-based board store with thread-safe locking.

Stores folders and tasks in a single YAML file (``board.yaml``) inside the
``.tasknest/`` directory. All reads and writes go through
:meth:`BoardStore.transaction`, which holds an exclusive file lock, loads a
fresh snapshot, and commits every change made inside the block with one
atomic file replace. Either the whole batch lands or none of it does.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

import yaml
from loguru import logger

from ..constants import LOCK_FILENAME, STORE_FILENAME, STORE_VERSION
from ..errors import StoreWriteError
from ..io_utils import FileLock, _atomic_write_yaml
from .model import Folder, Task

T = TypeVar("T", Task, Folder)


# ---------------------------------------------------------------------------
# Low-level I/O
# ---------------------------------------------------------------------------

def _load_raw(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Load the raw collections from *path*, returning empty ones if missing."""
    empty: dict[str, list[dict[str, Any]]] = {"folders": [], "tasks": []}
    if not path.exists():
        return empty
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        return empty
    for key in empty:
        items = data.get(key)
        if isinstance(items, list):
            empty[key] = [item for item in items if isinstance(item, dict)]
    return empty


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

class _Collection(Generic[T]):
    """Key-indexed records of one kind inside a transaction."""

    def __init__(self, items: list[T]) -> None:
        self.items = items
        self.dirty = False
        self._index: dict[str, int] = {item.id: i for i, item in enumerate(items)}

    def _reindex(self) -> None:
        self._index = {item.id: i for i, item in enumerate(self.items)}

    # -- lookups ------------------------------------------------------------

    def get(self, item_id: str) -> Optional[T]:
        idx = self._index.get(item_id)
        return self.items[idx] if idx is not None else None

    def list_all(self) -> list[T]:
        return list(self.items)

    def count(self) -> int:
        return len(self.items)

    def find(self, **criteria: Any) -> list[T]:
        """Equality query over record fields, e.g. ``find(folder_id="f1")``."""
        return [
            item for item in self.items
            if all(getattr(item, key, None) == value for key, value in criteria.items())
        ]

    @staticmethod
    def sorted_by(items: Iterable[T], field_name: str) -> list[T]:
        return sorted(items, key=lambda item: getattr(item, field_name))

    # -- mutations ----------------------------------------------------------

    def insert(self, item: T) -> T:
        if item.id in self._index:
            raise ValueError(f"Record {item.id} already exists")
        self._index[item.id] = len(self.items)
        self.items.append(item)
        self.dirty = True
        return item

    def update(self, item_id: str, changes: dict[str, Any]) -> Optional[T]:
        item = self.get(item_id)
        if item is None:
            return None
        for key, value in changes.items():
            if hasattr(item, key):
                setattr(item, key, value)
        touch: Optional[Callable[[], None]] = getattr(item, "touch", None)
        if touch is not None:
            touch()
        self.dirty = True
        return item

    def delete(self, item_id: str) -> bool:
        idx = self._index.pop(item_id, None)
        if idx is None:
            return False
        self.items.pop(idx)
        self._reindex()
        self.dirty = True
        return True

    def delete_many(self, item_ids: Iterable[str]) -> list[str]:
        """Remove every listed record; returns the ids that existed."""
        wanted = set(item_ids)
        removed = [item.id for item in self.items if item.id in wanted]
        if removed:
            self.items = [item for item in self.items if item.id not in wanted]
            self._reindex()
            self.dirty = True
        return removed


class _BoardTx:
    """In-memory transaction over both collections.

    Mutations are flushed back to disk together when the ``transaction``
    context manager exits without an exception.
    """

    def __init__(self, folders: list[Folder], tasks: list[Task]) -> None:
        self.folders: _Collection[Folder] = _Collection(folders)
        self.tasks: _Collection[Task] = _Collection(tasks)

    @property
    def dirty(self) -> bool:
        return self.folders.dirty or self.tasks.dirty


@dataclass(frozen=True)
class BoardSnapshot:
    folders: list[Folder]
    tasks: list[Task]


# ---------------------------------------------------------------------------
# BoardStore
# ---------------------------------------------------------------------------

class BoardStore:
    """Thread-safe, file-backed store for folders and tasks.

    Parameters
    ----------
    state_dir:
        Path to the ``.tasknest/`` directory.
    """

    def __init__(self, state_dir: Path) -> None:
        self._state_dir = state_dir
        self._store_path = state_dir / STORE_FILENAME
        self._lock = FileLock(state_dir / LOCK_FILENAME)
        self._thread_lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._store_path

    # -- internal helpers ---------------------------------------------------

    def _load(self) -> tuple[list[Folder], list[Task]]:
        raw = _load_raw(self._store_path)
        folders = [Folder.from_dict(d) for d in raw["folders"]]
        for record in raw["tasks"]:
            errors = Task.validate_dict(record)
            if errors:
                logger.warning("Loading malformed task record {}: {}", record.get("id", "?"), "; ".join(errors))
        tasks = [Task.from_dict(d) for d in raw["tasks"]]
        return folders, tasks

    def _save(self, folders: list[Folder], tasks: list[Task]) -> None:
        payload = {
            "version": STORE_VERSION,
            "folders": [f.to_dict() for f in folders],
            "tasks": [t.to_dict() for t in tasks],
        }
        try:
            _atomic_write_yaml(self._store_path, payload)
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to commit board store {}: {}", self._store_path, exc)
            raise StoreWriteError(str(exc)) from exc

    # -- public API ---------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[_BoardTx]:
        """Acquire the lock, load a fresh snapshot, yield it, and commit on exit.

        Usage::

            with store.transaction() as tx:
                tx.tasks.update("task-abc123", {"title": "Renamed"})
                # committed on exit

        Raises :class:`StoreWriteError` if the commit fails; nothing from the
        block is persisted in that case.
        """
        with self._thread_lock:
            with self._lock:
                folders, tasks = self._load()
                tx = _BoardTx(folders, tasks)
                yield tx
                if tx.dirty:
                    self._save(tx.folders.items, tx.tasks.items)

    def read_snapshot(self) -> BoardSnapshot:
        """Return a read-only snapshot (no lock held after return)."""
        with self._thread_lock:
            with self._lock:
                folders, tasks = self._load()
        return BoardSnapshot(folders=folders, tasks=tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.read_snapshot().tasks:
            if task.id == task_id:
                return task
        return None

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        for folder in self.read_snapshot().folders:
            if folder.id == folder_id:
                return folder
        return None
