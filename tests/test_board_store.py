"""Tests for the file-backed board store (board/store.py)."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from loguru import logger

from tasknest.board import store as store_module
from tasknest.board.model import Folder, Task, TaskStatus
from tasknest.board.store import BoardStore
from tasknest.errors import StoreWriteError


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    d = tmp_path / ".tasknest"
    d.mkdir()
    return d


@pytest.fixture
def store(state_dir: Path) -> BoardStore:
    return BoardStore(state_dir)


class TestBoardStore:
    def test_empty_read(self, store: BoardStore) -> None:
        snap = store.read_snapshot()
        assert snap.folders == []
        assert snap.tasks == []

    def test_insert_and_read(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.folders.insert(Folder(id="f1", name="Work"))
            tx.tasks.insert(Task(id="t1", title="First", folder_id="f1"))
            tx.tasks.insert(Task(id="t2", title="Second", folder_id="f1", order=1))

        snap = store.read_snapshot()
        assert [f.id for f in snap.folders] == ["f1"]
        assert [t.id for t in snap.tasks] == ["t1", "t2"]

    def test_duplicate_insert_raises(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.tasks.insert(Task(id="t1", title="First"))
            with pytest.raises(ValueError, match="already exists"):
                tx.tasks.insert(Task(id="t1", title="Duplicate"))

    def test_get_by_id(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.tasks.insert(Task(id="t1", title="Test", folder_id="f1"))
            tx.folders.insert(Folder(id="f1", name="Work"))

        assert store.get_task("t1").title == "Test"
        assert store.get_folder("f1").name == "Work"
        assert store.get_task("nonexistent") is None
        assert store.get_folder("nonexistent") is None

    def test_update_fields(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.tasks.insert(Task(id="t1", title="Old title"))

        with store.transaction() as tx:
            updated = tx.tasks.update("t1", {"title": "New title", "status": TaskStatus.DONE})
            assert updated is not None
            assert tx.tasks.update("nope", {"title": "x"}) is None

        t = store.get_task("t1")
        assert t.title == "New title"
        assert t.status == TaskStatus.DONE

    def test_delete_and_delete_many(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            for i in range(4):
                tx.tasks.insert(Task(id=f"t{i}", title=f"T{i}"))

        with store.transaction() as tx:
            assert tx.tasks.delete("t0")
            assert not tx.tasks.delete("t0")
            assert tx.tasks.delete_many(["t1", "t3", "missing"]) == ["t1", "t3"]
            assert tx.tasks.get("t2") is not None

        assert [t.id for t in store.read_snapshot().tasks] == ["t2"]

    def test_find_and_sorted_by(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.tasks.insert(Task(id="a", title="A", folder_id="f1", status=TaskStatus.TODO, order=1))
            tx.tasks.insert(Task(id="b", title="B", folder_id="f1", status=TaskStatus.TODO, order=0))
            tx.tasks.insert(Task(id="c", title="C", folder_id="f1", status=TaskStatus.DONE, order=0))
            tx.tasks.insert(Task(id="d", title="D", folder_id="f2", status=TaskStatus.TODO, order=0))

        with store.transaction() as tx:
            todo = tx.tasks.find(folder_id="f1", status="todo")
            assert sorted(t.id for t in todo) == ["a", "b"]
            assert [t.id for t in tx.tasks.sorted_by(todo, "order")] == ["b", "a"]
            assert len(tx.tasks.find(folder_id="f2")) == 1

    def test_read_only_transaction_does_not_write(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.tasks.list_all()
        assert not store.path.exists()

    def test_persistence_survives_reload(self, state_dir: Path) -> None:
        store1 = BoardStore(state_dir)
        with store1.transaction() as tx:
            tx.tasks.insert(Task(id="t1", title="Persistent", deadline="2026-07-04"))

        tasks = BoardStore(state_dir).read_snapshot().tasks
        assert len(tasks) == 1
        assert tasks[0].deadline == "2026-07-04"

    def test_file_layout(self, store: BoardStore) -> None:
        with store.transaction() as tx:
            tx.folders.insert(Folder(id="f1", name="Work"))
        raw = yaml.safe_load(store.path.read_text(encoding="utf-8"))
        assert raw["version"] == 1
        assert raw["folders"][0]["name"] == "Work"
        assert raw["tasks"] == []

    def test_failed_commit_persists_nothing(self, store: BoardStore, monkeypatch: pytest.MonkeyPatch) -> None:
        with store.transaction() as tx:
            tx.tasks.insert(Task(id="t1", title="Keep"))

        def boom(path: Path, data: dict) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(store_module, "_atomic_write_yaml", boom)
        with pytest.raises(StoreWriteError, match="disk full"):
            with store.transaction() as tx:
                tx.tasks.insert(Task(id="t2", title="Lost"))
                tx.tasks.update("t1", {"title": "Changed"})

        tasks = store.read_snapshot().tasks
        assert [(t.id, t.title) for t in tasks] == [("t1", "Keep")]

    def test_exception_inside_block_discards_changes(self, store: BoardStore) -> None:
        with pytest.raises(RuntimeError):
            with store.transaction() as tx:
                tx.tasks.insert(Task(id="t1", title="Never"))
                raise RuntimeError("abort")
        assert store.read_snapshot().tasks == []

    def test_malformed_records_load_with_warning(self, state_dir: Path, store: BoardStore) -> None:
        (state_dir / "board.yaml").write_text(
            yaml.safe_dump({
                "folders": [{"id": "f1", "name": "Work"}],
                "tasks": [
                    {"id": "t1", "title": "Fine", "folder_id": "f1", "status": "todo", "order": 0},
                    {"id": "t2", "title": "", "folder_id": "f1", "status": "blocked", "order": 1},
                ],
            }),
            encoding="utf-8",
        )
        messages: list[str] = []
        sink_id = logger.add(lambda msg: messages.append(str(msg)), level="WARNING")
        try:
            snap = store.read_snapshot()
        finally:
            logger.remove(sink_id)

        assert [t.id for t in snap.tasks] == ["t1", "t2"]
        assert snap.tasks[1].status == TaskStatus.TODO
        assert len(messages) == 1
        assert "t2" in messages[0] and "status" in messages[0]
