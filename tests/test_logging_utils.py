"""Tests for logging_utils module."""

from __future__ import annotations

from loguru import logger

from tasknest.board.model import TaskStatus
from tasknest.board.ordering import OrderAssignment
from tasknest.logging_utils import configure_logging, summarize_assignments


class TestSummarizeAssignments:
    def test_empty(self) -> None:
        assert summarize_assignments([]) == {"writes": 0, "groups": [], "sample": []}

    def test_groups_and_sample(self) -> None:
        plan = [
            OrderAssignment("t1", 0, TaskStatus.TODO),
            OrderAssignment("t2", 0, TaskStatus.DOING),
            OrderAssignment("t3", 1, TaskStatus.DOING),
            OrderAssignment("t4", 2, TaskStatus.DOING),
        ]
        summary = summarize_assignments(plan)
        assert summary["writes"] == 4
        assert summary["groups"] == ["todo", "doing"]
        assert summary["sample"] == ["t1@0", "t2@0", "t3@1"]

    def test_ungrouped(self) -> None:
        assert summarize_assignments([OrderAssignment("f1", 3)])["groups"] == ["-"]


def test_configure_logging_respects_level() -> None:
    messages: list[str] = []
    configure_logging("WARNING")
    sink_id = logger.add(lambda msg: messages.append(str(msg)), level="WARNING")
    try:
        logger.info("hidden")
        logger.warning("shown")
    finally:
        logger.remove(sink_id)
        configure_logging()
    assert len(messages) == 1
    assert "shown" in messages[0]
