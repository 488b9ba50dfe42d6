"""Tests for order index maintenance (board/ordering.py)."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

import pytest

from tasknest.board.ordering import MoveIntent, OrderAssignment, compact, next_order, plan_move


@dataclass
class Card:
    id: str
    order: int
    group: Optional[str] = None


def _group(card: Card) -> Optional[str]:
    return card.group


def _board(**columns: list[str]) -> list[Card]:
    return [Card(cid, i, group) for group, ids in columns.items() for i, cid in enumerate(ids)]


def _apply(cards: list[Card], plan: list[OrderAssignment]) -> list[Card]:
    by_id = {c.id: c for c in cards}
    for a in plan:
        by_id[a.entity_id].order = a.order
        by_id[a.entity_id].group = a.group
    return cards


def _column(cards: list[Card], group: Optional[str]) -> list[tuple[str, int]]:
    return [(c.id, c.order) for c in sorted(cards, key=lambda c: c.order) if c.group == group]


class TestMoveIntent:
    def test_constructors(self) -> None:
        assert MoveIntent.onto_entity("a", "b").drops_on_group is False
        onto = MoveIntent.onto_group("a", "doing")
        assert onto.drops_on_group is True
        assert onto.target_group == "doing"

    def test_rejects_entity_and_group_together(self) -> None:
        with pytest.raises(ValueError, match="either an entity or a group"):
            MoveIntent("a", target_id="b", target_group="doing")


class TestSameGroup:
    def test_move_last_onto_first(self) -> None:
        cards = _board(todo=["A", "B", "C"])
        plan = plan_move(cards, MoveIntent.onto_entity("C", "A"), _group)
        _apply(cards, plan)
        assert _column(cards, "todo") == [("C", 0), ("A", 1), ("B", 2)]

    def test_move_forward_lands_at_target_index(self) -> None:
        cards = _board(todo=["A", "B", "C", "D"])
        plan = plan_move(cards, MoveIntent.onto_entity("A", "C"), _group)
        _apply(cards, plan)
        assert _column(cards, "todo") == [("B", 0), ("C", 1), ("A", 2), ("D", 3)]

    def test_only_changed_entities_are_written(self) -> None:
        cards = _board(todo=["A", "B", "C", "D"])
        plan = plan_move(cards, MoveIntent.onto_entity("B", "C"), _group)
        assert [a.entity_id for a in plan] == ["C", "B"]

    def test_drop_onto_itself_is_noop(self) -> None:
        cards = _board(todo=["A", "B"])
        assert plan_move(cards, MoveIntent.onto_entity("A", "A"), _group) == []

    def test_single_group_default(self) -> None:
        folders = [Card("f1", 0), Card("f2", 1), Card("f3", 2)]
        plan = plan_move(folders, MoveIntent.onto_entity("f1", "f3"))
        _apply(folders, plan)
        assert _column(folders, None) == [("f2", 0), ("f3", 1), ("f1", 2)]
        assert all(a.group is None for a in plan)


class TestCrossGroup:
    def test_insert_before_target(self) -> None:
        cards = _board(todo=["A", "B"], doing=["C"])
        plan = plan_move(cards, MoveIntent.onto_entity("A", "C"), _group)
        _apply(cards, plan)
        assert _column(cards, "todo") == [("B", 0)]
        assert _column(cards, "doing") == [("A", 0), ("C", 1)]

    def test_source_group_written_before_target(self) -> None:
        cards = _board(todo=["A", "B"], doing=["C"])
        plan = plan_move(cards, MoveIntent.onto_entity("A", "C"), _group)
        assert plan == [
            OrderAssignment("B", 0, "todo"),
            OrderAssignment("A", 0, "doing"),
            OrderAssignment("C", 1, "doing"),
        ]

    def test_drop_on_empty_container(self) -> None:
        cards = _board(todo=["A", "B", "C"])
        plan = plan_move(cards, MoveIntent.onto_group("A", "doing"), _group)
        _apply(cards, plan)
        assert _column(cards, "doing") == [("A", 0)]
        assert _column(cards, "todo") == [("B", 0), ("C", 1)]

    def test_drop_on_container_appends_to_end(self) -> None:
        cards = _board(todo=["A"], done=["X", "Y"])
        plan = plan_move(cards, MoveIntent.onto_group("A", "done"), _group)
        assert plan == [OrderAssignment("A", 2, "done")]

    def test_drop_on_own_container_is_noop(self) -> None:
        cards = _board(todo=["A", "B"])
        assert plan_move(cards, MoveIntent.onto_group("A", "todo"), _group) == []


class TestStaleReferences:
    def test_missing_moved_entity(self) -> None:
        cards = _board(todo=["A", "B"])
        assert plan_move(cards, MoveIntent.onto_entity("X", "A"), _group) == []

    def test_missing_target_entity(self) -> None:
        cards = _board(todo=["A", "B"])
        assert plan_move(cards, MoveIntent.onto_entity("A", "X"), _group) == []


class TestDeterminism:
    def test_duplicate_orders_break_ties_by_snapshot_position(self) -> None:
        cards = [Card("A", 0, "todo"), Card("B", 0, "todo"), Card("C", 1, "todo")]
        plan = plan_move(cards, MoveIntent.onto_entity("C", "A"), _group)
        _apply(cards, plan)
        assert _column(cards, "todo") == [("C", 0), ("A", 1), ("B", 2)]

    def test_input_is_not_mutated(self) -> None:
        cards = _board(todo=["A", "B", "C"])
        plan_move(cards, MoveIntent.onto_entity("C", "A"), _group)
        assert [(c.id, c.order) for c in cards] == [("A", 0), ("B", 1), ("C", 2)]

    def test_random_moves_keep_every_group_contiguous(self) -> None:
        rng = random.Random(7)
        groups = ["todo", "doing", "done"]
        cards = _board(todo=[f"t{i}" for i in range(5)], doing=[f"d{i}" for i in range(3)])
        for _ in range(300):
            moved = rng.choice(cards)
            if rng.random() < 0.3:
                intent = MoveIntent.onto_group(moved.id, rng.choice(groups))
            else:
                intent = MoveIntent.onto_entity(moved.id, rng.choice(cards).id)
            _apply(cards, plan_move(cards, intent, _group))
            for group in groups:
                orders = sorted(c.order for c in cards if c.group == group)
                assert orders == list(range(len(orders)))
        assert len(cards) == 8


class TestHelpers:
    def test_compact_closes_gaps_per_group(self) -> None:
        cards = [Card("A", 0, "todo"), Card("C", 2, "todo"), Card("X", 5, "done"), Card("Y", 1, "done")]
        plan = compact(cards, _group)
        _apply(cards, plan)
        assert _column(cards, "todo") == [("A", 0), ("C", 1)]
        assert _column(cards, "done") == [("Y", 0), ("X", 1)]

    def test_compact_contiguous_is_empty(self) -> None:
        assert compact(_board(todo=["A", "B"], doing=["C"]), _group) == []

    def test_next_order(self) -> None:
        cards = _board(todo=["A", "B"])
        assert next_order(cards, "todo", _group) == 2
        assert next_order(cards, "doing", _group) == 0
        assert next_order([], None) == 0
