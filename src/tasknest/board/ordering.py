"""Order index maintenance for drag-and-drop moves.

Entities (tasks or folders) carry an explicit integer ``order`` that must
stay contiguous (``0..n-1``) within each group. Tasks are grouped by status
column, folders share a single global group (``None``).

:func:`plan_move` never mutates its input. It returns the minimal list of
:class:`OrderAssignment` objects that, once written together, restore the
contiguity invariant after the move. Writing only part of a plan breaks the
invariant, so callers must commit a plan as one batch.

Three drop shapes are supported:

* onto a group container: append to the end of that group
  (a no-op when the entity is already in it);
* onto an entity in another group: insert before that entity, and close
  the gap left in the source group;
* onto an entity in the same group: array-move semantics.

Moves that reference an entity missing from the snapshot (deleted since the
caller last read the board) produce an empty plan.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence

GroupOf = Callable[[Any], Hashable]


def _single_group(_entity: Any) -> Hashable:
    return None


@dataclass(frozen=True)
class MoveIntent:
    """What the pointer or keyboard dropped, and where.

    Use :meth:`onto_entity` or :meth:`onto_group` rather than the raw
    constructor.
    """

    entity_id: str
    target_id: Optional[str] = None
    target_group: Hashable = None

    def __post_init__(self) -> None:
        if self.target_id is not None and self.target_group is not None:
            raise ValueError("A move targets either an entity or a group, not both")

    @classmethod
    def onto_entity(cls, entity_id: str, target_id: str) -> "MoveIntent":
        return cls(entity_id=entity_id, target_id=target_id)

    @classmethod
    def onto_group(cls, entity_id: str, group: Hashable = None) -> "MoveIntent":
        return cls(entity_id=entity_id, target_group=group)

    @property
    def drops_on_group(self) -> bool:
        return self.target_id is None


@dataclass(frozen=True)
class OrderAssignment:
    """New position of one entity: its order and the group it belongs to."""

    entity_id: str
    order: int
    group: Hashable = None


def _sequence(entities: Iterable[Any], group: Hashable, group_of: GroupOf) -> list[Any]:
    # sorted() is stable: equal orders keep their snapshot position.
    return sorted((e for e in entities if group_of(e) == group), key=lambda e: e.order)


def _index_of(sequence: Sequence[Any], entity_id: str) -> int:
    return next(i for i, e in enumerate(sequence) if e.id == entity_id)


def _changes(sequence: Sequence[Any], group: Hashable, group_of: GroupOf) -> list[OrderAssignment]:
    return [
        OrderAssignment(entity.id, index, group)
        for index, entity in enumerate(sequence)
        if entity.order != index or group_of(entity) != group
    ]


def plan_move(
    entities: Iterable[Any],
    intent: MoveIntent,
    group_of: GroupOf = _single_group,
) -> list[OrderAssignment]:
    """Compute the assignments that apply *intent* to *entities*.

    Args:
        entities: A fresh snapshot; every item exposes ``id`` and ``order``.
        intent: The drop to apply.
        group_of: Maps an entity to its group key.

    Returns:
        Assignments for every entity whose order or group changes, source
        group first, each group in index order. Empty for no-ops and for
        stale references.
    """
    snapshot = list(entities)
    by_id = {e.id: e for e in snapshot}
    moved = by_id.get(intent.entity_id)
    if moved is None:
        return []
    source_group = group_of(moved)

    if intent.drops_on_group:
        target_group = intent.target_group
        if target_group == source_group:
            return []
        target_seq = [e for e in _sequence(snapshot, target_group, group_of) if e.id != moved.id]
        target_seq.append(moved)
    else:
        if intent.target_id == moved.id:
            return []
        target = by_id.get(intent.target_id)
        if target is None:
            return []
        target_group = group_of(target)
        target_seq = _sequence(snapshot, target_group, group_of)
        if target_group == source_group:
            old_index = _index_of(target_seq, moved.id)
            new_index = _index_of(target_seq, target.id)
            if old_index == new_index:
                return []
            target_seq.insert(new_index, target_seq.pop(old_index))
        else:
            target_seq.insert(_index_of(target_seq, target.id), moved)

    plan: list[OrderAssignment] = []
    if target_group != source_group:
        source_seq = [e for e in _sequence(snapshot, source_group, group_of) if e.id != moved.id]
        plan.extend(_changes(source_seq, source_group, group_of))
    plan.extend(_changes(target_seq, target_group, group_of))
    return plan


def compact(entities: Iterable[Any], group_of: GroupOf = _single_group) -> list[OrderAssignment]:
    """Reindex every group to ``0..n-1``, keeping relative order.

    Used after deletions, which leave gaps behind.
    """
    snapshot = list(entities)
    groups: list[Hashable] = []
    for entity in snapshot:
        group = group_of(entity)
        if group not in groups:
            groups.append(group)
    plan: list[OrderAssignment] = []
    for group in groups:
        plan.extend(_changes(_sequence(snapshot, group, group_of), group, group_of))
    return plan


def next_order(entities: Iterable[Any], group: Hashable = None, group_of: GroupOf = _single_group) -> int:
    """Order value that appends a new entity to the end of *group*."""
    orders = [e.order for e in entities if group_of(e) == group]
    return max(orders) + 1 if orders else 0
