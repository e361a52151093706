"""
Explicit reorder command and its client-side optimistic copy.

``plan_reorder`` validates a requested order against the current members of
a list and yields the contiguous ``sort_order`` values to persist.
``OptimisticOrder`` is the transient copy a UI drags around until the store
confirms (adopt) or fails (roll back).
"""

import uuid
from collections.abc import Iterable, Sequence


class ReorderError(ValueError):
    """The requested order is not a permutation of the current members."""


def plan_reorder(current_ids: Iterable[uuid.UUID], ordered_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, int]:
    current = set(current_ids)
    seen: set[uuid.UUID] = set()
    duplicates: list[uuid.UUID] = []
    for entity_id in ordered_ids:
        if entity_id in seen:
            duplicates.append(entity_id)
        seen.add(entity_id)
    if duplicates:
        raise ReorderError(f"Duplicate ids in order: {[str(i) for i in duplicates]}")

    unknown = seen - current
    if unknown:
        raise ReorderError(f"Ids do not belong to this list: {sorted(str(i) for i in unknown)}")
    missing = current - seen
    if missing:
        raise ReorderError(f"Order is missing ids: {sorted(str(i) for i in missing)}")

    return {entity_id: index for index, entity_id in enumerate(ordered_ids)}


class OptimisticOrder:
    def __init__(self, ids: Sequence[uuid.UUID]) -> None:
        self._confirmed: tuple[uuid.UUID, ...] = tuple(ids)
        self._current: list[uuid.UUID] = list(ids)

    @property
    def ids(self) -> tuple[uuid.UUID, ...]:
        return tuple(self._current)

    @property
    def confirmed(self) -> tuple[uuid.UUID, ...]:
        return self._confirmed

    @property
    def dirty(self) -> bool:
        return tuple(self._current) != self._confirmed

    def move(self, active_id: uuid.UUID, over_id: uuid.UUID) -> tuple[uuid.UUID, ...]:
        """Move ``active_id`` into the slot held by ``over_id``; unknown ids are a no-op."""
        if active_id == over_id:
            return self.ids
        try:
            old_index = self._current.index(active_id)
            new_index = self._current.index(over_id)
        except ValueError:
            return self.ids
        moved = self._current.pop(old_index)
        self._current.insert(new_index, moved)
        return self.ids

    def confirm(self) -> None:
        self._confirmed = tuple(self._current)

    def rollback(self) -> tuple[uuid.UUID, ...]:
        self._current = list(self._confirmed)
        return self.ids
