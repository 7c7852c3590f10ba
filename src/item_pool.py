"""ItemPool: ordered, id-addressable collection of stimuli prepared before a run."""
from __future__ import annotations

from typing import Iterable, Iterator

from models import StimulusItem


class ItemPool:
    """Insertion-ordered pool of StimulusItem.

    The pool knows nothing about runs; SequencingEngine decides when it may be
    mutated. ``version`` increases on every change so callers can tell whether
    a sequence built from the pool is stale.
    """

    def __init__(self, items: Iterable[StimulusItem] = ()) -> None:
        self._items: list[StimulusItem] = list(items)
        self.version = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[StimulusItem]:
        return iter(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    @property
    def items(self) -> tuple[StimulusItem, ...]:
        return tuple(self._items)

    def add(self, items: Iterable[StimulusItem]) -> int:
        """Append items, returning how many were added."""
        new_items = list(items)
        if new_items:
            self._items.extend(new_items)
            self.version += 1
        return len(new_items)

    def remove(self, item_id: str) -> bool:
        """Remove one item by id.

        Returns:
            True if an item was removed, False if the id is unknown
        """
        for i, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[i]
                self.version += 1
                return True
        return False

    def clear(self) -> int:
        count = len(self._items)
        if count:
            self._items.clear()
            self.version += 1
        return count
