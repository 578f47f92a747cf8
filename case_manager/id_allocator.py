"""Per-entity-type identifier allocation.

Pattern: one integer counter per entity type, seeded once from the max id of
an existing collection, then incremented. The O(n) scan happens only on first
use; every later allocation is O(1).
"""
from collections.abc import Iterable, Mapping
from typing import Any, Dict, Optional


def coerce_id(value: Any) -> Optional[int]:
    """
    Normalize an identifier to int.

    Accepts ints and numeric strings ("7", " 7 "). Anything else
    (None, "abc", 3.5, True) yields None and so matches no record.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _item_id(item: Any) -> int:
    raw = item.get("id") if isinstance(item, Mapping) else getattr(item, "id", None)
    coerced = coerce_id(raw)
    return coerced if coerced is not None else 0


class IdAllocator:
    """
    Monotonic id counters keyed by entity type.

    Counters for different types never interact: "appointment" and "case"
    may both hand out 1, 2, 3...
    """

    def __init__(self):
        # {entity_type: last_issued_id}
        self._counters: Dict[str, int] = {}

    def seed(self, entity_type: str, items: Optional[Iterable[Any]]) -> None:
        """
        Initialize a counter from the max id in ``items``.

        First writer wins: if the type already has a counter this is a no-op,
        so a late seed can never rewind (or raise) an active counter.

        Args:
            entity_type: Counter key (e.g. "appointment")
            items: Records exposing ``id`` (mappings or objects)
        """
        if entity_type in self._counters:
            return
        self._counters[entity_type] = max((_item_id(item) for item in items or ()), default=0)

    def allocate(self, entity_type: str, existing: Optional[Iterable[Any]] = None) -> int:
        """
        Issue the next id for ``entity_type``.

        Args:
            entity_type: Counter key
            existing: Optional collection used to seed the counter on first use

        Returns:
            last issued id + 1 (1 for a fresh type)
        """
        if entity_type not in self._counters:
            self.seed(entity_type, existing)
        next_id = self._counters[entity_type] + 1
        self._counters[entity_type] = next_id
        return next_id

    def peek(self, entity_type: str) -> int:
        """Last id issued for the type (0 when the type has no counter)."""
        return self._counters.get(entity_type, 0)

    def is_seeded(self, entity_type: str) -> bool:
        return entity_type in self._counters

    def reset(self, entity_type: str) -> None:
        """Drop the counter so the next allocate/seed starts fresh. For tests."""
        self._counters.pop(entity_type, None)

    def reset_all(self) -> None:
        self._counters.clear()
