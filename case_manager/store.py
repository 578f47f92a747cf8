"""In-memory entity store backing mock mode."""
import copy
from typing import Any, Dict, Iterable, List, Optional

from case_manager.id_allocator import coerce_id


class EntityStore:
    """
    Ordered, mutable collection of records for one entity type.

    Insertion order is creation order; updates replace a record at its
    current position. Callers only ever receive copies, so nothing they hold
    can alias the stored records.
    """

    def __init__(self, entity_type: str, records: Optional[Iterable[Dict[str, Any]]] = None):
        self.entity_type = entity_type
        self._records: List[Dict[str, Any]] = []
        for record in records or ():
            self.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self.all())

    def all(self) -> List[Dict[str, Any]]:
        """Copies of every record, in store order."""
        return [copy.deepcopy(record) for record in self._records]

    def index_of(self, record_id: Any) -> Optional[int]:
        """Position of the record with ``record_id`` or None."""
        wanted = coerce_id(record_id)
        if wanted is None:
            return None
        for index, record in enumerate(self._records):
            if coerce_id(record.get("id")) == wanted:
                return index
        return None

    def get(self, record_id: Any) -> Optional[Dict[str, Any]]:
        index = self.index_of(record_id)
        if index is None:
            return None
        return copy.deepcopy(self._records[index])

    def at(self, index: int) -> Dict[str, Any]:
        return copy.deepcopy(self._records[index])

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add a record at the end.

        Raises:
            ValueError: If a record with the same id is already stored
        """
        if self.index_of(record.get("id")) is not None:
            raise ValueError(
                f"Duplicate id {record.get('id')} in {self.entity_type} store"
            )
        self._records.append(copy.deepcopy(record))
        return copy.deepcopy(record)

    def replace(self, index: int, record: Dict[str, Any]) -> Dict[str, Any]:
        self._records[index] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def remove(self, index: int) -> Dict[str, Any]:
        return self._records.pop(index)

    def clear(self) -> None:
        self._records.clear()

    def load(self, records: Iterable[Dict[str, Any]]) -> None:
        """Replace the whole contents (used to reseed between tests)."""
        self.clear()
        for record in records:
            self.append(record)
