"""
In-memory ordered record store.

Records are pydantic models keyed by one of their attributes. Order is
insertion order (callers may insert at the front). Nothing survives a
process restart.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from pydantic import BaseModel

from ..utils.exceptions import NotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class RecordStore(Generic[T]):
    """Keyed, ordered collection guarded by a single lock"""

    def __init__(self, name: str, key_field: str = "id"):
        self.name = name
        self.key_field = key_field
        self._records: List[T] = []
        self._lock = threading.RLock()

    def _key(self, record: T) -> Any:
        return getattr(record, self.key_field)

    def _index_of(self, record_id: Any) -> int:
        for i, record in enumerate(self._records):
            if self._key(record) == record_id:
                return i
        return -1

    def insert(self, record: T, front: bool = False) -> T:
        """Add a record at the front (most recent first) or the back."""
        with self._lock:
            if front:
                self._records.insert(0, record)
            else:
                self._records.append(record)
        return record

    def find_by_id(self, record_id: Any) -> Optional[T]:
        with self._lock:
            idx = self._index_of(record_id)
            return self._records[idx] if idx >= 0 else None

    def find_one(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """Linear scan; first match wins."""
        with self._lock:
            return next((r for r in self._records if predicate(r)), None)

    def update(self, record_id: Any, patch: Dict[str, Any]) -> T:
        """
        Shallow-merge patch onto the stored record and return the new value.

        Only keys present in patch change. The key field cannot be patched.

        Raises:
            NotFoundError: If no record has this id
        """
        with self._lock:
            idx = self._index_of(record_id)
            if idx < 0:
                raise NotFoundError(f"{self.name} record not found: {record_id}")
            changes = {k: v for k, v in patch.items() if k != self.key_field}
            updated = self._records[idx].model_copy(update=changes)
            self._records[idx] = updated
            return updated

    def remove(self, record_id: Any) -> T:
        with self._lock:
            idx = self._index_of(record_id)
            if idx < 0:
                raise NotFoundError(f"{self.name} record not found: {record_id}")
            return self._records.pop(idx)

    def truncate(self, max_size: int) -> List[T]:
        """Keep the first max_size records in current order; return the evicted ones."""
        with self._lock:
            if len(self._records) <= max_size:
                return []
            evicted = self._records[max_size:]
            self._records = self._records[:max_size]
        logger.debug("Store truncated", store=self.name, evicted=len(evicted), max_size=max_size)
        return evicted

    def all(self) -> List[T]:
        """Snapshot of all records in current order."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def __contains__(self, record_id: Any) -> bool:
        return self.find_by_id(record_id) is not None
