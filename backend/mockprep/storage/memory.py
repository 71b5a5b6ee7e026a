"""Process-local repository backed by an insertion-ordered dict."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .base import Predicate

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """Thread-safe store of frozen dataclass entities.

    Reads return snapshots; ``update`` swaps in a replacement instance so
    callers holding the old one are unaffected.
    """

    def __init__(self, entities: Optional[List[T]] = None) -> None:
        self._items: Dict[str, T] = {}
        self._lock = threading.RLock()
        for entity in entities or []:
            self.add(entity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def add(self, entity: T) -> T:
        entity_id = getattr(entity, "id")
        with self._lock:
            if entity_id in self._items:
                raise KeyError(f"duplicate id: {entity_id}")
            self._items[entity_id] = entity
        return entity

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._items.get(entity_id)

    def find(self, predicate: Predicate) -> List[T]:
        with self._lock:
            return [item for item in self._items.values() if predicate(item)]

    def find_one(self, predicate: Predicate) -> Optional[T]:
        with self._lock:
            return next((item for item in self._items.values() if predicate(item)), None)

    def all(self) -> List[T]:
        with self._lock:
            return list(self._items.values())

    def update(self, entity_id: str, **changes: Any) -> Optional[T]:
        with self._lock:
            current = self._items.get(entity_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            self._items[entity_id] = updated
            return updated

    def delete(self, entity_id: str) -> bool:
        with self._lock:
            return self._items.pop(entity_id, None) is not None
