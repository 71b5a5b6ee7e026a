"""Storage interface the services are written against."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Protocol, TypeVar

T = TypeVar("T")

Predicate = Callable[[T], bool]


class Repository(Protocol[T]):
    """Create/find/update/delete for one entity type keyed by ``id``."""

    def add(self, entity: T) -> T:
        ...

    def get(self, entity_id: str) -> Optional[T]:
        ...

    def find(self, predicate: Predicate) -> List[T]:
        ...

    def find_one(self, predicate: Predicate) -> Optional[T]:
        ...

    def all(self) -> List[T]:
        ...

    def update(self, entity_id: str, **changes: Any) -> Optional[T]:
        ...

    def delete(self, entity_id: str) -> bool:
        ...
