"""Catalog repository port and an in-memory implementation.

The lending manager and the validation service only talk to the
``CatalogRepository`` protocol. Calls are synchronous; a failing store
raises ``RepositoryError`` and is never retried.
"""

import threading
from typing import Optional, Protocol, runtime_checkable

from ..errors import NotFoundError
from .schemas import CatalogItem


@runtime_checkable
class CatalogRepository(Protocol):
    """Storage contract for catalog items."""

    def find_all(self) -> list[CatalogItem]: ...

    def find_by_id(self, item_id: int) -> Optional[CatalogItem]: ...

    def save(self, item: CatalogItem) -> CatalogItem: ...

    def update(self, item: CatalogItem) -> CatalogItem: ...

    def delete_by_id(self, item_id: int) -> None: ...


class InMemoryCatalogRepository:
    """Catalog repository backed by a dict.

    Identifiers are assigned from 1 upwards in save order.
    """

    def __init__(self, items: Optional[list[CatalogItem]] = None):
        self._items: dict[int, CatalogItem] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        for item in items or []:
            self.save(item)

    def find_all(self) -> list[CatalogItem]:
        with self._lock:
            return [self._items[key] for key in sorted(self._items)]

    def find_by_id(self, item_id: int) -> Optional[CatalogItem]:
        with self._lock:
            return self._items.get(item_id)

    def save(self, item: CatalogItem) -> CatalogItem:
        with self._lock:
            saved = item.model_copy(update={"id": self._next_id})
            self._items[saved.id] = saved
            self._next_id += 1
            return saved

    def update(self, item: CatalogItem) -> CatalogItem:
        with self._lock:
            if item.id not in self._items:
                raise NotFoundError(item.id)
            self._items[item.id] = item
            return item

    def delete_by_id(self, item_id: int) -> None:
        with self._lock:
            self._items.pop(item_id, None)

    def __len__(self) -> int:
        return len(self._items)
