"""In-memory store of bundles attached to catalog items."""

import threading
from typing import Optional

from .bundles import AnyBundle


class AugmentationRegistry:
    """Holds bundles in an arena, indexed by item id.

    Attach order is preserved per item and determines the order in which
    bundles contribute to an item's description. Slots freed by
    ``detach_all`` are reused by later attaches.
    """

    def __init__(self) -> None:
        self._arena: list[Optional[AnyBundle]] = []
        self._free: list[int] = []
        self._index: dict[int, list[int]] = {}
        self._lock = threading.Lock()

    def attach(self, item_id: int, bundle: AnyBundle) -> int:
        """Attach a bundle to an item and return its slot number."""
        with self._lock:
            if self._free:
                slot = self._free.pop()
                self._arena[slot] = bundle
            else:
                slot = len(self._arena)
                self._arena.append(bundle)
            self._index.setdefault(item_id, []).append(slot)
            return slot

    def bundles_for(self, item_id: int, kind: Optional[str] = None) -> list[AnyBundle]:
        """Bundles attached to an item, optionally only those of one kind."""
        with self._lock:
            bundles = [self._arena[slot] for slot in self._index.get(item_id, [])]
        if kind is not None:
            bundles = [b for b in bundles if b.kind == kind]
        return bundles

    def detach_all(self, item_id: int) -> int:
        """Drop every bundle attached to an item. Returns how many were dropped."""
        with self._lock:
            slots = self._index.pop(item_id, [])
            for slot in slots:
                self._arena[slot] = None
            self._free.extend(slots)
            return len(slots)

    def item_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._index)

    @property
    def capacity(self) -> int:
        """Number of arena slots, used or free."""
        with self._lock:
            return len(self._arena)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(slots) for slots in self._index.values())
