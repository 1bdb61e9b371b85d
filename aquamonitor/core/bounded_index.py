"""
Bounded per-pond index
Append-only, order-preserving id lists with a hard ceiling per owner
"""

from typing import Dict, List

from aquamonitor.core.exceptions import CapacityExceededError


class BoundedIndex:
    """
    Maps an owner id to an ordered list of element ids

    The list for an owner is created on first append and never shrinks.
    Once an owner reaches capacity every further append is refused; there
    is no eviction.

    Not thread-safe on its own; MeasurementStore serialises access.
    """

    def __init__(self, capacity: int, name: str = "index"):
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.capacity = capacity
        self.name = name
        self._entries: Dict[int, List[int]] = {}

    def size(self, owner_id: int) -> int:
        return len(self._entries.get(owner_id, ()))

    def has_room(self, owner_id: int) -> bool:
        return self.size(owner_id) + 1 <= self.capacity

    def append(self, owner_id: int, element_id: int) -> None:
        """Add element_id at the tail, or raise CapacityExceededError"""
        if not self.has_room(owner_id):
            raise CapacityExceededError(owner_id, self.capacity, self.name)
        self._entries.setdefault(owner_id, []).append(element_id)

    def get(self, owner_id: int) -> List[int]:
        """Copy of the owner's ids in insertion order (empty if unknown)"""
        return list(self._entries.get(owner_id, ()))

    def discard_last(self, owner_id: int, element_id: int) -> None:
        """Undo the most recent append of element_id for owner_id"""
        entries = self._entries.get(owner_id)
        if entries and entries[-1] == element_id:
            entries.pop()
            if not entries:
                del self._entries[owner_id]
