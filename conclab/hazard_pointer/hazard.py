"""Hazard pointer slots and shields.

A "pointer" is any object; a hazard records its identity (``id``). ``None``
plays the part of the null pointer.
"""

from __future__ import annotations

import threading
from typing import Any, List, Optional, Set

from ..growable_array import AtomicCell

_NULL = 0


def _address(pointer: Any) -> int:
    return _NULL if pointer is None else id(pointer)


class PointerChanged(Exception):
    """The source no longer holds the expected pointer; ``current`` holds what it has."""

    def __init__(self, current: Any) -> None:
        super().__init__(current)
        self.current = current


class _HazardSlot:
    __slots__ = ("active", "hazard")

    def __init__(self) -> None:
        self.active = True
        self.hazard = _NULL

    def __repr__(self) -> str:
        return f"HazardSlot(active={self.active}, hazard={self.hazard:#x})"


class HazardBag:
    """Bag of hazard slots; slots are never removed, only recycled."""

    def __init__(self) -> None:
        self._slots: List[_HazardSlot] = []
        self._inactive: List[_HazardSlot] = []
        self._lock = threading.Lock()

    def acquire_slot(self) -> _HazardSlot:
        """Activate an inactive slot, or allocate a new one if there is none."""
        with self._lock:
            if self._inactive:
                slot = self._inactive.pop()
                slot.active = True
                return slot
            slot = _HazardSlot()
            self._slots.append(slot)
            return slot

    def _release_slot(self, slot: _HazardSlot) -> None:
        with self._lock:
            slot.hazard = _NULL
            slot.active = False
            self._inactive.append(slot)

    def all_hazards(self) -> Set[int]:
        """Return the identities protected by active slots."""
        with self._lock:
            slots = list(self._slots)
        return {s.hazard for s in slots if s.active and s.hazard != _NULL}

    def __repr__(self) -> str:
        return f"HazardBag(slots={len(self._slots)})"


class Shield:
    """Ownership of one hazard slot, used to protect a pointer."""

    def __init__(self, hazards: HazardBag) -> None:
        self._hazards = hazards
        self.slot: Optional[_HazardSlot] = hazards.acquire_slot()

    def set(self, pointer: Any) -> None:
        """Record ``pointer`` in the hazard slot."""
        if self.slot is None:
            raise RuntimeError("shield has been released")
        self.slot.hazard = _address(pointer)

    def clear(self) -> None:
        """Clear the hazard slot."""
        self.set(None)

    @staticmethod
    def validate(pointer: Any, source: AtomicCell) -> None:
        """Check that ``source`` still holds ``pointer``; raise ``PointerChanged`` if not."""
        current = source.load()
        if current is not pointer:
            raise PointerChanged(current)

    def try_protect(self, pointer: Any, source: AtomicCell) -> None:
        """Protect ``pointer`` read from ``source``.

        Raises ``PointerChanged`` and clears the slot if ``source`` moved on.
        """
        self.set(pointer)
        try:
            self.validate(pointer, source)
        except PointerChanged:
            self.clear()
            raise

    def protect(self, source: AtomicCell) -> Any:
        """Return a pointer read from ``source`` that is now protected."""
        pointer = source.load()
        while True:
            try:
                self.try_protect(pointer, source)
            except PointerChanged as changed:
                pointer = changed.current
            else:
                return pointer

    def release(self) -> None:
        """Clear the slot and give it back to the bag."""
        if self.slot is None:
            return
        slot, self.slot = self.slot, None
        self._hazards._release_slot(slot)

    def __enter__(self) -> "Shield":
        return self

    def __exit__(self, *args: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Shield({self.slot!r})"