"""Growable array of atomic cells, organised as a tree of fixed-size segments."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")

SEGMENT_LOGSIZE = 10
SEGMENT_SIZE = 1 << SEGMENT_LOGSIZE
_MASK = SEGMENT_SIZE - 1


class AtomicCell(Generic[T]):
    """A reference cell with compare-and-exchange by identity."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: Optional[T] = None) -> None:
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> Optional[T]:
        """Return the current value."""
        return self._value

    def store(self, value: Optional[T]) -> None:
        """Replace the current value."""
        with self._lock:
            self._value = value

    def compare_exchange(self, expected: Optional[T], new: Optional[T]) -> bool:
        """Set ``new`` if the cell still holds ``expected`` (by identity).

        Returns whether the exchange happened.
        """
        with self._lock:
            if self._value is not expected:
                return False
            self._value = new
            return True

    def __repr__(self) -> str:
        return f"AtomicCell({self._value!r})"


_Segment = Tuple[AtomicCell, ...]


def _new_segment() -> _Segment:
    return tuple(AtomicCell() for _ in range(SEGMENT_SIZE))


@dataclass(frozen=True, eq=False)
class _Root:
    segment: _Segment
    height: int


def _height_for(index: int) -> int:
    return max(1, -(-index.bit_length() // SEGMENT_LOGSIZE))


class GrowableArray(Generic[T]):
    """Unbounded array of ``AtomicCell`` objects, allocated on demand.

    Internal segments hold cells pointing to child segments; the lowest
    segments hold the element cells handed out by ``get``. The tree grows
    upwards by placing the old root under slot 0 of a new root, so cells
    already handed out stay where they are.
    """

    def __init__(self) -> None:
        self._root: AtomicCell[_Root] = AtomicCell()

    def height(self) -> int:
        """Return the number of segment levels; 0 before the first ``get``."""
        root = self._root.load()
        return 0 if root is None else root.height

    def _grow_to(self, height: int) -> _Root:
        while True:
            root = self._root.load()
            if root is not None and root.height >= height:
                return root
            if root is None:
                new = _Root(_new_segment(), 1)
            else:
                segment = _new_segment()
                segment[0].store(root.segment)
                new = _Root(segment, root.height + 1)
            self._root.compare_exchange(root, new)

    def get(self, index: int) -> AtomicCell[T]:
        """Return the cell at ``index``, allocating segments if necessary."""
        if index < 0:
            raise IndexError("index must be non-negative")
        root = self._grow_to(_height_for(index))
        segment: Any = root.segment
        for level in range(root.height - 1, 0, -1):
            cell = segment[(index >> (level * SEGMENT_LOGSIZE)) & _MASK]
            child = cell.load()
            if child is None:
                fresh = _new_segment()
                child = fresh if cell.compare_exchange(None, fresh) else cell.load()
            segment = child
        return segment[index & _MASK]

    def __repr__(self) -> str:
        return f"GrowableArray(height={self.height()})"