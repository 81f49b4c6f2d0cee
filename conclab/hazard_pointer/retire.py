"""Per-thread list of retired pointers awaiting reclamation."""

from __future__ import annotations

import time
from typing import Any, Callable, List, Optional, Tuple

from .hazard import HazardBag

Free = Optional[Callable[[Any], object]]


class RetiredSet:
    """Retired pointers, reclaimed once no hazard protects them."""

    THRESHOLD = 64

    def __init__(self, hazards: HazardBag) -> None:
        self._hazards = hazards
        self._retired: List[Tuple[Any, Free]] = []

    def retire(self, pointer: Any, free: Free = None) -> None:
        """Retire ``pointer``; ``free`` is called with it when it is reclaimed.

        A collection runs once ``THRESHOLD`` pointers are waiting.
        """
        self._retired.append((pointer, free))
        if len(self._retired) >= self.THRESHOLD:
            self.collect()

    def collect(self) -> None:
        """Reclaim every retired pointer that no shield protects."""
        hazards = self._hazards.all_hazards()
        kept, reclaimed = [], []
        for entry in self._retired:
            (kept if id(entry[0]) in hazards else reclaimed).append(entry)
        self._retired = kept
        for pointer, free in reclaimed:
            if free is not None:
                free(pointer)

    def drain(self) -> None:
        """Collect repeatedly until every retired pointer is reclaimed."""
        while self._retired:
            self.collect()
            if self._retired:
                time.sleep(0)

    def __len__(self) -> int:
        return len(self._retired)

    def __repr__(self) -> str:
        return f"RetiredSet(pending={len(self._retired)})"