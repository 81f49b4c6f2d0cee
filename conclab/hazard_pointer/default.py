"""Process-wide hazard bag and per-thread retired sets."""

from __future__ import annotations

import threading
from typing import Any

from .hazard import HazardBag, Shield
from .retire import Free, RetiredSet

HAZARDS = HazardBag()

_local = threading.local()


def _retired() -> RetiredSet:
    retired = getattr(_local, "retired", None)
    if retired is None:
        retired = _local.retired = RetiredSet(HAZARDS)
    return retired


def default_shield() -> Shield:
    """Return a shield on the global hazard bag."""
    return Shield(HAZARDS)


def retire(pointer: Any, free: Free = None) -> None:
    """Retire ``pointer`` in the current thread's retired set."""
    _retired().retire(pointer, free)


def collect() -> None:
    """Reclaim this thread's retired pointers that no shield protects."""
    _retired().collect()