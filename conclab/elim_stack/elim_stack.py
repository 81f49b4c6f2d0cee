"""Elimination-backoff stack."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Any, Optional, Tuple, TypeVar

from .stack import ELIM_DELAY, ELIM_SIZE, ContentionError, Stack, _Atomic, random_elim_index
from .treiber_stack import TreiberStack

T = TypeVar("T")


class _Tag(IntEnum):
    PUSH = 1
    ACKNOWLEDGED = 3


class ElimStack(Stack[T]):
    """Stack that pairs up colliding pushes and pops in an elimination array.

    When the inner stack loses a race, a push offers its request in a random
    slot for a short while and a pop takes any request it finds there.
    The inner stack's requests must expose their value as ``data``.
    """

    def __init__(self, inner: Optional[Stack[T]] = None) -> None:
        self.inner: Stack[T] = TreiberStack() if inner is None else inner
        self._slots = tuple(_Atomic(None) for _ in range(ELIM_SIZE))

    def _new_request(self, value: T) -> Any:
        return self.inner._new_request(value)

    def try_push(self, request: Any) -> bool:
        if self.inner.try_push(request):
            return True

        slot = self._slots[random_elim_index()]
        if slot.load() is not None:
            return False
        offer: Tuple[_Tag, Any] = (_Tag.PUSH, request)
        if not slot.compare_exchange(None, offer):
            return False

        time.sleep(ELIM_DELAY)

        if slot.compare_exchange(offer, None):
            # Nobody took the offer; the caller keeps the request.
            return False
        # A pop acknowledged the request: clear the slot for others.
        slot.store(None)
        return True

    def try_pop(self) -> T:
        try:
            return self.inner.try_pop()
        except ContentionError:
            pass

        slot = self._slots[random_elim_index()]
        current = slot.load()
        if current is None or current[0] is not _Tag.PUSH:
            raise ContentionError
        if not slot.compare_exchange(current, (_Tag.ACKNOWLEDGED, current[1])):
            raise ContentionError
        return current[1].data

    def is_empty(self) -> bool:
        return self.inner.is_empty()

    def __repr__(self) -> str:
        return f"ElimStack({self.inner!r})"