"""Common interface of the concurrent stacks."""

from __future__ import annotations

import random
import threading
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")

ELIM_SIZE = 16
ELIM_DELAY = 0.010  # seconds


def random_elim_index() -> int:
    """Pick an elimination slot at random."""
    return random.randrange(ELIM_SIZE)


class ContentionError(Exception):
    """An operation lost a race with another thread and may be retried."""


class _Atomic:
    """A reference cell with compare-and-exchange by identity."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: Any = None) -> None:
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> Any:
        return self._value

    def store(self, value: Any) -> None:
        with self._lock:
            self._value = value

    def compare_exchange(self, expected: Any, new: Any) -> bool:
        with self._lock:
            if self._value is not expected:
                return False
            self._value = new
            return True


class Stack(ABC, Generic[T]):
    """A stack usable from any number of threads.

    Subclasses provide single attempts; ``push`` and ``pop`` retry them.
    """

    def _new_request(self, value: T) -> Any:
        """Wrap ``value`` into the request that ``try_push`` takes."""
        return value

    @abstractmethod
    def try_push(self, request: Any) -> bool:
        """Try once to push ``request``; return whether it was served."""

    @abstractmethod
    def try_pop(self) -> T:
        """Try once to pop a value.

        Raises ``IndexError`` if the stack is empty and ``ContentionError``
        if the attempt lost a race.
        """

    @abstractmethod
    def is_empty(self) -> bool:
        """Return whether the stack holds no values."""

    def push(self, value: T) -> None:
        """Push ``value``, retrying until it succeeds."""
        request = self._new_request(value)
        while not self.try_push(request):
            pass

    def pop(self) -> T:
        """Pop a value, retrying on contention; raise ``IndexError`` if empty."""
        while True:
            try:
                return self.try_pop()
            except ContentionError:
                continue