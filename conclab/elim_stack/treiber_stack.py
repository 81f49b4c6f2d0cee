"""Treiber's lock-free stack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .stack import ContentionError, Stack, _Atomic

T = TypeVar("T")


@dataclass(eq=False)
class Node(Generic[T]):
    """A stack node; also the push request of ``TreiberStack``."""

    data: T
    next: Optional["Node[T]"] = None


class TreiberStack(Stack[T]):
    """Lock-free stack usable with any number of producers and consumers."""

    def __init__(self) -> None:
        self._head = _Atomic(None)

    def _new_request(self, value: T) -> Node[T]:
        return Node(value)

    def try_push(self, request: Node[T]) -> bool:
        head = self._head.load()
        request.next = head
        return self._head.compare_exchange(head, request)

    def try_pop(self) -> T:
        head = self._head.load()
        if head is None:
            raise IndexError("pop from empty stack")
        if not self._head.compare_exchange(head, head.next):
            raise ContentionError
        return head.data

    def is_empty(self) -> bool:
        return self._head.load() is None

    def __repr__(self) -> str:
        return f"TreiberStack(empty={self.is_empty()})"


__all__ = ["Node", "TreiberStack", "Any"]