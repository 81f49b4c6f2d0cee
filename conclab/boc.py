"""Behaviour-oriented concurrency: run code with exclusive access to cowns.

A cown ("concurrent owner") wraps a value that can only be reached from
inside a ``when`` block. A block names the cowns it needs and runs on its own
thread once it holds all of them. Blocks that share a cown run one after
another, in the order they were scheduled. Blocks on disjoint cowns may run
at the same time.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class _Cown:
    """Storage behind a ``CownPtr``; thunks reach the value through ``value``."""

    __slots__ = ("value", "lock", "last")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.lock = threading.Lock()
        # Tail of this cown's request queue.
        self.last: Optional[_Request] = None

    def __repr__(self) -> str:
        return f"CownRef({self.value!r})"


class _Request:
    """One behaviour's place in the queue of one cown."""

    __slots__ = ("target", "next", "linked", "scheduled")

    def __init__(self, target: _Cown) -> None:
        self.target = target
        self.next: Optional[_Behavior] = None
        self.linked = threading.Event()
        self.scheduled = threading.Event()

    def start_enqueue(self, behavior: "_Behavior") -> None:
        """Append to the cown's queue.

        Returns once the previous behaviour on this cown has finished
        enqueueing on all of its cowns, which keeps the enqueue two-phase.
        """
        cown = self.target
        with cown.lock:
            prev, cown.last = cown.last, self
        if prev is None:
            behavior.resolve_one()
            return
        prev.scheduled.wait()
        prev.next = behavior
        prev.linked.set()

    def finish_enqueue(self) -> None:
        """Let later behaviours on this cown continue their enqueue."""
        self.scheduled.set()

    def release(self) -> None:
        """Hand the cown to the next waiting behaviour, if any."""
        cown = self.target
        with cown.lock:
            if cown.last is self:
                cown.last = None
                return
        self.linked.wait()
        assert self.next is not None
        self.next.resolve_one()


class _Behavior:
    """The body of a ``when`` block together with its requests."""

    def __init__(self, requests: List[_Request], thunk: Callable[[], object]) -> None:
        # Requests are taken in a fixed global order to rule out deadlock.
        self.requests = sorted(requests, key=lambda r: id(r.target))
        self._thunk = thunk
        self._count = len(requests) + 1
        self._lock = threading.Lock()

    def schedule(self) -> None:
        """Enqueue on every cown with two-phase locking, then resolve once."""
        for request in self.requests:
            request.start_enqueue(self)
        for request in self.requests:
            request.finish_enqueue()
        self.resolve_one()

    def resolve_one(self) -> None:
        """Resolve one outstanding request; start the thunk after the last."""
        with self._lock:
            self._count -= 1
            ready = self._count == 0
        if ready:
            threading.Thread(target=self._run, name="behaviour").start()

    def _run(self) -> None:
        try:
            self._thunk()
        finally:
            for request in self.requests:
                request.release()


class CownPtr(Generic[T]):
    """A shared handle to a cown; copies refer to the same cown."""

    __slots__ = ("_cown",)

    def __init__(self, value: T) -> None:
        self._cown = _Cown(value)

    def __copy__(self) -> "CownPtr[T]":
        return self

    def __repr__(self) -> str:
        return f"CownPtr(at {id(self._cown):#x})"


def _cowns_of(cowns: Iterable[CownPtr]) -> List[_Cown]:
    result = []
    for pointer in cowns:
        if not isinstance(pointer, CownPtr):
            raise TypeError(f"expected CownPtr, got {type(pointer).__name__}")
        result.append(pointer._cown)
    if len({id(c) for c in result}) != len(result):
        raise ValueError("the same cown is requested more than once")
    return result


def run_when(cowns: Iterable[CownPtr], f: Callable[[List[_Cown]], object]) -> None:
    """Schedule ``f`` to run with exclusive access to ``cowns``.

    ``f`` receives a list with one reference per cown, in the given order;
    each reference exposes the cown's value as its ``value`` attribute.
    """
    refs = _cowns_of(cowns)
    _Behavior([_Request(c) for c in refs], lambda: f(refs)).schedule()


def when(*args: Any) -> None:
    """``when(c1, c2, ..., f)``: schedule ``f(r1, r2, ...)`` over the cowns."""
    if not args or not callable(args[-1]):
        raise TypeError("when() needs the cowns followed by a callable")
    *cowns, f = args
    run_when(cowns, lambda refs: f(*refs))