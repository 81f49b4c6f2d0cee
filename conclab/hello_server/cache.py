"""Thread-safe key/value cache that computes each value once."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_PARTITIONS = 32


class _Slot:
    __slots__ = ("ready", "value", "failed")

    def __init__(self) -> None:
        self.ready = threading.Event()
        self.value = None
        self.failed = False


class _Partition:
    __slots__ = ("lock", "slots")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.slots: Dict[object, _Slot] = {}


class Cache(Generic[K, V]):
    """Cache that remembers the result for each key.

    Computations for different keys run concurrently; concurrent requests for
    the same key share a single computation.
    """

    def __init__(self, partitions: int = DEFAULT_PARTITIONS) -> None:
        if partitions < 1:
            raise ValueError("a cache needs at least one partition")
        self._partitions = tuple(_Partition() for _ in range(partitions))

    def get_or_insert_with(self, key: K, f: Callable[[K], V]) -> V:
        """Return the cached value for ``key``, computing it with ``f`` if needed.

        ``f`` runs at most once per key unless it raises, in which case the
        error propagates and a later call may try again.
        """
        partition = self._partitions[hash(key) % len(self._partitions)]
        while True:
            with partition.lock:
                slot = partition.slots.get(key)
                owner = slot is None
                if owner:
                    slot = partition.slots[key] = _Slot()
            if owner:
                return self._fill(partition, key, slot, f)
            slot.ready.wait()
            if not slot.failed:
                return slot.value  # type: ignore[return-value]

    @staticmethod
    def _fill(partition: _Partition, key: K, slot: _Slot, f: Callable[[K], V]) -> V:
        try:
            value = f(key)
        except BaseException:
            with partition.lock:
                del partition.slots[key]
            slot.failed = True
            slot.ready.set()
            raise
        slot.value = value
        slot.ready.set()
        return value