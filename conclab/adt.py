"""Abstract interfaces for concurrent maps and sets."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")


class DuplicateKeyError(KeyError):
    """Raised by ``ConcurrentMap.insert`` when the key is already present.

    The rejected value is handed back in ``value``.
    """

    def __init__(self, key: object, value: object) -> None:
        super().__init__(key)
        self.key = key
        self.value = value


class ConcurrentMap(ABC, Generic[K, V]):
    """A key-value map that may be used from many threads at once."""

    @abstractmethod
    def lookup(self, key: K) -> Optional[V]:
        """Return the value stored for ``key``, or ``None`` if there is none."""

    @abstractmethod
    def insert(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``.

        Raises ``DuplicateKeyError`` carrying ``value`` if the key is present.
        """

    @abstractmethod
    def delete(self, key: K) -> V:
        """Remove ``key`` and return its value; raise ``KeyError`` if absent."""


class ConcurrentSet(ABC, Generic[T]):
    """A set that may be used from many threads at once."""

    @abstractmethod
    def contains(self, value: T) -> bool:
        """Return whether the set holds ``value``."""

    @abstractmethod
    def insert(self, value: T) -> bool:
        """Add ``value``; return whether it was newly inserted."""

    @abstractmethod
    def remove(self, value: T) -> bool:
        """Remove ``value``; return whether it was present."""

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]