import threading

import pytest

from conclab.adt import ConcurrentMap, ConcurrentSet, DuplicateKeyError


class DictMap(ConcurrentMap):
    def __init__(self):
        self._lock = threading.Lock()
        self._data = {}

    def lookup(self, key):
        with self._lock:
            return self._data.get(key)

    def insert(self, key, value):
        with self._lock:
            if key in self._data:
                raise DuplicateKeyError(key, value)
            self._data[key] = value

    def delete(self, key):
        with self._lock:
            return self._data.pop(key)


class LockedSet(ConcurrentSet):
    def __init__(self):
        self._lock = threading.Lock()
        self._items = set()

    def contains(self, value):
        with self._lock:
            return value in self._items

    def insert(self, value):
        with self._lock:
            if value in self._items:
                return False
            self._items.add(value)
            return True

    def remove(self, value):
        with self._lock:
            if value not in self._items:
                return False
            self._items.discard(value)
            return True


def test_abstract_map_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ConcurrentMap()


def test_abstract_set_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ConcurrentSet()


def test_map_insert_lookup_delete():
    m = DictMap()
    m.insert(1, "one")
    assert m.lookup(1) == "one"
    with pytest.raises(DuplicateKeyError) as info:
        m.insert(1, "uno")
    expected = DuplicateKeyError(1, "uno")
    assert str(info.value) == str(expected)
    assert m.delete(1) == "one"
    assert m.lookup(1) is None
    with pytest.raises(KeyError):
        m.delete(1)


def test_duplicate_insert_returns_value():
    m = DictMap()
    m.insert(5, "first")
    with pytest.raises(DuplicateKeyError) as info:
        m.insert(5, "second")
    assert info.value.value == "second"
    assert info.value.key == 5
    assert m.lookup(5) == "first"
    direct = DuplicateKeyError(5, "second")
    assert (direct.key, direct.value) == (info.value.key, info.value.value)


def test_duplicate_key_error_is_key_error():
    err = DuplicateKeyError(7, "seven")
    assert isinstance(err, KeyError)
    assert err.key == 7
    assert err.value == "seven"


def test_set_membership_operator_uses_contains():
    s = LockedSet()
    assert s.insert(3) is True
    assert s.insert(3) is False
    assert ConcurrentSet.__contains__(s, 3) is True
    assert 3 in s
    assert s.remove(3) is True
    assert ConcurrentSet.__contains__(s, 3) is False
    assert 3 not in s
    assert s.remove(3) is False