import threading

from conclab.growable_array import AtomicCell
from conclab.hazard_pointer.hazard import HazardBag, Shield
from conclab.hazard_pointer.retire import RetiredSet


class Tester:
    def __init__(self, index):
        self.index = index


def test_retire_threshold_collect():
    hazards = HazardBag()
    retires = RetiredSet(hazards)
    freed = set()
    for i in range(RetiredSet.THRESHOLD):
        retires.retire(Tester(i), lambda t: freed.add(t.index))
    assert freed == set(range(RetiredSet.THRESHOLD))
    assert len(retires) == 0


def test_below_threshold_nothing_freed():
    retires = RetiredSet(HazardBag())
    freed = []
    for i in range(RetiredSet.THRESHOLD - 1):
        retires.retire(Tester(i), freed.append)
    assert freed == []
    assert len(retires) == RetiredSet.THRESHOLD - 1


def test_protected_pointer_is_kept():
    hazards = HazardBag()
    retires = RetiredSet(hazards)
    node = Tester(7)
    source = AtomicCell(node)
    shield = Shield(hazards)
    assert shield.protect(source) is node
    source.store(None)

    freed = []
    retires.retire(node, freed.append)
    retires.collect()
    assert freed == []
    assert len(retires) == 1

    shield.release()
    retires.collect()
    assert freed == [node]
    assert len(retires) == 0


def test_drain_waits_for_release():
    hazards = HazardBag()
    retires = RetiredSet(hazards)
    node = Tester(1)
    shield = Shield(hazards)
    shield.set(node)
    freed = []
    retires.retire(node, freed.append)

    timer = threading.Timer(0.05, shield.release)
    timer.start()
    retires.drain()
    timer.join()
    assert freed == [node]


def test_retire_without_free_drops_entry():
    retires = RetiredSet(HazardBag())
    retires.retire(Tester(0))
    retires.collect()
    assert len(retires) == 0