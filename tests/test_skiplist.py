import random

import pytest

from gamekit.skiplist import SkipList


def test_add_and_iterate_sorted():
    sl = SkipList(random.Random(1))
    for value in [5, 3, 9, 1, 7]:
        assert sl.add(value)
    assert list(sl) == [1, 3, 5, 7, 9]
    assert len(sl) == 5


def test_add_rejects_duplicates():
    sl = SkipList(random.Random(2))
    assert sl.add(4)
    assert not sl.add(4)
    assert len(sl) == 1


@pytest.mark.parametrize("value", [0, -3])
def test_add_rejects_non_positive(value):
    sl = SkipList()
    assert not sl.add(value)
    assert len(sl) == 0


def test_add_rejects_values_wider_than_32_bits():
    with pytest.raises(ValueError):
        SkipList().add(2**32)


def test_contains():
    sl = SkipList(random.Random(3))
    sl.add(10)
    sl.add(20)
    assert 10 in sl
    assert 20 in sl
    assert 15 not in sl
    assert 0 not in sl


def test_delete():
    sl = SkipList(random.Random(4))
    for value in [1, 2, 3]:
        sl.add(value)
    assert sl.delete(2)
    assert list(sl) == [1, 3]
    assert 2 not in sl
    assert not sl.delete(2)
    assert len(sl) == 2


def test_delete_missing_from_empty():
    sl = SkipList()
    assert not sl.delete(1)
    assert len(sl) == 0


def test_reuse_after_emptying():
    sl = SkipList(random.Random(5))
    for value in [8, 6]:
        sl.add(value)
    assert sl.delete(8)
    assert sl.delete(6)
    assert list(sl) == []
    assert sl.add(7)
    assert sl.add(2)
    assert list(sl) == [2, 7]


def test_matches_reference_set():
    rng = random.Random(6)
    sl = SkipList(random.Random(7))
    reference: set[int] = set()
    for _ in range(2000):
        value = rng.randint(1, 300)
        if rng.random() < 0.6:
            assert sl.add(value) == (value not in reference)
            reference.add(value)
        else:
            assert sl.delete(value) == (value in reference)
            reference.discard(value)
        assert len(sl) == len(reference)
    assert list(sl) == sorted(reference)
    assert all(value in sl for value in reference)