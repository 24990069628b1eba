import random
from collections import Counter

from tetris_engine.game import BagRandomizer, TetrominoType


def test_every_bag_is_a_permutation():
    bag = BagRandomizer(random.Random(42))
    draws = [bag.next() for _ in range(7 * 20)]
    for start in range(0, len(draws), 7):
        assert sorted(draws[start:start + 7]) == sorted(TetrominoType)


def test_counts_are_balanced_over_whole_bags():
    bag = BagRandomizer(random.Random(7))
    counts = Counter(bag.next() for _ in range(7 * 9))
    assert set(counts.values()) == {9}


def test_same_seed_same_sequence():
    a = BagRandomizer(random.Random(123))
    b = BagRandomizer(random.Random(123))
    assert [a.next() for _ in range(30)] == [b.next() for _ in range(30)]


def test_no_type_waits_more_than_twelve_draws():
    bag = BagRandomizer(random.Random(5))
    draws = [bag.next() for _ in range(7 * 50)]
    last_seen = {}
    for i, kind in enumerate(draws):
        if kind in last_seen:
            assert i - last_seen[kind] <= 13
        last_seen[kind] = i

