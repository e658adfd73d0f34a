import random

import pytest

from vnds.algorithm_types import NeighborhoodType as NT
from vnds.neighborhoods import NeighborhoodGenerator


@pytest.fixture
def gen():
    return NeighborhoodGenerator({NT.DAYS: ("day", 5), NT.VEHICLES: ("vehicle", 3), NT.CUSTOMERS: ("customer", 10)},
                                 random.Random(7))


def test_sample_distinct_and_in_range(gen):
    for _ in range(50):
        n = gen.sample(NT.CUSTOMERS, 4)
        assert n.size == 4
        assert all(0 <= i < 10 for i in n.free)
        assert not n.is_full
        assert len(n.fixed_groups) == 6
        assert {g.dim for g in n.groups} == {"customer"}


def test_size_at_or_above_dimension_is_full(gen):
    for size in (5, 6, 100):
        n = gen.sample(NT.DAYS, size)
        assert n.is_full
        assert n.fixed_groups == []


def test_sample_is_reproducible():
    dims = {NT.DAYS: ("day", 20)}
    a = NeighborhoodGenerator(dims, random.Random(1))
    b = NeighborhoodGenerator(dims, random.Random(1))
    assert [a.sample(NT.DAYS, 3).free for _ in range(5)] == [b.sample(NT.DAYS, 3).free for _ in range(5)]


def test_sweep_covers_every_group_once(gen):
    blocks = list(gen.sweep(NT.CUSTOMERS, 3))
    assert [sorted(b.free) for b in blocks] == [[0, 1, 2], [3, 4, 5], [6, 7, 8], [9]]
    covered = [i for b in blocks for i in b.free]
    assert sorted(covered) == list(range(10))


def test_invalid_requests(gen):
    with pytest.raises(ValueError):
        gen.sample(NT.DAYS, 0)
    small = NeighborhoodGenerator({NT.DAYS: ("day", 5)}, random.Random(0))
    with pytest.raises(KeyError):
        small.sample(NT.VEHICLES, 1)
