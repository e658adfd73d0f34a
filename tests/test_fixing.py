import random

import numpy as np
import pytest

from vnds.algorithm_types import NeighborhoodType as NT
from vnds.classes import RowInvariantError
from vnds.fixing import fixed_assignments, fixing_scope, neighborhood_fixing, pinned_assignments
from vnds.neighborhoods import NeighborhoodGenerator

from conftest import FakeOracle


@pytest.fixture
def gen(formulation):
    return NeighborhoodGenerator({t: (formulation.dimensions[t], formulation.dimension_count(t))
                                  for t in formulation.neighborhood_types}, random.Random(5))


@pytest.fixture
def baseline(registry):
    rng = np.random.default_rng(0)
    return rng.integers(0, 3, registry.num_columns).astype(float)


def test_row_count_restored(formulation, registry, gen, baseline):
    oracle = FakeOracle(registry)
    before = oracle.row_count()
    with neighborhood_fixing(oracle, formulation, gen.sample(NT.DAYS, 2), baseline) as added:
        assert added > 0
        assert oracle.row_count() == before + added
    assert oracle.row_count() == before


def test_fixes_everything_outside_the_neighborhood(formulation, registry, gen, baseline):
    oracle = FakeOracle(registry)
    n = gen.sample(NT.VEHICLES, 1)
    free_vehicle = next(iter(n.free))
    with neighborhood_fixing(oracle, formulation, n, baseline):
        fixed = oracle.fixed
    expected = set()
    for v in range(3):
        if v != free_vehicle:
            expected |= set(registry.columns("y1", vehicle=v).tolist())
            expected |= set(registry.columns("y2", vehicle=v).tolist())
    assert set(fixed) == expected
    assert all(fixed[c] == baseline[c] for c in fixed)


def test_continuous_families_are_never_fixed(formulation, registry, gen, baseline):
    n = gen.sample(NT.CUSTOMERS, 2)
    cols = {c for c, _ in fixed_assignments(formulation, n, baseline)}
    x1 = set(registry.columns("x1").tolist())
    assert not cols & x1
    assert registry.index_of("z") not in cols


def test_integer_values_are_rounded(formulation, registry, gen):
    baseline = np.full(registry.num_columns, 0.9999999)
    values = {v for _, v in fixed_assignments(formulation, gen.sample(NT.DAYS, 1), baseline)}
    assert values == {1.0}


def test_full_neighborhood_adds_no_rows(formulation, registry, gen, baseline):
    oracle = FakeOracle(registry)
    before = oracle.row_count()
    with neighborhood_fixing(oracle, formulation, gen.sample(NT.VEHICLES, 3), baseline) as added:
        assert added == 0
    assert oracle.row_count() == before


def test_rows_released_when_the_solve_raises(formulation, registry, gen, baseline):
    oracle = FakeOracle(registry)
    before = oracle.row_count()
    with pytest.raises(RuntimeError):
        with neighborhood_fixing(oracle, formulation, gen.sample(NT.DAYS, 1), baseline):
            raise RuntimeError("solver crashed")
    assert oracle.row_count() == before


def test_rows_released_when_a_fix_fails(registry):
    class Failing(FakeOracle):
        def fix(self, column, value):
            if len(self.rows) > self.original_row_count + 2:
                raise ValueError("bad row")
            super().fix(column, value)

    oracle = Failing(registry)
    with pytest.raises(ValueError):
        with fixing_scope(oracle, [(i, 0.0) for i in range(10)]):
            pass
    assert oracle.row_count() == oracle.original_row_count


def test_unfix_below_base_rows_fails(registry):
    oracle = FakeOracle(registry)
    with pytest.raises(RowInvariantError):
        oracle.unfix_all_since(oracle.original_row_count - 1)


def test_pinned_assignments(formulation, registry):
    pins = pinned_assignments(formulation, {"y2": 0.0})
    assert [c for c, _ in pins] == registry.columns("y2").tolist()
    assert {v for _, v in pins} == {0.0}
