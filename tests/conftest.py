import numpy as np
import pytest

from vnds.algorithm_types import Emphasis, NeighborhoodType, SolveStatus
from vnds.applications import Formulation
from vnds.classes import RowInvariantError, SearchParams, SolveResult
from vnds.oracle import SolverOracle
from vnds.registry import VariableRegistry


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeOracle(SolverOracle):
    """
    in-memory oracle that replays scripted results. Every solve advances the clock by min(solve_time, time_limit)
    and records what the model looked like at that moment.
    """

    def __init__(self, registry, results=(), base_obj=None, clock=None, solve_time=1.0, original_rows=7, default=None):
        self.registry = registry
        self.results = list(results)
        self.default = default
        self.clock = clock or FakeClock()
        self.solve_time = solve_time
        self._original_rows = original_rows
        self.rows = [("base", i) for i in range(original_rows)]
        self.base_obj = np.zeros(registry.num_columns) if base_obj is None else np.array(base_obj, dtype=float)
        self.obj = self.base_obj.copy()
        self.solves = []
        self.starts = []

    @property
    def num_columns(self):
        return self.registry.num_columns

    @property
    def original_row_count(self):
        return self._original_rows

    @property
    def fixed(self):
        return dict(self.rows[self._original_rows:])

    def solve(self, time_limit, optimality_gap, emphasis=Emphasis.OPTIMALITY, solution_limit=None):
        self.solves.append(dict(time_limit=time_limit, emphasis=emphasis, solution_limit=solution_limit,
                                fixed=self.fixed, obj=self.obj.copy(), at=self.clock()))
        self.clock.advance(min(self.solve_time, max(0, time_limit)))
        if self.results:
            r = self.results.pop(0)
        elif self.default is not None:
            r = self.default
        else:
            r = SolveResult(SolveStatus.NO_SOLUTION)
        if callable(r):
            r = r(self)
        return r

    def row_count(self):
        return len(self.rows)

    def fix(self, column, value):
        self.rows.append((column, value))

    def unfix_all_since(self, checkpoint):
        if checkpoint < self._original_rows:
            raise RowInvariantError(f"checkpoint {checkpoint} below {self._original_rows}")
        del self.rows[checkpoint:]

    def perturb_objective(self, coefficients):
        for c, v in coefficients.items():
            self.obj[c] = v

    def restore_objective(self, coefficients):
        for c in coefficients:
            self.obj[c] = self.base_obj[c]

    def objective_of(self, solution):
        return float(self.base_obj @ np.asarray(solution, dtype=float))

    def set_start(self, solution):
        self.starts.append(np.array(solution, dtype=float))


def make_registry(vehicles=3, customers=10, days=5):
    r = VariableRegistry()
    vmd = (("vehicle", vehicles), ("customer", customers), ("day", days))
    r.add_family("y1", vmd, vtype='B')
    r.add_family("y2", vmd, vtype='I')
    r.add_family("x1", vmd)
    r.add_family("w", (("customer", customers), ("day", days)), vtype='B')
    r.add_family("z", vtype='I')
    return r


def make_formulation(registry=None, **dims):
    registry = registry or make_registry(**dims)
    return Formulation(registry,
                       dimensions={NeighborhoodType.VEHICLES: "vehicle",
                                   NeighborhoodType.DAYS: "day",
                                   NeighborhoodType.CUSTOMERS: "customer"},
                       fixable={NeighborhoodType.VEHICLES: ["y1", "y2"],
                                NeighborhoodType.DAYS: ["y1", "y2", "w"],
                                NeighborhoodType.CUSTOMERS: ["y1", "y2", "w"]},
                       shake_families=["y1", "y2"])


def cost_vector(registry):
    """objective that only counts z, so a solution's cost is its z entry"""
    obj = np.zeros(registry.num_columns)
    obj[registry.index_of("z")] = 1.0
    return obj


def solution_with_cost(registry, cost, fill=0.0):
    sol = np.full(registry.num_columns, fill, dtype=float)
    sol[registry.index_of("z")] = cost
    return sol


def feasible(registry, cost, status=SolveStatus.FEASIBLE_TIMEOUT, fill=0.0):
    return SolveResult(status, objective=cost, solution=solution_with_cost(registry, cost, fill), runtime=0.5)


@pytest.fixture
def registry():
    return make_registry()


@pytest.fixture
def formulation(registry):
    return make_formulation(registry)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def params():
    return SearchParams(total_timelimit=100, subproblem_timelimit=5, initial_timelimit=10, seed=3, sweep=False)
