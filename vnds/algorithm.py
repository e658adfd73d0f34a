import random
import time

import numpy as np

ALG_VERSION = "v1"

from . import heuristics, shaking
from .helper import vprint, fseconds, make_log

from .algorithm_types import NeighborhoodType, SearchState

from .applications import Formulation
from .classes import SearchParams, SearchStats, TimeExpired
from .fixing import neighborhood_fixing
from .incumbent import IncumbentTracker
from .neighborhoods import Neighborhood, NeighborhoodGenerator
from .oracle import GurobiOracle, SolverOracle


def log(s, params):
    if params.logfile:
        params.logfile.write(s)
        params.logfile.flush()
    else:
        print(s, end="")


class VNDSController:
    """
    variable neighborhood descent with shaking on top of a solver oracle.

    Every sub-problem fixes all groups outside a neighborhood to the incumbent and lets the solver optimize the rest.
    Sizes grow per type after stagnation_threshold attempts without improvement and wrap back to min_size once they
    exceed the dimension. A pass over all types without improvement converges and triggers a shake.
    The global deadline is checked before every solve, a solve never runs longer than the remaining budget.
    """

    def __init__(self, oracle: SolverOracle, formulation: Formulation, params: SearchParams,
                 clock=time.perf_counter, log=None, starttime=None):
        self.oracle = oracle
        self.formulation = formulation
        self.params = params
        self.options = params.options
        self.clock = clock
        self.starttime = clock() if starttime is None else starttime
        self.log = log if log is not None else make_log(params, self.starttime, clock)
        self.rng = random.Random(params.seed)

        self.types = [t for t in self.options.type_order if t in formulation.neighborhood_types]
        if not self.types:
            raise ValueError("The formulation offers none of the configured neighborhood types.")
        self.generator = NeighborhoodGenerator(
            {t: (formulation.dimensions[t], formulation.dimension_count(t)) for t in self.types}, self.rng)
        self.sizes = {t: self.options.size_for(t) for t in self.types}
        self.stagnation = {t: 0 for t in self.types}

        self.state = SearchState.SEARCHING
        self.current = None
        self.incumbent: IncumbentTracker = None
        self.stats = SearchStats(attempts={t: 0 for t in self.types}, improvements={t: 0 for t in self.types})

    def elapsed(self):
        return self.clock() - self.starttime

    def remaining(self):
        return self.params.total_timelimit - self.elapsed()

    def check_time(self):
        if self.remaining() <= 0:
            self.state = SearchState.TIME_EXPIRED
            raise TimeExpired(f"Time limit of {fseconds(self.params.total_timelimit)} reached.")

    def _record(self, result):
        self.stats.TIME_SOLVER += result.runtime
        if not result.has_solution:
            self.stats.FAILED_SOLVES += 1
            if result.message:
                self.log(f"   Solver failed: {result.message}\n")
        return result

    def initial_solution(self):
        time_limit = max(0, min(self.params.initial_timelimit, self.remaining()))
        t0 = self.clock()
        result = heuristics.initial_solution(self.oracle, self.formulation, time_limit,
                                             self.params.optimality_gap, self.params.initial_solution_limit)
        self._record(result)
        self.stats.TIME_INITIAL = self.clock() - t0
        self.incumbent = IncumbentTracker(result.solution, result.objective, self.params.improvement_eps,
                                          elapsed=self.elapsed())
        self.current = np.array(result.solution, dtype=float)
        self.stats.INITIAL_COST = result.objective
        self.log(f"Initial solution with cost {result.objective:.3f} in {fseconds(self.stats.TIME_INITIAL)} "
                 f"({result.status.str_reason(end=')')}\n")
        return result

    def evaluate(self, neighborhood: Neighborhood):
        """
        solves the sub-problem of one neighborhood. Fixing rows are gone again when this returns or raises.
        """
        self.check_time()
        if self.params.warm_start_current:
            self.oracle.set_start(self.current)
        time_limit = min(self.params.subproblem_timelimit, self.remaining())
        with neighborhood_fixing(self.oracle, self.formulation, neighborhood, self.incumbent.solution) as n_fixed:
            vprint(2, f"   {neighborhood}: {n_fixed} columns fixed, time limit {fseconds(time_limit)}")
            result = self.oracle.solve(time_limit, self.params.optimality_gap)
        self.stats.ITERATIONS += 1
        return self._record(result)

    def accept(self, result, ntype=None) -> bool:
        if not result.has_solution:
            return False
        if not self.incumbent.offer(result.solution, result.objective, elapsed=self.elapsed()):
            return False
        self.current = np.array(result.solution, dtype=float)
        self.stats.IMPROVEMENTS += 1
        if ntype is not None:
            self.stats.improvements[ntype] += 1
        self.log(f"+ New incumbent {self.incumbent.objective:.3f}"
                 f"{' (' + ntype.label + ')' if ntype is not None else ''}\n")
        return True

    def sweep(self, ntype=NeighborhoodType.CUSTOMERS):
        """
        visits contiguous blocks of the given type once each. Stagnation counters and sizes are left alone.
        """
        if ntype not in self.types:
            return False
        improved = False
        self.log(f"Sweeping {ntype.label} in blocks of {self.sizes[ntype]}\n")
        for neighborhood in self.generator.sweep(ntype, self.sizes[ntype]):
            result = self.evaluate(neighborhood)
            improved |= self.accept(result, ntype)
        return improved

    def _grow(self, ntype: NeighborhoodType):
        self.sizes[ntype] += 1
        if self.sizes[ntype] > self.generator.dimension_count(ntype):
            self.sizes[ntype] = self.options.min_size
        self.stagnation[ntype] = 0
        vprint(1, f"   size of {ntype.label} neighborhoods is now {self.sizes[ntype]}")

    def search_neighborhood(self, ntype: NeighborhoodType) -> bool:
        neighborhood = self.generator.sample(ntype, self.sizes[ntype])
        self.stats.attempts[ntype] += 1
        result = self.evaluate(neighborhood)
        if self.accept(result, ntype):
            self.stagnation[ntype] = 0
            self.state = SearchState.SEARCHING
            return True
        self.stagnation[ntype] += 1
        self.state = SearchState.STAGNATED
        if self.stagnation[ntype] >= self.options.threshold_for(ntype):
            self._grow(ntype)
        return False

    def vnd_pass(self) -> bool:
        order = list(self.types)
        if self.params.shuffle_types:
            self.rng.shuffle(order)
        any_improvement = False
        for ntype in order:
            any_improvement |= self.search_neighborhood(ntype)
        self.stats.PASSES += 1
        if not any_improvement:
            self.state = SearchState.CONVERGED
        return any_improvement

    def shake(self):
        """
        replaces the current solution by the solution of a randomly perturbed, unfixed model, also when it is worse
        """
        self.check_time()
        time_limit = min(self.params.subproblem_timelimit, self.remaining())
        result = self._record(shaking.shake(self.oracle, self.formulation, self.rng, time_limit,
                                            self.params.optimality_gap, self.params.shake_coefficient_range))
        self.stats.SHAKES += 1
        self.state = SearchState.SEARCHING
        if not result.has_solution:
            self.log(f"   Shake: {result.status.str_reason()}")
            return result
        self.current = np.array(result.solution, dtype=float)
        self.log(f"   Shake: current cost {result.objective:.3f}\n")
        self.accept(result)
        return result

    def run(self):
        """
        :return: (SearchStats, best solution vector). Raises NoInitialSolutionError if there is nothing to improve.
        """
        self.initial_solution()
        try:
            if self.params.sweep:
                self.sweep()
            while True:
                if not self.vnd_pass() and self.params.shake:
                    self.shake()
        except TimeExpired as e:
            self.log(f"# {e} #\n")
        finally:
            s = self.stats
            s.TIME_TOT = self.elapsed()
            s.COST = self.incumbent.objective
            s.SOLUTION = self.incumbent.solution
            s.history = list(self.incumbent.history)

        self.log(f"Final cost = {s.COST:.3f} (initial {s.INITIAL_COST:.3f})\n")
        self.log(f"ITERATIONS = {s.ITERATIONS}, IMPROVEMENTS = {s.IMPROVEMENTS}, PASSES = {s.PASSES}, "
                 f"SHAKES = {s.SHAKES}, FAILED_SOLVES = {s.FAILED_SOLVES}\n")
        self.log(f"TIME_SOLVER = {s.TIME_SOLVER:.3f}, TIME_TOT = {s.TIME_TOT:.3f}\n")
        return s, self.incumbent.solution


def vndsAlgorithm(params: SearchParams, clock=time.perf_counter):
    """
    builds the model of params.app and improves it with VNDS until params.total_timelimit is used up.
    The budget includes building the model.
    :return: (SearchStats, plan of the best solution)
    """
    starttime = clock()
    log(f"({ALG_VERSION}) VNDS on {params.n_threads} threads\n", params)
    strings = params.app.inst.strings
    if strings is not None:
        log(f"{strings.APPLICATION_NAME} instance {strings.UNIQUE_IDENTIFIER}: {strings.ALG_INTRO_TEXT}", params)
    log(f"with options: {params.options}\n", params)
    log(f"Total timelimit = {params.total_timelimit}s, sub-problem timelimit = {params.subproblem_timelimit}s\n",
        params)

    model = params.app.Model(params.app.inst, LogFile=params.model_logfile, Threads=params.n_threads)
    oracle = GurobiOracle(model)
    controller = VNDSController(oracle, model.formulation, params, clock=clock, starttime=starttime)
    s, best = controller.run()
    log(f"Gurobi ran {fseconds(model._accRuntime)} ({fseconds(model._accProctime)} proc time)\n", params)
    ret = model.get_plan(best)
    return s, ret
