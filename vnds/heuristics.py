from .algorithm_types import Emphasis
from .applications import Formulation
from .classes import NoInitialSolutionError, SolveResult
from .fixing import fixing_scope, pinned_assignments
from .oracle import SolverOracle, perturbed_objective


def initial_solution(oracle: SolverOracle, formulation: Formulation, time_limit, optimality_gap,
                     solution_limit=1) -> SolveResult:
    """
    first feasible solution of the whole model. The solver is asked for feasibility and stops after solution_limit
    solutions. Families in formulation.initial_fixings are pinned and families in
    formulation.initial_free_objective cost nothing during this solve, both are undone before returning.
    The objective of the result is recomputed with the true costs.
    """
    registry = formulation.registry
    free_objective = {c: 0.0 for name in formulation.initial_free_objective
                      for c in registry.columns(name).tolist()}
    pins = pinned_assignments(formulation, formulation.initial_fixings)

    with perturbed_objective(oracle, free_objective), fixing_scope(oracle, pins):
        result = oracle.solve(time_limit, optimality_gap, Emphasis.FEASIBILITY, solution_limit=solution_limit)

    if not result.has_solution:
        raise NoInitialSolutionError(result.message, result.status)
    result.objective = oracle.objective_of(result.solution)
    return result
