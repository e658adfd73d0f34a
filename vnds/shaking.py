import random
from typing import Dict

import numpy as np

from .algorithm_types import Emphasis
from .applications import Formulation
from .classes import SolveResult
from .oracle import SolverOracle, perturbed_objective


def shake_coefficients(formulation: Formulation, rng: random.Random, coefficient_range=(1e-3, 1.0)) -> Dict[int, float]:
    """
    uniform random positive cost for every column of the shake families (first and second trips)
    """
    low, high = coefficient_range
    if low <= 0 or high < low:
        raise ValueError(f"Shake coefficients need 0 < low <= high, got {coefficient_range}.")
    parts = [formulation.registry.columns(name) for name in formulation.shake_families]
    if not parts:
        return {}
    return {c: rng.uniform(low, high) for c in np.concatenate(parts).tolist()}


def shake(oracle: SolverOracle, formulation: Formulation, rng: random.Random, time_limit, optimality_gap,
          coefficient_range=(1e-3, 1.0)) -> SolveResult:
    """
    solves the free model under a randomly perturbed objective. The returned objective is the true one, the
    perturbed coefficients are gone again once this returns.
    """
    coefficients = shake_coefficients(formulation, rng, coefficient_range)
    with perturbed_objective(oracle, coefficients):
        result = oracle.solve(time_limit, optimality_gap, Emphasis.OPTIMALITY)
    if result.has_solution:
        result.objective = oracle.objective_of(result.solution)
    return result
