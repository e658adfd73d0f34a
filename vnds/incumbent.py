from typing import List, Tuple

import numpy as np


class IncumbentTracker:
    """
    best solution found so far. Only replaced by a strictly better objective (minimization), so its objective is
    non-increasing over a run. The stored vector is a private copy and is the baseline for fixing.
    """

    def __init__(self, solution, objective: float, eps: float = 0.0, elapsed: float = 0):
        self._solution = np.array(solution, dtype=float)
        self._objective = float(objective)
        self._eps = eps
        self.history: List[Tuple[float, float]] = [(elapsed, self._objective)]

    @property
    def solution(self):
        return self._solution

    @property
    def objective(self):
        return self._objective

    def improves(self, objective) -> bool:
        return objective is not None and objective < self._objective - self._eps

    def offer(self, solution, objective, elapsed: float = 0) -> bool:
        if solution is None or not self.improves(objective):
            return False
        self._solution = np.array(solution, dtype=float)
        self._objective = float(objective)
        self.history.append((elapsed, self._objective))
        return True
