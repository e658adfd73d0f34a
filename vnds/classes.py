import typing
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from .algorithm_types import NeighborhoodOptions, SolveStatus

# only for type checkers, the applications package imports the exceptions defined here
if TYPE_CHECKING:
    from .applications import Application


class ModelBuildError(Exception):
    pass

class NoInitialSolutionError(Exception):
    def __init__(self, message = None, status = None):
        message = message or "Could not find an initial feasible solution."
        if status is not None:
            message += f" Solver status: {status.name}"
        super().__init__(message)
        self.status = status

class RowInvariantError(Exception):
    """
    raised when rows below the pre-fixing checkpoint would be deleted. This is always a programming error.
    """
    pass

class VariableIndexError(IndexError):
    pass

class TimeExpired(Exception):
    pass


@dataclass
class SolveResult:
    status: SolveStatus
    objective: Optional[float] = None
    solution: Optional[np.ndarray] = None
    runtime: float = 0
    message: str = None

    @property
    def has_solution(self):
        return self.status.has_solution() and self.solution is not None


@dataclass
class CollectionPlan:
    # day -> vehicle -> customer served with the first trip
    first_trips: Dict[int, Dict[int, int]] = field(default_factory=dict)
    # day -> vehicle -> customer -> number of second trips
    second_trips: Dict[int, Dict[int, Dict[int, int]]] = field(default_factory=dict)
    # day -> customers visited
    visits: Dict[int, List[int]] = field(default_factory=dict)
    vehicles_used: int = 0


@dataclass
class SearchStats:
    TIME_TOT: float = 0
    TIME_SOLVER: float = 0
    TIME_INITIAL: float = 0
    ITERATIONS: int = 0
    IMPROVEMENTS: int = 0
    PASSES: int = 0
    SHAKES: int = 0
    FAILED_SOLVES: int = 0
    INITIAL_COST: float = np.nan
    COST: float = np.nan
    SOLUTION: Any = None
    # (elapsed seconds, incumbent objective) for every incumbent update
    history: List[Tuple[float, float]] = field(default_factory=list)
    attempts: Dict[Any, int] = field(default_factory=dict)
    improvements: Dict[Any, int] = field(default_factory=dict)


@dataclass
class SearchParams:
    app: "Application" = None
    total_timelimit: float = 60 # in seconds, wall clock
    subproblem_timelimit: float = 5
    initial_timelimit: float = 30
    initial_solution_limit: int = 1 # stop the initial solve after this many solutions
    optimality_gap: float = 1e-4
    seed: int = None
    n_threads: int = 0
    logfile: typing.TextIO = None
    model_logfile: str = ""
    sweep: bool = True
    shake: bool = True
    shake_coefficient_range: Tuple[float, float] = (1e-3, 1.0)
    improvement_eps: float = 0.0 # accept objectives below best - improvement_eps, 0 means any strict decrease
    warm_start_current: bool = True
    shuffle_types: bool = False
    options: NeighborhoodOptions = field(default_factory=NeighborhoodOptions)
