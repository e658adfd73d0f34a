from contextlib import contextmanager
from typing import Dict

import gurobipy as gp
from gurobipy import GRB
import numpy as np

from .algorithm_types import Emphasis, SolveStatus
from .applications.optimization_model import OptimizationModel
from .classes import RowInvariantError, SolveResult, VariableIndexError


class SolverOracle:
    """
    the only boundary between the search engine and the MIP solver. Every mutation is synchronous and visible to the
    next solve call.
    """

    @property
    def num_columns(self) -> int:
        raise NotImplementedError

    @property
    def original_row_count(self) -> int:
        raise NotImplementedError

    def solve(self, time_limit, optimality_gap, emphasis=Emphasis.OPTIMALITY, solution_limit=None) -> SolveResult:
        raise NotImplementedError

    def row_count(self) -> int:
        raise NotImplementedError

    def fix(self, column, value):
        raise NotImplementedError

    def unfix_all_since(self, checkpoint):
        raise NotImplementedError

    def perturb_objective(self, coefficients: Dict[int, float]):
        raise NotImplementedError

    def restore_objective(self, coefficients: Dict[int, float]):
        raise NotImplementedError

    def objective_of(self, solution) -> float:
        raise NotImplementedError

    def set_start(self, solution):
        pass


class GurobiOracle(SolverOracle):

    def __init__(self, model: OptimizationModel):
        model.update()
        self._model = model
        self._columns = model.getVars()
        # exact copies, restore_objective writes these back
        self._base_obj = np.array(model.getAttr("Obj", self._columns), dtype=float)
        self._obj_con = model.ObjCon
        self._original_rows = model.NumConstrs

    @property
    def num_columns(self):
        return len(self._columns)

    @property
    def original_row_count(self):
        return self._original_rows

    def _check_column(self, column):
        if not 0 <= column < len(self._columns):
            raise VariableIndexError(f"Column {column} out of range [0, {len(self._columns)}).")

    def solve(self, time_limit, optimality_gap, emphasis=Emphasis.OPTIMALITY, solution_limit=None) -> SolveResult:
        m = self._model
        try:
            m.resetParamsButLogAndThreads()
            m.Params.TimeLimit = max(0, time_limit)
            m.Params.MIPGap = optimality_gap
            m.Params.MIPFocus = emphasis.mip_focus
            if solution_limit:
                m.Params.SolutionLimit = solution_limit
            m.optimize()
        except gp.GurobiError as e:
            return SolveResult(SolveStatus.NO_SOLUTION, message=str(e))

        if m.Status == GRB.OPTIMAL:
            status = SolveStatus.OPTIMAL
        elif m.SolCount > 0:
            status = SolveStatus.FEASIBLE_TIMEOUT
        elif m.Status in (GRB.INFEASIBLE, GRB.INF_OR_UNBD, GRB.UNBOUNDED):
            status = SolveStatus.INFEASIBLE
        else:
            status = SolveStatus.NO_SOLUTION

        if m.SolCount == 0:
            return SolveResult(status, runtime=m.Runtime)
        solution = np.array(m.getAttr("X", self._columns), dtype=float)
        return SolveResult(status, objective=m.ObjVal, solution=solution, runtime=m.Runtime)

    def row_count(self):
        self._model.update()
        return self._model.NumConstrs

    def fix(self, column, value):
        self._check_column(column)
        self._model.addLConstr(self._columns[column], GRB.EQUAL, float(value), name=f"fix_c{column}")

    def unfix_all_since(self, checkpoint):
        if checkpoint < self._original_rows:
            raise RowInvariantError(f"Checkpoint {checkpoint} lies below the {self._original_rows} base rows.")
        self._model.update()
        constrs = self._model.getConstrs()
        if len(constrs) > checkpoint:
            self._model.remove(constrs[checkpoint:])
            self._model.update()

    def perturb_objective(self, coefficients: Dict[int, float]):
        cols = list(coefficients)
        if not cols:
            return
        for c in cols:
            self._check_column(c)
        self._model.setAttr("Obj", [self._columns[c] for c in cols], [float(coefficients[c]) for c in cols])

    def restore_objective(self, coefficients: Dict[int, float]):
        cols = list(coefficients)
        if not cols:
            return
        self._model.setAttr("Obj", [self._columns[c] for c in cols], self._base_obj[cols].tolist())

    def objective_of(self, solution):
        return float(self._base_obj @ np.asarray(solution, dtype=float) + self._obj_con)

    def set_start(self, solution):
        self._model.setAttr("Start", self._columns, np.asarray(solution, dtype=float).tolist())


@contextmanager
def perturbed_objective(oracle: SolverOracle, coefficients: Dict[int, float]):
    """
    objective coefficients are overwritten for the duration of the block and restored on every exit path
    """
    oracle.perturb_objective(coefficients)
    try:
        yield
    finally:
        oracle.restore_objective(coefficients)
