from contextlib import contextmanager
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .applications import Formulation
from .helper import roundIntegerValue
from .neighborhoods import Neighborhood
from .oracle import SolverOracle


def fixed_assignments(formulation: Formulation, neighborhood: Neighborhood, baseline) -> List[Tuple[int, float]]:
    """
    (column, value) for every column of a fixable family that lies outside the neighborhood.
    Values come from the baseline, integer columns are rounded so that 0.9999999 is pinned to 1.
    """
    if neighborhood.is_full:
        return []
    registry = formulation.registry
    families = formulation.fixable.get(neighborhood.type, [])
    parts = [registry.resolve(g, families) for g in neighborhood.fixed_groups]
    parts = [p for p in parts if p.size]
    if not parts:
        return []
    cols = np.unique(np.concatenate(parts))
    values = np.asarray(baseline, dtype=float)[cols]
    integer = registry.integrality[cols]
    values[integer] = roundIntegerValue(values[integer])
    return list(zip(cols.tolist(), values.tolist()))


def pinned_assignments(formulation: Formulation, pins: Dict[str, float]) -> List[Tuple[int, float]]:
    ret = []
    for name, value in pins.items():
        ret.extend((c, value) for c in formulation.registry.columns(name).tolist())
    return ret


@contextmanager
def fixing_scope(oracle: SolverOracle, assignments: Iterable[Tuple[int, float]]):
    """
    appends one equality row per assignment and deletes them again on every exit path.
    Yields the number of rows that were added. Adding nothing is a valid round and deletes nothing.
    """
    checkpoint = oracle.row_count()
    try:
        added = 0
        for column, value in assignments:
            oracle.fix(column, value)
            added += 1
        yield added
    finally:
        if oracle.row_count() > checkpoint:
            oracle.unfix_all_since(checkpoint)


def neighborhood_fixing(oracle: SolverOracle, formulation: Formulation, neighborhood: Neighborhood, baseline):
    return fixing_scope(oracle, fixed_assignments(formulation, neighborhood, baseline))
