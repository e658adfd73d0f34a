from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .classes import ModelBuildError, VariableIndexError


def _is_index(k):
    return isinstance(k, (int, np.integer)) and not isinstance(k, bool)


@dataclass(frozen=True)
class VariableFamily:
    name: str
    start: int
    dims: Tuple[str, ...]
    shape: Tuple[int, ...]
    vtype: str = 'C'

    @property
    def size(self):
        return int(np.prod(self.shape, dtype=int)) if self.shape else 1

    @property
    def stop(self):
        return self.start + self.size


@dataclass(frozen=True)
class VariableGroup:
    """
    semantic identity like ("vehicle", 2). Resolved to the columns of every family that carries the dimension.
    """
    dim: str
    index: int


class VariableRegistry:
    """
    Maps (family, key) to a column index and back. Families occupy contiguous column ranges in the order they
    are registered, keys are laid out row-major (the order in which gurobi's addVars creates a tupledict).
    """

    def __init__(self):
        self._families: Dict[str, VariableFamily] = {}
        self._order: List[VariableFamily] = []
        self._starts: List[int] = []
        self._num_columns = 0

    def add_family(self, name, dims: Sequence[Tuple[str, int]] = (), vtype='C') -> VariableFamily:
        if name in self._families:
            raise ModelBuildError(f"Variable family {name} registered twice.")
        dim_names = tuple(d for d, _ in dims)
        shape = tuple(int(n) for _, n in dims)
        if len(set(dim_names)) != len(dim_names):
            raise ModelBuildError(f"Variable family {name} has duplicate dimension names {dim_names}.")
        if any(n <= 0 for n in shape):
            raise ModelBuildError(f"Variable family {name} has an empty dimension {dims}.")
        fam = VariableFamily(name=name, start=self._num_columns, dims=dim_names, shape=shape, vtype=vtype)
        self._families[name] = fam
        self._order.append(fam)
        self._starts.append(fam.start)
        self._num_columns = fam.stop
        return fam

    @property
    def num_columns(self):
        return self._num_columns

    @property
    def families(self):
        return list(self._order)

    def family(self, name) -> VariableFamily:
        try:
            return self._families[name]
        except KeyError:
            raise VariableIndexError(f"Unknown variable family {name}.") from None

    def __contains__(self, name):
        return name in self._families

    def __len__(self):
        return self._num_columns

    def has_dim(self, name, dim):
        return dim in self.family(name).dims

    def dim_size(self, dim):
        sizes = {fam.shape[fam.dims.index(dim)] for fam in self._order if dim in fam.dims}
        if not sizes:
            raise VariableIndexError(f"No family has dimension {dim}.")
        if len(sizes) > 1:
            raise VariableIndexError(f"Dimension {dim} has inconsistent sizes {sizes}.")
        return sizes.pop()

    def index_of(self, name, *key) -> int:
        fam = self.family(name)
        if len(key) != len(fam.dims):
            raise VariableIndexError(f"{name} expects a key over {fam.dims}, got {key}.")
        if not fam.dims:
            return fam.start
        for d, k, n in zip(fam.dims, key, fam.shape):
            if not _is_index(k):
                raise VariableIndexError(f"{name}: {d} = {k!r} is not an integer index.")
            if not 0 <= k < n:
                raise VariableIndexError(f"{name}: {d} = {k} out of range [0, {n}).")
        return fam.start + int(np.ravel_multi_index(tuple(int(k) for k in key), fam.shape))

    def key_of(self, column) -> Tuple[str, Tuple[int, ...]]:
        if not 0 <= column < self._num_columns:
            raise VariableIndexError(f"Column {column} out of range [0, {self._num_columns}).")
        fam = self._order[bisect_right(self._starts, column) - 1]
        if not fam.dims:
            return fam.name, ()
        return fam.name, tuple(int(k) for k in np.unravel_index(column - fam.start, fam.shape))

    def columns(self, name, **fixed) -> np.ndarray:
        """
        columns of a family, restricted to the given values of named dimensions.
        columns("y1", vehicle=2) returns every y1[2, m, d]. Values may be ints or iterables of ints.
        """
        fam = self.family(name)
        unknown = set(fixed) - set(fam.dims)
        if unknown:
            raise VariableIndexError(f"{name} has no dimension(s) {unknown}.")
        if not fam.dims:
            return np.array([fam.start], dtype=int)
        axes = []
        for d, n in zip(fam.dims, fam.shape):
            if d in fixed:
                sel = np.atleast_1d(np.asarray(fixed[d]))
                if sel.size and not np.issubdtype(sel.dtype, np.integer):
                    raise VariableIndexError(f"{name}: {d} = {sel.tolist()} is not an integer index.")
                sel = sel.astype(int)
                if sel.size and (sel.min() < 0 or sel.max() >= n):
                    raise VariableIndexError(f"{name}: {d} = {sel.tolist()} out of range [0, {n}).")
            else:
                sel = np.arange(n)
            axes.append(sel)
        block = np.arange(fam.start, fam.stop).reshape(fam.shape)
        return block[np.ix_(*axes)].ravel()

    def resolve(self, group: VariableGroup, families: Iterable[str]) -> np.ndarray:
        parts = [self.columns(name, **{group.dim: group.index}) for name in families if self.has_dim(name, group.dim)]
        if not parts:
            return np.array([], dtype=int)
        return np.concatenate(parts)

    @property
    def integrality(self) -> np.ndarray:
        mask = np.zeros(self._num_columns, dtype=bool)
        for fam in self._order:
            if fam.vtype in ('B', 'I'):
                mask[fam.start:fam.stop] = True
        return mask
