import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List

from .algorithm_types import NeighborhoodType
from .registry import VariableGroup


@dataclass(frozen=True)
class Neighborhood:
    type: NeighborhoodType
    dim: str
    free: FrozenSet[int]
    dimension: int

    @property
    def size(self):
        return len(self.free)

    @property
    def is_full(self):
        return len(self.free) >= self.dimension

    @property
    def groups(self) -> List[VariableGroup]:
        return [VariableGroup(self.dim, i) for i in sorted(self.free)]

    @property
    def fixed_groups(self) -> List[VariableGroup]:
        return [VariableGroup(self.dim, i) for i in range(self.dimension) if i not in self.free]

    def __str__(self):
        return f"{self.type.label} {sorted(self.free)}"


class NeighborhoodGenerator:
    """
    :param dimensions: neighborhood type -> (dimension name, number of groups along it)
    :param rng: random.Random instance, shared with the shaking so one seed reproduces a run
    """

    def __init__(self, dimensions: Dict[NeighborhoodType, tuple], rng: random.Random):
        self._dimensions = dict(dimensions)
        self._rng = rng

    @property
    def types(self):
        return list(self._dimensions)

    def dimension_count(self, ntype: NeighborhoodType) -> int:
        return self._dimensions[ntype][1]

    def _check(self, ntype, size):
        if ntype not in self._dimensions:
            raise KeyError(f"No dimension registered for neighborhood type {ntype.label}.")
        if size < 1:
            raise ValueError(f"Neighborhood size must be at least 1, got {size}.")

    def full(self, ntype: NeighborhoodType) -> Neighborhood:
        dim, n = self._dimensions[ntype]
        return Neighborhood(ntype, dim, frozenset(range(n)), n)

    def sample(self, ntype: NeighborhoodType, size: int) -> Neighborhood:
        self._check(ntype, size)
        dim, n = self._dimensions[ntype]
        if size >= n:
            return self.full(ntype)
        return Neighborhood(ntype, dim, frozenset(self._rng.sample(range(n), size)), n)

    def sweep(self, ntype: NeighborhoodType, size: int) -> Iterator[Neighborhood]:
        """
        contiguous blocks of `size` groups, each visited once. The last block may be smaller.
        """
        self._check(ntype, size)
        dim, n = self._dimensions[ntype]
        for start in range(0, n, size):
            yield Neighborhood(ntype, dim, frozenset(range(start, min(start + size, n))), n)
