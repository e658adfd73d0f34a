from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..algorithm_types import NeighborhoodType
from ..registry import VariableRegistry
from .optimization_model import OptimizationModel


@dataclass
class Formulation:
    """
    what the search engine needs to know about a model: where the columns are, which families are fixed in which
    neighborhood type and which families are perturbed when shaking.
    """
    registry: VariableRegistry
    # neighborhood type -> name of the dimension it frees (e.g. VEHICLES -> "vehicle")
    dimensions: Dict[NeighborhoodType, str] = field(default_factory=dict)
    # neighborhood type -> families fixed outside of the neighborhood
    fixable: Dict[NeighborhoodType, List[str]] = field(default_factory=dict)
    shake_families: List[str] = field(default_factory=list)
    # pinned (family -> value) and zero-cost families while searching the initial solution
    initial_fixings: Dict[str, float] = field(default_factory=dict)
    initial_free_objective: List[str] = field(default_factory=list)

    @property
    def neighborhood_types(self):
        return [t for t in self.dimensions if self.fixable.get(t)]

    def dimension_count(self, ntype: NeighborhoodType) -> int:
        return self.registry.dim_size(self.dimensions[ntype])


@dataclass
class Application:
    inst: Any = None
    Model: type = None


@dataclass
class InstanceStrings:
    ALG_INTRO_TEXT: str = None
    UNIQUE_IDENTIFIER: str = None
    APPLICATION_NAME: str = None
