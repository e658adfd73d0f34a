from dataclasses import dataclass, field

from enum import Enum

class NeighborhoodType(Enum):
    VEHICLES = 1
    DAYS = 2
    CUSTOMERS = 3

    @property
    def label(self):
        return self.name.lower()

class SearchState(Enum):
    SEARCHING = 1
    STAGNATED = 2
    CONVERGED = 3 # a full pass over all types without improvement
    TIME_EXPIRED = 4

class Emphasis(Enum):
    FEASIBILITY = 1
    OPTIMALITY = 2

    @property
    def mip_focus(self):
        # gurobi MIPFocus: 1 = find feasible solutions quickly, 2 = prove optimality
        return 1 if self == Emphasis.FEASIBILITY else 2

class SolveStatus(Enum):
    OPTIMAL = 1
    FEASIBLE_TIMEOUT = 2
    INFEASIBLE = 3
    NO_SOLUTION = 4

    def has_solution(self) -> bool:
        return self in [self.OPTIMAL, self.FEASIBLE_TIMEOUT]

    def str_reason(self, end='\n'):
        if self == SolveStatus.OPTIMAL:
            return "Optimal solution found" + end
        if self == SolveStatus.FEASIBLE_TIMEOUT:
            return "Feasible solution found (limit reached)" + end
        if self == SolveStatus.INFEASIBLE:
            return "Sub-problem infeasible" + end
        return "No solution found" + end


DEFAULT_TYPE_ORDER = (NeighborhoodType.VEHICLES, NeighborhoodType.DAYS, NeighborhoodType.CUSTOMERS)


@dataclass
class NeighborhoodOptions:
    type_order: tuple = DEFAULT_TYPE_ORDER
    # starting number of free groups per type
    initial_size: dict = field(default_factory=lambda: {NeighborhoodType.DAYS: 2,
                                                        NeighborhoodType.CUSTOMERS: 3,
                                                        NeighborhoodType.VEHICLES: 1})
    # iterations without improvement before the size of a type grows
    stagnation_threshold: dict = field(default_factory=lambda: {t: 1 for t in NeighborhoodType})
    min_size: int = 1

    def size_for(self, ntype: NeighborhoodType) -> int:
        return max(self.min_size, self.initial_size.get(ntype, self.min_size))

    def threshold_for(self, ntype: NeighborhoodType) -> int:
        return self.stagnation_threshold.get(ntype, 1)

    def __str__(self):
        ret = ""
        for k, v in self.__dict__.items():
            if v is None:
                continue
            if isinstance(v, dict):
                v = "{" + ", ".join(f"{t.label}: {n}" for t, n in v.items()) + "}"
            elif k == "type_order":
                v = "[" + ",".join(t.label for t in v) + "]"
            ret += str(k) + " = " + str(v)
            ret += ", "
        if len(ret):
            ret = ret[:-2]
        return ret
