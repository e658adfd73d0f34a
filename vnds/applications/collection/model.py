from gurobipy import GRB
from gurobipy import quicksum
import copy

from ..optimization_model import OptimizationModel
from .. import Formulation
from ...algorithm_types import NeighborhoodType
from ...classes import CollectionPlan, ModelBuildError
from ...helper import getValueArray

from .instance import Instance

BIG_M = 50


class CollectionModel(OptimizationModel):
    """
    trip model of the waste collection: on every day d, vehicle v makes at most one first trip (y1) and any number
    of second trips (y2) to customer m, carrying x1 and x2. z is the number of vehicles in use, w[m, d] says
    whether m is visited on day d.
    """

    def __init__(self, instance: Instance, single_trip_start=True, *argc, **argv):
        super().__init__(*argc, **argv)

        inst = copy.deepcopy(instance)
        self._instance = inst
        self._single_trip_start = single_trip_start
        V, M, D = inst.V, inst.M, inst.days
        cust = inst.customers
        if not len(M) or not len(D) or not len(V):
            raise ModelBuildError("Need at least one customer, day and vehicle.")
        if any(c.Q < 0 or c.t_trip1 < 0 or c.t_trip2 < 0 or c.s < 0 for c in cust):
            raise ModelBuildError("Customer data must be nonnegative.")

        vmd = (("vehicle", len(V)), ("customer", len(M)), ("day", len(D)))
        y1 = self.addFamily("y1", vmd, vtype=GRB.BINARY, obj=lambda v, m, d: inst.c_h * cust[m].t_trip1)
        y2 = self.addFamily("y2", vmd, vtype=GRB.INTEGER, obj=lambda v, m, d: inst.c_h * cust[m].t_trip2)
        x1 = self.addFamily("x1", vmd)
        x2 = self.addFamily("x2", vmd)
        w = self.addFamily("w", (("customer", len(M)), ("day", len(D))), vtype=GRB.BINARY)
        z = self.addFamily("z", vtype=GRB.INTEGER, obj=inst.c_veh)
        self.checkRegistry()

        self.addConstrs((x1[v, m, d] <= inst.L * y1[v, m, d] for v in V for m in M for d in D), name="load1")
        self.addConstrs((x2[v, m, d] <= inst.L * y2[v, m, d] for v in V for m in M for d in D), name="load2")
        self.addConstrs((quicksum(x1[v, m, d] + x2[v, m, d] for v in V for d in D) == cust[m].Q for m in M),
                        name="demand")
        self.addConstrs((quicksum(cust[m].s * (x1[v, m, d] + x2[v, m, d])
                                  + cust[m].t_trip1 * y1[v, m, d] + cust[m].t_trip2 * y2[v, m, d] for m in M) <= inst.T
                         for v in V for d in D), name="hours")
        self.addConstrs((quicksum(y1[v, m, d] for m in M) <= 1 for v in V for d in D), name="first_trip")
        self.addConstrs((BIG_M * quicksum(y1[v, mm, d] for mm in M) >= y2[v, m, d] for v in V for m in M for d in D),
                        name="second_after_first")
        self.addConstrs((z >= quicksum(y1[v, m, d] for v in V for m in M) for d in D), name="fleet")
        self.addConstrs((w[m, d] >= y1[v, m, d] for v in V for m in M for d in D), name="visit1")
        self.addConstrs((BIG_M * w[m, d] >= y2[v, m, d] for v in V for m in M for d in D), name="visit2")
        self.addConstrs((quicksum(w[m, d] for d in D) <= inst.W for m in M), name="visit_days")
        self.update()

    @property
    def instance(self):
        return self._instance

    @property
    def formulation(self):
        f = Formulation(self.registry,
                        dimensions={NeighborhoodType.VEHICLES: "vehicle",
                                    NeighborhoodType.DAYS: "day",
                                    NeighborhoodType.CUSTOMERS: "customer"},
                        fixable={NeighborhoodType.VEHICLES: ["y1", "y2"],
                                 NeighborhoodType.DAYS: ["y1", "y2", "w"],
                                 NeighborhoodType.CUSTOMERS: ["y1", "y2", "w"]},
                        shake_families=["y1", "y2"])
        if self._single_trip_start:
            # first plan: first trips only, free of trip costs
            f.initial_fixings = {"y2": 0.0, "x2": 0.0}
            f.initial_free_objective = ["y1"]
        return f

    def get_plan(self, solution) -> CollectionPlan:
        inst = self._instance
        y1 = getValueArray(self.registry, solution, "y1", roundInteger=True)
        y2 = getValueArray(self.registry, solution, "y2", roundInteger=True)
        w = getValueArray(self.registry, solution, "w", roundInteger=True)

        ret = CollectionPlan()
        for d in inst.days:
            ret.first_trips[d] = {v: m for v in inst.V for m in inst.M if y1[v, m, d]}
            ret.second_trips[d] = {v: {m: int(y2[v, m, d]) for m in inst.M if y2[v, m, d]}
                                   for v in inst.V if y2[v, :, d].any()}
            ret.visits[d] = [m for m in inst.M if w[m, d]]
        ret.vehicles_used = int(getValueArray(self.registry, solution, "z", roundInteger=True))
        return ret
