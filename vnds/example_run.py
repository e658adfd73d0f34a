from vnds import helper
helper.VerbosityManager.global_verbosity = 1

from vnds.algorithm_types import NeighborhoodOptions
from vnds.classes import SearchParams, NoInitialSolutionError
from vnds.algorithm import vndsAlgorithm

from vnds.applications.collection.instance import Instance
import vnds.applications.collection.model as model
from vnds.applications import Application

customers = 10
days = 5
vehicles = 4
sample_number = 1
timelimit = 2 * 60

inst = Instance.createInstance(no_customers=customers, no_days=days, no_vehicles=vehicles, sample_number=sample_number)
appl = Application(inst=inst, Model=model.CollectionModel)
params = SearchParams(app=appl,
                      total_timelimit=timelimit,
                      subproblem_timelimit=5,
                      seed=sample_number,
                      n_threads=1,
                      options=NeighborhoodOptions())

try:
    s, plan = vndsAlgorithm(params=params)
except NoInitialSolutionError as e:
    print(e)
    raise SystemExit(1)

for d, trips in plan.first_trips.items():
    print(f"day {d + 1}: first trips {trips}, second trips {plan.second_trips[d]}")
print(f"Time total: {s.TIME_TOT:.3f}, Time solver: {s.TIME_SOLVER:.3f}, Initial cost: {s.INITIAL_COST:.2f}, "
      f"Cost: {s.COST:.2f}, Iterations: {s.ITERATIONS}, Shakes: {s.SHAKES}, Vehicles: {plan.vehicles_used}\n")
