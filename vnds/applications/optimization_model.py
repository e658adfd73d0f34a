import gurobipy as gp
from gurobipy import GRB
import time
from itertools import product

from ..classes import ModelBuildError
from ..registry import VariableRegistry


class OptimizationModel(gp.Model):
    def __init__(self, *argc, **argv):
        self._vars = dict()
        self._registry = VariableRegistry()
        self._accRuntime = 0
        self._accProctime = 0
        super().__init__()
        self.Params.LogToConsole = 0
        for k in argv:
          if hasattr(self.Params, k):
            setattr(self.Params, k, argv[k])

    def optimize(self, *argc, **argv):
      start_proc = time.process_time()
      super().optimize(*argc, **argv)
      end_proc = time.process_time()
      self._accRuntime += self.runtime
      self._accProctime += end_proc - start_proc

    def _trackVars(self, name, var):
        if name in self._vars:
            raise ModelBuildError(f"Variables named {name} added twice.")
        self._vars[name] = var
        return var

    def addFamily(self, name, dims=(), vtype=GRB.CONTINUOUS, obj=None, lb=0.0, ub=GRB.INFINITY):
        """
        adds a family of variables and registers it in the variable registry.
        :param dims: sequence of (dimension name, size), e.g. (("vehicle", 3), ("day", 5)). Empty for a single var.
        :param obj: objective coefficient, either a number or a function of the key
        """
        self._registry.add_family(name, dims, vtype=vtype)
        if not dims:
            coef = obj() if callable(obj) else (obj or 0.0)
            return self._trackVars(name, super().addVar(lb=lb, ub=ub, obj=coef, vtype=vtype, name=name))
        ranges = [range(n) for _, n in dims]
        if callable(obj):
            keys = product(*ranges) if len(ranges) > 1 else ranges[0]
            coefs = {key: obj(*key) if isinstance(key, tuple) else obj(key) for key in keys}
        else:
            coefs = obj or 0.0
        td = super().addVars(*ranges, lb=lb, ub=ub, obj=coefs, vtype=vtype, name=name)
        return self._trackVars(name, td)

    def checkRegistry(self):
        """
        makes sure every gurobi column sits where the registry expects it. Call after all variables are added.
        """
        self.update()
        if self.NumVars != self._registry.num_columns:
            raise ModelBuildError(f"Model has {self.NumVars} columns, registry expects {self._registry.num_columns}.")
        for fam in self._registry.families:
            variables = self._vars[fam.name]
            if isinstance(variables, gp.Var):
                indices = [variables.index]
            else:
                indices = [v.index for v in variables.values()]
            if indices != self._registry.columns(fam.name).tolist():
                raise ModelBuildError(f"Columns of {fam.name} do not match the registry layout.")

    @property
    def registry(self):
        return self._registry

    def resetParamsButLogAndThreads(self):
        logf = self.Params.LogFile
        logtc = self.Params.LogToConsole
        logflag = self.Params.OutputFlag
        n_threads = self.Params.Threads
        super().resetParams()
        self.Params.LogFile = logf
        self.Params.LogToConsole = logtc
        self.Params.OutputFlag = logflag
        self.Params.Threads = n_threads
