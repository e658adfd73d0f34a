import datetime

import numpy as np


def fseconds(seconds: float, precision = 2):
  return f"{seconds:.{precision}f}s"

class VerbosityManager:
    """
    utility class that stores the global verbosity values so that they can be used by every other file
    """
    # from verbosity 0 (don't print anything) to verbosity 4 (max level of verbosity)
    global_verbosity = -1

def vprint(min_verbosity=None, *args, **kwargs):
    """
    utility function that works like print() but takes an additional first parameter which indicates the minimum
    level of verbosity for printing this. if verbosity is less than min_verbosity nothing is printed.
    :param min_verbosity:
    :param args: just like standard function print
    :param kwargs: just like print
    :return:
    """
    if min_verbosity is None:
        print()
        return
    if not isinstance(min_verbosity, int):
        print(min_verbosity, *args, **kwargs)
        return
    if VerbosityManager.global_verbosity >= min_verbosity:
        print(*args, **kwargs)


def make_log(params, starttime, clock):
    """
    returns the log function used throughout one search run. Lines are prefixed with the elapsed time since
    starttime (measured with clock) and written to params.logfile or stdout.
    """
    def prefix():
        return str(datetime.timedelta(seconds=int(clock() - starttime))) + "   "

    if params.logfile is None:
        def log(s, printtime=True):
            if s is None:
                s = "NoneType\n"
            if printtime:
                print(prefix(), end="")
            print(s, end="")
    else:
        def log(s, printtime=True):
            if s is None:
                s = "NoneType\n"
            if printtime and '\n' in s:
                params.logfile.write(prefix())
            params.logfile.write(s)
            params.logfile.flush()
    return log


def roundBinaryValue(var):
    if type(var) == np.ndarray:
        ret = var.astype(int)
        ret[var < 0.5] = 0
        ret[var >= 0.5] = 1
        return ret
    return 0 if var < 0.5 else 1


def roundIntegerValue(var):
  if type(var) == np.ndarray:
    return var.round()
  return round(var) # is an integer


def getValueArray(registry, solution, name, roundInteger=False):
    """
    values of one variable family as an array shaped like the family (vehicle x customer x day for y1)
    """
    fam = registry.family(name)
    values = np.asarray(solution, dtype=float)[fam.start:fam.stop]
    if roundInteger and fam.vtype == 'B':
        values = roundBinaryValue(values)
    elif roundInteger and fam.vtype == 'I':
        values = roundIntegerValue(values).astype(int)
    if not fam.dims:
        return values[0]
    return values.reshape(fam.shape)

