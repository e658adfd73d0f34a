from dataclasses import dataclass
import math
import random

from .. import InstanceStrings


@dataclass
class Customer:
    name: str
    t_trip1: float # hours of a first trip (depot -> customer -> disposal)
    t_trip2: float # hours of every further trip (disposal -> customer -> disposal)
    Q: float # waste to collect over the planning horizon
    s: float # hours of collection per unit of waste


class Instance:

    def __init__(self, customers, D, vehicles, c_h, c_veh, T, L, W=3, name="", sample_number=None):
        """
        :param customers: list of Customer, indexed by m
        :param D: number of days of the planning horizon
        :param vehicles: number of available vehicles
        :param c_h: cost per working hour
        :param c_veh: cost per vehicle in use
        :param T: maximum working hours of a vehicle per day
        :param L: maximum load of a vehicle per trip
        :param W: maximum number of days a customer may be visited
        """
        self.customers = list(customers)
        self.D = D
        self.vehicles = vehicles
        self.c_h = c_h
        self.c_veh = c_veh
        self.T = T
        self.L = L
        self.W = W
        self.name = name
        self.sample_number = sample_number
        self.strings = InstanceStrings()
        self.updateStrings()

    def updateStrings(self):
        n, D, V = len(self.customers), self.D, self.vehicles
        self.strings.ALG_INTRO_TEXT = f"algorithm for customers = {n}, days = {D}, vehicles = {V}, sample = {self.sample_number}\n"
        self.strings.UNIQUE_IDENTIFIER = f"{n}-{D}-{V}-{self.sample_number}"
        self.strings.APPLICATION_NAME = "collection"

    @property
    def M(self):
        return range(len(self.customers))

    @property
    def V(self):
        return range(self.vehicles)

    @property
    def days(self):
        return range(self.D)

    @staticmethod
    def createInstance(no_customers=10, no_days=5, no_vehicles=None, sample_number=None, c_h=40.0, c_veh=250.0,
                       T=8.0, L=10.0, W=3):
        """
        creates a random instance that is reproducible for a given sample number.
        Every demand fits into one trip and every first trip fits into one working day, so a plan always exists
        as long as there are enough vehicle days. By default one vehicle per three customers is available.
        :param sample_number: None, if system random should be used
        """
        rng = random.Random(sample_number)
        if no_vehicles is None:
            no_vehicles = max(1, math.ceil(no_customers / 3))

        customers = []
        for m in range(no_customers):
            t_trip1 = round(rng.uniform(0.5, 1.5), 2)
            customers.append(Customer(name=f"C{m + 1}",
                                      t_trip1=t_trip1,
                                      t_trip2=round(rng.uniform(0.5, 0.9) * t_trip1, 2),
                                      Q=round(rng.uniform(0.2, 1.0) * L, 1),
                                      s=round(rng.uniform(0.02, 0.05), 3)))

        return Instance(customers, D=no_days, vehicles=no_vehicles, c_h=c_h, c_veh=c_veh, T=T, L=L, W=W,
                        name=f"RANDOM{no_customers} (s={sample_number})", sample_number=sample_number)
