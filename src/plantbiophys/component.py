"""
Component class: An organ (e.g. a leaf) bundling one model per process with its status, or one status per time-step
"""

import numpy as np
import pandas as pd
from attrs import define, field
from plantbiophys.exceptions import ShapeMismatchError
from plantbiophys.processes import Process, ProcessModel
from plantbiophys.status import Status

def _is_sequence(value):
    return isinstance(value, (list, tuple, np.ndarray))

def build_status(**initial_values):
    """
    Builds the status of an organ from initial values of the status variables.

    When any of the values is a sequence, one Status is built per element and a list is returned. All the
    sequences must have the same length, except sequences of length one which are broadcast like scalars.
    Otherwise a single Status is returned.
    """
    unknown = set(initial_values) - set(Status.variables())
    if unknown:
        raise ValueError(f"Unknown status variable(s): {sorted(unknown)}, expected any of {list(Status.variables())}")

    lengths = {name: len(value) for name, value in initial_values.items() if _is_sequence(value)}
    if not lengths:
        return Status(**initial_values)

    distinct = set(lengths.values()) - {1}
    if len(distinct) > 1:
        raise ShapeMismatchError(
            f"Initial values given as sequences must all have the same length (or length one), got {lengths}"
        )
    n = distinct.pop() if distinct else 1

    statuses = []
    for i in range(n):
        values = {}
        for name, value in initial_values.items():
            if name in lengths:
                values[name] = value[i] if lengths[name] > 1 else value[0]
            else:
                values[name] = value
        statuses.append(Status(**values))
    return statuses


@define(init=False)
class Component:
    """
    Organ of a plant, e.g. a leaf, with the models simulating each of its processes and its status.

    Any model may be None, in which case the corresponding process is not simulated. The status is either
    given directly, as a Status or a list of Status (one per time-step), or built from the keyword arguments
    as initial values of the status variables (see build_status).
    """

    interception: ProcessModel = field(default=None)  ## light interception model
    energy: ProcessModel = field(default=None)  ## energy balance model
    photosynthesis: ProcessModel = field(default=None)  ## photosynthesis model
    stomatal_conductance: ProcessModel = field(default=None)  ## stomatal conductance model
    status: object = field(default=None)  ## Status, or list of Status with one per time-step

    def __init__(self, interception=None, energy=None, photosynthesis=None, stomatal_conductance=None, status=None, **initial_values):
        models = {
            Process.INTERCEPTION: interception,
            Process.ENERGY: energy,
            Process.PHOTOSYNTHESIS: photosynthesis,
            Process.STOMATAL_CONDUCTANCE: stomatal_conductance,
        }
        for process, model in models.items():
            if model is not None and getattr(model, "process", None) != process:
                raise ValueError(f"{type(model).__name__} is not a {process.value} model")

        if status is None:
            status = build_status(**initial_values)
        elif initial_values:
            raise ValueError("Give either a status or initial values of the status variables, not both")
        elif isinstance(status, (list, tuple)):
            status = list(status)

        for s in (status if isinstance(status, list) else [status]):
            if s.is_initialised("d") and s.d <= 0.0:
                raise ValueError(f"The characteristic dimension d must be strictly positive, got d={s.d}")

        self.__attrs_init__(interception, energy, photosynthesis, stomatal_conductance, status)

    def get_model(self, process):
        """Model attached for the given process, or None."""
        return getattr(self, Process(process).value)

    @property
    def models(self):
        return {process: self.get_model(process) for process in Process}

    @property
    def is_timeseries(self):
        """Whether the organ holds one status per time-step."""
        return isinstance(self.status, list)

    def statuses(self):
        """The status of the organ as a list, with one element unless the organ holds one status per time-step."""
        return self.status if self.is_timeseries else [self.status]

    def __len__(self):
        return len(self.statuses())

    def __getitem__(self, i):
        return self.statuses()[i]

    def copy(self):
        """Copy of the organ, with a deep copy of the status sharing the same models."""
        if self.is_timeseries:
            status = [s.copy() for s in self.status]
        else:
            status = self.status.copy()
        return Component(self.interception, self.energy, self.photosynthesis, self.stomatal_conductance, status=status)

    def to_dataframe(self):
        """One row per status, one column per status variable, indexed by time-step."""
        df = pd.DataFrame([s.to_dict() for s in self.statuses()])
        df.index.name = "timestep"
        return df
