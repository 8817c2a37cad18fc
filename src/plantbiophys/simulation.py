"""
Simulation functions: Run the processes of one organ or a collection of organs for one atmosphere or a weather series
"""

import logging
from collections.abc import Mapping
import pandas as pd
from plantbiophys.atmosphere import Atmosphere, Weather
from plantbiophys.component import Component
from plantbiophys.constants import resolve_constants
from plantbiophys.exceptions import InitialisationError, ShapeMismatchError
from plantbiophys.processes import Process, check_initialised, pipeline, run_process
from plantbiophys.status import Status

logger = logging.getLogger(__name__)

## Columns labelling each row of the result tables
LABELS = ["component", "timestep"]

def _organs(obj):
    """(key, Component) pairs of a single organ, a sequence of organs or a mapping of organs."""
    if isinstance(obj, Component):
        return [(0, obj)]
    if isinstance(obj, Mapping):
        organs = list(obj.items())
    elif isinstance(obj, (list, tuple)):
        organs = list(enumerate(obj))
    else:
        raise TypeError(f"Expected a Component, or a list or dict of Component, got {type(obj).__name__}")
    for key, component in organs:
        if not isinstance(component, Component):
            raise TypeError(f"Expected a Component for organ {key!r}, got {type(component).__name__}")
    return organs

def _processes(component, processes):
    return pipeline(component) if processes is None else processes

def _check(component, meteo, processes):
    """Validates that the organ can be simulated, before any of its statuses is modified."""
    processes = _processes(component, processes)
    if isinstance(meteo, Weather):
        if component.is_timeseries and len(component) != len(meteo):
            raise ShapeMismatchError(
                f"The organ has {len(component)} statuses but the weather has {len(meteo)} time-steps"
            )
        atmospheres = list(meteo)
    elif isinstance(meteo, Atmosphere):
        atmospheres = [meteo]
    else:
        raise TypeError(f"Expected an Atmosphere or a Weather, got {type(meteo).__name__}")

    if Process.INTERCEPTION in processes and component.interception is not None:
        for i, atmosphere in enumerate(atmospheres):
            if not atmosphere.has_radiation():
                raise InitialisationError(
                    f"Light interception needs the incident radiation, missing at time-step {i}",
                    missing=("Ri_PAR_f", "Ri_NIR_f"),
                )
    for status in component.statuses():
        check_initialised(component, status, processes)

def _simulate_status(component, status, meteo, processes, constants):
    for process in processes:
        run_process(process, component, status, meteo, constants)

def _simulate_component(key, component, meteo, processes, constants):
    """Simulates one organ, returning one row per (status, time-step) simulated."""
    processes = _processes(component, processes)
    rows = []
    if isinstance(meteo, Weather):
        for i, atmosphere in enumerate(meteo):
            status = component[i] if component.is_timeseries else component.status
            _simulate_status(component, status, atmosphere, processes, constants)
            rows.append({"component": key, "timestep": i, **status.to_dict()})
    else:
        for i, status in enumerate(component.statuses()):
            _simulate_status(component, status, meteo, processes, constants)
            rows.append({"component": key, "timestep": i, **status.to_dict()})
    return rows

def _simulate(obj, meteo, processes, constants, skip_errors, inplace):
    """
    Implementation shared by every simulation entry point.

    Parameters
    ----------
    obj: Component, list of Component or dict of Component
        Organ(s) to simulate
    meteo: Atmosphere or Weather
        Ambient conditions, a single snapshot or one per time-step
    processes: tuple of Process or None
        Processes to run, or None for the full pipeline of each organ
    constants: Constants or None
        Physical constants, the default constants when None
    skip_errors: bool
        When simulating a collection of organs, log and skip the organs that fail instead of aborting the batch
    inplace: bool
        Whether to modify the status of the given organs, or to work on copies

    Returns
    -------
    A pandas DataFrame with one row per organ and time-step for a Weather or a collection of organs. For a
    single organ and a single Atmosphere, None when inplace, else the resulting Status (list of Status for an
    organ holding one status per time-step).
    """
    constants = resolve_constants(constants)
    single = isinstance(obj, Component)
    organs = _organs(obj)
    if not inplace:
        organs = [(key, component.copy()) for key, component in organs]
    isolate = skip_errors and not single

    ## Validate every organ before simulating any of them
    ready = []
    for key, component in organs:
        try:
            _check(component, meteo, processes)
        except (InitialisationError, ValueError) as err:
            if not isolate:
                raise
            logger.error("Skipping component %r: %s", key, err)
            continue
        ready.append((key, component))

    rows = []
    for key, component in ready:
        try:
            rows.extend(_simulate_component(key, component, meteo, processes, constants))
        except (InitialisationError, ArithmeticError, ValueError) as err:
            if not isolate:
                raise
            logger.error("Skipping component %r: %s", key, err)

    if isinstance(meteo, Weather) or not single:
        if inplace and not isinstance(meteo, Weather):
            return None
        return pd.DataFrame(rows, columns=LABELS + list(Status.variables()))
    if inplace:
        return None
    return organs[0][1].status


def run(obj, meteo, constants=None, skip_errors=False):
    """
    Simulates all the processes of the organ(s) without modifying them: light interception, then the energy
    balance (which runs photosynthesis and stomatal conductance), or photosynthesis when there is no energy
    model, or stomatal conductance alone when there is neither.

    Parameters
    ----------
    obj: Component, list of Component or dict of Component
        Organ(s) to simulate
    meteo: Atmosphere or Weather
        Ambient conditions
    constants: Constants
        Physical constants, the default constants when None
    skip_errors: bool
        For collections of organs, log and skip the organs that fail instead of aborting

    Returns
    -------
    Status (or list of Status) for a single organ and Atmosphere, else a pandas DataFrame with the columns
    component and timestep followed by the status variables.
    """
    return _simulate(obj, meteo, None, constants, skip_errors, inplace=False)

def run_inplace(obj, meteo, constants=None, skip_errors=False):
    """Same as run but updates the status of the given organ(s). Returns a DataFrame for a Weather, else None."""
    return _simulate(obj, meteo, None, constants, skip_errors, inplace=True)

def light_interception(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.INTERCEPTION,), constants, skip_errors, inplace=False)

def light_interception_inplace(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.INTERCEPTION,), constants, skip_errors, inplace=True)

def energy_balance(obj, meteo, constants=None, skip_errors=False):
    """
    Simulates the energy balance of the organ(s) without modifying them. Organs with no energy model are
    left untouched.
    """
    return _simulate(obj, meteo, (Process.ENERGY,), constants, skip_errors, inplace=False)

def energy_balance_inplace(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.ENERGY,), constants, skip_errors, inplace=True)

def photosynthesis(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.PHOTOSYNTHESIS,), constants, skip_errors, inplace=False)

def photosynthesis_inplace(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.PHOTOSYNTHESIS,), constants, skip_errors, inplace=True)

def stomatal_conductance(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.STOMATAL_CONDUCTANCE,), constants, skip_errors, inplace=False)

def stomatal_conductance_inplace(obj, meteo, constants=None, skip_errors=False):
    return _simulate(obj, meteo, (Process.STOMATAL_CONDUCTANCE,), constants, skip_errors, inplace=True)
