"""
Process models: Process kinds, the common interface of the model strategies, the model registry and the readiness check
"""

from enum import Enum
from importlib import import_module
from plantbiophys.exceptions import InitialisationError

class Process(str, Enum):
    """Kinds of process an organ can simulate. The value is the name of the Component slot holding the model."""
    INTERCEPTION = "interception"
    ENERGY = "energy"
    PHOTOSYNTHESIS = "photosynthesis"
    STOMATAL_CONDUCTANCE = "stomatal_conductance"

## Order in which processes are run within a time-step
PIPELINE = (Process.INTERCEPTION, Process.ENERGY, Process.PHOTOSYNTHESIS, Process.STOMATAL_CONDUCTANCE)

## Processes run from inside the model of another process
NESTED = {
    Process.ENERGY: (Process.PHOTOSYNTHESIS, Process.STOMATAL_CONDUCTANCE),
    Process.PHOTOSYNTHESIS: (Process.STOMATAL_CONDUCTANCE,),
}

def with_nested(models, processes):
    """The given processes plus those their attached models run internally, in pipeline order."""
    expanded = set(processes)
    for process in processes:
        if models.get_model(process) is not None:
            expanded.update(NESTED.get(process, ()))
    return tuple(p for p in PIPELINE if p in expanded)

def pipeline(models):
    """
    Processes run by a full simulation of an organ: light interception, then the energy balance or, when
    there is no energy model, photosynthesis or, when there is neither, stomatal conductance alone.
    """
    processes = [Process.INTERCEPTION]
    for process in (Process.ENERGY, Process.PHOTOSYNTHESIS, Process.STOMATAL_CONDUCTANCE):
        if models.get_model(process) is not None:
            processes.append(process)
            break
    return tuple(processes)


class ProcessModel:
    """
    Base class of the model strategies. A model is an immutable bundle of parameters tagged with the process
    it implements, declaring the status variables it reads (inputs) and writes (outputs).

    Subclasses set the class attributes `process` and `requires` (the processes whose model must also be
    attached to the organ, e.g. a photosynthesis model calling a stomatal conductance model) and implement
    `run`.
    """
    process = None
    requires = ()

    def inputs(self):
        return ()

    def outputs(self):
        return ()

    def run(self, models, status, meteo, constants):
        """
        Runs the model for one organ at one time-step, writing its outputs into the status.

        Parameters
        ----------
        models: Component
            Organ the model is attached to, used to reach the models of the other processes
        status: Status
            Status of the organ at this time-step, mutated in place
        meteo: Atmosphere
            Ambient conditions at this time-step
        constants: Constants
            Physical constants
        """
        raise NotImplementedError


_REGISTRY = {process: {} for process in Process}

## Modules defining the registered models
MODEL_MODULES = (
    "plantbiophys.interception",
    "plantbiophys.energybalance",
    "plantbiophys.photosynthesis",
    "plantbiophys.stomatalconductance",
)

def register_model(name):
    """Class decorator registering a model strategy under its process kind and the given name."""
    def decorator(cls):
        _REGISTRY[Process(cls.process)][name] = cls
        return cls
    return decorator

def _load_models():
    for module in MODEL_MODULES:
        import_module(module)

def _as_process(kind):
    try:
        return Process(kind)
    except ValueError:
        raise ValueError(f"Unknown process kind '{kind}', expected one of {[p.value for p in Process]}") from None

def available_models(kind):
    """Names of the models registered for the given process kind."""
    _load_models()
    return tuple(_REGISTRY[_as_process(kind)])

def build_model(kind, name, **params):
    """
    Builds a model from its process kind and registered name, e.g. build_model("photosynthesis", "Fvcb", VcMaxRef=150.0).
    """
    _load_models()
    process = _as_process(kind)
    try:
        cls = _REGISTRY[process][name]
    except KeyError:
        raise ValueError(f"No {process.value} model named '{name}', available models: {list(_REGISTRY[process])}") from None
    return cls(**params)

def run_process(process, models, status, meteo, constants):
    """Runs the model attached to the organ for the given process. Nothing happens when no model is attached."""
    model = models.get_model(process)
    if model is None:
        return
    model.run(models, status, meteo, constants)

def required_inputs(models, processes=PIPELINE):
    """
    Variables that must be initialised in the status before running the given processes of an organ. Inputs
    of a model that are written by a model earlier in the pipeline are not required.
    """
    required = []
    produced = set()
    for process in PIPELINE:
        if process not in processes:
            continue
        model = models.get_model(process)
        if model is None:
            continue
        for name in model.inputs():
            if name not in produced and name not in required:
                required.append(name)
        produced.update(model.outputs())
    return tuple(required)

def check_dependencies(models, processes=PIPELINE):
    for process in processes:
        model = models.get_model(process)
        if model is None:
            continue
        for dependency in model.requires:
            if models.get_model(dependency) is None:
                raise InitialisationError(
                    f"{type(model).__name__} needs a {Process(dependency).value} model, but the organ has none attached"
                )

def check_initialised(models, status, processes=PIPELINE):
    """
    Raises an InitialisationError when a model dependency is missing, or when a variable needed to run the
    given processes, or by the models they run internally, still holds the uninitialised sentinel.
    """
    processes = with_nested(models, processes)
    check_dependencies(models, processes)
    missing = status.uninitialised(required_inputs(models, processes))
    if missing:
        raise InitialisationError(
            f"Some variables must be initialised before simulation: {', '.join(missing)}", missing=missing
        )
