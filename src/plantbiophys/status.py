"""
Status class: Mutable record of the simulation variables of one organ at one time-step
"""

import numpy as np
from attrs import define, field, fields, evolve

## Value held by a variable that has not been initialised yet
UNINITIALISED = -np.inf

@define
class Status:
    """
    Holds every variable read or written by the interception, energy balance, photosynthesis and stomatal
    conductance models. Variables that were never given a value hold the UNINITIALISED sentinel, which is
    distinct from zero.
    """

    ## Light interception
    Rs: float = field(default=UNINITIALISED)  ## absorbed shortwave radiation (W m-2)
    PPFD: float = field(default=UNINITIALISED)  ## absorbed photosynthetic photon flux density (umol m-2 s-1)

    ## Organ geometry
    sky_fraction: float = field(default=UNINITIALISED)  ## view factor between the organ and the sky (-)
    d: float = field(default=UNINITIALISED)  ## characteristic dimension of the organ, e.g. leaf width (m)

    ## Energy balance
    Tl: float = field(default=UNINITIALISED)  ## organ temperature (degrees Celsius)
    Rn: float = field(default=UNINITIALISED)  ## net radiation (W m-2)
    Rll: float = field(default=UNINITIALISED)  ## net longwave radiation, positive when the organ gains energy (W m-2)
    H: float = field(default=UNINITIALISED)  ## sensible heat flux (W m-2)
    lambdaE: float = field(default=UNINITIALISED)  ## latent heat flux (W m-2)
    Gbh: float = field(default=UNINITIALISED)  ## boundary layer conductance for heat (m s-1)
    Dl: float = field(default=UNINITIALISED)  ## vapor pressure deficit at the organ surface (kPa)
    iterations: float = field(default=UNINITIALISED)  ## number of leaf temperature updates of the energy balance

    ## Gas exchange
    Cs: float = field(default=UNINITIALISED)  ## CO2 concentration at the organ surface (umol mol-1)
    Ci: float = field(default=UNINITIALISED)  ## intercellular CO2 concentration (umol mol-1)
    A: float = field(default=UNINITIALISED)  ## net CO2 assimilation rate (umol m-2 s-1)
    Gs: float = field(default=UNINITIALISED)  ## stomatal conductance for CO2 (mol m-2 s-1)
    Gbc: float = field(default=UNINITIALISED)  ## boundary layer conductance for CO2 (mol m-2 s-1)

    @classmethod
    def variables(cls):
        """Names of all the status variables, in declaration order."""
        return tuple(a.name for a in fields(cls))

    def is_initialised(self, name):
        return getattr(self, name) != UNINITIALISED

    def uninitialised(self, names=None):
        """Returns the subset of the given variable names (all variables by default) still holding the sentinel."""
        if names is None:
            names = self.variables()
        return tuple(n for n in names if not self.is_initialised(n))

    def update(self, **values):
        """Sets several variables at once. Unknown names raise a ValueError."""
        unknown = set(values) - set(self.variables())
        if unknown:
            raise ValueError(f"Unknown status variable(s): {sorted(unknown)}")
        for name, value in values.items():
            setattr(self, name, value)

    def copy(self):
        return evolve(self)

    def to_dict(self):
        return {n: getattr(self, n) for n in self.variables()}
