"""
Atmosphere and Weather classes: Ambient conditions of an organ at one time-step, and an ordered series of them
"""

import numpy as np
import pandas as pd
from attrs import define, evolve, field, fields
from plantbiophys.constants import Constants, resolve_constants
from plantbiophys.biophysics_funcs import e_sat as calc_e_sat
from plantbiophys.biophysics_funcs import (
    e_sat_slope,
    air_density,
    latent_heat_vaporization,
    psychrometer_constant,
    atmosphere_emissivity,
)

@define(frozen=True)
class Atmosphere:
    """
    Snapshot of the atmosphere surrounding an organ. The quantities derived from the inputs are computed
    once at construction and are read-only afterwards.

    Notes
    -----
    When only the global shortwave radiation (Ri_SW_f) is known, it is partitioned into its
    photosynthetically active (Ri_PAR_f) and near infra-red (Ri_NIR_f) components using
    Constants.PAR_fraction.
    """

    ## Inputs
    T: float = field()  ## air temperature (degrees Celsius)
    Wind: float = field()  ## wind speed (m s-1)
    P: float = field()  ## air pressure (kPa)
    Rh: float = field(default=None)  ## relative humidity (0-1), derived from VPD when not given
    VPD: float = field(default=None)  ## vapor pressure deficit (kPa), derived from Rh when not given
    Ca: float = field(default=400.0)  ## ambient CO2 concentration (umol mol-1)
    Ri_SW_f: float = field(default=np.nan)  ## incident global shortwave radiation flux (W m-2)
    Ri_PAR_f: float = field(default=np.nan)  ## incident photosynthetically active radiation flux (W m-2)
    Ri_NIR_f: float = field(default=np.nan)  ## incident near infra-red radiation flux (W m-2)
    date: object = field(default=None)  ## date-time of the record, for bookkeeping only
    duration: float = field(default=1.0)  ## duration of the time-step (s)
    constants: Constants = field(default=None, converter=resolve_constants, repr=False, eq=False)

    ## Derived quantities
    e_sat: float = field(init=False)  ## saturated vapor pressure (kPa)
    e: float = field(init=False)  ## vapor pressure (kPa)
    rho: float = field(init=False)  ## air density (kg m-3)
    lambda_: float = field(init=False)  ## latent heat of vaporization (J kg-1)
    gamma: float = field(init=False)  ## psychrometer constant (kPa K-1)
    epsilon: float = field(init=False)  ## atmosphere emissivity (-)
    Delta: float = field(init=False)  ## slope of the saturated vapor pressure curve (kPa K-1)

    @Rh.validator
    def _check_Rh(self, attribute, value):
        if value is not None and not 0.0 <= value <= 1.0:
            raise ValueError(f"Relative humidity must be given as a fraction between 0 and 1, got Rh={value}")

    @Wind.validator
    def _check_Wind(self, attribute, value):
        if value <= 0.0:
            raise ValueError(f"Wind speed must be strictly positive, there is no forced convection in still air, got Wind={value}")

    @VPD.validator
    def _check_VPD(self, attribute, value):
        if value is not None and not 0.0 <= value <= self.e_sat:
            raise ValueError(f"Vapor pressure deficit must be between 0 and e_sat={self.e_sat:.4g} kPa, got VPD={value}")

    @P.validator
    def _check_P(self, attribute, value):
        if value <= 0.0:
            raise ValueError(f"Air pressure must be positive, got P={value}")

    @e_sat.default
    def _e_sat_default(self):
        return calc_e_sat(self.T)

    @e.default
    def _e_default(self):
        if (self.Rh is None) == (self.VPD is None):
            raise ValueError(f"Give the air humidity as either Rh or VPD, got Rh={self.Rh} and VPD={self.VPD}")
        if self.Rh is not None:
            return self.Rh * self.e_sat
        return self.e_sat - self.VPD

    @rho.default
    def _rho_default(self):
        return air_density(self.T, self.P, self.constants)

    @lambda_.default
    def _lambda_default(self):
        return latent_heat_vaporization(self.T, self.constants.lambda0)

    @gamma.default
    def _gamma_default(self):
        return psychrometer_constant(self.P, self.lambda_, self.constants.cp_air, self.constants.MW_ratio_H2O)

    @epsilon.default
    def _epsilon_default(self):
        return atmosphere_emissivity(self.T, self.e, self.constants.T_K0)

    @Delta.default
    def _Delta_default(self):
        return e_sat_slope(self.T)

    def __attrs_post_init__(self):
        if self.Rh is None:
            object.__setattr__(self, "Rh", self.e / self.e_sat)
        if self.VPD is None:
            object.__setattr__(self, "VPD", self.e_sat - self.e)
        if not np.isnan(self.Ri_SW_f) and np.isnan(self.Ri_PAR_f) and np.isnan(self.Ri_NIR_f):
            Ri_PAR_f = self.constants.PAR_fraction * self.Ri_SW_f
            object.__setattr__(self, "Ri_PAR_f", Ri_PAR_f)
            object.__setattr__(self, "Ri_NIR_f", self.Ri_SW_f - Ri_PAR_f)

    def has_radiation(self):
        """Whether the record carries the incident PAR and NIR radiation fluxes."""
        return not (np.isnan(self.Ri_PAR_f) or np.isnan(self.Ri_NIR_f))

    def with_constants(self, constants):
        """
        The same atmosphere with its derived quantities computed from the given constants, or the record itself
        when it already uses them.
        """
        constants = resolve_constants(constants)
        if constants == self.constants:
            return self
        return evolve(self, constants=constants, VPD=None)

    def to_dict(self):
        return {a.name: getattr(self, a.name) for a in fields(Atmosphere) if a.name != "constants"}


@define
class Weather:
    """
    Ordered series of Atmosphere records, one per time-step, with site metadata (e.g. site name, latitude, longitude).
    """

    data: list = field(converter=list)
    metadata: dict = field(factory=dict)

    @data.validator
    def _check_data(self, attribute, value):
        if len(value) == 0:
            raise ValueError("Weather requires at least one Atmosphere record")
        for i, a in enumerate(value):
            if not isinstance(a, Atmosphere):
                raise TypeError(f"Weather records must be Atmosphere instances, got {type(a).__name__} at time-step {i}")

    def __len__(self):
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def with_constants(self, constants):
        """The same series with the derived quantities of every record computed from the given constants."""
        return Weather([a.with_constants(constants) for a in self.data], dict(self.metadata))

    def __getitem__(self, i):
        if isinstance(i, slice):
            return Weather(self.data[i], dict(self.metadata))
        return self.data[i]

    def to_dataframe(self):
        """One row per time-step, one column per Atmosphere variable."""
        return pd.DataFrame([a.to_dict() for a in self.data])
