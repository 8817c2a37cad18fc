"""
Physical constants class: Bundle of named physical constants shared by every biophysical calculation
"""

from attrs import define, field

@define(frozen=True)
class Constants:
    """
    Physical constants used across the energy balance, boundary layer and gas exchange calculations.
    Pass a modified instance to any calculation to override a value, e.g. Constants(Dh0=22.0e-6).
    """

    ## Unit conversion factors
    T_K0: float = field(default=273.15)  ## conversion factor for degrees Celsius to Kelvin
    J_to_umol: float = field(default=4.57)  ## Conversion factor of PAR irradiance (W m-2) to PPFD (umol photons m-2 s-1) (umol J-1)
    PAR_fraction: float = field(default=0.48)  ## Fraction of global shortwave radiation that is photosynthetically active (-)

    ## Gas constants
    R: float = field(default=8.314)  ## universal gas constant (J mol-1 K-1)
    R_dry_air: float = field(default=287.0586)  ## specific gas constant for dry air (J kg-1 K-1)
    M_H2O: float = field(default=18.0e-3)  ## molar mass of water (kg mol-1)
    MW_ratio_H2O: float = field(default=0.622)  ## ratio molecular weight of water vapor to dry air

    ## Thermodynamic constants
    cp_air: float = field(default=1013.0)  ## specific heat of air at constant pressure (J kg-1 K-1)
    lambda0: float = field(default=2.501)  ## latent heat of vaporization of water at 0 degC (MJ kg-1)
    StefanBoltzmannConstant: float = field(default=5.670373e-8)  ## Stefan-Boltzmann constant (W m-2 K-4)
    Dh0: float = field(default=21.5e-6)  ## molecular diffusivity for heat at 0 degC (m2 s-1), Monteith and Unsworth (2013)

    ## Conductance ratios
    Gbh_to_Gbw: float = field(default=1.075)  ## ratio of boundary layer conductance for water vapour to that for heat (-)
    Gsc_to_Gsw: float = field(default=1.57)  ## ratio of stomatal conductance for water vapour to that for CO2 (-)
    Gbc_to_Gbh: float = field(default=1.32)  ## ratio of boundary layer conductance for heat to that for CO2 (-)


def resolve_constants(constants=None) -> Constants:
    """Returns the given constants, or the canonical default set when none is given."""
    if constants is None:
        return Constants()
    return constants
