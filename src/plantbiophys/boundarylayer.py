"""
Boundary layer functions: Conductances of the leaf boundary layer to heat and water vapour, and the apparent psychrometer constant.
"""

import numpy as np
from plantbiophys.biophysics_funcs import ms_to_mol
from plantbiophys.constants import resolve_constants

def heat_diffusivity(T, Dh0=21.5e-6):
    """
    Molecular diffusivity for heat, corrected for air temperature.

    Parameters
    ----------
    T: float
        Air temperature (degrees Celsius)
    Dh0: float
        Molecular diffusivity for heat at 0 degC (m2 s-1)

    Returns
    -------
    Dh: float
        Molecular diffusivity for heat at temperature T (m2 s-1)

    References
    ----------
    Monteith and Unsworth (2013) Principles of Environmental Physics, 4th edn, eq. 3.10.
    """
    return Dh0 * (1.0 + 0.007 * T)

def gbh_free(Ta, Tl, d, Dh0=21.5e-6):
    """
    Boundary layer conductance for heat under free (buoyancy-driven) convection, for one side of a flat leaf.

    Parameters
    ----------
    Ta: float
        Air temperature (degrees Celsius)
    Tl: float
        Leaf temperature (degrees Celsius)
    d: float
        Characteristic dimension of the leaf, e.g. its width (m)
    Dh0: float
        Molecular diffusivity for heat at 0 degC (m2 s-1)

    Returns
    -------
    Gbh_free: float
        Boundary layer conductance for heat (m s-1)

    Notes
    -----
    Free convection only takes place when the leaf is warmer than the surrounding air, otherwise the
    conductance is zero. The Grashof number is taken as Gr = 1.58e8 d^3 |Tl - Ta| (Monteith and Unsworth,
    2013, eq. 10.9) and the conductance as Gbh = 0.5 Dh Gr^(1/4) / d (Leuning, 1995, eq. E4).

    References
    ----------
    Leuning et al. (1995) Leaf nitrogen, photosynthesis, conductance and transpiration: scaling from leaves
    to canopies. Plant, Cell and Environment 18, 1183-1200.
    """
    if Tl <= Ta:
        return 0.0
    Gr = 1.58e8 * d**3.0 * np.abs(Tl - Ta)
    return 0.5 * heat_diffusivity(Ta, Dh0) * Gr**0.25 / d

def gbh_forced(Wind, d):
    """
    Boundary layer conductance for heat under forced (wind-driven) convection, for one side of a flat leaf.

    Parameters
    ----------
    Wind: float
        Wind speed at leaf level (m s-1)
    d: float
        Characteristic dimension of the leaf (m)

    Returns
    -------
    Gbh_forced: float
        Boundary layer conductance for heat (m s-1)

    References
    ----------
    Leuning et al. (1995), eq. E1.
    """
    return 0.003 * np.sqrt(Wind / d)

def gbh_to_gbw(Gbh, Gbh_to_Gbw=1.075):
    """Boundary layer conductance for water vapour from the boundary layer conductance for heat."""
    return Gbh * Gbh_to_Gbw

def gamma_star(gamma, a_sh, a_sv, Rbv, Rsv, Rbh):
    """
    Apparent value of the psychrometer constant, accounting for the resistances to heat and water vapour.

    Parameters
    ----------
    gamma: float
        Psychrometer constant (kPa K-1)
    a_sh: int
        Number of faces of the object exchanging sensible heat (1 or 2)
    a_sv: int
        Number of faces of the object exchanging water vapour, i.e. 1 for hypostomatous leaves
    Rbv: float
        Boundary layer resistance to water vapour (s m-1)
    Rsv: float
        Stomatal resistance to water vapour (s m-1)
    Rbh: float
        Boundary layer resistance to heat (s m-1)

    Returns
    -------
    gamma_star: float
        Apparent psychrometer constant (kPa K-1)

    References
    ----------
    Monteith and Unsworth (2013), eq. 13.32.
    """
    return gamma * a_sh / a_sv * (Rbv + Rsv) / Rbh

def boundary_conductances(Ta, Tl, Wind, d, P, constants=None):
    """
    Total boundary layer conductance for heat and the derived resistances and CO2 conductance.

    Returns
    -------
    Gbh: float
        Boundary layer conductance for heat, free plus forced convection (m s-1)
    Rbh: float
        Boundary layer resistance to heat (s m-1)
    Rbv: float
        Boundary layer resistance to water vapour (s m-1)
    Gbc: float
        Boundary layer conductance for CO2 (mol m-2 s-1)
    """
    constants = resolve_constants(constants)
    Gbh = gbh_free(Ta, Tl, d, constants.Dh0) + gbh_forced(Wind, d)
    if not Gbh > 0.0:
        raise ValueError(
            f"No heat exchange through the boundary layer (Gbh={Gbh}): the wind speed must be strictly positive, got Wind={Wind}"
        )
    Rbh = 1.0 / Gbh
    Rbv = 1.0 / gbh_to_gbw(Gbh, constants.Gbh_to_Gbw)
    Gbc = ms_to_mol(Gbh, Ta, P, constants) / constants.Gbc_to_Gbh
    return Gbh, Rbh, Rbv, Gbc
