"""
Biophysics helper functions used across more than one plantbiophys module
"""

import numpy as np
from plantbiophys.constants import resolve_constants

def e_sat(T):
    """
    Computes the saturation vapor pressure using Tetens' formula with the coefficients for water
    of Buck (1981).

    Parameters
    ----------
    T: float or ndarray
        Air temperature (degrees Celsius)

    Returns
    -------
    e_s: float or ndarray
        Saturation vapor pressure (kPa)

    References
    ----------
    Jones, H.G. (2013) Plants and microclimate, 3rd edn. Cambridge University Press, p. 412.
    """
    return 0.61375 * np.exp((17.502 * T) / (T + 240.97))

def e_sat_slope(T):
    """
    Slope of the saturation vapor pressure curve at temperature T (kPa K-1), computed with a
    forward finite difference of 0.1 K.
    """
    return (e_sat(T + 0.1) - e_sat(T)) / 0.1

def vapor_pressure(T, Rh):
    """
    Computes the actual vapor pressure from relative humidity and temperature.

    Parameters
    ----------
    T : float or ndarray
        Air temperature (degC).
    Rh : float or ndarray
        Relative humidity (0-1).

    Returns
    -------
    e_a : float or ndarray
        Actual vapor pressure (kPa)
    """
    return Rh * e_sat(T)

def air_density(T, P, constants=None):
    """
    Density of dry air from the ideal gas law.

    Parameters
    ----------
    T: float
        Air temperature (degrees Celsius)
    P: float
        Atmospheric pressure (kPa)
    constants: Constants
        Physical constants, uses the gas constant of dry air and the Celsius to Kelvin offset

    Returns
    -------
    rho: float
        Air density (kg m-3)
    """
    constants = resolve_constants(constants)
    return P * 1000 / (constants.R_dry_air * (T + constants.T_K0))

def latent_heat_vaporization(T, lambda0=2.501):
    """
    Latent heat of vaporization of water, corrected for temperature.

    Parameters
    ----------
    T: float
        Temperature (degrees Celsius)
    lambda0: float
        Latent heat of vaporization at 0 degC (MJ kg-1)

    Returns
    -------
    lambda_: float
        Latent heat of vaporization (J kg-1)
    """
    return (lambda0 - 0.002365 * T) * 1.0e6

def psychrometer_constant(P, lambda_, cp=1013.0, epsilon=0.622):
    """
    Computes the psychrometer constant, the ratio of the specific heat of moist air at constant
    pressure to the latent heat of vaporization scaled by the pressure.

    Parameters
    ----------
    P: float
        Atmospheric pressure (kPa)
    lambda_: float
        Latent heat of vaporization (J kg-1), see latent_heat_vaporization
    cp: float
        Specific heat of air at constant pressure (J kg-1 K-1)
    epsilon: float
        Ratio of the molecular weight of water vapor to dry air (-)

    Returns
    -------
    gamma: float
        Psychrometer constant (kPa K-1)

    Notes
    -----
    Monteith and Unsworth (2013, p. 230) give about 66 Pa K-1 at 0 degC rising to 67 Pa K-1 at 20 degC
    for a pressure of 101.3 kPa.

    References
    ----------
    Monteith and Unsworth (2013) Principles of Environmental Physics, 4th edn, Academic Press.
    """
    return (cp * P) / (epsilon * lambda_)

def atmosphere_emissivity(T, e, T_K0=273.15):
    """
    Emissivity of a clear sky atmosphere (Brutsaert, 1975).

    Parameters
    ----------
    T: float
        Air temperature (degrees Celsius)
    e: float
        Air vapor pressure (kPa)
    T_K0: float
        Celsius to Kelvin offset

    Returns
    -------
    epsilon_a: float
        Atmospheric emissivity (-)
    """
    return 0.642 * (e * 100 / (T + T_K0))**(1 / 7)

def black_body(T, constants=None):
    """
    Thermal radiation emitted by a black body at temperature T (Stefan-Boltzmann law).

    Parameters
    ----------
    T: float
        Temperature of the body (degrees Celsius)
    constants: Constants
        Physical constants

    Returns
    -------
    flux: float
        Emitted radiation (W m-2)
    """
    constants = resolve_constants(constants)
    return constants.StefanBoltzmannConstant * (T + constants.T_K0)**4.0

def grey_body(T, epsilon, constants=None):
    """Thermal radiation emitted by a grey body of emissivity epsilon at temperature T (W m-2)."""
    return epsilon * black_body(T, constants)

def net_longwave_radiation(T_1, T_2, epsilon_1, epsilon_2, F_1, constants=None):
    """
    Net longwave radiation exchanged by object 1 with object 2, e.g. a leaf with the atmosphere.

    Parameters
    ----------
    T_1: float
        Temperature of object 1 (degrees Celsius)
    T_2: float
        Temperature of object 2 (degrees Celsius)
    epsilon_1: float
        Emissivity of object 1 (-)
    epsilon_2: float
        Emissivity of object 2 (-)
    F_1: float
        View factor of object 1 towards object 2, e.g. the sky fraction seen by a leaf (-)
    constants: Constants
        Physical constants

    Returns
    -------
    Rll: float
        Net longwave radiation of object 1 (W m-2). Positive when object 1 gains energy,
        negative when it loses energy.

    References
    ----------
    Cengel (2003) Heat transfer: a practical approach, McGraw-Hill, Example 12-7 (p. 627).
    """
    constants = resolve_constants(constants)
    T_1k = T_1 + constants.T_K0
    T_2k = T_2 + constants.T_K0
    return constants.StefanBoltzmannConstant * F_1 * (T_2k**4.0 - T_1k**4.0) / (1.0 / epsilon_1 + 1.0 / epsilon_2 - 1.0)

def latent_heat(Rn, VPD, gamma_star, Rbh, Delta, rho, a_sh, cp=1013.0):
    """
    Latent heat flux from the Penman-Monteith equation.

    Parameters
    ----------
    Rn: float
        Net radiation (W m-2)
    VPD: float
        Air vapor pressure deficit (kPa)
    gamma_star: float
        Apparent psychrometer constant (kPa K-1), see boundarylayer.gamma_star
    Rbh: float
        Boundary layer resistance to heat (s m-1)
    Delta: float
        Slope of the saturation vapor pressure curve at air temperature (kPa K-1)
    rho: float
        Air density (kg m-3)
    a_sh: int
        Number of faces exchanging heat (1 or 2)
    cp: float
        Specific heat of air (J kg-1 K-1)

    Returns
    -------
    lambdaE: float
        Latent heat flux (W m-2)

    References
    ----------
    Monteith and Unsworth (2013) Chapter 13, Steady-state heat balance.
    """
    return (Delta * Rn + rho * cp * VPD * (a_sh / Rbh)) / (Delta + gamma_star)

def sensible_heat(Rn, VPD, gamma_star, Rbh, Delta, rho, a_sh, cp=1013.0):
    """
    Sensible heat flux from the Penman-Monteith formulation (W m-2). Shares all arguments with
    latent_heat so that the sum of both fluxes is exactly Rn.
    """
    return (gamma_star * Rn - rho * cp * VPD * (a_sh / Rbh)) / (Delta + gamma_star)

def ms_to_mol(G, T, P, constants=None):
    """
    Converts a conductance from m s-1 to mol m-2 s-1.

    Parameters
    ----------
    G: float
        Conductance (m s-1)
    T: float
        Air temperature (degrees Celsius)
    P: float
        Air pressure (kPa)
    constants: Constants
        Physical constants

    Returns
    -------
    G_mol: float
        Conductance (mol m-2 s-1)
    """
    constants = resolve_constants(constants)
    return G * (P * 1000) / (constants.R * (T + constants.T_K0))

def mol_to_ms(G, T, P, constants=None):
    """Converts a conductance from mol m-2 s-1 to m s-1, the inverse of ms_to_mol."""
    constants = resolve_constants(constants)
    return G * (constants.R * (T + constants.T_K0)) / (P * 1000)

def gsc_to_gsw(Gsc, Gsc_to_Gsw=1.57):
    """Stomatal conductance for water vapour from the stomatal conductance for CO2."""
    return Gsc * Gsc_to_Gsw

def fT_arrhenius(k_ref, E_a, T_k, T_ref_k, R=8.314):
    """
    Applies an Arrhenius-type temperature scaling function to the given parameter.

    Parameters
    ----------
    k_ref: float
        Rate constant at the reference temperature

    E_a: float
        Activation energy, J mol-1, gives the rate of exponential increase of the function

    T_k: float
        Temperature, K

    T_ref_k: float
        Reference temperature, K

    R: float
        Universal gas constant, J mol-1 K-1

    Returns
    -------
    Temperature adjusted rate constant at the given temperature.

    References
    ----------
    Medlyn et al. (2002, doi: 10.1046/j.1365-3040.2002.00891.x) Equation 16
    """
    return k_ref * np.exp(E_a * (T_k - T_ref_k) / (R * T_k * T_ref_k))

def fT_arrheniuspeaked(k_ref, E_a, T_k, T_ref_k, H_d=200000.0, DeltaS=650.0, R=8.314):
    """
    Applies a peaked Arrhenius-type temperature scaling function to the given parameter.

    Parameters
    ----------
    k_ref: float
        Rate constant at the reference temperature

    E_a: float
        Activation energy, J mol-1. Describes the rate of exponential increase of the function below the optimum

    T_k: float
        Temperature, K

    T_ref_k: float
        Reference temperature, K

    H_d: float
        Deactivation energy, J mol-1. Describes the rate of decrease of the function above the optimum

    DeltaS: float
        Entropy of the process, J mol-1 K-1.

    R: float
        Universal gas constant, J mol-1 K-1

    Returns
    -------
    Temperature adjusted rate constant at the given temperature.

    References
    ----------
    Medlyn et al. (2002, doi: 10.1046/j.1365-3040.2002.00891.x) Equation 17.
    """
    k_scaling = np.exp(E_a * (T_k - T_ref_k) / (R * T_k * T_ref_k)) * \
        (1.0 + np.exp((T_ref_k * DeltaS - H_d) / (R * T_ref_k))) / \
        (1.0 + np.exp((T_k * DeltaS - H_d) / (R * T_k)))
    return k_ref * k_scaling
