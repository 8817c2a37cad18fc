"""
Photosynthesis models: Net CO2 assimilation of an organ, coupled to its stomatal conductance
"""

import logging
import numpy as np
from attrs import define, field
from plantbiophys.biophysics_funcs import fT_arrhenius, fT_arrheniuspeaked
from plantbiophys.exceptions import InitialisationError, InvalidRootError
from plantbiophys.processes import Process, ProcessModel, register_model

logger = logging.getLogger(__name__)

def max_root(a, b, c):
    """
    Largest real root of the quadratic a*x**2 + b*x + c = 0, or the root of the linear equation when a is zero.
    Raises an InvalidRootError when there is no real root.
    """
    if a == 0.0:
        if b == 0.0:
            raise InvalidRootError(f"Degenerate quadratic with a=0 and b=0 (c={c}), no root can be found")
        return -c / b
    discriminant = b**2 - 4 * a * c
    if discriminant < 0.0 or np.isnan(discriminant):
        raise InvalidRootError(f"Quadratic has no real root (a={a}, b={b}, c={c}, discriminant={discriminant})")
    sqrt_discriminant = np.sqrt(discriminant)
    return max((-b + sqrt_discriminant) / (2 * a), (-b - sqrt_discriminant) / (2 * a))

def _stomatal_model(models, model):
    gs_model = models.get_model(Process.STOMATAL_CONDUCTANCE)
    if gs_model is None:
        raise InitialisationError(f"{type(model).__name__} needs a stomatal_conductance model, but the organ has none attached")
    return gs_model


@register_model("Fvcb")
@define(frozen=True)
class Fvcb(ProcessModel):
    """
    Farquhar, von Caemmerer and Berry (1980) biochemical model of C3 photosynthesis, coupled analytically to a
    stomatal conductance model.

    The assimilation is limited by either the Rubisco carboxylation rate (Wv), the regeneration of RuBP by
    electron transport (Wj) or the triose-phosphate utilisation (TPU). For the first two limitations the
    intercellular CO2 concentration that satisfies both the biochemical demand and the diffusion supply
    through the stomata is the largest root of a quadratic equation (see Duursma, 2015).

    References
    ----------
    Farquhar, G. D., von Caemmerer, S. and Berry, J. A. (1980) A biochemical model of photosynthetic CO2
    assimilation in leaves of C3 species. Planta 149, 78-90.

    Medlyn, B. E. et al. (2002) Temperature response of parameters of a biochemically based model of
    photosynthesis. II. A review of experimental data. Plant, Cell and Environment 25, 1167-1179.

    Duursma, R. A. (2015) Plantecophys - An R package for analysing and modelling leaf gas exchange data.
    PLoS ONE 10, e0143346.
    """
    process = Process.PHOTOSYNTHESIS
    requires = (Process.STOMATAL_CONDUCTANCE,)

    Tr: float = field(default=25.0)  ## reference temperature of the parameters (degrees Celsius)
    VcMaxRef: float = field(default=200.0)  ## maximum rate of Rubisco carboxylation at Tr (umol m-2 s-1)
    JMaxRef: float = field(default=250.0)  ## maximum rate of electron transport at Tr (umol m-2 s-1)
    RdRef: float = field(default=0.6)  ## mitochondrial respiration in the light at Tr (umol m-2 s-1)
    TPURef: float = field(default=9999.0)  ## rate of triose phosphate utilisation at Tr (umol m-2 s-1)
    E_a_r: float = field(default=46390.0)  ## activation energy of Rd (J mol-1)
    O2: float = field(default=210.0)  ## intercellular dioxygen concentration (mmol mol-1)
    E_a_j: float = field(default=29680.0)  ## activation energy of JMax (J mol-1)
    Hd_j: float = field(default=200000.0)  ## deactivation energy of JMax (J mol-1)
    DeltaS_j: float = field(default=631.88)  ## entropy term of JMax (J mol-1 K-1)
    E_a_v: float = field(default=58550.0)  ## activation energy of VcMax (J mol-1)
    Hd_v: float = field(default=200000.0)  ## deactivation energy of VcMax (J mol-1)
    DeltaS_v: float = field(default=629.26)  ## entropy term of VcMax (J mol-1 K-1)
    alpha: float = field(default=0.24)  ## quantum yield of electron transport (mol e- mol-1 photons)
    theta: float = field(default=0.7)  ## curvature of the light response of electron transport (-)

    def inputs(self):
        return ("PPFD", "Tl", "Cs")

    def outputs(self):
        return ("A", "Gs", "Ci")

    def temperature_responses(self, Tl, constants):
        """
        Returns the photosynthetic parameters adjusted to the leaf temperature Tl (degrees Celsius).

        Returns
        -------
        GammaStar: float
            CO2 compensation point in the absence of mitochondrial respiration (umol mol-1)
        Km: float
            Effective Michaelis-Menten coefficient of Rubisco for CO2 (umol mol-1)
        JMax: float
            Maximum rate of electron transport (umol m-2 s-1)
        VcMax: float
            Maximum rate of Rubisco carboxylation (umol m-2 s-1)
        Rd: float
            Mitochondrial respiration in the light (umol m-2 s-1)
        TPU: float
            Rate of triose phosphate utilisation (umol m-2 s-1)

        Notes
        -----
        GammaStar, Kc and Ko are given at 25 degC from Bernacchi et al. (2001).
        """
        Tk = Tl + constants.T_K0
        Trk = self.Tr + constants.T_K0
        GammaStar = fT_arrhenius(42.75, 37830.0, Tk, Trk, constants.R)
        Kc = fT_arrhenius(404.9, 79430.0, Tk, Trk, constants.R)
        Ko = fT_arrhenius(278.4, 36380.0, Tk, Trk, constants.R)
        Km = Kc * (1.0 + self.O2 / Ko)
        JMax = fT_arrheniuspeaked(self.JMaxRef, self.E_a_j, Tk, Trk, self.Hd_j, self.DeltaS_j, constants.R)
        VcMax = fT_arrheniuspeaked(self.VcMaxRef, self.E_a_v, Tk, Trk, self.Hd_v, self.DeltaS_v, constants.R)
        Rd = fT_arrhenius(self.RdRef, self.E_a_r, Tk, Trk, constants.R)
        TPU = self.TPURef
        return GammaStar, Km, JMax, VcMax, Rd, TPU

    def electron_transport(self, PPFD, JMax):
        """Rate of electron transport (umol m-2 s-1) from a non-rectangular hyperbola light response."""
        x = self.alpha * PPFD + JMax
        return (x - np.sqrt(x**2 - 4 * self.alpha * self.theta * PPFD * JMax)) / (2 * self.theta)

    def assimilation(self, status, meteo, constants, gs_model):
        """
        Solves the coupled assimilation and stomatal conductance system.

        Returns
        -------
        A: float
            Net CO2 assimilation rate (umol m-2 s-1)
        Gs: float
            Stomatal conductance for CO2 (mol m-2 s-1)
        Ci: float
            Intercellular CO2 concentration (umol mol-1)
        """
        Cs = status.Cs
        GammaStar, Km, JMax, VcMax, Rd, TPU = self.temperature_responses(status.Tl, constants)
        J = self.electron_transport(status.PPFD, JMax)
        Vj = J / 4.0
        g0, gs_mod = gs_model.linear_response(status, meteo)

        ## RuBP regeneration (electron transport) limited rate
        a = g0 + gs_mod * (Vj - Rd)
        b = (1.0 - Cs * gs_mod) * (Vj - Rd) + g0 * (2.0 * GammaStar - Cs) - gs_mod * (Vj * GammaStar + 2.0 * GammaStar * Rd)
        c = -(1.0 - Cs * gs_mod) * GammaStar * (Vj + 2.0 * Rd) - g0 * 2.0 * GammaStar * Cs
        Ci_j = max_root(a, b, c)
        if Ci_j <= 0.0 or Ci_j > Cs:
            Wj = 0.0
        else:
            Wj = Vj * (Ci_j - GammaStar) / (Ci_j + 2.0 * GammaStar)

        ## Rubisco carboxylation limited rate
        a = g0 + gs_mod * (VcMax - Rd)
        b = (1.0 - Cs * gs_mod) * (VcMax - Rd) + g0 * (Km - Cs) - gs_mod * (VcMax * GammaStar + Km * Rd)
        c = -(1.0 - Cs * gs_mod) * (VcMax * GammaStar + Km * Rd) - g0 * Km * Cs
        Ci_v = max_root(a, b, c)
        if Ci_v <= 0.0 or Ci_v > Cs:
            Wv = 0.0
        else:
            Wv = VcMax * (Ci_v - GammaStar) / (Ci_v + Km)

        A = min(Wv, Wj, 3.0 * TPU) - Rd
        Gs = gs_model.conductance(status, meteo, A)
        Ci = min(Cs, Cs - A / Gs)
        logger.debug("Fvcb: Tl=%s, Cs=%s, Wv=%s, Wj=%s, A=%s, Gs=%s, Ci=%s", status.Tl, Cs, Wv, Wj, A, Gs, Ci)
        return A, Gs, Ci

    def run(self, models, status, meteo, constants):
        gs_model = _stomatal_model(models, self)
        status.A, status.Gs, status.Ci = self.assimilation(status, meteo, constants, gs_model)


@register_model("ConstantAGs")
@define(frozen=True)
class ConstantAGs(ProcessModel):
    """
    Constant net assimilation rate. The stomatal conductance is computed by the attached stomatal conductance
    model at that rate and the intercellular CO2 concentration is back-solved from the diffusion equation.
    """
    process = Process.PHOTOSYNTHESIS
    requires = (Process.STOMATAL_CONDUCTANCE,)

    A: float = field(default=25.0)  ## net CO2 assimilation rate (umol m-2 s-1)

    def inputs(self):
        return ("Cs",)

    def outputs(self):
        return ("A", "Gs", "Ci")

    def run(self, models, status, meteo, constants):
        gs_model = _stomatal_model(models, self)
        Gs = gs_model.conductance(status, meteo, self.A)
        if Gs <= 0.0:
            raise InvalidRootError(f"Stomatal conductance must be positive to back-solve Ci, got Gs={Gs}")
        status.A = self.A
        status.Gs = Gs
        status.Ci = min(status.Cs, status.Cs - self.A / Gs)
