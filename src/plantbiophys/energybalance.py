"""
Energy balance models: Organ temperature and the partition of net radiation into sensible and latent heat
"""

import logging
import warnings
from attrs import define, field
from plantbiophys.biophysics_funcs import (
    e_sat,
    net_longwave_radiation,
    latent_heat,
    sensible_heat,
    mol_to_ms,
    gsc_to_gsw,
)
from plantbiophys.boundarylayer import boundary_conductances, gamma_star
from plantbiophys.exceptions import NonConvergenceWarning
from plantbiophys.processes import Process, ProcessModel, register_model, run_process

logger = logging.getLogger(__name__)

def _check_faces(instance, attribute, value):
    if value not in (1, 2):
        raise ValueError(f"{attribute.name} is a number of faces and must be 1 or 2, got {value}")

def _check_positive(instance, attribute, value):
    if value <= 0:
        raise ValueError(f"{attribute.name} must be strictly positive, got {value}")


@register_model("Monteith")
@define(frozen=True)
class Monteith(ProcessModel):
    """
    Steady-state energy balance of a leaf following Monteith and Unsworth (2013), coupled to the photosynthesis
    and stomatal conductance models of the organ.

    The leaf temperature is found by fixed-point iteration. Starting from the air temperature, each pass
    computes the net radiation, the boundary layer conductances, the assimilation and stomatal conductance
    and the latent heat flux from the Penman-Monteith equation, then updates the leaf temperature from the
    sensible heat flux needed to close the balance. The iteration stops when the leaf temperature changes by
    less than deltaT, or after maxiter updates, in which case a NonConvergenceWarning is issued and the last
    estimate is kept.

    The quantities of the atmosphere that depend on the physical constants (air density, latent heat of
    vaporization, psychrometer constant) are recomputed from the constants given to the simulation.

    References
    ----------
    Monteith, J. L. and Unsworth, M. H. (2013) Principles of Environmental Physics, 4th edn. Academic Press,
    Chapter 13.

    Leuning, R. et al. (1995) Leaf nitrogen, photosynthesis, conductance and transpiration: scaling from
    leaves to canopies. Plant, Cell and Environment 18, 1183-1200.
    """
    process = Process.ENERGY

    a_sh: int = field(default=2, validator=_check_faces)  ## number of faces exchanging sensible heat (-)
    a_sv: int = field(default=1, validator=_check_faces)  ## number of faces exchanging water vapour, 1 for hypostomatous leaves (-)
    epsilon: float = field(default=0.955)  ## emissivity of the organ (-)
    maxiter: int = field(default=10, validator=_check_positive)  ## maximum number of leaf temperature updates
    deltaT: float = field(default=0.01, validator=_check_positive)  ## convergence threshold on the leaf temperature (degrees Celsius)

    def inputs(self):
        return ("Rs", "sky_fraction", "d")

    def outputs(self):
        return ("Tl", "Rn", "Rll", "H", "lambdaE", "Cs", "Ci", "A", "Gs", "Gbh", "Dl", "Gbc", "iterations")

    def run(self, models, status, meteo, constants):
        meteo = meteo.with_constants(constants)
        has_photosynthesis = models.get_model(Process.PHOTOSYNTHESIS) is not None
        gs_model = models.get_model(Process.STOMATAL_CONDUCTANCE)
        Ta = meteo.T

        status.Tl = Ta
        status.Cs = meteo.Ca
        status.Dl = meteo.VPD
        iterations = 0

        while True:
            status.Rll = net_longwave_radiation(status.Tl, Ta, self.epsilon, meteo.epsilon, status.sky_fraction, constants)
            status.Rn = status.Rs + status.Rll

            Gbh, Rbh, Rbv, Gbc = boundary_conductances(Ta, status.Tl, meteo.Wind, status.d, meteo.P, constants)

            if has_photosynthesis:
                run_process(Process.PHOTOSYNTHESIS, models, status, meteo, constants)
                status.Cs = min(meteo.Ca, meteo.Ca - status.A / Gbc)
            else:
                status.A = 0.0
                status.Cs = meteo.Ca
                status.Ci = meteo.Ca
                status.Gs = gs_model.conductance(status, meteo, 0.0) if gs_model is not None else 0.0

            transpiring = status.Gs > 0.0
            if transpiring:
                Rsv = 1.0 / gsc_to_gsw(mol_to_ms(status.Gs, Ta, meteo.P, constants), constants.Gsc_to_Gsw)
                g_star = gamma_star(meteo.gamma, self.a_sh, self.a_sv, Rbv, Rsv, Rbh)
                status.lambdaE = latent_heat(status.Rn, meteo.VPD, g_star, Rbh, meteo.Delta, meteo.rho, self.a_sh, constants.cp_air)
            else:
                status.lambdaE = 0.0

            Tl_new = Ta + (status.Rn - status.lambdaE) / (meteo.rho * constants.cp_air * (self.a_sh / Rbh))
            logger.debug("Monteith: iteration %d, Tl=%s, new Tl=%s", iterations, status.Tl, Tl_new)

            if abs(Tl_new - status.Tl) <= self.deltaT:
                break
            if iterations >= self.maxiter:
                message = (
                    f"Energy balance did not converge after {self.maxiter} iterations "
                    f"(last leaf temperature change {abs(Tl_new - status.Tl):.4g} degC, threshold {self.deltaT} degC)"
                )
                logger.warning(message)
                warnings.warn(message, NonConvergenceWarning)
                break

            status.Tl = Tl_new
            status.Dl = e_sat(status.Tl) - meteo.e
            iterations += 1

        if transpiring:
            status.H = sensible_heat(status.Rn, meteo.VPD, g_star, Rbh, meteo.Delta, meteo.rho, self.a_sh, constants.cp_air)
        else:
            status.H = status.Rn
        status.Gbh = Gbh
        status.Gbc = Gbc
        status.iterations = iterations
