"""
Stomatal conductance models: Conductance of the stomata to CO2 as a linear response to the assimilation rate
"""

import logging
import numpy as np
from attrs import define, field
from plantbiophys.processes import Process, ProcessModel, register_model

logger = logging.getLogger(__name__)

def _check_positive(instance, attribute, value):
    if value <= 0.0:
        raise ValueError(f"{type(instance).__name__}.{attribute.name} must be strictly positive, got {value}")

def _check_non_negative(instance, attribute, value):
    if value < 0.0:
        raise ValueError(f"{type(instance).__name__}.{attribute.name} cannot be negative, got {value}")


class StomatalConductanceModel(ProcessModel):
    """
    Common behaviour of the stomatal conductance models. Each model gives the conductance as a linear
    function of the assimilation rate, Gs = intercept + slope * A, which lets the photosynthesis models
    solve the coupled assimilation and conductance system analytically.
    """
    process = Process.STOMATAL_CONDUCTANCE
    gs_min = 0.001

    def linear_response(self, status, meteo):
        """Returns the (intercept, slope) of the conductance response to the assimilation rate."""
        raise NotImplementedError

    def conductance(self, status, meteo, A):
        """
        Stomatal conductance for CO2 (mol m-2 s-1) at the assimilation rate A, floored to gs_min so that it is
        never zero or negative.
        """
        intercept, slope = self.linear_response(status, meteo)
        return max(self.gs_min, intercept + slope * A)

    def outputs(self):
        return ("Gs",)

    def run(self, models, status, meteo, constants):
        status.Gs = self.conductance(status, meteo, status.A)


@register_model("Medlyn")
@define(frozen=True)
class Medlyn(StomatalConductanceModel):
    """
    Stomatal conductance model of Medlyn et al. (2011), an optimal stomatal behaviour model responding to the
    assimilation rate, the surface CO2 concentration and the vapor pressure deficit at the leaf surface.

    Gs = g0 + (1 + g1 / sqrt(Dl)) * A / Cs

    References
    ----------
    Medlyn, B. E. et al. (2011) Reconciling the optimal and empirical approaches to modelling stomatal
    conductance. Global Change Biology 17, 2134-2144.
    """
    g0: float = field()  ## residual conductance when the assimilation rate is zero (mol m-2 s-1)
    g1: float = field()  ## slope parameter, related to the marginal water cost of carbon gain (kPa^0.5)
    gs_min: float = field(default=0.001, validator=_check_positive)  ## minimum stomatal conductance (mol m-2 s-1)
    Dl_min: float = field(default=1e-3, validator=_check_positive)  ## lower bound on Dl, avoids an infinite slope in saturated air (kPa)

    def inputs(self):
        return ("Dl", "Cs", "A")

    def linear_response(self, status, meteo):
        Dl = status.Dl
        if Dl < self.Dl_min:
            logger.debug("Medlyn: Dl=%s below Dl_min, using Dl_min=%s", Dl, self.Dl_min)
            Dl = self.Dl_min
        return self.g0, (1.0 + self.g1 / np.sqrt(Dl)) / status.Cs


@register_model("ConstantGs")
@define(frozen=True)
class ConstantGs(StomatalConductanceModel):
    """Constant stomatal conductance g0 + gs, independent of the assimilation rate. Useful to decouple the models."""
    g0: float = field(default=0.0, validator=_check_non_negative)  ## residual conductance (mol m-2 s-1)
    gs: float = field(default=0.0011, validator=_check_positive)  ## stomatal conductance for CO2 (mol m-2 s-1)

    def inputs(self):
        return ()

    def linear_response(self, status, meteo):
        return self.g0 + self.gs, 0.0

    def conductance(self, status, meteo, A):
        return self.g0 + self.gs
