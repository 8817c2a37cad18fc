"""
Light interception models: Shortwave radiation and photon flux absorbed by an organ
"""

from attrs import define, field
from plantbiophys.exceptions import InitialisationError
from plantbiophys.processes import Process, ProcessModel, register_model

@register_model("Translucent")
@define(frozen=True)
class Translucent(ProcessModel):
    """
    Interception of the incident radiation by a translucent organ, e.g. a leaf. The radiation not
    transmitted through the organ is absorbed except for the fraction scattered in each waveband.
    """
    process = Process.INTERCEPTION

    transparency: float = field(default=0.0)  ## fraction of the incident radiation transmitted through the organ (-)
    scattering_PAR: float = field(default=0.15)  ## scattering coefficient of the organ for PAR (-)
    scattering_NIR: float = field(default=0.9)  ## scattering coefficient of the organ for NIR (-)

    def inputs(self):
        return ()

    def outputs(self):
        return ("Rs", "PPFD")

    def run(self, models, status, meteo, constants):
        if not meteo.has_radiation():
            raise InitialisationError(
                "Light interception needs the incident radiation (Ri_SW_f, or Ri_PAR_f and Ri_NIR_f) in the atmosphere",
                missing=("Ri_PAR_f", "Ri_NIR_f"),
            )
        intercepted = 1.0 - self.transparency
        PAR = meteo.Ri_PAR_f * intercepted * (1.0 - self.scattering_PAR)
        NIR = meteo.Ri_NIR_f * intercepted * (1.0 - self.scattering_NIR)
        status.PPFD = PAR * constants.J_to_umol
        status.Rs = PAR + NIR
