"""Tests for the light interception model."""

import pytest

from plantbiophys.atmosphere import Atmosphere
from plantbiophys.component import Component
from plantbiophys.exceptions import InitialisationError
from plantbiophys.interception import Translucent
from plantbiophys.simulation import light_interception


@pytest.fixture
def sunny() -> Atmosphere:
    return Atmosphere(T=20.0, Wind=1.0, P=101.3, Rh=0.65, Ri_SW_f=500.0)


class TestTranslucent:
    """Tests for the absorbed shortwave radiation and photon flux."""

    def test_opaque_leaf(self, sunny) -> None:
        result = light_interception(Component(interception=Translucent()), sunny)
        assert result.PPFD == pytest.approx(240.0 * 0.85 * 4.57)
        assert result.Rs == pytest.approx(240.0 * 0.85 + 260.0 * 0.1)

    def test_transparency(self, sunny) -> None:
        opaque = light_interception(Component(interception=Translucent()), sunny)
        half = light_interception(Component(interception=Translucent(transparency=0.5)), sunny)
        assert half.Rs == pytest.approx(opaque.Rs / 2)
        assert half.PPFD == pytest.approx(opaque.PPFD / 2)

    def test_missing_radiation(self, meteo) -> None:
        with pytest.raises(InitialisationError):
            light_interception(Component(interception=Translucent()), meteo)

    def test_no_model_is_noop(self, sunny) -> None:
        leaf = Component(Rs=10.0)
        assert light_interception(leaf, sunny).Rs == 10.0
