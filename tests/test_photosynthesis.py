"""Tests for the photosynthesis models."""

import pytest

from plantbiophys.component import Component
from plantbiophys.constants import Constants
from plantbiophys.exceptions import InitialisationError, InvalidRootError
from plantbiophys.photosynthesis import ConstantAGs, Fvcb, max_root
from plantbiophys.simulation import photosynthesis, photosynthesis_inplace
from plantbiophys.stomatalconductance import ConstantGs, Medlyn


def make_leaf(PPFD=1500.0, Tl=25.0, Cs=400.0, Dl=1.0, photo=None, gs=None) -> Component:
    return Component(
        photosynthesis=photo if photo is not None else Fvcb(),
        stomatal_conductance=gs if gs is not None else Medlyn(0.03, 12.0),
        PPFD=PPFD, Tl=Tl, Cs=Cs, Dl=Dl,
    )


class TestMaxRoot:
    """Tests for the quadratic root selection."""

    def test_largest_root(self) -> None:
        assert max_root(1.0, -3.0, 2.0) == pytest.approx(2.0)
        assert max_root(-1.0, 3.0, -2.0) == pytest.approx(2.0)

    def test_linear(self) -> None:
        assert max_root(0.0, 2.0, -4.0) == pytest.approx(2.0)

    def test_no_real_root(self) -> None:
        with pytest.raises(InvalidRootError):
            max_root(1.0, 0.0, 1.0)

    def test_degenerate(self) -> None:
        with pytest.raises(InvalidRootError):
            max_root(0.0, 0.0, 1.0)

    def test_is_arithmetic_error(self) -> None:
        assert issubclass(InvalidRootError, ArithmeticError)


class TestFvcb:
    """Tests for the Farquhar, von Caemmerer and Berry model coupled to Medlyn."""

    def test_temperature_responses_at_reference(self) -> None:
        GammaStar, Km, JMax, VcMax, Rd, TPU = Fvcb().temperature_responses(25.0, Constants())
        assert GammaStar == pytest.approx(42.75)
        assert Km == pytest.approx(404.9 * (1 + 210.0 / 278.4))
        assert JMax == pytest.approx(250.0)
        assert VcMax == pytest.approx(200.0)
        assert Rd == pytest.approx(0.6)
        assert TPU == 9999.0

    def test_electron_transport_saturates(self) -> None:
        model = Fvcb()
        assert model.electron_transport(0.0, 250.0) == pytest.approx(0.0)
        assert model.electron_transport(500.0, 250.0) < model.electron_transport(1500.0, 250.0) < 250.0

    def test_light_saturated_assimilation(self, meteo) -> None:
        result = photosynthesis(make_leaf(), meteo)
        assert 10.0 < result.A < 60.0
        assert result.Gs > 0.0
        assert 0.0 < result.Ci <= result.Cs

    def test_darkness_gives_respiration(self, meteo) -> None:
        result = photosynthesis(make_leaf(PPFD=0.0), meteo)
        assert result.A == pytest.approx(-0.6)
        assert result.Gs > 0.0
        assert result.Ci == pytest.approx(400.0)

    @pytest.mark.parametrize("Tl", [5.0, 15.0, 25.0, 35.0])
    @pytest.mark.parametrize("PPFD", [50.0, 500.0, 2000.0])
    def test_ci_not_above_cs(self, meteo, Tl: float, PPFD: float) -> None:
        result = photosynthesis(make_leaf(PPFD=PPFD, Tl=Tl), meteo)
        assert result.Ci <= result.Cs + 1e-9
        assert result.Gs > 0.0

    def test_more_light_more_assimilation(self, meteo) -> None:
        low = photosynthesis(make_leaf(PPFD=200.0), meteo)
        high = photosynthesis(make_leaf(PPFD=1500.0), meteo)
        assert high.A > low.A

    def test_gs_consistent_with_conductance_model(self, meteo) -> None:
        result = photosynthesis(make_leaf(), meteo)
        assert result.Gs == pytest.approx(0.03 + 13.0 / 400.0 * result.A)

    def test_inplace(self, meteo) -> None:
        leaf = make_leaf()
        expected = photosynthesis(leaf, meteo)
        assert photosynthesis_inplace(leaf, meteo) is None
        assert leaf.status == expected

    def test_needs_stomatal_model(self, meteo) -> None:
        leaf = Component(photosynthesis=Fvcb(), PPFD=1500.0, Tl=25.0, Cs=400.0)
        with pytest.raises(InitialisationError):
            photosynthesis(leaf, meteo)


class TestConstantAGs:
    """Tests for the constant assimilation model."""

    def test_back_solves_ci(self, meteo) -> None:
        leaf = make_leaf(photo=ConstantAGs(A=25.0), gs=ConstantGs(gs=0.5))
        result = photosynthesis(leaf, meteo)
        assert result.A == 25.0
        assert result.Gs == 0.5
        assert result.Ci == pytest.approx(350.0)

    def test_with_medlyn(self, meteo) -> None:
        leaf = make_leaf(photo=ConstantAGs(A=20.0))
        result = photosynthesis(leaf, meteo)
        assert result.Gs == pytest.approx(0.68)
        assert result.Ci == pytest.approx(400.0 - 20.0 / 0.68)

    def test_negative_assimilation_keeps_ci_at_cs(self, meteo) -> None:
        leaf = make_leaf(photo=ConstantAGs(A=-2.0), gs=ConstantGs(gs=0.1))
        assert photosynthesis(leaf, meteo).Ci == 400.0
