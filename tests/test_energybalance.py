"""Tests for the Monteith energy balance."""

import logging
import warnings

import pytest

from plantbiophys.component import Component
from plantbiophys.energybalance import Monteith
from plantbiophys.exceptions import InitialisationError, NonConvergenceWarning
from plantbiophys.photosynthesis import ConstantAGs, Fvcb
from plantbiophys.simulation import energy_balance, energy_balance_inplace
from plantbiophys.status import UNINITIALISED
from plantbiophys.stomatalconductance import ConstantGs, Medlyn


class TestReferenceScenario:
    """Leaf at 20 degC air temperature, 1 m s-1 wind, 65% relative humidity, with Fvcb and Medlyn."""

    def test_converges_to_reference_values(self, leaf, meteo) -> None:
        """Within 1% of the published values: the leaf is cooler than the air, so free convection is zero and only forced convection remains."""
        result = energy_balance(leaf, meteo)
        assert result.iterations == 2
        assert result.Tl == pytest.approx(17.66, abs=0.05)
        assert result.Rn == pytest.approx(21.27, rel=0.01)
        assert result.A == pytest.approx(29.35, rel=0.01)

    def test_regression(self, leaf, meteo) -> None:
        result = energy_balance(leaf, meteo)
        assert result.Tl == pytest.approx(17.6222420918, rel=1e-6)
        assert result.Rn == pytest.approx(21.3858408303, rel=1e-6)
        assert result.Rll == pytest.approx(7.63884083033, rel=1e-6)
        assert result.A == pytest.approx(29.1330145606, rel=1e-6)
        assert result.Gs == pytest.approx(1.54373500821, rel=1e-6)
        assert result.Ci == pytest.approx(327.849699695, rel=1e-6)
        assert result.Cs == pytest.approx(346.581805744, rel=1e-6)
        assert result.Gbh == pytest.approx(0.0173205080757, rel=1e-6)
        assert result.Gbc == pytest.approx(0.545376251791, rel=1e-6)
        assert result.Dl == pytest.approx(0.497365325914, rel=1e-6)
        assert result.lambdaE == pytest.approx(121.687671795, rel=1e-6)
        assert result.H == pytest.approx(-100.301830965055, rel=1e-6)

    def test_energy_conserved(self, leaf, meteo) -> None:
        result = energy_balance(leaf, meteo)
        assert result.H + result.lambdaE == pytest.approx(result.Rn, rel=1e-9)

    def test_all_outputs_initialised(self, leaf, meteo) -> None:
        result = energy_balance(leaf, meteo)
        assert result.uninitialised(Monteith().outputs()) == ()

    def test_leaf_cooler_than_air_has_forced_convection_only(self, leaf, meteo) -> None:
        result = energy_balance(leaf, meteo)
        assert result.Tl < meteo.T
        assert result.Gbh == pytest.approx(0.003 * (1.0 / 0.03) ** 0.5)

    def test_ci_not_above_cs(self, leaf, meteo) -> None:
        result = energy_balance(leaf, meteo)
        assert result.Ci <= result.Cs
        assert result.Cs <= meteo.Ca


class TestIdempotence:
    """Tests for the mutating and non-mutating entry points."""

    def test_non_mutating_is_repeatable(self, leaf, meteo) -> None:
        first = energy_balance(leaf, meteo)
        second = energy_balance(leaf, meteo)
        assert first == second

    def test_non_mutating_leaves_organ_untouched(self, leaf, meteo) -> None:
        before = leaf.status.copy()
        energy_balance(leaf, meteo)
        assert leaf.status == before

    def test_mutating_reproduces_non_mutating(self, leaf, meteo) -> None:
        expected = energy_balance(leaf, meteo)
        assert energy_balance_inplace(leaf, meteo) is None
        assert leaf.status == expected


class TestConvergence:
    """Tests for the iteration limit."""

    def test_non_convergence_warns_and_returns_estimate(self, leaf, meteo, caplog) -> None:
        leaf = Component(
            energy=Monteith(maxiter=1), photosynthesis=Fvcb(), stomatal_conductance=Medlyn(0.03, 12.0),
            Rs=13.747, sky_fraction=1.0, d=0.03, PPFD=1500.0,
        )
        with caplog.at_level(logging.WARNING, logger="plantbiophys.energybalance"):
            with pytest.warns(NonConvergenceWarning):
                result = energy_balance(leaf, meteo)
        assert result.iterations == 1
        assert result.Tl == pytest.approx(17.6, abs=0.2)
        assert result.H + result.lambdaE == pytest.approx(result.Rn)
        assert "did not converge" in caplog.text

    def test_converged_run_does_not_warn(self, leaf, meteo) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", NonConvergenceWarning)
            energy_balance(leaf, meteo)

    def test_iterations_logged_at_debug(self, leaf, meteo, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="plantbiophys.energybalance"):
            energy_balance(leaf, meteo)
        assert sum("Monteith: iteration" in r.getMessage() for r in caplog.records) == 3

    @pytest.mark.parametrize("kwargs", [dict(a_sh=3), dict(a_sv=0), dict(maxiter=0), dict(deltaT=0.0)])
    def test_invalid_parameters(self, kwargs) -> None:
        with pytest.raises(ValueError):
            Monteith(**kwargs)


class TestOtherConfigurations:
    """Tests for organs without a photosynthesis or an energy model."""

    def test_no_energy_model_is_noop(self, meteo) -> None:
        leaf = Component(photosynthesis=Fvcb(), stomatal_conductance=Medlyn(0.03, 12.0), PPFD=1500.0)
        result = energy_balance(leaf, meteo)
        assert result == leaf.status
        assert result.Tl == UNINITIALISED

    def test_non_transpiring_surface(self, meteo) -> None:
        surface = Component(energy=Monteith(), Rs=13.747, sky_fraction=1.0, d=0.03)
        result = energy_balance(surface, meteo)
        assert result.lambdaE == 0.0
        assert result.H == pytest.approx(result.Rn)
        assert result.A == 0.0
        assert result.Cs == meteo.Ca
        assert result.Gs == 0.0
        assert result.Tl > meteo.T

    def test_stomatal_model_without_photosynthesis(self, meteo) -> None:
        leaf = Component(energy=Monteith(), stomatal_conductance=ConstantGs(gs=0.2), Rs=13.747, sky_fraction=1.0, d=0.03)
        result = energy_balance(leaf, meteo)
        assert result.Gs == 0.2
        assert result.lambdaE > 0.0
        assert result.H + result.lambdaE == pytest.approx(result.Rn)

    def test_constant_assimilation(self, meteo) -> None:
        leaf = Component(
            energy=Monteith(), photosynthesis=ConstantAGs(A=20.0), stomatal_conductance=ConstantGs(gs=0.5),
            Rs=13.747, sky_fraction=1.0, d=0.03,
        )
        result = energy_balance(leaf, meteo)
        assert result.A == 20.0
        assert result.Ci < result.Cs < meteo.Ca

    def test_uninitialised_inputs(self, meteo) -> None:
        leaf = Component(energy=Monteith(), photosynthesis=Fvcb(), stomatal_conductance=Medlyn(0.03, 12.0), d=0.03)
        with pytest.raises(InitialisationError):
            energy_balance(leaf, meteo)
