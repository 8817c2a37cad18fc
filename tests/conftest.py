"""Shared fixtures: the reference leaf and its atmosphere."""

import pytest

from plantbiophys.atmosphere import Atmosphere
from plantbiophys.component import Component
from plantbiophys.energybalance import Monteith
from plantbiophys.photosynthesis import Fvcb
from plantbiophys.stomatalconductance import Medlyn


@pytest.fixture
def meteo() -> Atmosphere:
    """Atmosphere of the reference energy balance scenario."""
    return Atmosphere(T=20.0, Wind=1.0, P=101.3, Rh=0.65)


@pytest.fixture
def make_leaf():
    """Factory for a leaf coupling Monteith, Fvcb and Medlyn with the reference initial values."""

    def make(**overrides) -> Component:
        values = dict(Rs=13.747, sky_fraction=1.0, d=0.03, PPFD=1500.0)
        values.update(overrides)
        return Component(
            energy=Monteith(),
            photosynthesis=Fvcb(),
            stomatal_conductance=Medlyn(g0=0.03, g1=12.0),
            **values,
        )

    return make


@pytest.fixture
def leaf(make_leaf) -> Component:
    return make_leaf()
