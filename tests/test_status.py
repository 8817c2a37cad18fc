"""Tests for the Status record."""

import pytest

from plantbiophys.status import UNINITIALISED, Status


class TestStatus:
    """Tests for initialisation tracking and copying of Status."""

    def test_defaults_are_uninitialised(self) -> None:
        s = Status()
        assert s.Tl == UNINITIALISED
        assert s.uninitialised() == Status.variables()

    def test_zero_is_initialised(self) -> None:
        """The sentinel is distinguishable from zero."""
        s = Status(A=0.0)
        assert s.is_initialised("A")
        assert "A" not in s.uninitialised()

    def test_uninitialised_subset(self) -> None:
        s = Status(Rs=13.747, d=0.03)
        assert s.uninitialised(("Rs", "d", "PPFD", "sky_fraction")) == ("PPFD", "sky_fraction")

    def test_update(self) -> None:
        s = Status()
        s.update(Tl=25.0, Cs=380.0)
        assert (s.Tl, s.Cs) == (25.0, 380.0)

    def test_update_unknown_variable(self) -> None:
        with pytest.raises(ValueError):
            Status().update(foo=1.0)

    def test_unknown_variable_at_construction(self) -> None:
        with pytest.raises(TypeError):
            Status(foo=1.0)

    def test_copy_is_independent(self) -> None:
        s = Status(Tl=20.0)
        c = s.copy()
        c.Tl = 30.0
        assert s.Tl == 20.0
        assert c == Status(Tl=30.0)

    def test_to_dict(self) -> None:
        d = Status(Rs=1.0).to_dict()
        assert list(d) == list(Status.variables())
        assert d["Rs"] == 1.0
