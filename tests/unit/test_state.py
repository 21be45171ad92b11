"""Unit tests for BinState."""

import pytest

from lertsim.core.state import BinKind, BinState


class TestBinState:
    """Tests for BinState construction and properties."""

    def test_constructors(self):
        assert BinState.empty().kind is BinKind.EMPTY
        assert BinState.full().kind is BinKind.FULL
        assert BinState.flushing().kind is BinKind.FLUSHING
        filling = BinState.filling(0.25)
        assert filling.kind is BinKind.FILLING
        assert filling.fraction == 0.25

    def test_filling_bounds(self):
        assert BinState.filling(0.0).fraction == 0.0
        with pytest.raises(ValueError):
            BinState.filling(1.0)
        with pytest.raises(ValueError):
            BinState.filling(-0.1)

    def test_only_filling_has_fraction(self):
        with pytest.raises(ValueError):
            BinState(BinKind.FULL, 0.5)

    def test_fill_level(self):
        assert BinState.empty().fill_level == 0.0
        assert BinState.filling(0.5).fill_level == 0.5
        assert BinState.full().fill_level == 1.0
        assert BinState.flushing().fill_level == 1.0

    def test_equality(self):
        assert BinState.full() == BinState.full()
        assert BinState.filling(0.5) == BinState.filling(0.5)
        assert BinState.filling(0.5) != BinState.filling(0.25)
        assert BinState.full() != BinState.flushing()

    def test_str(self):
        assert str(BinState.empty()) == "Empty"
        assert str(BinState.flushing()) == "Flushing"
        assert str(BinState.filling(0.5)) == "Filling(0.5)"
