"""Unit tests for ScheduleConfig and resolve_configuration."""

import dataclasses
from fractions import Fraction

import pytest

from lertsim.core.config import (
    ScheduleConfig,
    intended_depth,
    literal_depth,
    resolve_configuration,
)
from lertsim.core.errors import ArithmeticOverflow, InvalidConfiguration, ScheduleError


class TestDerivedConstants:
    """Tests for depth and num_bins."""

    def test_original_defaults(self):
        cfg = resolve_configuration(5, 20, 2, 1.0)
        # ceil(20 / log2(10)) = ceil(6.02)
        assert cfg.depth == 7
        assert cfg.num_bins == 2

    def test_num_bins_from_time_stretch(self):
        assert resolve_configuration(5, 20, 2, 0.5).num_bins == 3
        assert resolve_configuration(5, 20, 2, 0.25).num_bins == 5
        assert resolve_configuration(5, 20, 2, 0.3).num_bins == 5  # ceil(3.33) + 1

    def test_fraction_time_stretch(self):
        cfg = resolve_configuration(5, 20, 2, Fraction(1, 3))
        assert cfg.num_bins == 4

    def test_levels_range(self):
        cfg = resolve_configuration(5, 20, 2, 1.0)
        assert cfg.levels == range(0, 8)


class TestDepthModes:
    """Tests for the two readings of the depth formula."""

    def test_literal_is_linear_in_disk_size(self):
        # log2(2 * 1) == 1, so depth == D
        assert literal_depth(1, 16, 2) == 16
        assert resolve_configuration(1, 16, 2, 1.0).depth == 16

    def test_intended_exact_power(self):
        # 2 * 1 * 2^3 == 16
        assert intended_depth(1, 16, 2) == 3

    def test_intended_rounds_up(self):
        # log10(1000 / 2) = 2.7
        assert intended_depth(1, 1000, 10) == 3
        cfg = resolve_configuration(1, 1000, 10, 1.0, depth_mode="intended")
        assert cfg.depth == 3

    def test_intended_small_disk_rejected(self):
        # D <= 2M gives depth 0
        with pytest.raises(InvalidConfiguration):
            resolve_configuration(10, 20, 2, 1.0, depth_mode="intended")

    def test_modes_differ(self):
        literal = resolve_configuration(5, 20, 2, 1.0)
        intended = resolve_configuration(5, 20, 2, 1.0, depth_mode="intended")
        assert literal.depth == 7
        assert intended.depth == 1


class TestValidation:
    """Tests for rejected parameters."""

    @pytest.mark.parametrize("kwargs", [
        dict(memory_size=0),
        dict(memory_size=-3),
        dict(disk_size=0),
        dict(expansion_factor=1),
        dict(expansion_factor=0),
        dict(time_stretch=0.0),
        dict(time_stretch=-0.5),
        dict(time_stretch=1.5),
        dict(time_stretch=True),
        dict(expansion_factor=2.5),
        dict(memory_size="5"),
        dict(depth_mode="logarithmic"),
        dict(word_bits=4),
    ])
    def test_invalid_parameters(self, kwargs):
        params = dict(memory_size=5, disk_size=20, expansion_factor=2, time_stretch=1.0)
        params.update(kwargs)
        with pytest.raises(InvalidConfiguration):
            resolve_configuration(**params)

    def test_subnormal_time_stretch(self):
        # 1 / 1e-310 is inf as a float
        with pytest.raises(ArithmeticOverflow):
            resolve_configuration(5, 20, 2, 1e-310)
        with pytest.raises(ScheduleError):
            resolve_configuration(5, 20, 2, 1e-310)

    def test_num_bins_must_fit_word(self):
        with pytest.raises(ArithmeticOverflow):
            resolve_configuration(5, 20, 2, 1e-30)
        with pytest.raises(ArithmeticOverflow):
            resolve_configuration(5, 20, 2, Fraction(1, 255), word_bits=8)
        assert resolve_configuration(5, 20, 2, Fraction(1, 254), word_bits=8).num_bins == 255

    def test_error_hierarchy(self):
        with pytest.raises(ScheduleError):
            resolve_configuration(5, 20, 1, 1.0)
        with pytest.raises(ValueError):
            resolve_configuration(5, 20, 1, 1.0)


class TestScheduleConfig:
    """Tests for the config object itself."""

    def test_frozen(self):
        cfg = resolve_configuration(5, 20, 2, 1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.depth = 3

    def test_equal_configs_hash_equal(self):
        a = resolve_configuration(5, 20, 2, 1.0)
        b = ScheduleConfig(5, 20, 2, 1.0)
        assert a == b
        assert hash(a) == hash(b)

    def test_describe(self):
        cfg = resolve_configuration(5, 20, 2, 1.0)
        assert cfg.describe() == {"M": 5, "D": 20, "depth": 7, "r": 2, "alpha": 1.0, "c": 2}

    def test_str_lists_parameters(self):
        text = str(resolve_configuration(5, 20, 2, 1.0))
        assert text.splitlines() == [
            "M = 5", "D = 20", "depth = 7", "r = 2", "alpha = 1.0", "c = 2",
        ]
