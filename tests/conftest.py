"""
Pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import pytest


@pytest.fixture
def small_config():
    """M=5, D=20, r=2, α=1: depth 7 (literal), two bins per level."""
    from lertsim.core import resolve_configuration
    return resolve_configuration(5, 20, 2, 1.0)


@pytest.fixture
def small_engine(small_config):
    from lertsim.core import ScheduleEngine
    return ScheduleEngine(small_config)


@pytest.fixture
def ternary_config():
    """M=1, D=100, r=3, α=0.5: depth 4 (intended), three bins per level."""
    from lertsim.core import resolve_configuration
    return resolve_configuration(1, 100, 3, 0.5, depth_mode="intended")


@pytest.fixture
def ternary_engine(ternary_config):
    from lertsim.core import ScheduleEngine
    return ScheduleEngine(ternary_config)
