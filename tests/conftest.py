"""
Shared fixtures for the watershed test suite.

Run with: python -m pytest tests -v
"""
import numpy as np
import pytest

from watershed.parameters import ClimateParameters


@pytest.fixture
def small_params():
    """A 16x16 run with the default physics."""
    return ClimateParameters.from_config({"grid_size": 16, "seed": 7, "log_interval": 10})


@pytest.fixture
def calm_params():
    """A 16x16 run without tide or wind."""
    return ClimateParameters.from_config({
        "grid_size": 16,
        "tide_amplitude": 0.0,
        "wind_start_x": 0.0,
        "wind_start_y": 0.0,
        "wind_end_x": 0.0,
        "wind_end_y": 0.0,
    })


@pytest.fixture
def rough_land(small_params):
    """Reproducible random relief, independent of the terrain generator."""
    rng = np.random.default_rng(2024)
    return rng.normal(0.0, 20.0, (small_params.grid_size, small_params.grid_size))
