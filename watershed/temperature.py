# watershed/temperature.py

"""
================================================================================
TEMPERATURE FIELD
================================================================================
Derives a temperature scalar per cell, recomputed in full every tick.

By convention here higher ground (land + water surface) is colder. The
latitude and seasonal terms are optional and disabled by the defaults.

Data Contract:
---------------
- Inputs: land and water grids, optional ClimateParameters and tick.
- Outputs: A new (N, N) float64 temperature grid.
- Side Effects: None.
- Invariants: No persistent state; the output depends only on the inputs.
================================================================================
"""
import numpy as np


def seasonal_shift(tick: int, params) -> float:
    """Angle (radians) by which the warm band is displaced at this tick."""
    phase = 2.0 * np.pi * (tick % params.season_period) / params.season_period
    return params.seasonal_tilt * np.sin(phase)


def latitude_term(size: int, tick: int, params) -> np.ndarray:
    """
    Temperature offset per row. The grid wraps in y, so the warm band at
    y = 0 and the cold band at y = N / 2 meet smoothly across the edge.
    """
    latitude = 2.0 * np.pi * np.arange(size) / size
    return params.latitude_strength * np.cos(latitude - seasonal_shift(tick, params))


def update(land: np.ndarray, water: np.ndarray, params=None, tick: int = 0) -> np.ndarray:
    """
    Computes the temperature grid.

    Args:
        land, water: (N, N) height grids.
        params (ClimateParameters, optional): Enables the latitude term when
            its latitude_strength is non-zero.
        tick (int): Global tick, drives the seasonal tilt.
    """
    temperature = -(land + water)
    if params is not None and params.latitude_strength != 0.0:
        temperature += latitude_term(land.shape[1], tick, params)[np.newaxis, :]
    return temperature
