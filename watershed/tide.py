# watershed/tide.py

"""
================================================================================
TIDE FORCING
================================================================================
A travelling sinusoidal bulge along the x axis. The tide is a virtual
height added to land + water when the flow solver compares neighbouring
columns; it never holds or conserves any water itself.

Data Contract:
---------------
- Inputs: grid position / size, the global tick and ClimateParameters.
- Outputs: a height offset (scalar or (N, N) float64 grid).
- Side Effects: None.
- Invariants: A pure function of (position, tick). Nothing is persisted.
================================================================================
"""
import numpy as np


def _phase(tick: int, period: int) -> float:
    return 2.0 * np.pi * (tick % period) / period


def height_offset(x, tick: int, params, size: int = None):
    """
    Tidal height offset at column x.

    Args:
        x: Column index (int or NumPy array of ints).
        tick (int): The global simulation tick.
        params (ClimateParameters): Supplies amplitude and period.
        size (int, optional): Grid side length, defaults to params.grid_size.
    """
    size = params.grid_size if size is None else size
    return params.tide_amplitude * np.sin(2.0 * np.pi * x / size + _phase(tick, params.tide_period))


def tide_grid(size: int, tick: int, params) -> np.ndarray:
    """Full (size, size) tide grid for one tick. Constant along y."""
    column = height_offset(np.arange(size), tick, params, size)
    return np.repeat(column[:, np.newaxis], size, axis=1)
