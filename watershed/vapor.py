# watershed/vapor.py

"""
================================================================================
VAPOR CYCLE
================================================================================
Moves water between the ground and the air and carries the airborne part
around the grid.

Each tick runs two sub-steps:
1. exchange: water and vapor relax towards a temperature-dependent
   equilibrium vapor amount, with separate condensation and evaporation
   rates.
2. diffuse + advect: vapor spreads to its four neighbours and is then
   carried one upwind blend along a slowly rotating wind.

Data Contract:
---------------
- Inputs: (N, N) float64 water, vapor and temperature grids indexed [x, y],
  the global tick and ClimateParameters.
- Outputs: exchange() returns the signed rain grid (positive = condensation).
  The other steps update vapor in place.
- Side Effects: None beyond the in-place updates.
- Invariants:
    - exchange() conserves water + vapor exactly: every unit removed from
      one is added to the other.
    - Neither water nor vapor goes negative.
    - diffuse() and advect() conserve total vapor (periodic boundaries).
================================================================================
"""
import numpy as np
from scipy.ndimage import convolve


def equilibrium_vapor(temperature: np.ndarray, params) -> np.ndarray:
    """Vapor amount a cell's air settles at for a given temperature."""
    return params.vapor_base * np.exp(params.vapor_sensitivity * temperature)


def exchange(water: np.ndarray, vapor: np.ndarray, temperature: np.ndarray, params) -> np.ndarray:
    """
    Condenses surplus vapor into water and evaporates water into deficient air.

    Returns:
        np.ndarray: The transfer applied this tick ("rain"). Kept for
        display only; the simulation does not read it back.
    """
    deviation = vapor - equilibrium_vapor(temperature, params)
    transfer = np.where(
        deviation > 0,
        params.condensation_rate * deviation,
        params.evaporation_rate * deviation,
    )
    # Cannot rain out more vapor than the air holds, nor evaporate more
    # water than lies on the ground.
    transfer = np.clip(transfer, -water, vapor)

    water += transfer
    vapor -= transfer
    return transfer


def diffusion_kernel(coefficient: float) -> np.ndarray:
    """The 3x3 five-point blending stencil."""
    return np.array([
        [0.0, coefficient, 0.0],
        [coefficient, 1.0 - 4.0 * coefficient, coefficient],
        [0.0, coefficient, 0.0],
    ])


def diffuse(vapor: np.ndarray, coefficient: float):
    """Blends each cell with its four axis neighbours, in place."""
    if coefficient == 0.0:
        return
    # convolve reads the whole input before writing its output, so every
    # cell is blended against the same pre-pass snapshot.
    vapor[...] = convolve(vapor, diffusion_kernel(coefficient), mode='wrap')


def wind_vector(tick: int, params) -> tuple:
    """
    The global wind (wx, wy) in cells per tick.

    Over one wind period the vector leaves the start vector, reaches the end
    vector at half period and returns. The circularity term pushes it
    sideways, perpendicular to the start->end line, so that with
    circularity 1 it sweeps a full circle through both endpoints.
    """
    phase = 2.0 * np.pi * (tick % params.wind_period) / params.wind_period
    blend = (1.0 - np.cos(phase)) / 2.0
    swirl = params.wind_circularity * np.sin(phase) / 2.0

    span_x = params.wind_end_x - params.wind_start_x
    span_y = params.wind_end_y - params.wind_start_y

    wx = params.wind_start_x + blend * span_x - swirl * span_y
    wy = params.wind_start_y + blend * span_y + swirl * span_x
    return float(wx), float(wy)


def advect(vapor: np.ndarray, wind: tuple):
    """
    Upwind advection, in place. Both axes blend against one shared
    pre-advection snapshot.
    """
    wx, wy = wind
    snapshot = vapor.copy()

    # A positive component blows towards higher indices, so the upstream
    # neighbour sits one index lower.
    upstream_x = np.roll(snapshot, 1 if wx >= 0 else -1, axis=0)
    upstream_y = np.roll(snapshot, 1 if wy >= 0 else -1, axis=1)

    vapor += abs(wx) * (upstream_x - snapshot) + abs(wy) * (upstream_y - snapshot)


def diffuse_and_advect(vapor: np.ndarray, tick: int, params) -> tuple:
    """
    Runs the transport half of the vapor cycle.

    Returns:
        tuple: The wind vector used this tick.
    """
    diffuse(vapor, params.diffusion)
    wind = wind_vector(tick, params)
    advect(vapor, wind)
    return wind
