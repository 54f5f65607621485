# watershed/flow.py

"""
================================================================================
SURFACE WATER FLOW
================================================================================
An explicit flux solver for surface water on a toroidal grid.

Water moves across the edges between each cell and its two forward
neighbours (x + 1 and y + 1). flux_x[x, y] is the rate from (x, y) to
(x + 1, y); a negative value means water moves the other way. The flux
grids are the solver's momentum state: they are carried over between ticks
and only damped, never reset, which gives the flow its inertia.

Data Contract:
---------------
- Inputs:
    - land, tide, water: (N, N) float64 grids indexed [x, y].
    - flux_x, flux_y: (N, N) float64 flux/momentum grids from the previous tick.
    - params (ClimateParameters): gravity, outflow clamp fraction, damping.
- Outputs: None. water, flux_x and flux_y are updated in place.
- Side Effects: None beyond the in-place updates.
- Invariants:
    - Total water is conserved up to floating-point rounding.
    - Water never goes negative: the outflow clamp lets at most
      outflow_clamp_fraction of a cell's water leave it per tick.
    - accumulate and clamp never touch water; apply only reads committed
      fluxes. Every pass is vectorised, so the result does not depend on a
      cell iteration order.
================================================================================
"""
import numpy as np

# Asymptotic upper bound of the per-edge transfer coefficient. An explicit
# scheme moving half of a height difference per tick sits at the edge of
# divergence, so the coefficient approaches but never reaches it.
FLOW_STABILITY_CEILING = 0.5

# Grid axes of flux_x and flux_y, in that order.
_AXES = (0, 1)


def saturate(pressure: np.ndarray, ceiling: float = FLOW_STABILITY_CEILING) -> np.ndarray:
    """
    Maps a non-negative pressure term onto [0, ceiling).

    Behaves like the identity for small pressures and flattens out towards
    the ceiling however large the pressure grows.
    """
    return ceiling * pressure / (ceiling + pressure)


def accumulate_flux(land: np.ndarray, tide: np.ndarray, water: np.ndarray,
                    flux_x: np.ndarray, flux_y: np.ndarray, gravity: float):
    """
    Pass 1: adds this tick's gradient-driven flux onto the carried flux.
    """
    height = land + tide + water
    for axis, flux in zip(_AXES, (flux_x, flux_y)):
        # Head difference across the edge to the forward neighbour.
        dh = height - np.roll(height, -1, axis=axis)

        # The donor is whichever side of the edge stands higher.
        donor_depth = np.where(dh > 0, water, np.roll(water, -1, axis=axis))
        coefficient = saturate(gravity * donor_depth)

        flux += coefficient * dh


def outgoing_flux(flux_x: np.ndarray, flux_y: np.ndarray) -> np.ndarray:
    """Total flux leaving each cell across all four of its edges."""
    return (
        np.maximum(flux_x, 0.0) +
        np.maximum(flux_y, 0.0) +
        np.maximum(-np.roll(flux_x, 1, axis=0), 0.0) +
        np.maximum(-np.roll(flux_y, 1, axis=1), 0.0)
    )


def clamp_outflow(water: np.ndarray, flux_x: np.ndarray, flux_y: np.ndarray,
                  fraction: float) -> np.ndarray:
    """
    Pass 2: limits each cell's total outflow to fraction * water.

    One factor per cell scales all of that cell's outgoing components at
    once. Every edge has exactly one donor (given by the sign of its flux),
    so each edge is scaled once, by its donor's factor.

    Returns:
        np.ndarray: The per-cell clamp factor (1.0 where no clamp applied).
    """
    outgoing = outgoing_flux(flux_x, flux_y)
    limit = fraction * water

    scale = np.ones_like(water)
    over = outgoing > limit
    scale[over] = limit[over] / outgoing[over]

    for axis, flux in zip(_AXES, (flux_x, flux_y)):
        donor_scale = np.where(flux > 0, scale, np.roll(scale, -1, axis=axis))
        flux *= donor_scale
    return scale


def apply_flux(water: np.ndarray, flux_x: np.ndarray, flux_y: np.ndarray, damping: float):
    """
    Pass 3: damps the flux grids and moves the water they describe.
    """
    flux_x *= damping
    flux_y *= damping

    outflow = flux_x + flux_y
    inflow = np.roll(flux_x, 1, axis=0) + np.roll(flux_y, 1, axis=1)
    water += inflow - outflow


def step(land: np.ndarray, tide: np.ndarray, water: np.ndarray,
         flux_x: np.ndarray, flux_y: np.ndarray, params) -> np.ndarray:
    """
    Advances surface water by one tick.

    Args:
        land, tide, water: Height grids; only water is modified.
        flux_x, flux_y: Persistent flux grids, modified in place.
        params (ClimateParameters): Flow parameters.

    Returns:
        np.ndarray: The clamp factor grid of this tick, for diagnostics.
    """
    accumulate_flux(land, tide, water, flux_x, flux_y, params.gravity)
    scale = clamp_outflow(water, flux_x, flux_y, params.outflow_clamp_fraction)
    apply_flux(water, flux_x, flux_y, params.flux_damping)
    return scale
