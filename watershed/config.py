# watershed/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the
simulation. These values are used if they are not explicitly provided by the
user's configuration.

All heights, depths and vapor amounts are expressed in "grid units": one unit
of height is the same length as one cell edge. The defaults below are tuned
for the reference 256x256 grid.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SIMULATION.
Instead, pass a configuration dictionary to ClimateParameters.from_config().
================================================================================
"""

# --- Grid ---
# Side length of the square, toroidal grid. Must be a power of two.
DEFAULT_GRID_SIZE = 256

# --- Terrain Synthesis ---
DEFAULT_SEED = 1337
# Number of coarse octaves that use BASE_AMPLITUDE instead of the
# distance-scaled displacement. These lay down continents and ocean basins.
SEED_OCTAVES = 2
# Displacement amplitude for the seed octaves, in grid units.
BASE_AMPLITUDE = 96.0
# Displacement amplitude per unit of distance to the sampled neighbours.
# 1.0 reproduces classic midpoint displacement roughness.
DISPLACEMENT_SCALE = 0.6
# Fraction of the cube-root skew term added at each non-seed octave.
# 0.0 gives symmetric, Gaussian-like roughness; larger values favour
# occasional sharp peaks and troughs.
SKEW_FRACTION = 0.35
# Initial water surface level. Every cell whose land lies below this level
# starts submerged up to it.
SEA_LEVEL = 0.0

# --- Surface Water Flow ---
# Pressure coefficient: transfer rate per unit of donor depth and head.
GRAVITY = 0.05
# At most this fraction of a cell's water may leave it in a single tick.
OUTFLOW_CLAMP_FRACTION = 0.5
# Per-tick multiplier applied to the persistent flux grids (friction).
# 1.0 means frictionless, 0.0 removes all inertia.
FLUX_DAMPING = 0.98

# --- Tide ---
# Amplitude of the travelling tidal bulge, in grid units (0.05 * 256).
TIDE_AMPLITUDE = 12.8
# Ticks for the bulge to travel once around the x axis.
TIDE_PERIOD = 1700

# --- Temperature ---
# Strength of the optional latitude term. 0.0 keeps temperature purely
# elevation-driven.
LATITUDE_STRENGTH = 0.0
# Seasonal shift of the warm band, in radians of latitude. 0.0 disables it.
SEASONAL_TILT = 0.0
SEASON_PERIOD = 4000

# --- Vapor Cycle ---
# Neighbour weight for the five-point vapor diffusion (stable up to 0.25).
DIFFUSION = 0.1
# Fraction of the vapor surplus that rains out per tick.
CONDENSATION_RATE = 0.05
# Fraction of the vapor deficit that evaporates per tick.
EVAPORATION_RATE = 0.01
# Equilibrium vapor = VAPOR_BASE * exp(VAPOR_SENSITIVITY * temperature).
VAPOR_BASE = 1.0
VAPOR_SENSITIVITY = 0.02

# --- Wind ---
# Wind blows from the start vector towards the end vector and back over
# one WIND_PERIOD. Components are in cells per tick.
WIND_START = (0.3, 0.0)
WIND_END = (-0.1, 0.2)
WIND_PERIOD = 2000
# 0.0 oscillates along the straight line between the endpoints, 1.0 sweeps
# a full circle through both of them.
WIND_CIRCULARITY = 0.5

# --- Runtime ---
# A debug line with the global water and vapor totals is logged every
# LOG_INTERVAL ticks.
LOG_INTERVAL = 100
