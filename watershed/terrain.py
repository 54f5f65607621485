# watershed/terrain.py

"""
================================================================================
TERRAIN GENERATION
================================================================================
This module builds the static land-height field with a skewed midpoint
displacement fractal on a toroidal grid.

Data Contract:
---------------
- Inputs (on initialization):
    - params (ClimateParameters): grid size and the terrain synthesis fields.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from generate()):
    - A float64 NumPy array of shape (N, N), indexed [x, y]. Values are
      unbounded in sign and measured relative to the reference level 0.
- Side Effects: Logs messages using the provided logger.
- Invariants:
    - Given the same seed and parameters, the output is bit-identical.
    - The random stream is numpy.random.default_rng(seed) with exactly one
      value discarded before the first displacement is drawn.
    - Every neighbour lookup wraps modulo N, so the field tiles seamlessly.
================================================================================
"""
import logging
import time

import numpy as np
from numba import njit

# Number of values drawn from a fresh generator and thrown away before
# the first displacement sample.
RANDOM_DISCARD_COUNT = 1


@njit
def _signed_cbrt(value):
    "Real cube root that keeps the sign of negative inputs."
    if value < 0.0:
        return -((-value) ** (1.0 / 3.0))
    return value ** (1.0 / 3.0)


@njit
def _displace_point(grid, samples, cursor, x, y, du, dv, amplitude, skew_fraction, use_skew):
    """
    Sets grid[x, y] from the four neighbours at offsets (du, dv) rotated by
    quarter turns. With du == dv these are the diagonals of a block, with
    dv == 0 the axis-aligned neighbours of an edge midpoint.

    Returns the advanced sample cursor.
    """
    n = grid.shape[0]
    a = grid[(x + du) % n, (y + dv) % n]
    b = grid[(x - du) % n, (y - dv) % n]
    c = grid[(x + dv) % n, (y - du) % n]
    d = grid[(x - dv) % n, (y + du) % n]
    average = (a + b + c + d) / 4.0

    displacement = (samples[cursor] - 0.5) * amplitude
    height = average + displacement

    if use_skew:
        cubes = ((a - average) ** 3 + (b - average) ** 3 +
                 (c - average) ** 3 + (d - average) ** 3) / 4.0
        height += skew_fraction * _signed_cbrt(cubes)

    grid[x, y] = height
    return cursor + 1


@njit
def midpoint_displacement(size, samples, seed_octaves, base_amplitude, displacement_scale, skew_fraction):
    """
    Generates a size x size toroidal height field.

    samples must hold at least size * size - 1 uniform values in [0, 1);
    they are consumed in generation order, one per point.
    """
    grid = np.zeros((size, size))
    cursor = 0
    octave = 0
    step = size
    while step >= 2:
        half = step // 2
        is_seed = octave < seed_octaves

        # Diagonal pass: block centres from the four block corners.
        if is_seed:
            amplitude = base_amplitude
        else:
            amplitude = displacement_scale * half * np.sqrt(2.0)
        for x in range(0, size, step):
            for y in range(0, size, step):
                cursor = _displace_point(grid, samples, cursor, x + half, y + half,
                                         half, half, amplitude, skew_fraction, not is_seed)

        # Edge pass: edge midpoints from their axis-aligned neighbours.
        if is_seed:
            amplitude = base_amplitude
        else:
            amplitude = displacement_scale * half
        for x in range(0, size, step):
            for y in range(0, size, step):
                cursor = _displace_point(grid, samples, cursor, x + half, y,
                                         half, 0, amplitude, skew_fraction, not is_seed)
                cursor = _displace_point(grid, samples, cursor, x, y + half,
                                         half, 0, amplitude, skew_fraction, not is_seed)

        step = half
        octave += 1
    return grid


def draw_samples(seed: int, count: int) -> np.ndarray:
    """Draws the displacement samples for one terrain, after the documented discard."""
    rng = np.random.default_rng(seed)
    rng.random(RANDOM_DISCARD_COUNT)
    return rng.random(count)


class TerrainGenerator:
    """
    Generates the land-height field for a simulation run.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, params, logger: logging.Logger = None):
        """
        Initializes the terrain generator.

        Args:
            params (ClimateParameters): Validated simulation parameters.
            logger (logging.Logger, optional): The logger instance for all output.
        """
        self.params = params
        self.logger = logger or logging.getLogger(__name__)
        self.size = params.grid_size

        if self.size < 2 or (self.size & (self.size - 1)) != 0:
            raise ValueError(f"Terrain size must be a power of two >= 2, got {self.size}")

    def generate(self, seed: int = None) -> np.ndarray:
        """
        Builds the land grid.

        Args:
            seed (int, optional): Overrides the configured seed.

        Returns:
            np.ndarray: float64 heights of shape (N, N).
        """
        seed = self.params.seed if seed is None else seed
        self.logger.info(f"Generating {self.size}x{self.size} terrain with seed: {seed}")
        start_time = time.perf_counter()

        # Every cell except the (0, 0) anchor is displaced exactly once.
        samples = draw_samples(seed, self.size * self.size - 1)
        land = midpoint_displacement(
            self.size,
            samples,
            int(self.params.seed_octaves),
            float(self.params.base_amplitude),
            float(self.params.displacement_scale),
            float(self.params.skew_fraction),
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        self.logger.info(
            f"Terrain generated in {elapsed_ms:.1f} ms "
            f"(min {land.min():.2f}, max {land.max():.2f}, mean {land.mean():.2f})"
        )
        return land
