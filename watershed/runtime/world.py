# watershed/runtime/world.py

"""
================================================================================
SIMULATION RUNTIME
================================================================================
This module provides the user-facing `Simulation` class, the single owner of
all grids of a run. It wires the terrain, tide, flow, temperature and vapor
components together and advances them once per call to step().

Data Contract:
---------------
- Inputs (on initialization):
    - params (ClimateParameters): Validated simulation parameters.
    - logger: Optional Python logging object for runtime messages.
    - land (np.ndarray, optional): A pre-built land grid, bypassing generation.
- Public Methods:
    - step(): Advances every grid by one tick.
    - run(ticks): Calls step() repeatedly.
    - inject_water(x, y, amount): Adds water to one cell between ticks.
    - snapshot(): Copies of the grids for a renderer.
    - total_water(), total_vapor(), total_mass(): Diagnostics.
- Side Effects: Logs messages using the logger.
- Invariants:
    - Per tick: tide -> flow -> temperature -> exchange -> diffuse/advect ->
      clock advance, always in that order.
    - Land is never modified after initialization.
    - Water and vapor stay non-negative.
================================================================================
"""
import logging
import math
from dataclasses import dataclass, fields

import numpy as np

from .. import flow
from .. import temperature as temperature_field
from .. import tide
from .. import vapor as vapor_cycle
from ..terrain import TerrainGenerator
from .clock import SimulationClock


@dataclass
class SimulationState:
    """
    All grids of a simulation, indexed [x, y].

    flux_x and flux_y are flux/momentum state: they persist from tick to
    tick and are only damped by the flow solver. tide, temperature and rain
    are rewritten every tick and kept here only so they can be displayed.
    """
    land: np.ndarray
    water: np.ndarray
    flux_x: np.ndarray
    flux_y: np.ndarray
    tide: np.ndarray
    temperature: np.ndarray
    vapor: np.ndarray
    rain: np.ndarray

    @property
    def size(self) -> int:
        return self.land.shape[0]

    def copy(self) -> "SimulationState":
        return SimulationState(**{f.name: getattr(self, f.name).copy() for f in fields(self)})


class Simulation:
    """
    The main runtime class for a watershed simulation.
    """
    def __init__(self, params, logger: logging.Logger = None, land: np.ndarray = None):
        """
        Initializes the grids of a new run.

        Args:
            params (ClimateParameters): Validated parameters for the run.
            logger (logging.Logger, optional): Defaults to this module's logger.
            land (np.ndarray, optional): Use this land grid instead of
                generating one from params.seed.
        """
        self.params = params
        self.logger = logger or logging.getLogger(__name__)
        self.clock = SimulationClock()
        size = params.grid_size

        # --- 1. Land ---
        if land is None:
            land = TerrainGenerator(params, self.logger).generate()
        else:
            land = np.array(land, dtype=np.float64)
            if land.shape != (size, size):
                raise ValueError(f"land must have shape {(size, size)}, got {land.shape}")

        # --- 2. Water fills everything below sea level ---
        water = np.maximum(params.sea_level - land, 0.0)

        # --- 3. Air starts at the equilibrium of the initial temperature ---
        initial_temperature = temperature_field.update(land, water, params, 0)
        vapor = vapor_cycle.equilibrium_vapor(initial_temperature, params)

        self.state = SimulationState(
            land=land,
            water=water,
            flux_x=np.zeros((size, size)),
            flux_y=np.zeros((size, size)),
            tide=np.zeros((size, size)),
            temperature=initial_temperature,
            vapor=vapor,
            rain=np.zeros((size, size)),
        )
        self.wind = vapor_cycle.wind_vector(0, params)

        self.logger.info(
            f"Simulation initialized: {size}x{size} grid, "
            f"{np.count_nonzero(water) / water.size:.1%} submerged, "
            f"total water {self.total_water():.1f}, total vapor {self.total_vapor():.1f}"
        )

    @property
    def tick(self) -> int:
        return self.clock.tick

    def step(self):
        """
        Advances the simulation by one tick. Should be called once per frame;
        a paused simulation simply does not call it.
        """
        s = self.state
        t = self.clock.tick

        s.tide = tide.tide_grid(s.size, t, self.params)
        flow.step(s.land, s.tide, s.water, s.flux_x, s.flux_y, self.params)
        s.temperature = temperature_field.update(s.land, s.water, self.params, t)
        s.rain = vapor_cycle.exchange(s.water, s.vapor, s.temperature, self.params)
        self.wind = vapor_cycle.diffuse_and_advect(s.vapor, t, self.params)

        self.clock.advance()

        if self.clock.tick % self.params.log_interval == 0:
            self.logger.debug(
                f"{self.clock.get_time_string()}: water {self.total_water():.3f}, "
                f"vapor {self.total_vapor():.3f}, wind ({self.wind[0]:+.3f}, {self.wind[1]:+.3f})"
            )

    def run(self, ticks: int):
        """Advances the simulation by `ticks` steps."""
        for _ in range(ticks):
            self.step()

    def inject_water(self, x: int, y: int, amount: float):
        """
        Adds water to a single cell between ticks (e.g. a rain event placed
        by the user). Coordinates wrap around the torus.

        Raises:
            ValueError: If amount is negative or not finite.
        """
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"Injected water must be finite and non-negative, got {amount}")
        size = self.state.size
        self.state.water[x % size, y % size] += amount

    def total_water(self) -> float:
        return float(self.state.water.sum())

    def total_vapor(self) -> float:
        return float(self.state.vapor.sum())

    def total_mass(self) -> float:
        """Water plus vapor over the whole grid."""
        return self.total_water() + self.total_vapor()

    def snapshot(self) -> SimulationState:
        """
        Copies of every grid, safe to hand to a renderer while the
        simulation keeps stepping.
        """
        return self.state.copy()
