# watershed/parameters.py

"""
================================================================================
CLIMATE PARAMETERS
================================================================================
The typed, immutable configuration struct shared by every simulation
component. It is populated once before the simulation starts and is never
mutated afterwards.

Data Contract:
---------------
- Inputs:
    - config (dict): User-defined parameters to override the defaults in
      watershed/config.py. Keys are the field names of ClimateParameters.
- Outputs:
    - A frozen ClimateParameters instance.
- Side Effects: None.
- Invariants: A ClimateParameters returned by from_config() has passed
  validate(); invalid values raise ValueError before any grid is touched.
================================================================================
"""
import math
from dataclasses import dataclass, fields

from . import config as DEFAULTS


@dataclass(frozen=True)
class ClimateParameters:
    """Every tunable number of a simulation run."""

    # --- Grid ---
    grid_size: int = DEFAULTS.DEFAULT_GRID_SIZE

    # --- Terrain ---
    seed: int = DEFAULTS.DEFAULT_SEED
    seed_octaves: int = DEFAULTS.SEED_OCTAVES
    base_amplitude: float = DEFAULTS.BASE_AMPLITUDE
    displacement_scale: float = DEFAULTS.DISPLACEMENT_SCALE
    skew_fraction: float = DEFAULTS.SKEW_FRACTION
    sea_level: float = DEFAULTS.SEA_LEVEL

    # --- Flow ---
    gravity: float = DEFAULTS.GRAVITY
    outflow_clamp_fraction: float = DEFAULTS.OUTFLOW_CLAMP_FRACTION
    flux_damping: float = DEFAULTS.FLUX_DAMPING

    # --- Tide ---
    tide_amplitude: float = DEFAULTS.TIDE_AMPLITUDE
    tide_period: int = DEFAULTS.TIDE_PERIOD

    # --- Temperature ---
    latitude_strength: float = DEFAULTS.LATITUDE_STRENGTH
    seasonal_tilt: float = DEFAULTS.SEASONAL_TILT
    season_period: int = DEFAULTS.SEASON_PERIOD

    # --- Vapor ---
    diffusion: float = DEFAULTS.DIFFUSION
    condensation_rate: float = DEFAULTS.CONDENSATION_RATE
    evaporation_rate: float = DEFAULTS.EVAPORATION_RATE
    vapor_base: float = DEFAULTS.VAPOR_BASE
    vapor_sensitivity: float = DEFAULTS.VAPOR_SENSITIVITY

    # --- Wind ---
    wind_start_x: float = DEFAULTS.WIND_START[0]
    wind_start_y: float = DEFAULTS.WIND_START[1]
    wind_end_x: float = DEFAULTS.WIND_END[0]
    wind_end_y: float = DEFAULTS.WIND_END[1]
    wind_period: int = DEFAULTS.WIND_PERIOD
    wind_circularity: float = DEFAULTS.WIND_CIRCULARITY

    # --- Runtime ---
    log_interval: int = DEFAULTS.LOG_INTERVAL

    @classmethod
    def field_names(cls) -> set:
        """The set of keys accepted by from_config()."""
        return {f.name for f in fields(cls)}

    @classmethod
    def from_config(cls, config: dict) -> "ClimateParameters":
        """
        Builds a validated parameter set, falling back to the internal
        defaults for every key the config does not provide.

        Unknown keys are ignored here; rejecting them is the loader's job.
        """
        defaults = cls()
        values = {
            name: config.get(name, getattr(defaults, name))
            for name in cls.field_names()
        }
        params = cls(**values)
        params.validate()
        return params

    @property
    def wind_start(self) -> tuple:
        return (self.wind_start_x, self.wind_start_y)

    @property
    def wind_end(self) -> tuple:
        return (self.wind_end_x, self.wind_end_y)

    def max_wind_speed(self) -> float:
        """
        Upper bound on the wind vector magnitude over a whole wind period.

        The wind traces an ellipse centred on the midpoint of the two
        endpoints; its semi-axes are half the endpoint distance and that
        distance scaled by the circularity.
        """
        mid_x = (self.wind_start_x + self.wind_end_x) / 2.0
        mid_y = (self.wind_start_y + self.wind_end_y) / 2.0
        half_span = math.hypot(self.wind_end_x - self.wind_start_x,
                               self.wind_end_y - self.wind_start_y) / 2.0
        return math.hypot(mid_x, mid_y) + half_span * max(1.0, abs(self.wind_circularity))

    def validate(self):
        """
        Rejects parameter sets the solver cannot run stably.

        Raises:
            ValueError: describing the first offending field.
        """
        n = self.grid_size
        if n < 2 or (n & (n - 1)) != 0:
            raise ValueError(f"grid_size must be a power of two >= 2, got {n}")
        if self.seed_octaves < 0:
            raise ValueError(f"seed_octaves must be >= 0, got {self.seed_octaves}")
        if self.base_amplitude < 0 or self.displacement_scale < 0:
            raise ValueError("base_amplitude and displacement_scale must be >= 0")

        if self.gravity < 0:
            raise ValueError(f"gravity must be >= 0, got {self.gravity}")
        if not 0.0 < self.outflow_clamp_fraction < 1.0:
            raise ValueError(
                f"outflow_clamp_fraction must lie in (0, 1), got {self.outflow_clamp_fraction}"
            )
        if not 0.0 <= self.flux_damping <= 1.0:
            raise ValueError(f"flux_damping must lie in [0, 1], got {self.flux_damping}")

        for name in ("tide_period", "season_period", "wind_period", "log_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")

        if not 0.0 <= self.diffusion <= 0.25:
            raise ValueError(f"diffusion must lie in [0, 0.25], got {self.diffusion}")
        for name in ("condensation_rate", "evaporation_rate"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {getattr(self, name)}")
        if self.vapor_base < 0:
            raise ValueError(f"vapor_base must be >= 0, got {self.vapor_base}")

        # Upwind advection blends at most |wx| + |wy| of a neighbour into a
        # cell, which must never exceed the whole cell.
        if self.max_wind_speed() * math.sqrt(2.0) > 1.0:
            raise ValueError(
                f"wind too strong for stable advection (bound {self.max_wind_speed():.3f} "
                f"cells/tick, limit {1.0 / math.sqrt(2.0):.3f})"
            )
