# watershed/shading.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module converts simulation grids (land, water, vapor, temperature, flux,
rain) into RGB color arrays.

It is designed to be a pure, stateless utility with no dependencies on Pygame,
so it can be used by both the live viewer and the headless runner.

Data Contract:
---------------
- Inputs: (N, N) float64 grids indexed [x, y], or a SimulationState.
- Outputs: uint8 arrays of shape (N, N, 3) indexed [x, y], the layout
  pygame.surfarray expects. Transpose to (y, x, 3) for Pillow.
- Side Effects: None.
================================================================================
"""
import numpy as np

# --- Terrain shading ---
# How quickly water turns opaque with depth.
WATER_OPACITY_PER_UNIT = 35.0

# --- Default Color Mappings ---
COLOR_MAP_TEMPERATURE = {
    "cold": (0, 0, 255),
    "temperate": (255, 255, 0),
    "hot": (255, 0, 0),
}

COLOR_MAP_VAPOR = {
    "dry": (20, 20, 30),
    "wet": (235, 240, 255),
}

COLOR_MAP_RAIN = {
    "evaporation": (230, 120, 30),
    "none": (0, 0, 0),
    "condensation": (40, 120, 255),
}


# --- Color Lookup Table (LUT) Generation ---
def _two_stop_lut(low: tuple, high: tuple) -> np.ndarray:
    t = np.linspace(0.0, 1.0, 256)[..., np.newaxis]
    return ((1 - t) * np.array(low) + t * np.array(high)).astype(np.uint8)


def _three_stop_lut(low: tuple, mid: tuple, high: tuple) -> np.ndarray:
    t = np.linspace(0.0, 1.0, 256)[..., np.newaxis]
    colors = np.where(
        t < 0.5,
        (1 - 2 * t) * np.array(low) + 2 * t * np.array(mid),
        (2 - 2 * t) * np.array(mid) + (2 * t - 1) * np.array(high),
    )
    return colors.astype(np.uint8)


def create_temperature_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for the temperature map."""
    c = COLOR_MAP_TEMPERATURE
    return _three_stop_lut(c["cold"], c["temperate"], c["hot"])


def create_vapor_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for the vapor map."""
    return _two_stop_lut(COLOR_MAP_VAPOR["dry"], COLOR_MAP_VAPOR["wet"])


def create_rain_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for signed rain (evaporation below 128)."""
    c = COLOR_MAP_RAIN
    return _three_stop_lut(c["evaporation"], c["none"], c["condensation"])


def _lut_indices(normalized: np.ndarray) -> np.ndarray:
    return (np.clip(normalized, 0.0, 1.0) * 255).astype(np.uint8)


def _normalize(values: np.ndarray) -> np.ndarray:
    """Stretches values onto [0, 1]; a constant field maps to 0.5."""
    low, high = values.min(), values.max()
    if high - low <= 0:
        return np.full(values.shape, 0.5)
    return (values - low) / (high - low)


# --- Color Array Generation Functions ---
def terrain_colors(land: np.ndarray, water: np.ndarray) -> np.ndarray:
    """
    Shaded relief map. Land runs from green (low) to red (high), water is
    blue and turns opaque with depth, and every cell is lit by the slope of
    the water surface towards its y - 1 neighbour.
    """
    size = land.shape[0]
    surface = land + water

    water_alpha = np.exp(-water * WATER_OPACITY_PER_UNIT)
    scaled = np.arctan(land * 2.0 / size) / np.pi + 0.5
    light = np.arctan(surface - np.roll(surface, 1, axis=1)) / np.pi + 0.5

    red = scaled * water_alpha * light
    green = (1.0 - scaled) * water_alpha * light
    blue = (1.0 - water_alpha) * light
    return (np.stack([red, green, blue], axis=-1) * 255).astype(np.uint8)


def temperature_colors(temperature: np.ndarray, lut: np.ndarray = None) -> np.ndarray:
    lut = create_temperature_lut() if lut is None else lut
    return lut[_lut_indices(_normalize(temperature))]


def vapor_colors(vapor: np.ndarray, lut: np.ndarray = None) -> np.ndarray:
    """Vapor relative to the wettest cell of the grid."""
    lut = create_vapor_lut() if lut is None else lut
    peak = vapor.max()
    normalized = vapor / peak if peak > 0 else np.zeros_like(vapor)
    return lut[_lut_indices(normalized)]


def flux_colors(flux_x: np.ndarray, flux_y: np.ndarray) -> np.ndarray:
    """Flow speed as brightness, flow direction as hue."""
    speed = np.hypot(flux_x, flux_y)
    brightness = 2.0 * np.arctan(speed * 10.0) / np.pi
    red = brightness * (0.5 + 0.5 * np.tanh(flux_x * 10.0))
    green = brightness * (0.5 + 0.5 * np.tanh(flux_y * 10.0))
    blue = brightness
    return (np.stack([red, green, blue], axis=-1) * 255).astype(np.uint8)


def rain_colors(rain: np.ndarray, lut: np.ndarray = None) -> np.ndarray:
    """Signed rain, symmetric around zero."""
    lut = create_rain_lut() if lut is None else lut
    peak = np.abs(rain).max()
    normalized = 0.5 + 0.5 * rain / peak if peak > 0 else np.full(rain.shape, 0.5)
    return lut[_lut_indices(normalized)]


# Palette name -> function of a SimulationState.
PALETTES = {
    "terrain": lambda s: terrain_colors(s.land, s.water),
    "vapor": lambda s: vapor_colors(s.vapor),
    "flux": lambda s: flux_colors(s.flux_x, s.flux_y),
    "temperature": lambda s: temperature_colors(s.temperature),
    "rain": lambda s: rain_colors(s.rain),
}


def get_color_array(state, palette: str) -> np.ndarray:
    """
    Colors a SimulationState with one of the named PALETTES.

    Raises:
        KeyError: If the palette name is unknown.
    """
    return PALETTES[palette](state)
