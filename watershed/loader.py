# watershed/loader.py

"""
================================================================================
CONFIGURATION LOADER
================================================================================
Reads a JSON configuration file and turns its `simulation_parameters` table
into a validated ClimateParameters. This is the only place where user input
is checked; the simulation core trusts the parameters it is given.

Expected file layout:

    {
        "simulation_parameters": {
            "seed": 42,
            "gravity": 0.05,
            ...
        }
    }

Any other top-level sections (display, camera, ...) are left to the
applications that read them.
================================================================================
"""
import json
import logging
import math
import numbers
from dataclasses import fields

from .parameters import ClimateParameters

PARAMETERS_SECTION = "simulation_parameters"


class ConfigError(ValueError):
    """Raised for configuration tables the simulation must not run with."""


def read_config(path: str) -> dict:
    """
    Loads the raw JSON document.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    with open(path, 'r') as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error decoding JSON from {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"Top level of {path} must be a JSON object")
    return config


def parse_parameters(table: dict) -> ClimateParameters:
    """
    Checks a flat table of named numbers and builds the parameter set.

    Raises:
        ConfigError: On unknown keys, non-numeric values, fractional values
            for integer fields, or values that fail ClimateParameters.validate().
    """
    if not isinstance(table, dict):
        raise ConfigError(f"'{PARAMETERS_SECTION}' must be a JSON object")

    field_types = {f.name: f.type for f in fields(ClimateParameters)}
    unknown = sorted(set(table) - set(field_types))
    if unknown:
        raise ConfigError(f"Unknown simulation parameter(s): {', '.join(unknown)}")

    values = {}
    for name, value in table.items():
        # bool is a subclass of int, but true/false is never a valid number here.
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ConfigError(f"Parameter '{name}' must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ConfigError(f"Parameter '{name}' must be finite, got {value!r}")
        if field_types[name] is int:
            if float(value) != int(value):
                raise ConfigError(f"Parameter '{name}' must be an integer, got {value!r}")
            value = int(value)
        else:
            value = float(value)
        values[name] = value

    try:
        return ClimateParameters.from_config(values)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def load_parameters(path: str, logger: logging.Logger = None) -> ClimateParameters:
    """
    Reads `path` and returns its validated simulation parameters.
    Parameters the file leaves out take their internal default values.
    """
    logger = logger or logging.getLogger(__name__)
    logger.info(f"Loading configuration from {path}")
    config = read_config(path)
    table = config.get(PARAMETERS_SECTION, {})
    params = parse_parameters(table)
    logger.info(
        f"Loaded {len(table)} simulation parameter(s); "
        f"grid {params.grid_size}x{params.grid_size}, seed {params.seed}"
    )
    return params
