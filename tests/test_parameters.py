"""
ClimateParameters defaults and validation.
"""
import dataclasses

import pytest

from watershed import config as DEFAULTS
from watershed.parameters import ClimateParameters


class TestDefaults:

    def test_defaults_come_from_config_module(self):
        params = ClimateParameters()
        assert params.grid_size == DEFAULTS.DEFAULT_GRID_SIZE
        assert params.gravity == DEFAULTS.GRAVITY
        assert params.wind_start == DEFAULTS.WIND_START
        assert params.wind_end == DEFAULTS.WIND_END

    def test_defaults_are_valid(self):
        ClimateParameters().validate()

    def test_is_immutable(self):
        params = ClimateParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.gravity = 1.0


class TestFromConfig:

    def test_overrides_only_given_keys(self):
        params = ClimateParameters.from_config({"seed": 5, "diffusion": 0.2})
        assert params.seed == 5
        assert params.diffusion == 0.2
        assert params.tide_period == DEFAULTS.TIDE_PERIOD

    def test_unknown_keys_are_ignored(self):
        params = ClimateParameters.from_config({"not_a_field": 1})
        assert params == ClimateParameters()

    def test_field_names(self):
        names = ClimateParameters.field_names()
        assert {"grid_size", "gravity", "wind_circularity", "log_interval"} <= names


class TestValidation:

    @pytest.mark.parametrize("overrides", [
        {"grid_size": 0},
        {"grid_size": 100},
        {"seed_octaves": -1},
        {"base_amplitude": -1.0},
        {"displacement_scale": -0.5},
        {"gravity": -0.1},
        {"outflow_clamp_fraction": 0.0},
        {"outflow_clamp_fraction": 1.0},
        {"flux_damping": 1.5},
        {"tide_period": 0},
        {"wind_period": -10},
        {"log_interval": 0},
        {"diffusion": 0.3},
        {"condensation_rate": 1.2},
        {"evaporation_rate": -0.1},
        {"vapor_base": -1.0},
    ])
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            ClimateParameters.from_config(overrides)

    def test_rejects_wind_that_outruns_the_grid(self):
        with pytest.raises(ValueError, match="wind"):
            ClimateParameters.from_config({
                "wind_start_x": 0.9, "wind_start_y": 0.0,
                "wind_end_x": 0.9, "wind_end_y": 0.0,
            })

    def test_max_wind_speed_bounds_the_wind_vector(self):
        from watershed.vapor import wind_vector

        params = ClimateParameters.from_config({"wind_period": 200, "wind_circularity": 1.0})
        bound = params.max_wind_speed()
        for tick in range(200):
            wx, wy = wind_vector(tick, params)
            assert (wx * wx + wy * wy) ** 0.5 <= bound + 1e-12
