"""
Vapor cycle tests: the ground/air exchange, diffusion, advection and wind.
"""
import math

import numpy as np
import pytest

from watershed import vapor
from watershed.parameters import ClimateParameters

N = 16


def _params(**overrides):
    config = {"grid_size": N}
    config.update(overrides)
    return ClimateParameters.from_config(config)


class TestExchange:

    def test_conserves_water_plus_vapor(self, small_params):
        rng = np.random.default_rng(11)
        water = rng.random((N, N)) * 5.0
        air = rng.random((N, N)) * 3.0
        temperature = rng.normal(0.0, 30.0, (N, N))
        total = water.sum() + air.sum()

        vapor.exchange(water, air, temperature, small_params)

        assert water.sum() + air.sum() == pytest.approx(total, rel=1e-12)

    def test_rain_matches_the_change_in_water(self, small_params):
        water = np.full((N, N), 1.0)
        air = np.full((N, N), 4.0)
        temperature = np.zeros((N, N))

        before = water.copy()
        rain = vapor.exchange(water, air, temperature, small_params)

        np.testing.assert_allclose(water - before, rain)
        assert np.all(rain > 0.0)

    def test_surplus_condenses_at_condensation_rate(self):
        params = _params(condensation_rate=0.2, evaporation_rate=0.01,
                         vapor_base=1.0, vapor_sensitivity=0.0)
        water = np.full((N, N), 1.0)
        air = np.full((N, N), 3.0)

        rain = vapor.exchange(water, air, np.zeros((N, N)), params)

        np.testing.assert_allclose(rain, 0.2 * (3.0 - 1.0))

    def test_deficit_evaporates_at_evaporation_rate(self):
        params = _params(condensation_rate=0.2, evaporation_rate=0.01,
                         vapor_base=1.0, vapor_sensitivity=0.0)
        water = np.full((N, N), 10.0)
        air = np.zeros((N, N))

        rain = vapor.exchange(water, air, np.zeros((N, N)), params)

        np.testing.assert_allclose(rain, -0.01)
        np.testing.assert_allclose(air, 0.01)

    def test_evaporation_is_limited_by_standing_water(self):
        params = _params(evaporation_rate=1.0, vapor_base=100.0, vapor_sensitivity=0.0)
        water = np.full((N, N), 0.5)
        water[0, 0] = 0.0
        air = np.zeros((N, N))

        vapor.exchange(water, air, np.zeros((N, N)), params)

        assert water.min() == 0.0
        assert air[0, 0] == 0.0
        np.testing.assert_allclose(air[1:, :], 0.5)

    def test_never_negative_under_extreme_temperatures(self):
        params = _params(condensation_rate=1.0, evaporation_rate=1.0)
        rng = np.random.default_rng(4)
        water = rng.random((N, N))
        air = rng.random((N, N))
        temperature = rng.normal(0.0, 500.0, (N, N))

        for _ in range(20):
            vapor.exchange(water, air, temperature, params)
            assert water.min() >= 0.0
            assert air.min() >= 0.0

    def test_converges_monotonically_towards_equilibrium(self, small_params):
        temperature = np.full((N, N), -25.0)
        target = vapor.equilibrium_vapor(temperature, small_params)
        water = np.full((N, N), 50.0)
        air = np.zeros((N, N))

        gaps = []
        for _ in range(200):
            vapor.exchange(water, air, temperature, small_params)
            gaps.append(float(np.abs(air - target).max()))

        assert all(b <= a for a, b in zip(gaps, gaps[1:]))
        assert gaps[-1] < 0.2 * gaps[0]


class TestEquilibrium:

    def test_warmer_air_holds_more(self, small_params):
        cold, warm = vapor.equilibrium_vapor(np.array([-10.0, 10.0]), small_params)
        assert warm > cold > 0.0

    def test_zero_temperature_gives_base(self, small_params):
        assert vapor.equilibrium_vapor(np.zeros(1), small_params)[0] == pytest.approx(
            small_params.vapor_base)


class TestDiffusion:

    def test_kernel_sums_to_one(self):
        assert vapor.diffusion_kernel(0.2).sum() == pytest.approx(1.0)

    def test_conserves_total_vapor(self):
        air = np.random.default_rng(8).random((N, N))
        total = air.sum()
        vapor.diffuse(air, 0.25)
        assert air.sum() == pytest.approx(total, rel=1e-12)

    def test_uniform_field_is_unchanged(self):
        air = np.full((N, N), 2.5)
        vapor.diffuse(air, 0.1)
        np.testing.assert_allclose(air, 2.5)

    def test_spreads_to_four_neighbours_across_the_wrap(self):
        air = np.zeros((N, N))
        air[0, 0] = 1.0
        vapor.diffuse(air, 0.1)

        assert air[0, 0] == pytest.approx(0.6)
        for cell in [(1, 0), (N - 1, 0), (0, 1), (0, N - 1)]:
            assert air[cell] == pytest.approx(0.1)
        assert air[1, 1] == 0.0

    def test_zero_coefficient_is_a_no_op(self):
        air = np.random.default_rng(1).random((N, N))
        before = air.copy()
        vapor.diffuse(air, 0.0)
        np.testing.assert_array_equal(air, before)


class TestAdvection:

    def test_full_speed_shifts_one_cell(self):
        air = np.zeros((N, N))
        air[3, 5] = 1.0
        vapor.advect(air, (1.0, 0.0))
        assert air[4, 5] == pytest.approx(1.0)
        assert air[3, 5] == pytest.approx(0.0)

    def test_partial_speed_splits_between_cells(self):
        air = np.zeros((N, N))
        air[3, 5] = 1.0
        vapor.advect(air, (0.25, -0.5))
        assert air[3, 5] == pytest.approx(0.25)
        assert air[4, 5] == pytest.approx(0.25)
        assert air[3, 4] == pytest.approx(0.5)
        assert air.sum() == pytest.approx(1.0)

    def test_wraps_at_the_edges(self):
        air = np.zeros((N, N))
        air[N - 1, 0] = 1.0
        vapor.advect(air, (1.0, 0.0))
        assert air[0, 0] == pytest.approx(1.0)

        air = np.zeros((N, N))
        air[2, 0] = 1.0
        vapor.advect(air, (0.0, -1.0))
        assert air[2, N - 1] == pytest.approx(1.0)

    def test_conserves_and_stays_non_negative(self):
        air = np.random.default_rng(6).random((N, N))
        total = air.sum()
        for wind in [(0.3, 0.4), (-0.5, 0.2), (0.0, -0.7)]:
            vapor.advect(air, wind)
        assert air.sum() == pytest.approx(total, rel=1e-12)
        assert air.min() >= 0.0

    def test_diffuse_and_advect_returns_wind(self, small_params):
        air = np.ones((N, N))
        wind = vapor.diffuse_and_advect(air, 0, small_params)
        assert wind == pytest.approx(small_params.wind_start)
        np.testing.assert_allclose(air, 1.0)


class TestWind:

    def test_endpoints(self):
        params = _params(wind_start_x=0.3, wind_start_y=0.0,
                         wind_end_x=-0.1, wind_end_y=0.2,
                         wind_period=100, wind_circularity=0.7)
        assert vapor.wind_vector(0, params) == pytest.approx((0.3, 0.0))
        assert vapor.wind_vector(50, params) == pytest.approx((-0.1, 0.2))
        assert vapor.wind_vector(100, params) == pytest.approx((0.3, 0.0))

    def test_zero_circularity_stays_on_the_segment(self):
        params = _params(wind_start_x=0.4, wind_start_y=0.0,
                         wind_end_x=0.0, wind_end_y=0.4,
                         wind_period=64, wind_circularity=0.0)
        for tick in range(64):
            wx, wy = vapor.wind_vector(tick, params)
            assert wx + wy == pytest.approx(0.4)
            assert 0.0 <= wx <= 0.4

    def test_full_circularity_traces_a_circle(self):
        params = _params(wind_start_x=0.4, wind_start_y=0.0,
                         wind_end_x=-0.2, wind_end_y=0.0,
                         wind_period=64, wind_circularity=1.0)
        centre, radius = (0.1, 0.0), 0.3
        for tick in range(64):
            wx, wy = vapor.wind_vector(tick, params)
            assert math.hypot(wx - centre[0], wy - centre[1]) == pytest.approx(radius)

    def test_periodic_in_ticks(self, small_params):
        period = small_params.wind_period
        assert vapor.wind_vector(17, small_params) == pytest.approx(
            vapor.wind_vector(17 + 3 * period, small_params))
