import math

import numpy as np
import pytest

from early_exercise import PathSimulator, RandomStream, MarketSnapshot


@pytest.fixture
def dividend_market():
    return MarketSnapshot(spot=100.0, rate=0.05, volatility=0.3, dividend=0.02)


def test_single_path_shape_and_start(dividend_market):
    path = PathSimulator(RandomStream(1)).simulate(100.0, dividend_market, 1.0, 50)
    assert path.shape == (51,)
    assert path[0] == 100.0
    assert np.all(path > 0.0)


def test_single_path_follows_lognormal_step(dividend_market):
    steps, horizon = 20, 0.5
    path = PathSimulator(RandomStream(9)).simulate(100.0, dividend_market, horizon, steps)
    z = RandomStream(9).normal_vector(steps)

    dt = horizon / steps
    sigma = dividend_market.volatility
    drift = (dividend_market.rate - dividend_market.dividend - 0.5 * sigma ** 2) * dt
    expected_log_returns = drift + sigma * math.sqrt(dt) * z
    np.testing.assert_allclose(np.diff(np.log(path)), expected_log_returns, rtol=1e-10, atol=1e-12)


def test_batch_matches_repeated_single_paths(dividend_market):
    batch = PathSimulator(RandomStream(4)).simulate_paths(100.0, dividend_market, 1.0, 10, 3)
    sim = PathSimulator(RandomStream(4))
    singles = np.vstack([sim.simulate(100.0, dividend_market, 1.0, 10) for _ in range(3)])
    np.testing.assert_allclose(batch, singles, rtol=1e-12)


def test_antithetic_paths_mirror_the_draws(dividend_market):
    steps, horizon = 25, 1.0
    paths = PathSimulator(RandomStream(2)).simulate_paths(100.0, dividend_market, horizon, steps, 10, antithetic=True)
    primary, mirror = paths[:5], paths[5:]

    dt = horizon / steps
    sigma = dividend_market.volatility
    drift = (dividend_market.rate - dividend_market.dividend - 0.5 * sigma ** 2) * dt

    # log-return of mirror = drift - sigma sqrt(dt) Z, primary = drift + sigma sqrt(dt) Z
    log_sum = np.diff(np.log(primary), axis=1) + np.diff(np.log(mirror), axis=1)
    np.testing.assert_allclose(log_sum, 2.0 * drift, atol=1e-12)
    assert not np.allclose(primary, mirror)
    np.testing.assert_array_equal(mirror[:, 0], 100.0)


def test_antithetic_odd_path_count(dividend_market):
    paths = PathSimulator(RandomStream(2)).simulate_paths(100.0, dividend_market, 1.0, 5, 7, antithetic=True)
    assert paths.shape == (7, 6)
    assert np.all(paths > 0.0)


def test_terminal_mean_matches_forward(dividend_market):
    paths = PathSimulator(RandomStream(8)).simulate_paths(100.0, dividend_market, 1.0, 10, 100000, antithetic=True)
    forward = 100.0 * math.exp(dividend_market.rate - dividend_market.dividend)
    assert paths[:, -1].mean() == pytest.approx(forward, rel=0.005)


@pytest.mark.parametrize("horizon,steps,num_paths", [
    (1.0, 0, 10),
    (0.0, 10, 10),
    (1.0, 10, 0),
])
def test_invalid_grid(dividend_market, horizon, steps, num_paths):
    with pytest.raises(ValueError):
        PathSimulator(RandomStream(1)).simulate_paths(100.0, dividend_market, horizon, steps, num_paths)
