import pytest

from early_exercise import MonteCarloPricing, MonteCarloConfig, UnsupportedOptionError

from conftest import black_scholes_price


def test_mc_european_call_close_to_black_scholes(market, european_call):
    mc = MonteCarloPricing(MonteCarloConfig(num_paths=100000, num_timesteps=100))
    price, se = mc.price_with_error(european_call, market)
    bs = black_scholes_price(100.0, 100.0, 1.0, 0.05, 0.2)

    assert abs(price - bs) / bs < 0.02
    assert abs(price - bs) < 4.0 * se


def test_antithetic_reduces_standard_error(market, european_put):
    plain = MonteCarloPricing(MonteCarloConfig(num_paths=20000, num_timesteps=4, use_antithetic=False))
    mirrored = MonteCarloPricing(MonteCarloConfig(num_paths=20000, num_timesteps=4, use_antithetic=True))
    _, se_plain = plain.price_with_error(european_put, market)
    _, se_mirrored = mirrored.price_with_error(european_put, market)
    assert se_mirrored < se_plain


def test_rejects_american_contract(market, american_put):
    with pytest.raises(UnsupportedOptionError):
        MonteCarloPricing(MonteCarloConfig(num_paths=100, num_timesteps=2)).price(american_put, market)


def test_confidence_interval_width():
    from early_exercise.MonteCarloSimulation import confidence_interval

    low, high = confidence_interval(10.0, 0.5)
    assert low == pytest.approx(10.0 - 1.959964 * 0.5, abs=1e-6)
    assert high == pytest.approx(10.0 + 1.959964 * 0.5, abs=1e-6)
    low99, high99 = confidence_interval(10.0, 0.5, level=0.99)
    assert low99 < low and high99 > high
