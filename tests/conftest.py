import math

import pytest
from scipy.stats import norm

from early_exercise import OptionContract, MarketSnapshot, OptionType, OptionStyle


def black_scholes_price(S, K, T, r, sigma, q=0.0, option_type='call'):
    """Closed-form European reference price (continuous dividend yield)."""
    d1 = (math.log(S / K) + (r - q + 0.5 * sigma ** 2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    if OptionType.parse(option_type) is OptionType.CALL:
        return S * math.exp(-q * T) * norm.cdf(d1) - K * math.exp(-r * T) * norm.cdf(d2)
    return K * math.exp(-r * T) * norm.cdf(-d2) - S * math.exp(-q * T) * norm.cdf(-d1)


@pytest.fixture
def market():
    return MarketSnapshot(spot=100.0, rate=0.05, volatility=0.2, dividend=0.0)


@pytest.fixture
def american_put():
    # deep in-the-money
    return OptionContract(strike=110.0, expiry=1.0, option_type=OptionType.PUT, style=OptionStyle.AMERICAN)


@pytest.fixture
def european_put():
    return OptionContract(strike=110.0, expiry=1.0, option_type=OptionType.PUT, style=OptionStyle.EUROPEAN)


@pytest.fixture
def european_call():
    return OptionContract(strike=100.0, expiry=1.0, option_type=OptionType.CALL, style=OptionStyle.EUROPEAN)
