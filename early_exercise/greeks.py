# early_exercise/greeks.py
"""
Finite-difference sensitivities for any pricing engine.

The price function is treated as a pure function of (option, market):
    - delta, gamma: central differences on a relative spot bump
    - vega, rho: forward differences on absolute vol / rate bumps
    - theta: forward difference on a contract whose expiry is one day shorter
"""

import logging
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Greeks:
    delta: float = 0.0
    gamma: float = 0.0
    vega: float = 0.0
    theta: float = 0.0
    rho: float = 0.0

    def to_dict(self):
        return asdict(self)


def numerical_greeks(price_fn, option, market, spot_bump=0.01, vol_bump=0.001,
                     rate_bump=0.0001, time_bump=1.0 / 365.0):
    """
    price_fn: callable (option, market) -> price
    spot_bump: relative spot bump (1%)
    vol_bump, rate_bump: absolute bumps
    time_bump: expiry reduction in years; theta is 0.0 when expiry <= time_bump
    """
    base_price = price_fn(option, market)

    dS = market.spot * spot_bump
    price_up = price_fn(option, market.bumped(spot=market.spot + dS))
    price_down = price_fn(option, market.bumped(spot=market.spot - dS))
    delta = (price_up - price_down) / (2.0 * dS)
    gamma = (price_up - 2.0 * base_price + price_down) / dS ** 2

    vega = (price_fn(option, market.bumped(volatility=market.volatility + vol_bump)) - base_price) / vol_bump

    if option.expiry > time_bump:
        theta_price = price_fn(option.with_expiry(option.expiry - time_bump), market)
        theta = (theta_price - base_price) / time_bump
    else:
        logger.debug("expiry %.6f within one time bump, theta set to 0", option.expiry)
        theta = 0.0

    rho = (price_fn(option, market.bumped(rate=market.rate + rate_bump)) - base_price) / rate_bump

    return Greeks(delta=float(delta), gamma=float(gamma), vega=float(vega), theta=float(theta), rho=float(rho))
