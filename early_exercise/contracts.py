# early_exercise/contracts.py
"""
Inputs to every pricing engine: the option contract and the market snapshot.

Both are immutable and validated on construction, so engines never re-check
them.
"""

import math
from dataclasses import dataclass, replace

# Third party imports
import numpy as np

# Local package imports
from .base import OptionType, OptionStyle, AveragingType, BarrierType


def _require_positive(name, value):
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"{name} must be positive and finite, got {value!r}")


def _require_finite(name, value):
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class OptionContract:
    """
    Vanilla call/put contract.

    Parameters:
    - strike: strike price (> 0)
    - expiry: time to expiry in years (> 0)
    - option_type: OptionType or 'call' / 'put'
    - style: OptionStyle or 'european' / 'american'
    """

    strike: float
    expiry: float
    option_type: OptionType = OptionType.CALL
    style: OptionStyle = OptionStyle.EUROPEAN

    def __post_init__(self):
        object.__setattr__(self, 'strike', float(self.strike))
        object.__setattr__(self, 'expiry', float(self.expiry))
        object.__setattr__(self, 'option_type', OptionType.parse(self.option_type))
        object.__setattr__(self, 'style', OptionStyle.parse(self.style))
        _require_positive("strike", self.strike)
        _require_positive("expiry", self.expiry)

    @property
    def is_american(self):
        return self.style is OptionStyle.AMERICAN

    @property
    def is_path_dependent(self):
        return False

    def payoff(self, spot):
        """Immediate-exercise value at `spot` (scalar or numpy array)."""
        if self.option_type is OptionType.CALL:
            value = np.maximum(np.asarray(spot, dtype=float) - self.strike, 0.0)
        else:
            value = np.maximum(self.strike - np.asarray(spot, dtype=float), 0.0)
        if np.ndim(value) == 0:
            return float(value)
        return value

    def path_payoff(self, paths):
        """Payoff per row of a (num_paths, steps + 1) batch; vanilla contracts only look at the last column."""
        return self.payoff(np.asarray(paths, dtype=float)[:, -1])

    def simulation_steps(self, default_steps):
        """Number of time steps a Monte Carlo engine should simulate for this contract."""
        return int(default_steps)

    def intrinsic_value(self, spot):
        return self.payoff(spot)

    def with_expiry(self, expiry):
        return replace(self, expiry=expiry)


@dataclass(frozen=True)
class AsianOption(OptionContract):
    """
    European average-price option.

    The average runs over num_observations equally spaced fixings plus the
    spot at inception, i.e. every point of a path simulated on a
    num_observations-step grid.
    """

    averaging: AveragingType = AveragingType.ARITHMETIC
    num_observations: int = 12

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, 'averaging', AveragingType.parse(self.averaging))
        object.__setattr__(self, 'num_observations', int(self.num_observations))
        if self.num_observations < 1:
            raise ValueError("num_observations must be >= 1")
        if self.is_american:
            raise ValueError("Asian options are European-style only")

    @property
    def is_path_dependent(self):
        return True

    def average(self, paths):
        paths = np.atleast_2d(np.asarray(paths, dtype=float))
        if self.averaging is AveragingType.ARITHMETIC:
            return paths.mean(axis=1)
        return np.exp(np.log(paths).mean(axis=1))

    def path_payoff(self, paths):
        return self.payoff(self.average(paths))

    def simulation_steps(self, default_steps):
        return self.num_observations


@dataclass(frozen=True)
class BarrierOption(OptionContract):
    """
    European knock-in / knock-out option monitored at every simulated point.

    Parameters:
    - barrier_type: BarrierType or 'up-and-out', 'down-and-in', ...
    - barrier_level: barrier (> 0)
    - rebate: paid at expiry when a knock-out is breached or a knock-in never is (>= 0)
    """

    barrier_type: BarrierType = BarrierType.UP_AND_OUT
    barrier_level: float = None
    rebate: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, 'barrier_type', BarrierType.parse(self.barrier_type))
        if self.barrier_level is None:
            raise ValueError("barrier_level is required")
        object.__setattr__(self, 'barrier_level', float(self.barrier_level))
        object.__setattr__(self, 'rebate', float(self.rebate))
        _require_positive("barrier_level", self.barrier_level)
        _require_finite("rebate", self.rebate)
        if self.rebate < 0.0:
            raise ValueError(f"rebate must be non-negative, got {self.rebate!r}")
        if self.is_american:
            raise ValueError("Barrier options are European-style only")

    @property
    def is_path_dependent(self):
        return True

    @property
    def is_knock_in(self):
        return self.barrier_type.is_knock_in

    def is_knocked(self, spot):
        """True where `spot` has reached the barrier."""
        spot = np.asarray(spot, dtype=float)
        if self.barrier_type.is_up:
            return spot >= self.barrier_level
        return spot <= self.barrier_level

    def path_payoff(self, paths):
        paths = np.atleast_2d(np.asarray(paths, dtype=float))
        hit = self.is_knocked(paths).any(axis=1)
        vanilla = self.payoff(paths[:, -1])
        if self.is_knock_in:
            return np.where(hit, vanilla, self.rebate)
        return np.where(hit, self.rebate, vanilla)


@dataclass(frozen=True)
class MarketSnapshot:
    """Spot, continuously compounded rate, volatility and dividend yield."""

    spot: float
    rate: float
    volatility: float
    dividend: float = 0.0

    def __post_init__(self):
        for name in ('spot', 'rate', 'volatility', 'dividend'):
            object.__setattr__(self, name, float(getattr(self, name)))
        _require_positive("spot", self.spot)
        _require_positive("volatility", self.volatility)
        _require_finite("rate", self.rate)
        _require_finite("dividend", self.dividend)

    def bumped(self, **changes):
        """Validated copy with some fields replaced."""
        return replace(self, **changes)
