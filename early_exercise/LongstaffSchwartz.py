"""
Longstaff-Schwartz implementation for American option pricing (Monte Carlo / least-squares).
Uses a Laguerre polynomial basis in moneyness S/K for the continuation value regression.

The regression target at step t is always the cash flow a path actually
realises after t under the exercise decisions already committed at later
steps, discounted back to t. Regression estimates are only ever used to make
the exercise decision at t, never as a target for an earlier step.
"""

import logging
from dataclasses import dataclass, field

# Third party imports
import numpy as np
import pandas as pd

# Local package imports
from .base import PricingEngine
from .config import LSMCConfig
from .exceptions import SingularMatrixError, UnsupportedOptionError
from .MonteCarloSimulation import PathSimulator, mean_and_std_error, confidence_interval
from .random_stream import RandomStream
from .regression import RegressionEngine

logger = logging.getLogger(__name__)


def first_cash_flows(cash_flows, start=0):
    """
    Per row, the first non-zero entry at or after column `start`.

    Returns (index, value); rows without one get index -1 and value 0.
    """
    window = cash_flows[:, start:]
    nonzero = window != 0.0
    has_cash_flow = nonzero.any(axis=1)
    offset = np.argmax(nonzero, axis=1)
    value = np.where(has_cash_flow, window[np.arange(window.shape[0]), offset], 0.0)
    index = np.where(has_cash_flow, offset + start, -1)
    return index, value


def realized_discounted_cash_flows(cash_flows, t, rate, dt):
    """Realised cash flow strictly after step t, discounted back to t (0 if none)."""
    index, value = first_cash_flows(cash_flows, t + 1)
    return np.where(index >= 0, value * np.exp(-rate * dt * (index - t)), 0.0)


@dataclass(frozen=True)
class LSMCResult:
    price: float
    std_error: float
    ci_low: float
    ci_high: float
    n_paths: int
    exercise_counts: np.ndarray = field(repr=False)
    cash_flows: np.ndarray = field(repr=False)
    paths: np.ndarray = field(repr=False)
    notes: str = ""

    def to_dict(self):
        return {
            "price": self.price,
            "std_error": self.std_error,
            "ci_low": self.ci_low,
            "ci_high": self.ci_high,
            "n_paths": self.n_paths,
            "notes": self.notes,
        }

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([self.to_dict()])

    def exercise_profile(self) -> pd.DataFrame:
        """Number and share of paths realising their cash flow at each time index."""
        counts = np.asarray(self.exercise_counts)
        return pd.DataFrame({
            "time_index": np.arange(counts.size),
            "exercised": counts,
            "share": counts / float(self.n_paths),
        })


class LongstaffSchwartz(PricingEngine):
    """
    Longstaff-Schwartz pricing engine.

    Parameters:
    - config: LSMCConfig (paths, time steps, seed, antithetic flag, polynomial degree)
    - regression: continuation-value estimator with fit/evaluate (default RegressionEngine)

    The engine owns its random stream: consecutive price() calls continue the
    sequence. Call reseed() (or set_config()) to replay a given seed.
    """

    def __init__(self, config=None, regression=None):
        self._config = config if config is not None else LSMCConfig()
        self.stream = RandomStream(self._config.seed)
        self.simulator = PathSimulator(self.stream)
        self.regression = regression if regression is not None else RegressionEngine()

    @property
    def config(self):
        return self._config

    def set_config(self, config):
        self._config = config
        self.reseed(config.seed)

    def reseed(self, seed):
        self.stream.reseed(seed)

    def _simulate_paths(self, option, market):
        cfg = self._config
        return self.simulator.simulate_paths(
            market.spot, market, option.expiry, cfg.num_timesteps, cfg.num_paths, antithetic=cfg.use_antithetic
        )

    def _fit_continuation(self, x, y, t):
        try:
            coeffs = self.regression.fit(x, y, self._config.polynomial_degree)
        except SingularMatrixError:
            logger.error("singular regression at time index %d (%d in-the-money paths)", t, x.size)
            raise
        return self.regression.evaluate(coeffs, x)

    def price_with_details(self, option, market):
        """
        Run LSM and return an LSMCResult (price, std-error, cash-flow schedule, ...).
        """
        if not option.is_american:
            raise UnsupportedOptionError("LSMC is designed for American options")

        cfg = self._config
        steps = cfg.num_timesteps
        degree = cfg.polynomial_degree
        dt = option.expiry / steps
        r = market.rate

        paths = self._simulate_paths(option, market)

        # cash-flow schedule: terminal payoff in the last column, zero elsewhere
        cash_flows = np.zeros_like(paths)
        cash_flows[:, steps] = option.payoff(paths[:, steps])

        for t in range(steps - 1, 0, -1):  # backwards in time, exclude t=0 (valuation date)
            immediate_ex = option.payoff(paths[:, t])
            itm = np.flatnonzero(immediate_ex > 0.0)
            if itm.size < degree + 1:
                logger.debug("t=%d: %d in-the-money paths, too few to regress, skipping", t, itm.size)
                continue

            # realised future cash flows discounted to t, from committed decisions only
            y = realized_discounted_cash_flows(cash_flows[itm], t, r, dt)
            x = paths[itm, t] / option.strike
            continuation = self._fit_continuation(x, y, t)

            exercise_now = itm[immediate_ex[itm] > continuation]
            cash_flows[exercise_now, t] = immediate_ex[exercise_now]
            cash_flows[exercise_now, t + 1:] = 0.0
            logger.debug("t=%d: itm=%d exercised=%d", t, itm.size, exercise_now.size)

        index, value = first_cash_flows(cash_flows)
        pv = np.where(index >= 0, value * np.exp(-r * dt * index), 0.0)
        exercise_counts = np.bincount(index[index >= 0], minlength=steps + 1)

        price, se = mean_and_std_error(pv, antithetic=cfg.use_antithetic)
        ci_low, ci_high = confidence_interval(price, se)
        logger.debug("LSMC price=%.6f se=%.6f paths=%d steps=%d", price, se, cfg.num_paths, steps)

        return LSMCResult(
            price=price,
            std_error=se,
            ci_low=ci_low,
            ci_high=ci_high,
            n_paths=cfg.num_paths,
            exercise_counts=exercise_counts,
            cash_flows=cash_flows,
            paths=paths,
            notes=f"LSM American (n_steps={steps}, degree={degree}){' + antithetic' if cfg.use_antithetic else ''}",
        )

    def price(self, option, market):
        return self.price_with_details(option, market).price

    def _price_for_greeks(self, option, market):
        # common random numbers across bumps
        self.reseed(self._config.seed)
        return self.price(option, market)
