# early_exercise/BinomialTreeModel.py
import logging
from typing import NamedTuple

# Third party imports
import numpy as np

# Local package imports
from .base import PricingEngine
from .exceptions import LatticeParameterError, UnsupportedOptionError

logger = logging.getLogger(__name__)


class TreeParameters(NamedTuple):
    u: float   # up factor
    d: float   # down factor
    p: float   # risk-neutral up probability
    dt: float  # time step
    df: float  # per-step discount factor


class BinomialTreeModel(PricingEngine):
    """
    Cox-Ross-Rubinstein binomial tree, European and American exercise.

    Values live in a single buffer of number_of_time_steps + 1 nodes that is
    overwritten slice by slice during backward induction. Node i of step n
    sits at spot S * u^(n-i) * d^i, so index 0 is the highest node.
    """

    def __init__(self, number_of_time_steps=100):
        self.number_of_time_steps = int(number_of_time_steps)
        if self.number_of_time_steps < 1:
            raise ValueError("number_of_time_steps must be >= 1")

    def tree_parameters(self, market, expiry):
        dt = float(expiry) / self.number_of_time_steps
        u = np.exp(market.volatility * np.sqrt(dt))
        d = 1.0 / u
        growth = np.exp((market.rate - market.dividend) * dt)
        p = (growth - d) / (u - d)

        if p < 0.0 or p > 1.0:
            raise LatticeParameterError(
                f"Invalid binomial tree parameters: p={p:.6f} outside [0, 1] "
                f"(sigma={market.volatility}, r={market.rate}, q={market.dividend}, dt={dt:.6g})"
            )
        return TreeParameters(u=float(u), d=float(d), p=float(p), dt=dt, df=float(np.exp(-market.rate * dt)))

    def _node_spots(self, spot, params, step):
        i = np.arange(step + 1)
        return spot * params.u ** (step - i) * params.d ** i

    # -------------------------
    # Pricing
    # -------------------------
    def price(self, option, market):
        if option.is_path_dependent:
            raise UnsupportedOptionError(f"{type(option).__name__} is path-dependent; price it with MonteCarloPricing")
        params = self.tree_parameters(market, option.expiry)
        N = self.number_of_time_steps
        p, q, df = params.p, 1.0 - params.p, params.df
        american = option.is_american
        logger.debug("CRR tree N=%d u=%.6f d=%.6f p=%.6f american=%s", N, params.u, params.d, p, american)

        # Option values at maturity
        values = np.asarray(option.payoff(self._node_spots(market.spot, params, N)), dtype=float)

        # Backward induction
        for step in range(N - 1, -1, -1):
            values[:step + 1] = df * (p * values[:step + 1] + q * values[1:step + 2])
            if american:
                exercise = option.payoff(self._node_spots(market.spot, params, step))
                np.maximum(values[:step + 1], exercise, out=values[:step + 1])

        return float(values[0])
