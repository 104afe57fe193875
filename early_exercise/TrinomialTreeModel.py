# early_exercise/TrinomialTreeModel.py
import logging
from typing import NamedTuple

# Third party imports
import numpy as np

# Local package imports
from .base import PricingEngine
from .exceptions import LatticeParameterError, UnsupportedOptionError

logger = logging.getLogger(__name__)


class TrinomialParameters(NamedTuple):
    dx: float  # log-spot spacing
    pu: float
    pm: float
    pd: float
    dt: float
    df: float


class TrinomialTreeModel(PricingEngine):
    """
    Trinomial tree in log-spot with moment-matched branch probabilities.

    dx = sigma sqrt(3 dt), nu = r - q - sigma^2 / 2 and
        pu = (a + nu dt / dx) / 2,  pm = 1 - a,  pd = (a - nu dt / dx) / 2
    with a = (sigma^2 dt + nu^2 dt^2) / dx^2. Node j in [-N, N] sits at
    S exp(j dx); buffer index j + N.
    """

    def __init__(self, number_of_time_steps=100):
        self.number_of_time_steps = int(number_of_time_steps)
        if self.number_of_time_steps < 1:
            raise ValueError("number_of_time_steps must be >= 1")

    def tree_parameters(self, market, expiry):
        dt = float(expiry) / self.number_of_time_steps
        sigma = market.volatility
        dx = sigma * np.sqrt(3.0 * dt)
        nu = market.rate - market.dividend - 0.5 * sigma ** 2
        a = (sigma ** 2 * dt + nu ** 2 * dt ** 2) / dx ** 2
        b = nu * dt / dx
        pu, pm, pd = 0.5 * (a + b), 1.0 - a, 0.5 * (a - b)

        for name, prob in (("pu", pu), ("pm", pm), ("pd", pd)):
            if prob < 0.0 or prob > 1.0:
                raise LatticeParameterError(
                    f"Invalid trinomial tree parameters: {name}={prob:.6f} outside [0, 1] "
                    f"(sigma={sigma}, r={market.rate}, q={market.dividend}, dt={dt:.6g})"
                )
        return TrinomialParameters(dx=float(dx), pu=float(pu), pm=float(pm), pd=float(pd),
                                   dt=dt, df=float(np.exp(-market.rate * dt)))

    def price(self, option, market):
        if option.is_path_dependent:
            raise UnsupportedOptionError(f"{type(option).__name__} is path-dependent; price it with MonteCarloPricing")
        params = self.tree_parameters(market, option.expiry)
        N = self.number_of_time_steps
        american = option.is_american
        logger.debug("trinomial tree N=%d pu=%.6f pm=%.6f pd=%.6f american=%s",
                     N, params.pu, params.pm, params.pd, american)

        spots = market.spot * np.exp(np.arange(-N, N + 1) * params.dx)
        values = np.asarray(option.payoff(spots), dtype=float)

        # At step n only nodes N-n..N+n are reachable
        for step in range(N - 1, -1, -1):
            lo, hi = N - step, N + step + 1
            continuation = params.df * (
                params.pu * values[lo + 1:hi + 1] + params.pm * values[lo:hi] + params.pd * values[lo - 1:hi - 1]
            )
            if american:
                continuation = np.maximum(continuation, option.payoff(spots[lo:hi]))
            values[lo:hi] = continuation

        return float(values[N])
