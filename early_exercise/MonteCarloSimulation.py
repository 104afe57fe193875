# early_exercise/MonteCarloSimulation.py
import math
import logging

# Third party imports
import numpy as np
from scipy.stats import norm

# Local package imports
from .base import PricingEngine, OptionStyle
from .config import MonteCarloConfig
from .exceptions import UnsupportedOptionError
from .random_stream import RandomStream

logger = logging.getLogger(__name__)


def antithetic_split(num_paths):
    """(number of primary paths, number of mirrored paths) for an antithetic batch."""
    n_primary = (int(num_paths) + 1) // 2
    return n_primary, int(num_paths) - n_primary


def mean_and_std_error(samples, antithetic=False):
    """
    Sample mean and its standard error.

    With antithetic sampling the rows are [primaries..., mirrors...]; the error
    is estimated from the primary/mirror pair averages, which are i.i.d.
    """
    samples = np.asarray(samples, dtype=float).reshape(-1)
    mean = float(np.mean(samples))
    if antithetic:
        n_primary, n_mirror = antithetic_split(samples.size)
        samples = 0.5 * (samples[:n_mirror] + samples[n_primary:])
    if samples.size < 2:
        return mean, float("nan")
    return mean, float(np.std(samples, ddof=1) / math.sqrt(samples.size))


def confidence_interval(mean, std_error, level=0.95):
    """Two-sided normal-approximation interval (ci_low, ci_high)."""
    if not math.isfinite(std_error):
        return float("nan"), float("nan")
    half_width = norm.ppf(0.5 + 0.5 * level) * std_error
    return mean - half_width, mean + half_width


class PathSimulator:
    """
    Geometric Brownian motion paths on a uniform grid, exact lognormal steps:

        S[i] = S[i-1] * exp((r - q - 0.5 sigma^2) dt + sigma sqrt(dt) Z)

    Every normal is taken from the stream passed in, so paths are fully
    determined by the stream position.
    """

    def __init__(self, stream):
        self.stream = stream

    @staticmethod
    def _grid(market, horizon, steps):
        if int(steps) < 1:
            raise ValueError("steps must be >= 1")
        if not horizon > 0.0:
            raise ValueError("horizon must be > 0")
        dt = float(horizon) / int(steps)
        sigma = market.volatility
        drift = (market.rate - market.dividend - 0.5 * sigma ** 2) * dt
        diffusion = sigma * math.sqrt(dt)
        return drift, diffusion

    @staticmethod
    def _build(spot0, Z, drift, diffusion):
        n_paths, steps = Z.shape
        paths = np.empty((n_paths, steps + 1))
        paths[:, 0] = spot0
        for t in range(1, steps + 1):
            paths[:, t] = paths[:, t - 1] * np.exp(drift + diffusion * Z[:, t - 1])
        return paths

    def simulate(self, spot0, market, horizon, steps):
        """One price path of length steps + 1 with path[0] == spot0."""
        drift, diffusion = self._grid(market, horizon, steps)
        Z = self.stream.normal_vector(steps).reshape(1, -1)
        return self._build(float(spot0), Z, drift, diffusion)[0]

    def simulate_paths(self, spot0, market, horizon, steps, num_paths, antithetic=False):
        """
        Batch of paths, shape (num_paths, steps + 1).

        Primary paths draw their normals one path at a time, in the same order
        as repeated simulate() calls. With `antithetic`, the first
        ceil(num_paths / 2) rows are primaries and row n_primary + i is driven
        by -Z of primary i at every step.
        """
        num_paths = int(num_paths)
        if num_paths < 1:
            raise ValueError("num_paths must be >= 1")
        drift, diffusion = self._grid(market, horizon, steps)

        if antithetic:
            n_primary, n_mirror = antithetic_split(num_paths)
            Z_primary = self.stream.standard_normal((n_primary, int(steps)))
            Z = np.vstack([Z_primary, -Z_primary[:n_mirror]])
        else:
            Z = self.stream.standard_normal((num_paths, int(steps)))

        return self._build(float(spot0), Z, drift, diffusion)


class MonteCarloPricing(PricingEngine):
    """
    Monte Carlo pricing of European contracts, vanilla or path-dependent.

    Every contract is priced as the discounted mean of option.path_payoff()
    over a simulated batch, so Asian averages and barrier monitoring see the
    whole path. Early-exercise contracts belong to LongstaffSchwartz; passing
    one here is rejected before any random number is drawn.
    """

    def __init__(self, config=None):
        self._config = config if config is not None else MonteCarloConfig()
        self.stream = RandomStream(self._config.seed)
        self.simulator = PathSimulator(self.stream)

    @property
    def config(self):
        return self._config

    def set_config(self, config):
        self._config = config
        self.reseed(config.seed)

    def reseed(self, seed):
        self.stream.reseed(seed)

    @staticmethod
    def _control_adjust(samples, terminal, market, expiry):
        """
        Control variate on the discounted terminal spot, E[S_T] = S_0 exp((r - q) T).
        samples: discounted payoffs per path (not yet averaged)
        """
        disc = math.exp(-market.rate * expiry)
        forward = market.spot * math.exp((market.rate - market.dividend) * expiry)
        control = disc * (terminal - forward)
        var_c = np.var(control, ddof=1)
        beta = 0.0 if var_c <= 0 else np.cov(samples, control, ddof=1)[0, 1] / var_c
        logger.debug("control variate beta=%.6f", beta)
        return samples - beta * control

    def _discounted_payoffs(self, option, market):
        if option.style is not OptionStyle.EUROPEAN:
            raise UnsupportedOptionError(
                "Basic Monte Carlo only supports European options. Use LongstaffSchwartz for American options."
            )
        cfg = self._config
        steps = option.simulation_steps(cfg.num_timesteps)
        paths = self.simulator.simulate_paths(
            market.spot, market, option.expiry, steps, cfg.num_paths, antithetic=cfg.use_antithetic
        )
        samples = math.exp(-market.rate * option.expiry) * np.asarray(option.path_payoff(paths), dtype=float)
        if cfg.use_control_variate and samples.size > 1:
            samples = self._control_adjust(samples, paths[:, -1], market, option.expiry)
        return samples

    def price_with_error(self, option, market):
        """(price, standard error)"""
        samples = self._discounted_payoffs(option, market)
        price, se = mean_and_std_error(samples, antithetic=self._config.use_antithetic)
        logger.debug("%s MC price=%.6f se=%.6f paths=%d", type(option).__name__, price, se, samples.size)
        return price, se

    def price(self, option, market):
        price, _ = self.price_with_error(option, market)
        return price

    def _price_for_greeks(self, option, market):
        # common random numbers across bumps
        self.reseed(self._config.seed)
        return self.price(option, market)
