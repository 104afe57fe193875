# early_exercise/config.py
"""
Engine configuration.

Defaults use a fixed seed so two engines built from the same config return
identical prices. Overrides can come from the environment, e.g.

    EARLY_EXERCISE_LSMC_PATHS=20000
    EARLY_EXERCISE_LSMC_TIMESTEPS=100
    EARLY_EXERCISE_LSMC_SEED=7
    EARLY_EXERCISE_LSMC_ANTITHETIC=false
    EARLY_EXERCISE_LSMC_DEGREE=2
"""

import os
import logging
from dataclasses import dataclass, fields, replace as _replace

logger = logging.getLogger(__name__)

DEFAULT_SEED = 12345

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}


def _parse_bool(raw):
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Cannot interpret {raw!r} as a boolean")


class _EnvConfig:
    ENV_PREFIX = ""
    ENV_NAMES = {}

    def _check_counts(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is int:
                object.__setattr__(self, f.name, int(value))
            elif f.type is bool:
                if isinstance(value, str):
                    value = _parse_bool(value)
                object.__setattr__(self, f.name, bool(value))
        if self.num_paths < 1:
            raise ValueError("num_paths must be >= 1")
        if self.num_timesteps < 1:
            raise ValueError("num_timesteps must be >= 1")
        if self.seed < 0:
            raise ValueError("seed must be >= 0")

    def replace(self, **changes):
        """Validated copy with some fields replaced."""
        return _replace(self, **changes)

    @classmethod
    def from_env(cls, prefix=None, environ=None):
        """Build a config from defaults overridden by `<prefix>_<NAME>` variables."""
        environ = os.environ if environ is None else environ
        prefix = prefix or cls.ENV_PREFIX
        types = {f.name: f.type for f in fields(cls)}
        overrides = {}
        for field_name, suffix in cls.ENV_NAMES.items():
            raw = environ.get(f"{prefix}_{suffix}")
            if raw is None or raw.strip() == "":
                continue
            cast = _parse_bool if types[field_name] is bool else types[field_name]
            overrides[field_name] = cast(raw)
            logger.debug("config override %s_%s=%s", prefix, suffix, raw)
        return cls(**overrides)


@dataclass(frozen=True)
class MonteCarloConfig(_EnvConfig):
    """
    European / path-dependent Monte Carlo settings.

    - use_control_variate: regress the discounted payoff on the discounted
      terminal spot, whose risk-neutral mean is known
    """

    num_paths: int = 100000
    num_timesteps: int = 100
    seed: int = DEFAULT_SEED
    use_antithetic: bool = True
    use_control_variate: bool = False

    ENV_PREFIX = "EARLY_EXERCISE_MC"
    ENV_NAMES = {
        'num_paths': 'PATHS',
        'num_timesteps': 'TIMESTEPS',
        'seed': 'SEED',
        'use_antithetic': 'ANTITHETIC',
        'use_control_variate': 'CONTROL_VARIATE',
    }

    def __post_init__(self):
        self._check_counts()


@dataclass(frozen=True)
class LSMCConfig(_EnvConfig):
    """
    Longstaff-Schwartz settings.

    - num_paths: Monte Carlo paths
    - num_timesteps: grid size; exercise is considered at steps 1..num_timesteps-1 and at expiry
    - seed: seed of the engine-owned random stream
    - use_antithetic: pair every path with its mirrored-draw twin
    - polynomial_degree: highest Laguerre degree in the regression basis
    """

    num_paths: int = 50000
    num_timesteps: int = 50
    seed: int = DEFAULT_SEED
    use_antithetic: bool = True
    polynomial_degree: int = 3

    ENV_PREFIX = "EARLY_EXERCISE_LSMC"
    ENV_NAMES = {
        'num_paths': 'PATHS',
        'num_timesteps': 'TIMESTEPS',
        'seed': 'SEED',
        'use_antithetic': 'ANTITHETIC',
        'polynomial_degree': 'DEGREE',
    }

    def __post_init__(self):
        self._check_counts()
        if self.polynomial_degree < 0:
            raise ValueError("polynomial_degree must be >= 0")
