# early_exercise/random_stream.py
"""
Seeded pseudo-random stream shared by the Monte Carlo engines.

A stream is stateful: the order of draws decides every simulated path, so a
stream must never be shared between threads. Use `spawn` to hand each worker
its own independent child stream.
"""

import logging

# Third party imports
import numpy as np

logger = logging.getLogger(__name__)


class RandomStream:
    """
    Standard-normal and correlated-normal draws from a numpy Generator (PCG64).

    Parameters:
    - seed: non-negative integer; the same seed always replays the same draws
    """

    def __init__(self, seed=12345):
        self._seed = None
        self._seed_sequence = None
        self._rng = None
        self.reseed(seed)

    @classmethod
    def _from_seed_sequence(cls, seed_sequence):
        stream = cls.__new__(cls)
        stream._seed = None
        stream._seed_sequence = seed_sequence
        stream._rng = np.random.default_rng(seed_sequence)
        return stream

    @property
    def seed(self):
        """Integer seed of a root stream; None for streams returned by spawn()."""
        return self._seed

    @property
    def seed_sequence(self):
        """
        numpy SeedSequence behind the stream. For a spawned child, `entropy` is
        the root seed and `spawn_key` its position, which together identify it.
        """
        return self._seed_sequence

    def reseed(self, seed):
        """Restart the sequence from `seed`. The only way stream state is reset."""
        seed = int(seed)
        if seed < 0:
            raise ValueError("seed must be >= 0")
        self._seed = seed
        self._seed_sequence = np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seed_sequence)
        logger.debug("random stream reseeded with %d", seed)

    def standard_normal(self, size=None):
        return self._rng.standard_normal(size)

    def normal_vector(self, n):
        return self._rng.standard_normal(int(n))

    def uniform(self, size=None):
        return self._rng.uniform(0.0, 1.0, size)

    def correlated_normals(self, correlation, size=None):
        """
        Pair (w1, w2) of standard normals with corr(w1, w2) = correlation.
        w1 = z1, w2 = rho * z1 + sqrt(1 - rho^2) * z2
        """
        rho = float(correlation)
        if not -1.0 <= rho <= 1.0:
            raise ValueError(f"correlation must lie in [-1, 1], got {correlation!r}")
        z1 = self._rng.standard_normal(size)
        z2 = self._rng.standard_normal(size)
        return z1, rho * z1 + np.sqrt(1.0 - rho * rho) * z2

    def spawn(self, n):
        """`n` statistically independent child streams, deterministic given the seed."""
        return [RandomStream._from_seed_sequence(child) for child in self._seed_sequence.spawn(int(n))]
