"""
Shared test signals with known properties.

Every signal here is a linear-Gaussian process whose active information
storage is known in closed form or from a ground truth library.
"""
import numpy as np
import pytest


def _autoregressive(coefficients, n, seed, burn_in=1000):
    rng = np.random.RandomState(seed)
    order = len(coefficients)
    noise = rng.randn(n + burn_in)
    x = np.zeros(n + burn_in)
    for t in range(order, n + burn_in):
        x[t] = noise[t] + sum(c * x[t - 1 - i] for i, c in enumerate(coefficients))
    return x[burn_in:]


@pytest.fixture
def white_noise():
    """White noise: AIS = 0 for every (k, tau)."""
    rng = np.random.RandomState(42)
    return rng.randn(10000)


@pytest.fixture
def ar1():
    """AR(1), phi = 0.9: AIS(k=1) = -0.5 ln(1 - 0.81) ~ 0.830 nats."""
    return _autoregressive([0.9], 10000, seed=42)


@pytest.fixture
def ar3():
    """AR(3), true order 3: AIS saturates at k = 3."""
    return _autoregressive([0.3, 0.2, 0.4], 10000, seed=42)


@pytest.fixture
def seasonal_ar():
    """x[t] = 0.8 x[t-3] + e: x[t+1] depends only on x[t-2], so (k=2, tau=2)."""
    return _autoregressive([0.0, 0.0, 0.8], 10000, seed=42)
