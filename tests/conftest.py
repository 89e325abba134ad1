"""
Shared test signals with known generating processes.
"""
import numpy as np
import pytest


def autoregressive(coefficients, n, seed, burn_in=500):
    """x[t] = sum_i c_i * x[t-1-i] + e[t], unit-variance Gaussian noise."""
    rng = np.random.RandomState(seed)
    order = len(coefficients)
    noise = rng.randn(n + burn_in)
    x = np.zeros(n + burn_in)
    for t in range(order, n + burn_in):
        x[t] = noise[t] + sum(c * x[t - 1 - i] for i, c in enumerate(coefficients))
    return x[burn_in:]


@pytest.fixture
def white_noise():
    """No self-predictability: AIS ~ 0 for every embedding."""
    rng = np.random.RandomState(42)
    return rng.randn(2000)


@pytest.fixture
def ar1_process():
    """AR(1), phi = 0.6: AIS(k=1) = -0.5 * ln(1 - 0.36) nats."""
    return autoregressive([0.6], 5000, seed=7)


@pytest.fixture
def ar2_process():
    """AR(2), x[t] = 0.2 x[t-1] + 0.6 x[t-2] + e: true order 2, weak lag-1 memory."""
    return autoregressive([0.2, 0.6], 5000, seed=11)


@pytest.fixture
def constant():
    """Zero variance: Gaussian covariances are exactly singular."""
    return np.zeros(500)


@pytest.fixture
def correlated_pair():
    """Two signals with correlation 0.8: MI = -0.5 * ln(0.36) nats."""
    rng = np.random.RandomState(42)
    x = rng.randn(1000)
    y = 0.8 * x + 0.6 * rng.randn(1000)
    return x, y


@pytest.fixture
def uncorrelated_pair():
    rng = np.random.RandomState(42)
    x = rng.randn(1000)
    rng2 = np.random.RandomState(99)
    y = rng2.randn(1000)
    return x, y
