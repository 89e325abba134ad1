"""
Embedding Primitives

Time-delay embedding of a univariate series, and the (past state, next value)
pairs that active information storage is computed from.
"""

import numpy as np
from typing import Tuple


def time_delay_embedding(
    signal: np.ndarray,
    dimension: int = 3,
    delay: int = 1,
) -> np.ndarray:
    """
    Construct time-delay embedding.

    Returns (n_points, dimension) array, row i being
    [x[i], x[i + delay], ..., x[i + (dimension - 1) * delay]].
    """
    signal = np.asarray(signal, dtype=np.float64).flatten()
    n = len(signal)
    n_points = n - (dimension - 1) * delay

    if dimension < 1 or delay < 1:
        raise ValueError(f"dimension and delay must be >= 1, got {dimension}, {delay}")

    if n_points <= 0:
        raise ValueError(
            f"Signal too short for embedding: {n} samples, "
            f"need at least {(dimension - 1) * delay + 1}"
        )

    embedded = np.zeros((n_points, dimension))
    for d in range(dimension):
        start = d * delay
        embedded[:, d] = signal[start:start + n_points]

    return embedded


def history_embedding(
    signal: np.ndarray,
    k: int,
    tau: int = 1,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a series into past states and the values that follow them.

    Parameters
    ----------
    signal : np.ndarray
        Univariate time series
    k : int
        Embedding length (number of past samples)
    tau : int
        Embedding delay (spacing between past samples)

    Returns
    -------
    past : np.ndarray
        (n_samples, k) array, past[i] = [x[t-(k-1)tau], ..., x[t-tau], x[t]]
    next_values : np.ndarray
        (n_samples, 1) array, next_values[i] = x[t+1]

    Notes
    -----
    t runs from (k-1)*tau to n-2, so the first (k-1)*tau + 1 samples never
    appear as a next value and n_samples = n - (k-1)*tau - 1.
    A series too short for a single sample yields empty arrays.
    """
    signal = np.asarray(signal, dtype=np.float64).flatten()

    if k < 1 or tau < 1:
        raise ValueError(f"k and tau must be >= 1, got k={k}, tau={tau}")

    n_samples = len(signal) - (k - 1) * tau - 1
    if n_samples <= 0:
        return np.zeros((0, k)), np.zeros((0, 1))

    past = time_delay_embedding(signal[:-1], dimension=k, delay=tau)
    next_values = signal[(k - 1) * tau + 1:].reshape(-1, 1)

    return past, next_values
