"""Tests for delay and history embedding."""
import numpy as np
import pytest

from infostorage.embedding.delay import history_embedding, time_delay_embedding


def test_time_delay_embedding():
    """Time delay embedding produces correct shape."""
    signal = np.arange(100, dtype=np.float64)

    emb = time_delay_embedding(signal, dimension=3, delay=2)
    assert emb.shape == (96, 3)
    # First point: [0, 2, 4]
    np.testing.assert_array_equal(emb[0], [0, 2, 4])


def test_time_delay_embedding_too_short():
    with pytest.raises(ValueError):
        time_delay_embedding(np.arange(4.0), dimension=3, delay=2)


def test_history_embedding_alignment():
    """Past window ends at t, next value is t + 1."""
    signal = np.arange(10, dtype=np.float64)

    past, next_values = history_embedding(signal, k=3, tau=2)
    assert past.shape == (5, 3)
    assert next_values.shape == (5, 1)
    np.testing.assert_array_equal(past[0], [0, 2, 4])
    np.testing.assert_array_equal(past[-1], [4, 6, 8])
    np.testing.assert_array_equal(next_values.ravel(), [5, 6, 7, 8, 9])


def test_history_embedding_k1_ignores_tau():
    signal = np.arange(20, dtype=np.float64)

    past_a, next_a = history_embedding(signal, k=1, tau=1)
    past_b, next_b = history_embedding(signal, k=1, tau=5)
    np.testing.assert_array_equal(past_a, past_b)
    np.testing.assert_array_equal(next_a, next_b)
    assert len(past_a) == 19


def test_history_embedding_short_signal_is_empty():
    """Series with no full (past, next) pair gives empty arrays."""
    past, next_values = history_embedding(np.array([1.0, 2.0, 3.0]), k=3, tau=1)
    assert past.shape == (0, 3)
    assert next_values.shape == (0, 1)


def test_history_embedding_rejects_bad_parameters():
    with pytest.raises(ValueError):
        history_embedding(np.arange(10.0), k=0, tau=1)
    with pytest.raises(ValueError):
        history_embedding(np.arange(10.0), k=2, tau=0)
