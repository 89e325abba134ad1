"""
Embedding Selection Primitives

Automatic choice of the embedding length k and delay tau for active
information storage, by one of two criteria:

    RAGWITZ       minimise nearest-neighbour one-step prediction error
    MAX_CORR_AIS  maximise bias-corrected AIS

Both walk the same (k, tau) grid against a fixed observation set and keep
only the running best candidate.

References
----------
Ragwitz & Kantz (2002), Phys. Rev. E 65, 056201.
Garland, James & Bradley (2016), Phys. Rev. E 93, 022221.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple

import numpy as np

from infostorage.config import INFOSTORAGE_CONFIG as cfg
from infostorage.errors import CandidateEvaluationError, ConfigurationError
from infostorage.information.gaussian import MutualInfoCalculatorGaussian
from infostorage.information.kraskov import MutualInfoCalculatorKraskov

logger = logging.getLogger(__name__)

# prepare(estimator, k, tau) loads the observations embedded with (k, tau)
PrepareFn = Callable[[object, int, int], None]


class AutoEmbedMethod(str, Enum):
    """Embedding search strategy."""

    NONE = "NONE"
    RAGWITZ = "RAGWITZ"
    MAX_CORR_AIS = "MAX_CORR_AIS"

    @classmethod
    def parse(cls, value) -> "AutoEmbedMethod":
        """Case-insensitive lookup; unknown values are a configuration error."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ConfigurationError(
                f"Unexpected value {value!r} for the auto-embedding method "
                f"(expected one of {', '.join(m.value for m in cls)})"
            ) from None


@dataclass(frozen=True)
class Candidate:
    """One scored (k, tau) embedding."""

    k: int
    tau: int
    score: float
    num_observations: int = 0


def candidate_grid(k_search_max: int, tau_search_max: int) -> Iterator[Tuple[int, int]]:
    """
    Yield (k, tau) in search order.

    k runs 1..k_search_max and tau 1..tau_search_max, except that k = 1 is
    only tried with tau = 1 (tau has no effect on a one-sample past).
    """
    for k in range(1, k_search_max + 1):
        for tau in range(1, tau_search_max + 1):
            yield k, tau
            if k == 1:
                break


@contextmanager
def property_override(estimator, name: str, value):
    """Set an estimator property for the duration of the block, then restore it."""
    previous = estimator.get_property(name)
    estimator.set_property(name, value)
    try:
        yield previous
    finally:
        estimator.set_property(name, previous)


def ragwitz_search(
    prepare: PrepareFn,
    k_search_max: int,
    tau_search_max: int,
    n_neighbours: Optional[int] = None,
    estimator_factory: Callable[[], object] = MutualInfoCalculatorKraskov,
    log: Optional[logging.Logger] = None,
) -> Candidate:
    """
    Ragwitz criterion: minimise normalised nearest-neighbour prediction error.

    Parameters
    ----------
    prepare : callable
        prepare(estimator, k, tau) loads the embedded observations
    k_search_max, tau_search_max : int
        Inclusive grid bounds
    n_neighbours : int, optional
        Neighbours averaged per prediction; the estimator's own k if None
    estimator_factory : callable
        Builds a fresh nearest-neighbour estimator for every candidate
    log : logging.Logger, optional

    Returns
    -------
    Candidate
        Lowest error / num_observations; ties keep the earlier candidate.
        (1, 1) with score inf if nothing was scored.

    Notes
    -----
    Dividing by the number of observations puts embeddings that consume
    different numbers of leading samples on a comparable basis.
    """
    log = log or logger
    best = Candidate(cfg.auto_embed.default_k, cfg.auto_embed.default_tau, np.inf)
    log.debug(
        f"Beginning Ragwitz auto-embedding with k_max={k_search_max}, tau_max={tau_search_max}"
    )

    for k, tau in candidate_grid(k_search_max, tau_search_max):
        try:
            estimator = estimator_factory()
            prepare(estimator, k, tau)
            if n_neighbours is None:
                errors = estimator.compute_prediction_errors_from_observations()
            else:
                errors = estimator.compute_prediction_errors_from_observations(
                    n_neighbours=n_neighbours)
            n_obs = estimator.get_num_observations()
            score = float(errors[0]) / n_obs
        except Exception as ex:
            raise CandidateEvaluationError(k, tau) from ex

        log.debug(
            f"Embedding prediction error (dim={len(errors)}) for k={k},tau={tau} is {score:.3f}"
        )
        if score < best.score:
            best = Candidate(k, tau, score, n_obs)

    return best


def max_corr_ais_search(
    prepare: PrepareFn,
    estimator,
    k_search_max: int,
    tau_search_max: int,
    log: Optional[logging.Logger] = None,
) -> Candidate:
    """
    Maximise bias-corrected AIS over the (k, tau) grid.

    The persistent estimator is reused so any properties already set on it
    apply. Its BIAS_CORRECTION property is forced on for the search and
    restored afterwards, whether or not a candidate fails.

    Returns
    -------
    Candidate
        Highest bias-corrected AIS; ties keep the earlier candidate.
        (1, 1) with score -inf if nothing was scored.
    """
    log = log or logger
    best = Candidate(cfg.auto_embed.default_k, cfg.auto_embed.default_tau, -np.inf)
    log.debug(
        f"Beginning max bias corrected AIS auto-embedding with "
        f"k_max={k_search_max}, tau_max={tau_search_max}"
    )

    with property_override(estimator, MutualInfoCalculatorGaussian.PROP_BIAS_CORRECTION, "true"):
        for k, tau in candidate_grid(k_search_max, tau_search_max):
            try:
                prepare(estimator, k, tau)
                ais = float(estimator.compute_average_local_of_observations())
                n_obs = estimator.get_num_observations()
            except Exception as ex:
                raise CandidateEvaluationError(k, tau) from ex

            log.debug(f"AIS (bias corrected) for k={k},tau={tau} ({n_obs} samples) is {ais:.5f}")
            if ais > best.score:
                best = Candidate(k, tau, ais, n_obs)

    return best


def select_embedding(
    method,
    prepare: PrepareFn,
    estimator,
    k_search_max: int,
    tau_search_max: int,
    n_neighbours: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> Optional[Candidate]:
    """
    Run the search named by method.

    Returns None for AutoEmbedMethod.NONE (manual k and tau stand).
    Raises ConfigurationError for an unknown method before anything is scored,
    and CandidateEvaluationError if scoring any candidate fails.
    """
    method = AutoEmbedMethod.parse(method)

    if method is AutoEmbedMethod.NONE:
        return None
    if method is AutoEmbedMethod.RAGWITZ:
        return ragwitz_search(prepare, k_search_max, tau_search_max,
                              n_neighbours=n_neighbours, log=log)
    return max_corr_ais_search(prepare, estimator, k_search_max, tau_search_max, log=log)
