"""
Active Information Storage via Mutual Information

AIS is the MI between a process's embedded past state and its next value:

    A(X; k, tau) = I(X_t^(k, tau) ; X_{t+1})

This module holds the observation lifecycle shared by every AIS calculator;
the MI itself is delegated to a wrapped estimator.
"""

import logging
from typing import List, Optional

import numpy as np

from infostorage.embedding.delay import history_embedding
from infostorage.errors import ConfigurationError, StateError
from infostorage.properties import format_value, parse_int


class ActiveInfoStorageCalculatorViaMutualInfo:
    """
    AIS calculator delegating to a mutual information estimator.

    Usage
    -----
        calc = ActiveInfoStorageCalculatorViaMutualInfo(estimator)
        calc.initialise(k=2, tau=1)
        calc.set_observations(series)
        ais = calc.compute_average_local_of_observations()

    Parameters
    ----------
    mi_calc : object
        Estimator exposing initialise, set_observations, get_num_observations,
        compute_average_local_of_observations, compute_local_of_previous_observations
        and get_property / set_property
    logger : logging.Logger, optional
        Destination for diagnostic output; defaults to this module's logger
    """

    K_PROP_NAME = "k_HISTORY"
    TAU_PROP_NAME = "TAU"
    # AIS fixes the source-destination lag, so this MI property is refused
    PROP_TIME_DIFF = "TIME_DIFF"

    def __init__(self, mi_calc, logger: Optional[logging.Logger] = None):
        self._mi_calc = mi_calc
        self.logger = logger or logging.getLogger(__name__)
        self.k = 1
        self.tau = 1
        self._observations: List[np.ndarray] = []
        self._adding = False
        self._finalised = False
        self.last_average = np.nan

    def initialise(self, k: Optional[int] = None, tau: Optional[int] = None):
        """Optionally set the embedding, and discard any previous observations."""
        if k is not None:
            self.k = parse_int(self.K_PROP_NAME, k, minimum=1)
        if tau is not None:
            self.tau = parse_int(self.TAU_PROP_NAME, tau, minimum=1)
        self._mi_calc.initialise(self.k, 1)
        self._observations = []
        self._adding = False
        self._finalised = False
        self.last_average = np.nan

    def set_property(self, name: str, value):
        key = name.upper()
        if key == self.K_PROP_NAME.upper():
            self.k = parse_int(name, value, minimum=1)
        elif key == self.TAU_PROP_NAME:
            self.tau = parse_int(name, value, minimum=1)
        elif key == self.PROP_TIME_DIFF:
            raise ConfigurationError(
                f"Property {name} cannot be set for an active information storage calculator"
            )
        else:
            # Assume it was a property for the underlying MI calculator
            self._mi_calc.set_property(name, value)
            return
        self.logger.debug(f"{type(self).__name__}: Set property {name} to {value}")

    def get_property(self, name: str) -> Optional[str]:
        key = name.upper()
        if key == self.K_PROP_NAME.upper():
            return format_value(self.k)
        if key == self.TAU_PROP_NAME:
            return format_value(self.tau)
        if key == self.PROP_TIME_DIFF:
            return "0"
        return self._mi_calc.get_property(name)

    # Observation lifecycle

    def set_observations(self, observations: np.ndarray):
        self.start_add_observations()
        self.add_observations(observations)
        self.finalise_add_observations()

    def start_add_observations(self):
        self._observations = []
        self._adding = True
        self._finalised = False

    def add_observations(self, observations: np.ndarray, start: int = 0, num: Optional[int] = None):
        """Queue one time series (or the slice [start, start + num) of it)."""
        if not self._adding:
            raise StateError("start_add_observations() must be called before add_observations()")

        series = np.asarray(observations, dtype=np.float64).flatten()
        end = len(series) if num is None else start + num
        if start < 0 or end > len(series) or end < start:
            raise ValueError(
                f"Slice [{start}, {end}) out of range for series of length {len(series)}"
            )
        self._observations.append(series[start:end])

    def finalise_add_observations(self):
        """Run any pre-finalisation step, then hand embedded samples to the MI estimator."""
        if not self._adding:
            raise StateError("start_add_observations() must be called before finalise_add_observations()")

        self.pre_finalise_add_observations()
        self.prepare_mi_calculator(self._mi_calc, self.k, self.tau)
        self._adding = False
        self._finalised = True

    def pre_finalise_add_observations(self):
        """Hook run after observations are queued and before the estimator is prepared."""

    def prepare_mi_calculator(self, mi_calc, k: int, tau: int):
        """
        Embed every queued series with (k, tau) and load the (past, next)
        pairs into mi_calc.

        Series too short for a single sample are skipped with a warning.
        """
        pasts, nexts = [], []
        for i, series in enumerate(self._observations):
            past, next_values = history_embedding(series, k, tau)
            if len(past) == 0:
                self.logger.warning(
                    f"Series {i} ({len(series)} samples) too short for k={k}, tau={tau}; skipped"
                )
                continue
            pasts.append(past)
            nexts.append(next_values)

        if not pasts:
            raise StateError(f"No observations usable with embedding k={k}, tau={tau}")

        mi_calc.initialise(k, 1)
        mi_calc.set_observations(np.vstack(pasts), np.vstack(nexts))

    # Calculations

    def compute_average_local_of_observations(self) -> float:
        self._check_finalised()
        self.last_average = self._mi_calc.compute_average_local_of_observations()
        return self.last_average

    def compute_local_of_previous_observations(self) -> np.ndarray:
        """
        Local AIS for the supplied observations.

        With a single series the result is aligned to it: the first
        (k-1)*tau + 1 entries, which have no full past, are zero. With several
        series the locals are concatenated without padding.
        """
        self._check_finalised()
        locals_ = np.asarray(self._mi_calc.compute_local_of_previous_observations())
        self.last_average = float(np.mean(locals_))

        if len(self._observations) == 1:
            offset = (self.k - 1) * self.tau + 1
            return np.concatenate([np.zeros(offset), locals_])
        return locals_

    def compute_significance(self):
        """Analytic significance, when the wrapped estimator can provide one."""
        self._check_finalised()
        compute = getattr(self._mi_calc, "compute_significance", None)
        if compute is None:
            raise ConfigurationError(
                f"{type(self._mi_calc).__name__} has no analytic null distribution"
            )
        return compute()

    def get_num_observations(self) -> int:
        self._check_finalised()
        return self._mi_calc.get_num_observations()

    def get_last_average(self) -> float:
        return self.last_average

    def _check_finalised(self):
        if not self._finalised:
            raise StateError("Observations have not been finalised")
