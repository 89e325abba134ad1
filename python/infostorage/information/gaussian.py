"""
Gaussian Mutual Information Estimator

Closed-form MI between two multivariates under a linear-Gaussian model.
All values are in nats.
"""

import logging
from typing import Optional

import numpy as np
from scipy import stats

from infostorage.config import INFOSTORAGE_CONFIG as cfg
from infostorage.errors import StateError
from infostorage.properties import format_value, parse_bool
from infostorage.stat_tests.analytic import ChiSquareMeasurementDistribution

logger = logging.getLogger(__name__)


class MutualInfoCalculatorGaussian:
    """
    MI estimator assuming jointly Gaussian source and destination.

    Notes
    -----
    I(X; Y) = 0.5 * log( |Σx| |Σy| / |Σxy| )

    With BIAS_CORRECTION on, the mean of the analytic null distribution,
    dx * dy / (2N), is subtracted from the average. This is what stops
    higher-dimensional pasts from looking better purely from finite-sample
    inflation.

    NORMALISE is accepted and reported back for compatibility with the other
    estimators but has no effect: the Gaussian MI is invariant to rescaling
    either variable.
    """

    PROP_BIAS_CORRECTION = "BIAS_CORRECTION"
    PROP_NORMALISE = "NORMALISE"

    def __init__(self):
        self.bias_correction = False
        self.normalise = True
        self.initialise()

    def initialise(self, source_dimensions: int = 1, dest_dimensions: int = 1):
        self.source_dimensions = source_dimensions
        self.dest_dimensions = dest_dimensions
        self._source: Optional[np.ndarray] = None
        self._dest: Optional[np.ndarray] = None
        self._mean: Optional[np.ndarray] = None
        self._covariance: Optional[np.ndarray] = None
        self.last_average = np.nan

    def set_property(self, name: str, value):
        key = name.upper()
        if key == self.PROP_BIAS_CORRECTION:
            self.bias_correction = parse_bool(name, value)
        elif key == self.PROP_NORMALISE:
            self.normalise = parse_bool(name, value)
        else:
            logger.debug(f"Ignoring unknown property {name}={value!r}")

    def get_property(self, name: str) -> Optional[str]:
        key = name.upper()
        if key == self.PROP_BIAS_CORRECTION:
            return format_value(self.bias_correction)
        if key == self.PROP_NORMALISE:
            return format_value(self.normalise)
        return None

    def set_observations(self, source: np.ndarray, dest: np.ndarray):
        """Supply paired samples (rows) and compute the joint covariance."""
        source = _as_columns(source)
        dest = _as_columns(dest)

        if source.shape[0] != dest.shape[0]:
            raise ValueError(
                f"Source and destination lengths differ: {source.shape[0]} vs {dest.shape[0]}"
            )
        if source.shape[1] != self.source_dimensions or dest.shape[1] != self.dest_dimensions:
            raise ValueError(
                f"Expected dimensions ({self.source_dimensions}, {self.dest_dimensions}), "
                f"got ({source.shape[1]}, {dest.shape[1]})"
            )
        if source.shape[0] < cfg.min_samples.gaussian_mi:
            raise StateError(
                f"Need at least {cfg.min_samples.gaussian_mi} observations, got {source.shape[0]}"
            )

        joint = np.hstack([source, dest])
        self._source = source
        self._dest = dest
        self._mean = joint.mean(axis=0)
        self._covariance = np.atleast_2d(np.cov(joint, rowvar=False))

    def get_num_observations(self) -> int:
        self._check_observations()
        return self._source.shape[0]

    def compute_average_local_of_observations(self) -> float:
        mi = self._raw_mutual_information()
        if self.bias_correction:
            mi -= self._null_distribution(mi).mean_of_null
        self.last_average = float(mi)
        return self.last_average

    def compute_local_of_previous_observations(self) -> np.ndarray:
        """
        Local MI log[p(x, y) / (p(x) p(y))] for every supplied sample.

        Locals are not bias corrected.
        """
        self._check_observations()
        dx = self.source_dimensions
        cov = self._covariance
        joint = np.hstack([self._source, self._dest])

        log_joint = stats.multivariate_normal.logpdf(joint, self._mean, cov)
        log_source = stats.multivariate_normal.logpdf(
            self._source, self._mean[:dx], cov[:dx, :dx])
        log_dest = stats.multivariate_normal.logpdf(
            self._dest, self._mean[dx:], cov[dx:, dx:])

        locals_ = np.atleast_1d(log_joint - log_source - log_dest)
        self.last_average = float(np.mean(locals_))
        return locals_

    def compute_significance(self) -> ChiSquareMeasurementDistribution:
        """Analytic chi-square significance of the (uncorrected) MI."""
        return self._null_distribution(self._raw_mutual_information())

    def _raw_mutual_information(self) -> float:
        self._check_observations()
        dx = self.source_dimensions
        cov = self._covariance
        return 0.5 * (_log_det(cov[:dx, :dx]) + _log_det(cov[dx:, dx:]) - _log_det(cov))

    def _null_distribution(self, mi: float) -> ChiSquareMeasurementDistribution:
        return ChiSquareMeasurementDistribution(
            actual_value=float(mi),
            num_observations=self._source.shape[0],
            degrees_of_freedom=self.source_dimensions * self.dest_dimensions,
        )

    def _check_observations(self):
        if self._covariance is None:
            raise StateError("Observations have not been supplied to the MI calculator")


def _as_columns(data: np.ndarray) -> np.ndarray:
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    return data


def _log_det(cov: np.ndarray) -> float:
    """Log-determinant via Cholesky; raises LinAlgError if not positive definite."""
    chol = np.linalg.cholesky(cov)
    return 2.0 * float(np.sum(np.log(np.diag(chol))))
