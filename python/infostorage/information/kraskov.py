"""
Kraskov-Stoegbauer-Grassberger (KSG) Mutual Information Estimator

Nearest-neighbour MI (algorithm 1) and nearest-neighbour prediction
errors, the latter used by the Ragwitz embedding criterion.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy.spatial import KDTree
from scipy.special import digamma

from infostorage.config import INFOSTORAGE_CONFIG as cfg
from infostorage.errors import StateError
from infostorage.properties import format_value, parse_bool, parse_float, parse_int

logger = logging.getLogger(__name__)


class MutualInfoCalculatorKraskov:
    """
    KSG estimator (algorithm 1) with max-norm neighbour searches.

    Properties
    ----------
    k : int
        Nearest neighbours (default 4)
    NORMALISE : bool
        Rescale every column to zero mean, unit variance (default true)
    NOISE_LEVEL_TO_ADD : float
        Std of Gaussian noise added to break distance ties (default 1e-8)
    NOISE_SEED : int
        Seed for that noise, so repeated runs agree (default 0)
    DYN_CORR_EXCL : int
        Theiler window; samples within this many steps are never neighbours
    """

    PROP_K = "k"
    PROP_NORMALISE = "NORMALISE"
    PROP_ADD_NOISE = "NOISE_LEVEL_TO_ADD"
    PROP_NOISE_SEED = "NOISE_SEED"
    PROP_DYN_CORR_EXCL = "DYN_CORR_EXCL"

    def __init__(self):
        self.k = cfg.kraskov.k
        self.normalise = True
        self.noise_level = cfg.kraskov.noise_level
        self.noise_seed = cfg.kraskov.noise_seed
        self.dynamic_correlation_exclusion = cfg.kraskov.dynamic_correlation_exclusion
        self.initialise()

    def initialise(self, source_dimensions: int = 1, dest_dimensions: int = 1):
        self.source_dimensions = source_dimensions
        self.dest_dimensions = dest_dimensions
        self._source: Optional[np.ndarray] = None
        self._dest: Optional[np.ndarray] = None
        self.last_average = np.nan

    def set_property(self, name: str, value):
        key = name.upper()
        if key == self.PROP_K.upper():
            self.k = parse_int(name, value, minimum=1)
        elif key == self.PROP_NORMALISE:
            self.normalise = parse_bool(name, value)
        elif key == self.PROP_ADD_NOISE:
            self.noise_level = parse_float(name, value)
        elif key == self.PROP_NOISE_SEED:
            self.noise_seed = parse_int(name, value)
        elif key == self.PROP_DYN_CORR_EXCL:
            self.dynamic_correlation_exclusion = parse_int(name, value, minimum=0)
        else:
            logger.debug(f"Ignoring unknown property {name}={value!r}")

    def get_property(self, name: str) -> Optional[str]:
        key = name.upper()
        values = {
            self.PROP_K.upper(): self.k,
            self.PROP_NORMALISE: self.normalise,
            self.PROP_ADD_NOISE: self.noise_level,
            self.PROP_NOISE_SEED: self.noise_seed,
            self.PROP_DYN_CORR_EXCL: self.dynamic_correlation_exclusion,
        }
        if key not in values:
            return None
        return format_value(values[key])

    def set_observations(self, source: np.ndarray, dest: np.ndarray):
        source = _as_columns(source)
        dest = _as_columns(dest)

        if source.shape[0] != dest.shape[0]:
            raise ValueError(
                f"Source and destination lengths differ: {source.shape[0]} vs {dest.shape[0]}"
            )
        if source.shape[0] < cfg.min_samples.kraskov:
            raise StateError(
                f"Need at least {cfg.min_samples.kraskov} observations, got {source.shape[0]}"
            )

        if self.normalise:
            source = _normalise(source)
            dest = _normalise(dest)

        if self.noise_level > 0:
            rng = np.random.default_rng(self.noise_seed)
            source = source + self.noise_level * rng.standard_normal(source.shape)
            dest = dest + self.noise_level * rng.standard_normal(dest.shape)

        self._source = source
        self._dest = dest

    def get_num_observations(self) -> int:
        self._check_observations()
        return self._source.shape[0]

    def compute_average_local_of_observations(self) -> float:
        self.last_average = float(np.mean(self.compute_local_of_previous_observations()))
        return self.last_average

    def compute_local_of_previous_observations(self) -> np.ndarray:
        """
        Local KSG values psi(k) + psi(N) - psi(n_x + 1) - psi(n_y + 1).

        n_x, n_y count marginal points strictly closer than the distance
        to the k-th joint neighbour.
        """
        self._check_observations()
        n = self._source.shape[0]
        joint = np.hstack([self._source, self._dest])

        distances, _ = self._neighbours(KDTree(joint), joint, self.k)
        eps = distances[:, -1]

        n_x = self._count_within(self._source, eps)
        n_y = self._count_within(self._dest, eps)

        return digamma(self.k) + digamma(n) - digamma(n_x + 1) - digamma(n_y + 1)

    def compute_prediction_errors_from_observations(
        self,
        n_neighbours: Optional[int] = None,
    ) -> np.ndarray:
        """
        Sum of squared one-step prediction errors, per destination dimension.

        Each destination value is predicted as the mean destination of the
        n_neighbours nearest source points (the sample itself and its Theiler
        window excluded). Defaults to the estimator's k.

        Returns
        -------
        np.ndarray
            Shape (dest_dimensions,)
        """
        self._check_observations()
        if n_neighbours is None:
            n_neighbours = self.k

        _, indices = self._neighbours(KDTree(self._source), self._source, n_neighbours)
        predictions = self._dest[indices].mean(axis=1)

        return np.sum((self._dest - predictions) ** 2, axis=0)

    def _neighbours(
        self,
        tree: KDTree,
        points: np.ndarray,
        m: int,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """m nearest (max-norm) neighbours of every point, outside the Theiler window."""
        n = points.shape[0]
        window = self.dynamic_correlation_exclusion
        n_query = min(n, m + 2 * window + 1)

        distances, indices = tree.query(points, k=n_query, p=np.inf)
        distances = distances.reshape(n, -1)
        indices = indices.reshape(n, -1)

        valid = np.abs(indices - np.arange(n)[:, None]) > window
        order = np.argsort(~valid, axis=1, kind="stable")[:, :m]

        if order.shape[1] < m or not np.all(np.take_along_axis(valid, order, axis=1)):
            raise StateError(
                f"Not enough samples ({n}) for {m} neighbours "
                f"with dynamic correlation exclusion {window}"
            )

        return (np.take_along_axis(distances, order, axis=1),
                np.take_along_axis(indices, order, axis=1))

    def _count_within(self, points: np.ndarray, radii: np.ndarray) -> np.ndarray:
        """Points strictly inside each radius, excluding self and the Theiler window."""
        strict = np.nextafter(radii, 0)
        counts = KDTree(points).query_ball_point(
            points, r=strict, p=np.inf, return_length=True
        ).astype(np.int64)

        n = points.shape[0]
        window = self.dynamic_correlation_exclusion
        for offset in range(-window, window + 1):
            rows = np.arange(max(0, -offset), min(n, n - offset))
            if len(rows) == 0:
                continue
            gap = np.max(np.abs(points[rows] - points[rows + offset]), axis=1)
            counts[rows] -= (gap <= strict[rows]).astype(np.int64)

        return counts

    def _check_observations(self):
        if self._source is None:
            raise StateError("Observations have not been supplied to the MI calculator")


def _as_columns(data: np.ndarray) -> np.ndarray:
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    return data


def _normalise(data: np.ndarray) -> np.ndarray:
    std = data.std(axis=0, ddof=1)
    std[std == 0] = 1.0
    return (data - data.mean(axis=0)) / std
