"""
Analytic Null Distribution Primitives

Closed-form (non-resampled) significance for Gaussian information estimates.
"""

from dataclasses import dataclass

from scipy import stats


@dataclass(frozen=True)
class ChiSquareMeasurementDistribution:
    """
    Analytic null distribution of a Gaussian MI estimate.

    Parameters
    ----------
    actual_value : float
        Observed (uncorrected) MI, in nats
    num_observations : int
        Number of samples the estimate was computed from
    degrees_of_freedom : int
        dx * dy for the two multivariates

    Notes
    -----
    Under H0 (no relationship) 2 * N * MI ~ chi2(dx * dy)
    (Brillinger 2004; Geweke 1982). The p-value is the tail mass of
    observing a statistic at least as large as the one observed.
    """

    actual_value: float
    num_observations: int
    degrees_of_freedom: int

    @property
    def chi_square_statistic(self) -> float:
        return 2.0 * self.num_observations * self.actual_value

    @property
    def p_value(self) -> float:
        return float(stats.chi2.sf(self.chi_square_statistic, self.degrees_of_freedom))

    @property
    def mean_of_null(self) -> float:
        """Expected MI under H0, i.e. the finite-sample bias."""
        return self.degrees_of_freedom / (2.0 * self.num_observations)

    def compute_p_value(self, value: float) -> float:
        """Tail mass of the null distribution above an arbitrary MI value."""
        return float(stats.chi2.sf(2.0 * self.num_observations * value,
                                   self.degrees_of_freedom))
