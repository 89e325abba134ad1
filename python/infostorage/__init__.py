"""
infostorage — active information storage under a Gaussian model.

Estimates how much of a process's next value is predictable from its own
embedded past, and chooses that embedding (length k, delay tau)
automatically by the Ragwitz or max bias-corrected AIS criterion.

Usage:
    from infostorage import ActiveInfoStorageCalculatorGaussian

    calc = ActiveInfoStorageCalculatorGaussian()
    calc.set_property("AUTO_EMBED_METHOD", "MAX_CORR_AIS")
    calc.set_property("AUTO_EMBED_K_SEARCH_MAX", 5)
    calc.initialise()
    calc.set_observations(series)
    ais = calc.compute_average_local_of_observations()

    # Or import by category:
    from infostorage.embedding.delay import history_embedding
    from infostorage.embedding.selection import ragwitz_search
    from infostorage.stat_tests.analytic import ChiSquareMeasurementDistribution
"""
__version__ = "0.1.0"

from infostorage.errors import (
    InfoStorageError,
    ConfigurationError,
    ParseError,
    CandidateEvaluationError,
    StateError,
)
from infostorage.embedding.selection import AutoEmbedMethod, Candidate
from infostorage.information.gaussian import MutualInfoCalculatorGaussian
from infostorage.information.kraskov import MutualInfoCalculatorKraskov
from infostorage.information.storage import ActiveInfoStorageCalculatorViaMutualInfo
from infostorage.information.storage_gaussian import ActiveInfoStorageCalculatorGaussian
from infostorage.stat_tests.analytic import ChiSquareMeasurementDistribution

# Subpackages
from infostorage import embedding  # noqa: F401
from infostorage import information  # noqa: F401
from infostorage import stat_tests  # noqa: F401

__all__ = [
    # Calculators
    "ActiveInfoStorageCalculatorGaussian",
    "ActiveInfoStorageCalculatorViaMutualInfo",
    "MutualInfoCalculatorGaussian",
    "MutualInfoCalculatorKraskov",
    # Embedding search
    "AutoEmbedMethod",
    "Candidate",
    # Significance
    "ChiSquareMeasurementDistribution",
    # Errors
    "InfoStorageError",
    "ConfigurationError",
    "ParseError",
    "CandidateEvaluationError",
    "StateError",
    # Subpackages
    "embedding",
    "information",
    "stat_tests",
]
