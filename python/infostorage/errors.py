"""
Infostorage error hierarchy.

ConfigurationError and ParseError are raised at set-time or when a search
starts. CandidateEvaluationError wraps any failure while scoring a single
(k, tau) candidate. StateError marks calls made before observations are
finalised.
"""

from typing import Any


class InfoStorageError(Exception):
    """Base class for all errors raised by infostorage."""


class ConfigurationError(InfoStorageError, ValueError):
    """Invalid property name, value or estimator capability."""


class ParseError(ConfigurationError):
    """A property value could not be parsed into the type it requires."""

    def __init__(self, name: str, value: Any, reason: str = "expected a positive integer"):
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {value!r} for property {name}: {reason}")


class CandidateEvaluationError(InfoStorageError, RuntimeError):
    """Scoring an embedding candidate failed; the whole search is aborted."""

    def __init__(self, k: int, tau: int):
        self.k = k
        self.tau = tau
        super().__init__(
            f"Exception encountered in attempting auto-embedding, "
            f"evaluating candidates k={k}, tau={tau}"
        )


class StateError(InfoStorageError, RuntimeError):
    """Operation requested before the calculator holds finalised observations."""
