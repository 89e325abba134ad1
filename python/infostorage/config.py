"""
Infostorage Configuration

Centralized defaults for the estimators and the embedding search.
Avoids hardcoded magic numbers scattered across modules.

Usage:
    from infostorage.config import INFOSTORAGE_CONFIG as cfg

    k_max = cfg.auto_embed.k_search_max
    if n < cfg.min_samples.gaussian_mi:
        raise StateError(...)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AutoEmbedConfig:
    """Defaults for automatic selection of the embedding (k, tau)."""

    # Search bounds (inclusive)
    k_search_max: int = 1
    tau_search_max: int = 1

    # Conservative floor returned when no candidate improves the sentinel
    default_k: int = 1
    default_tau: int = 1


@dataclass(frozen=True)
class KraskovConfig:
    """Defaults for the KSG nearest-neighbour estimator."""

    # Nearest neighbours for MI and Ragwitz prediction
    k: int = 4

    # Noise added to break ties in neighbour distances
    noise_level: float = 1e-8
    noise_seed: int = 0

    # Theiler window (samples either side excluded from neighbour search)
    dynamic_correlation_exclusion: int = 0


@dataclass(frozen=True)
class MinSamplesConfig:
    """Minimum sample requirements for the estimators."""

    gaussian_mi: int = 2          # sample covariance needs N - 1 > 0
    kraskov: int = 2              # at least one neighbour


@dataclass(frozen=True)
class InfoStorageConfig:
    """Master configuration."""

    auto_embed: AutoEmbedConfig = AutoEmbedConfig()
    kraskov: KraskovConfig = KraskovConfig()
    min_samples: MinSamplesConfig = MinSamplesConfig()


# Global singleton instance
INFOSTORAGE_CONFIG = InfoStorageConfig()
