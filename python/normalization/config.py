"""
Normalization Configuration

Centralized defaults for statistics and the slice mapper.
Avoids hardcoded magic numbers scattered across modules.

Usage:
    from normalization.config import NORMALIZATION_CONFIG as cfg

    sigma = np.std(x, ddof=cfg.statistics.ddof)
    if n_slices < cfg.mapping.min_parallel_slices:
        ...
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from normalization._config import NUM_THREADS, USE_THREADS


@dataclass(frozen=True)
class StatisticsConfig:
    """Configuration for the statistic reducers."""

    # Sample standard deviation (n - 1), so z-scores round-trip exactly
    ddof: int = 1

    # Percentiles bounding the interquartile range
    robust_quantiles: Tuple[float, float] = (25.0, 75.0)

    # IQR / 1.35 ~ std for normally distributed data
    robust_scale_divisor: float = 1.35


@dataclass(frozen=True)
class MappingConfig:
    """Configuration for the slice mapper."""

    use_threads: bool = USE_THREADS
    max_workers: Optional[int] = NUM_THREADS   # None = executor default

    # Below this many slices the loop runs serially
    min_parallel_slices: int = 2

    # np.errstate action while applying a function to a slice
    float_errors: str = "ignore"


@dataclass(frozen=True)
class NormalizationConfig:
    """Master configuration."""

    statistics: StatisticsConfig = StatisticsConfig()
    mapping: MappingConfig = MappingConfig()


# Global singleton instance
NORMALIZATION_CONFIG = NormalizationConfig()
