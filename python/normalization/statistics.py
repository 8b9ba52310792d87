"""
Statistic Reducers

Scalar statistics computed over one slice of an array. They are the
parameter estimators of the normalization families.

All reducers propagate NaN. Wrap them with ``nan_safe_statistic`` to ignore
missing values instead.
"""

import numpy as np
from scipy import stats as scipy_stats
from typing import Callable

from normalization.config import NORMALIZATION_CONFIG as cfg
from normalization.mapping import Dims, map_slices

Statistic = Callable[[np.ndarray], float]


def mean(x: np.ndarray) -> float:
    """Arithmetic mean of every element."""
    return float(np.mean(x))


def std(x: np.ndarray) -> float:
    """
    Standard deviation of every element.

    Notes
    -----
    std = sqrt((1/(n-ddof)) * sum((x_i - mean)^2))

    ddof comes from the configuration (1, the sample estimator).
    """
    return float(np.std(x, ddof=cfg.statistics.ddof))


def median(x: np.ndarray) -> float:
    """Median of every element."""
    return float(np.median(x))


def minimum(x: np.ndarray) -> float:
    # np.min refuses empty input; match mean and std
    return float(np.min(x)) if np.size(x) else np.nan


def maximum(x: np.ndarray) -> float:
    return float(np.max(x)) if np.size(x) else np.nan


def robust_scale(x: np.ndarray) -> float:
    """
    Interquartile range rescaled to match the standard deviation.

    Parameters
    ----------
    x : np.ndarray
        Input slice (flattened)

    Returns
    -------
    float
        (Q3 - Q1) / 1.35

    Notes
    -----
    For a normal distribution IQR ~ 1.349 * sigma, so the result is close
    to ``std`` on Gaussian data while ignoring the tails.
    Quantiles use linear interpolation (numpy's default).
    """
    s = cfg.statistics
    if np.size(x) == 0:
        return np.nan
    iqr = scipy_stats.iqr(np.ravel(x), rng=s.robust_quantiles)
    return float(iqr / s.robust_scale_divisor)


def mixed_center(x: np.ndarray) -> float:
    """Median, or the mean when the interquartile range is zero."""
    return mean(x) if robust_scale(x) == 0 else median(x)


def mixed_scale(x: np.ndarray) -> float:
    """Robust scale, or the standard deviation when it is zero."""
    sigma = robust_scale(x)
    return std(x) if sigma == 0 else sigma


class NanSafe:
    """
    Statistic that drops NaN entries before reducing.

    An all-NaN (or empty) slice yields NaN.
    """

    def __init__(self, statistic: Statistic):
        self.statistic = statistic
        self.__name__ = f"nansafe_{getattr(statistic, '__name__', 'statistic')}"

    def __call__(self, x: np.ndarray) -> float:
        x = np.ravel(x)
        x = x[~np.isnan(x)]
        if x.size == 0:
            return np.nan
        return self.statistic(x)

    def __eq__(self, other):
        return isinstance(other, NanSafe) and self.statistic == other.statistic

    def __hash__(self):
        return hash((NanSafe, self.statistic))

    def __repr__(self):
        return f"NanSafe({getattr(self.statistic, '__name__', self.statistic)!s})"


def nan_safe_statistic(statistic: Statistic) -> NanSafe:
    """Wrap ``statistic`` to ignore NaN. Wrapping twice is a no-op."""
    if isinstance(statistic, NanSafe):
        return statistic
    return NanSafe(statistic)


def reduce(statistic: Statistic, x: np.ndarray, dims: Dims = None) -> np.ndarray:
    """
    Compute ``statistic`` over every slice of ``x`` spanning ``dims``.

    Parameters
    ----------
    statistic : callable
        One of the reducers above (or any ``array -> scalar`` function)
    x : np.ndarray
        Input array
    dims : sequence of int, optional
        Axes to reduce over (None = all)

    Returns
    -------
    np.ndarray
        Statistic with size 1 on the reduced axes

    Examples
    --------
    >>> reduce(mean, np.arange(6.0).reshape(2, 3), dims=(0,))
    array([[1.5, 2.5, 3.5]])
    """
    return map_slices(statistic, x, dims)
