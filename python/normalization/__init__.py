"""
normalization — reversible per-axis normalization of n-dimensional arrays.

Usage:
    from normalization import fit, normalize, denormalize, ZScore

    T = fit(ZScore, X, dims=(0,))     # one mean/std per column
    Y = normalize(X, T)
    X2 = denormalize(Y, T)

    # Or by name, with NaN-tolerant parameter estimation:
    from normalization import nan_safe
    T = nan_safe("RobustZScore", dims=(0,))
    Y = normalize(X, T)               # fits T on first use

    # Building blocks:
    from normalization.mapping import map_dims, map_slices
    from normalization.statistics import robust_scale, mixed_scale
"""
__version__ = "0.1.0"

from normalization.definitions import (
    DEFINITIONS,
    NormalizationDefinition,
    available_normalizations,
    get_definition,
    ZScore,
    Sigmoid,
    MinMax,
    Center,
    RobustCenter,
    RobustZScore,
    RobustSigmoid,
    MixedZScore,
    MixedSigmoid,
)
from normalization.errors import (
    NormalizationError,
    InconsistentParameterDimensions,
    ShapeMismatch,
    UnfitNormalizationError,
    UnknownNormalization,
    AxisOutOfRange,
)
from normalization.mapping import map_dims, map_slices
from normalization.transform import (
    Normalization,
    fit,
    fit_inplace,
    fit_normalize,
    normalize,
    normalize_inplace,
    denormalize,
    denormalize_inplace,
    nan_safe,
    nan_safe_inplace,
)

__all__ = [
    # Families
    "DEFINITIONS",
    "NormalizationDefinition",
    "available_normalizations",
    "get_definition",
    "ZScore",
    "Sigmoid",
    "MinMax",
    "Center",
    "RobustCenter",
    "RobustZScore",
    "RobustSigmoid",
    "MixedZScore",
    "MixedSigmoid",
    # Instances and operations
    "Normalization",
    "fit",
    "fit_inplace",
    "fit_normalize",
    "normalize",
    "normalize_inplace",
    "denormalize",
    "denormalize_inplace",
    "nan_safe",
    "nan_safe_inplace",
    # Slice mapping
    "map_dims",
    "map_slices",
    # Errors
    "NormalizationError",
    "InconsistentParameterDimensions",
    "ShapeMismatch",
    "UnfitNormalizationError",
    "UnknownNormalization",
    "AxisOutOfRange",
]
