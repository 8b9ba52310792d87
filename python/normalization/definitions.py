"""
Normalization Definitions

Registry of reversible normalization families. Each family pairs a forward
transform with its inverse and lists the statistics that estimate its
parameters, in the order the transforms take them.

    ZScore        (mean, std)          (x - mu) / sigma
    Sigmoid       (mean, std)          1 / (1 + exp(-(x - mu) / sigma))
    MinMax        (minimum, maximum)   (x - l) / (u - l)
    Center        (mean,)              x - mu
    RobustCenter  (median,)            x - median

ZScore and Sigmoid also come in ``Robust`` (median, robust_scale) and
``Mixed`` (mixed_center, mixed_scale) variants with the same transforms.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Mapping, Tuple

import numpy as np
from scipy import special

from normalization import statistics as st
from normalization.errors import UnknownNormalization


@dataclass(frozen=True)
class NormalizationDefinition:
    """Immutable template for one normalization family."""

    name: str
    statistics: Tuple[Callable[[np.ndarray], float], ...]
    forward: Callable[..., np.ndarray]
    inverse: Callable[..., np.ndarray]

    @property
    def arity(self) -> int:
        """Number of parameters (1 or 2)."""
        return len(self.statistics)

    def __repr__(self):
        names = ", ".join(getattr(s, "__name__", repr(s)) for s in self.statistics)
        return f"NormalizationDefinition({self.name}: {names})"


# Transforms. Parameters broadcast against x.

def _zscore(x, mu, sigma):
    return (x - mu) / sigma


def _zscore_inverse(y, mu, sigma):
    return y * sigma + mu


def _sigmoid(x, mu, sigma):
    return special.expit((x - mu) / sigma)


def _sigmoid_inverse(y, mu, sigma):
    # -sigma * log(1/y - 1) + mu
    return sigma * special.logit(y) + mu


def _minmax(x, lower, upper):
    return (x - lower) / (upper - lower)


def _minmax_inverse(y, lower, upper):
    return (upper - lower) * y + lower


def _center(x, mu):
    return x - mu


def _center_inverse(y, mu):
    return y + mu


# Two-parameter families that get Robust/Mixed variants
_VARIANT_FAMILIES = ("ZScore", "Sigmoid")

_ROBUST_STATISTICS = (st.median, st.robust_scale)
_MIXED_STATISTICS = (st.mixed_center, st.mixed_scale)


def _build_registry() -> Mapping[str, NormalizationDefinition]:
    base = [
        NormalizationDefinition("ZScore", (st.mean, st.std), _zscore, _zscore_inverse),
        NormalizationDefinition("Sigmoid", (st.mean, st.std), _sigmoid, _sigmoid_inverse),
        NormalizationDefinition("MinMax", (st.minimum, st.maximum), _minmax, _minmax_inverse),
        NormalizationDefinition("Center", (st.mean,), _center, _center_inverse),
        NormalizationDefinition("RobustCenter", (st.median,), _center, _center_inverse),
    ]
    registry = {d.name: d for d in base}

    for name in _VARIANT_FAMILIES:
        family = registry[name]
        for prefix, stats in (("Robust", _ROBUST_STATISTICS), ("Mixed", _MIXED_STATISTICS)):
            variant = NormalizationDefinition(
                prefix + name, stats, family.forward, family.inverse
            )
            registry[variant.name] = variant

    return MappingProxyType(registry)


DEFINITIONS = _build_registry()

_BY_LOWER = MappingProxyType({name.lower(): d for name, d in DEFINITIONS.items()})


def available_normalizations() -> List[str]:
    """Names of every registered family, sorted."""
    return sorted(DEFINITIONS)


def get_definition(name: str) -> NormalizationDefinition:
    """
    Look up a normalization family by name (case-insensitive).

    Raises
    ------
    UnknownNormalization
        If no family has that name.
    """
    if isinstance(name, NormalizationDefinition):
        return name
    try:
        return _BY_LOWER[str(name).lower()]
    except KeyError:
        raise UnknownNormalization(
            f"Unknown normalization: {name!r}. "
            f"Available: {', '.join(available_normalizations())}"
        ) from None


ZScore = DEFINITIONS["ZScore"]
Sigmoid = DEFINITIONS["Sigmoid"]
MinMax = DEFINITIONS["MinMax"]
Center = DEFINITIONS["Center"]
RobustCenter = DEFINITIONS["RobustCenter"]
RobustZScore = DEFINITIONS["RobustZScore"]
RobustSigmoid = DEFINITIONS["RobustSigmoid"]
MixedZScore = DEFINITIONS["MixedZScore"]
MixedSigmoid = DEFINITIONS["MixedSigmoid"]
