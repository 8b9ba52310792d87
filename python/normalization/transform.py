"""
Fit / Normalize / Denormalize

Binds a normalization family to data. Parameters are estimated over the
axes in ``dims`` (one set per slice spanning them) and broadcast back when
the forward or inverse transform is applied.

    >>> T = fit(ZScore, X, dims=(0,))      # per-column mean and std
    >>> Y = normalize(X, T)
    >>> np.allclose(denormalize(Y, T), X)
    True

Functions ending in ``_inplace`` mutate their first argument; the others
work on a copy.
"""

import copy
import logging
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from normalization.definitions import NormalizationDefinition, get_definition
from normalization.errors import (
    AxisOutOfRange,
    InconsistentParameterDimensions,
    NormalizationError,
    UnfitNormalizationError,
)
from normalization.mapping import Dims, map_dims, map_slices, normalize_dims
from normalization.statistics import nan_safe_statistic

logger = logging.getLogger(__name__)


class Normalization:
    """
    A normalization family bound to axes and, once fit, to parameters.

    Parameters
    ----------
    definition : NormalizationDefinition, str or Normalization
        Family (or registry name). Passing an existing instance copies its
        statistics and transforms as defaults.
    dims : sequence of int, optional
        Axes the parameters are estimated over. None = all axes.
    params : tuple of np.ndarray, optional
        Precomputed parameters, one array per statistic, all the same shape.
    statistics, forward, inverse : optional
        Overrides for the family's statistics and transforms.

    Raises
    ------
    InconsistentParameterDimensions
        If ``params`` has the wrong length, its arrays differ in shape, or
        scalar parameters are combined with explicit ``dims``.
    AxisOutOfRange
        If ``dims`` holds non-integers or duplicates.
    """

    def __init__(
        self,
        definition: Union[NormalizationDefinition, str, "Normalization"],
        dims: Dims = None,
        params: Optional[Sequence[np.ndarray]] = None,
        *,
        statistics: Optional[Sequence[Callable]] = None,
        forward: Optional[Callable] = None,
        inverse: Optional[Callable] = None
    ):
        if isinstance(definition, Normalization):
            base = definition
            definition = base.definition
        else:
            definition = get_definition(definition)
            base = definition

        self.definition = definition
        self.statistics = tuple(statistics) if statistics is not None else tuple(base.statistics)
        self.forward = forward if forward is not None else base.forward
        self.inverse = inverse if inverse is not None else base.inverse
        self.dims = _check_dims(dims)
        self.params = _check_params(params, self.arity, self.dims)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def arity(self) -> int:
        return len(self.statistics)

    @property
    def is_fit(self) -> bool:
        return self.params is not None

    def copy(self) -> "Normalization":
        # Definitions are registry singletons; share rather than copy them
        return copy.deepcopy(self, {id(self.definition): self.definition})

    def __repr__(self):
        state = "fit" if self.is_fit else "unfit"
        return f"Normalization({self.name}, dims={self.dims}, {state})"


Target = Union[Normalization, NormalizationDefinition, str]


def _check_dims(dims: Dims) -> Optional[Tuple[int, ...]]:
    if dims is None:
        return None
    if isinstance(dims, (int, np.integer)):
        dims = (dims,)
    dims = tuple(dims)
    for axis in dims:
        if isinstance(axis, bool) or not isinstance(axis, (int, np.integer)):
            raise AxisOutOfRange(f"Axis must be an integer, got {axis!r}")
    if len(set(dims)) != len(dims):
        raise AxisOutOfRange(f"Duplicate axes in dims: {dims}")
    return tuple(int(a) for a in dims)


def _check_params(params, arity: int, dims) -> Optional[Tuple[np.ndarray, ...]]:
    if params is None:
        return None
    params = tuple(np.asarray(p, dtype=np.float64) for p in params)
    if len(params) != arity:
        raise InconsistentParameterDimensions(
            f"Expected {arity} parameter arrays, got {len(params)}"
        )
    shapes = {p.shape for p in params}
    if len(shapes) > 1:
        raise InconsistentParameterDimensions(
            f"Parameter arrays have different shapes: {[p.shape for p in params]}"
        )
    if params and params[0].ndim == 0 and dims is not None:
        raise InconsistentParameterDimensions(
            f"Scalar parameters only apply over all axes, not dims {dims}"
        )
    return params


def _operands(instance: Normalization, x: np.ndarray) -> Tuple[np.ndarray, ...]:
    # Scalar parameters broadcast over every axis
    return tuple(p.reshape((1,) * x.ndim) if p.ndim == 0 else p
                 for p in instance.params)


def _check_float_array(x) -> None:
    if not isinstance(x, np.ndarray) or not np.issubdtype(x.dtype, np.floating):
        raise TypeError(
            "In-place (de)normalization needs a floating-point np.ndarray, "
            f"got {type(x).__name__}"
            + (f" of dtype {x.dtype}" if isinstance(x, np.ndarray) else "")
        )


def fit_inplace(instance: Normalization, x: np.ndarray, dims: Dims = None) -> Normalization:
    """
    Estimate the parameters of ``instance`` from ``x``.

    Parameters
    ----------
    instance : Normalization
        Instance to fit; its parameters are replaced.
    x : np.ndarray
        Data (not modified)
    dims : sequence of int, optional
        Replaces the instance's axes when given.

    Returns
    -------
    Normalization
        ``instance``
    """
    if not isinstance(instance, Normalization):
        raise TypeError(f"Expected a Normalization, got {type(instance).__name__}")

    x = np.asarray(x)
    dims = _check_dims(dims) if dims is not None else instance.dims
    resolved = normalize_dims(dims, x.ndim)

    params = tuple(map_slices(s, x, resolved) for s in instance.statistics)

    instance.dims = None if dims is None else resolved
    instance.params = params
    logger.debug("Fit %s over dims %s: parameter shape %s",
                 instance.name, resolved, params[0].shape if params else ())
    return instance


def fit(target: Target, x: np.ndarray, dims: Dims = None) -> Normalization:
    """
    Fit a normalization to ``x`` without touching ``target``.

    A family (or its name) yields a fresh instance; an instance is copied
    first.
    """
    if isinstance(target, Normalization):
        return fit_inplace(target.copy(), x, dims)
    return fit_inplace(Normalization(target, dims), x)


def _prepare(x: np.ndarray, target: Target, dims: Dims) -> Normalization:
    if not isinstance(target, Normalization):
        return fit(target, x, dims)

    if not target.is_fit:
        return fit_inplace(target, x, dims)

    if dims is not None and normalize_dims(dims, x.ndim) != normalize_dims(target.dims, x.ndim):
        raise NormalizationError(
            f"{target.name} is already fit over dims {target.dims}; "
            f"refit it to use dims {dims}"
        )
    return target


def _normalize_inplace(x: np.ndarray, target: Target, dims: Dims) -> Normalization:
    _check_float_array(x)
    instance = _prepare(x, target, dims)
    map_dims(instance.forward, x, *_operands(instance, x), dims=instance.dims)
    return instance


def normalize_inplace(x: np.ndarray, target: Target, dims: Dims = None) -> np.ndarray:
    """
    Normalize ``x`` in place.

    Parameters
    ----------
    x : np.ndarray
        Floating-point data, overwritten
    target : Normalization, NormalizationDefinition or str
        An unfit instance is fit to ``x`` first (and keeps the parameters).
        A family is fit to ``x`` on a throwaway instance.
    dims : sequence of int, optional
        Axes to fit over when fitting happens here

    Returns
    -------
    np.ndarray
        ``x``
    """
    _normalize_inplace(x, target, dims)
    return x


def normalize(x: np.ndarray, target: Target, dims: Dims = None) -> np.ndarray:
    """Normalized float64 copy of ``x``. See ``normalize_inplace``."""
    y = np.array(x, dtype=np.float64)
    return normalize_inplace(y, target, dims)


def fit_normalize(x: np.ndarray, target: Target,
                  dims: Dims = None) -> Tuple[np.ndarray, Normalization]:
    """
    Normalize a copy of ``x`` and return the instance that did it.

    Returns
    -------
    normalized : np.ndarray
    instance : Normalization
        Fitted instance, usable with ``denormalize``
    """
    y = np.array(x, dtype=np.float64)
    instance = _normalize_inplace(y, target, dims)
    return y, instance


def denormalize_inplace(x: np.ndarray, instance: Normalization) -> np.ndarray:
    """
    Undo a normalization in place.

    Never fits: the parameters must come from the original data.

    Raises
    ------
    UnfitNormalizationError
        If ``instance`` has no parameters (or is not an instance at all).
    """
    if not isinstance(instance, Normalization) or not instance.is_fit:
        raise UnfitNormalizationError("Cannot denormalize with an unfit normalization")
    _check_float_array(x)
    map_dims(instance.inverse, x, *_operands(instance, x), dims=instance.dims)
    return x


def denormalize(x: np.ndarray, instance: Normalization) -> np.ndarray:
    """Denormalized float64 copy of ``x``."""
    if not isinstance(instance, Normalization) or not instance.is_fit:
        raise UnfitNormalizationError("Cannot denormalize with an unfit normalization")
    y = np.array(x, dtype=np.float64)
    return denormalize_inplace(y, instance)


def nan_safe_inplace(instance: Normalization) -> Normalization:
    """Make the statistics of ``instance`` ignore NaN values."""
    instance.statistics = tuple(nan_safe_statistic(s) for s in instance.statistics)
    return instance


def nan_safe(target: Target, dims: Dims = None) -> Normalization:
    """
    NaN-safe copy of an instance, or a new NaN-safe instance of a family.

    Only parameter estimation ignores NaN; the transforms still carry NaN
    through elementwise.
    """
    if isinstance(target, Normalization):
        return nan_safe_inplace(target.copy())
    return nan_safe_inplace(Normalization(target, dims))
