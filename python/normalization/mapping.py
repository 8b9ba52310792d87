"""
Slice Mapping Primitives

Apply a function independently to every slice of an n-dimensional array.

A slice spans every axis in ``dims`` and holds a single position on each of
the remaining axes. Slices are dispatched to a thread pool; each one writes a
disjoint region of the output, so no locking is needed.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from itertools import product
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from normalization.config import NORMALIZATION_CONFIG as cfg
from normalization.errors import AxisOutOfRange, ShapeMismatch

logger = logging.getLogger(__name__)

Dims = Optional[Sequence[int]]


def normalize_dims(dims: Dims, ndim: int) -> Tuple[int, ...]:
    """
    Resolve ``dims`` against an array rank.

    Parameters
    ----------
    dims : sequence of int or int, optional
        Axes to resolve; negative values count from the end.
        None means every axis.
    ndim : int
        Array rank

    Returns
    -------
    tuple of int
        Sorted, non-negative axes

    Raises
    ------
    AxisOutOfRange
        If an entry is not an integer, is outside ``[-ndim, ndim)``,
        or appears twice.
    """
    if dims is None:
        return tuple(range(ndim))
    if isinstance(dims, (int, np.integer)):
        dims = (dims,)

    resolved = []
    for axis in dims:
        if isinstance(axis, bool) or not isinstance(axis, (int, np.integer)):
            raise AxisOutOfRange(f"Axis must be an integer, got {axis!r}")
        if not -ndim <= axis < ndim:
            raise AxisOutOfRange(
                f"Axis {axis} is out of range for an array of rank {ndim}"
            )
        resolved.append(int(axis) % ndim)

    if len(set(resolved)) != len(resolved):
        raise AxisOutOfRange(f"Duplicate axes in dims: {tuple(dims)}")

    return tuple(sorted(resolved))


def keepdims_shape(shape: Sequence[int], dims: Dims) -> Tuple[int, ...]:
    """Shape of a per-slice statistic: size 1 on every axis of ``dims``."""
    dims = normalize_dims(dims, len(shape))
    return tuple(1 if i in dims else n for i, n in enumerate(shape))


def slice_indices(shape: Sequence[int], dims: Dims) -> List[tuple]:
    """
    Enumerate the slices of an array of ``shape``.

    Each index tuple holds ``slice(None)`` on the axes of ``dims`` and a
    length-1 slice elsewhere, so indexing with it keeps the full rank.
    """
    dims = normalize_dims(dims, len(shape))
    ranges = [
        [slice(None)] if i in dims else [slice(j, j + 1) for j in range(n)]
        for i, n in enumerate(shape)
    ]
    return list(product(*ranges))


def _check_operands(x: np.ndarray, operands: Sequence[np.ndarray],
                    dims: Tuple[int, ...]) -> None:
    for k, op in enumerate(operands, start=1):
        if op.ndim != x.ndim:
            raise ShapeMismatch(
                f"Operand {k} has rank {op.ndim}, reference array has rank {x.ndim}"
            )
        for axis, (n_ref, n_op) in enumerate(zip(x.shape, op.shape)):
            if axis in dims:
                ok = n_op in (1, n_ref)
            else:
                ok = n_op == n_ref
            if not ok:
                raise ShapeMismatch(
                    f"Operand {k} with shape {op.shape} cannot be mapped over "
                    f"dims {dims} of an array with shape {x.shape} "
                    f"(axis {axis}: {n_op} vs {n_ref})"
                )


def _pool_size(workers: Optional[int]) -> int:
    # ThreadPoolExecutor's own default
    return workers if workers is not None else min(32, (os.cpu_count() or 1) + 4)


def _run(task: Callable, indices: List[tuple]) -> None:
    m = cfg.mapping
    n_slices = len(indices)
    n_workers = min(_pool_size(m.max_workers), n_slices)
    if not m.use_threads or n_slices < m.min_parallel_slices or n_workers <= 1:
        logger.debug("Mapping %d slices serially", n_slices)
        for idx in indices:
            task(idx)
        return

    # One task per worker, each looping over a strided share of the slices
    chunks = [indices[k::n_workers] for k in range(n_workers)]

    def run_chunk(chunk):
        for idx in chunk:
            task(idx)

    logger.debug("Mapping %d slices in %d chunks on a thread pool",
                 n_slices, n_workers)
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        # list() re-raises the first exception from a worker
        list(executor.map(run_chunk, chunks))


def map_dims(
    f: Callable[..., np.ndarray],
    x: np.ndarray,
    *operands: np.ndarray,
    dims: Dims = None
) -> np.ndarray:
    """
    Map ``f`` over the slices of ``x`` and its operands, in place.

    Parameters
    ----------
    f : callable
        ``f(x_slice, *operand_slices) -> array`` broadcastable to
        ``x_slice``. Must be free of side effects.
    x : np.ndarray
        Reference array; overwritten with the result.
    *operands : np.ndarray
        Read-only arrays of the same rank as ``x``, sized 1 or like ``x``
        on each axis of ``dims`` and exactly like ``x`` on the others.
    dims : sequence of int, optional
        Axes spanned by each slice (None = all axes).

    Returns
    -------
    np.ndarray
        ``x``, after being rewritten

    Notes
    -----
    With ``dims`` covering every axis, ``f`` is called once on the whole
    arrays. Otherwise it is called once per index combination on the
    remaining axes, in parallel, into a scratch buffer that is copied into
    ``x`` only after every slice succeeded. The result does not depend on
    the order.
    """
    if not isinstance(x, np.ndarray):
        raise TypeError(f"Reference array must be an np.ndarray, got {type(x).__name__}")

    dims = normalize_dims(dims, x.ndim)
    operands = tuple(np.asarray(op) for op in operands)
    _check_operands(x, operands, dims)

    errors = cfg.mapping.float_errors

    if len(dims) == x.ndim:
        with np.errstate(all=errors):
            x[...] = f(x, *operands)
        return x

    # Slices go to a scratch buffer so a failing slice leaves x untouched
    out = np.empty_like(x)

    def apply(idx):
        with np.errstate(all=errors):
            out[idx] = f(x[idx], *(op[idx] for op in operands))

    _run(apply, slice_indices(x.shape, dims))
    x[...] = out
    return x


def map_slices(
    f: Callable[[np.ndarray], float],
    x: np.ndarray,
    dims: Dims = None
) -> np.ndarray:
    """
    Reduce every slice of ``x`` spanning ``dims`` to a scalar.

    Parameters
    ----------
    f : callable
        ``f(slice) -> scalar``
    x : np.ndarray
        Input array (not modified)
    dims : sequence of int, optional
        Axes each slice spans (None = all axes)

    Returns
    -------
    np.ndarray
        float64 array with size 1 on every axis of ``dims``
    """
    x = np.asarray(x)
    dims = normalize_dims(dims, x.ndim)
    out = np.empty(keepdims_shape(x.shape, dims), dtype=np.float64)

    errors = cfg.mapping.float_errors

    if len(dims) == x.ndim:
        with np.errstate(all=errors):
            out[...] = f(x)
        return out

    def apply(idx):
        with np.errstate(all=errors):
            out[idx] = f(x[idx])

    _run(apply, slice_indices(x.shape, dims))
    return out
