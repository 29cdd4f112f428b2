#!/usr/bin/env python3
"""
Utility functions for minichart data preparation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from .exceptions import MalformedBatchError


def as_float_vector(
    values: Any,
    n_rows: int,
    name: str,
) -> np.ndarray:
    """
    Validate a per-point numeric column (lat, lng, ...).

    Args:
        values: Sequence of numbers
        n_rows: Expected length
        name: Name for error messages

    Returns:
        (N,) float64 array
    """
    try:
        array = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedBatchError(f"{name} must be numeric: {e}") from e

    if array.ndim == 0:
        array = array.reshape(1)
    if array.ndim != 1:
        raise MalformedBatchError(f"{name} must have shape (N,), got {array.shape}")
    if array.shape[0] != n_rows:
        raise MalformedBatchError(
            f"{name} has {array.shape[0]} values for {n_rows} rows"
        )
    if not np.isfinite(array).all():
        raise MalformedBatchError(f"{name} contains NaN/Inf values")
    return array


def broadcast_per_row(
    value: Any,
    n_rows: int,
    name: str,
) -> list:
    """Expand a scalar option to one value per row, or check a per-row sequence."""
    if isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, np.ndarray)):
        return [value] * n_rows
    value = list(value)
    if len(value) != n_rows:
        raise MalformedBatchError(f"{name} has {len(value)} values for {n_rows} rows")
    return value


def proportional_sizes(
    totals: Sequence[float],
    max_size: float,
    min_size: float = 0.0,
) -> np.ndarray:
    """
    Chart sizes whose area is proportional to ``totals``.

    The largest total gets ``max_size``; pass the result as width/height to
    draw pies whose area encodes the total.
    """
    totals = np.abs(np.nan_to_num(np.asarray(totals, dtype=np.float64), nan=0.0))
    if totals.size == 0:
        return totals
    largest = totals.max()
    if largest <= 1e-12:
        return np.full_like(totals, max(min_size, 1.0))
    sizes = max_size * np.sqrt(totals / largest)
    # a zero-sized chart cannot be drawn
    return np.maximum(sizes, max(min_size, 1.0))


def compute_bounds(
    xs: Sequence[float],
    ys: Sequence[float],
    pad_ratio: float = 0.05,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """
    Calculate bounds with padding for initial view.

    Returns:
        ((xmin, xmax), (ymin, ymax))
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.size == 0:
        return (0.0, 1.0), (0.0, 1.0)

    min_vals = np.array([xs.min(), ys.min()])
    max_vals = np.array([xs.max(), ys.max()])
    size = np.maximum(max_vals - min_vals, 1e-12)
    pad = np.maximum(size * pad_ratio, 0.5)  # single points still get a window
    lo = min_vals - pad
    hi = max_vals + pad
    return (float(lo[0]), float(hi[0])), (float(lo[1]), float(hi[1]))


def load_rows_from_stdin() -> tuple[tuple[str, ...], list[tuple]]:
    """
    Read minichart rows from stdin via messagepack.

    The first non-comment tuple is the header
    ("layer_id", "lat", "lng", <series names>...); comment tuples start with "#".

    Returns:
        Tuple of (header, rows)
    """
    from unmp import unmp  # pylint: disable=import-outside-toplevel

    header: tuple[str, ...] = ()
    rows: list[tuple] = []
    for _mpobject in unmp(valid_types=[tuple]):
        _v = _mpobject
        if isinstance(_v, dict):
            # Accept single k:v dict rows, use the value part
            for _, __v in _v.items():
                _v = __v
                break

        if not _v:
            continue
        if isinstance(_v[0], str) and _v[0].startswith("#"):
            continue
        if not header:
            header = tuple(str(c) for c in _v)
            if len(header) < 4:
                raise MalformedBatchError(
                    f"header needs layer_id, lat, lng and at least one series: {header}"
                )
            continue
        if len(_v) != len(header):
            raise MalformedBatchError(
                f"row {len(rows)} has {len(_v)} fields, header has {len(header)}"
            )
        rows.append(tuple(_v))

    return header, rows
