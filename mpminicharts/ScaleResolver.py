#!/usr/bin/env python3
# tab-width:4

from __future__ import annotations

import warnings
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .ChartBatch import ChartBatch
from .exceptions import MalformedBatchError


@dataclass(frozen=True)
class Scale:
    """Resolved (min, max) per series, shared by every chart of a registry."""

    names: tuple[str, ...]
    min_values: tuple[float, ...]
    max_values: tuple[float, ...]

    def __post_init__(self):
        if not len(self.names) == len(self.min_values) == len(self.max_values):
            raise MalformedBatchError(
                f"scale needs one min and max per series: {self.names}"
            )
        for name, lo, hi in zip(self.names, self.min_values, self.max_values):
            if hi < lo:
                raise MalformedBatchError(
                    f"scale for {name!r} has max {hi} below min {lo}"
                )

    def _index(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError as e:
            raise MalformedBatchError(f"no scale for series {name!r}") from e

    def min_for(self, name: str) -> float:
        return self.min_values[self._index(name)]

    def max_for(self, name: str) -> float:
        return self.max_values[self._index(name)]

    def max_abs_for(self, name: str) -> float:
        """Largest magnitude on the scale, used by area/radius based charts."""
        index = self._index(name)
        return max(abs(self.min_values[index]), abs(self.max_values[index]))

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def with_series(self, other: Scale) -> Scale:
        """Add the series of ``other`` this scale lacks. Known series keep their values."""
        names = list(self.names)
        mins = list(self.min_values)
        maxs = list(self.max_values)
        for name, lo, hi in zip(other.names, other.min_values, other.max_values):
            if name in self.names:
                continue
            names.append(name)
            mins.append(lo)
            maxs.append(hi)
        return Scale(tuple(names), tuple(mins), tuple(maxs))

    def to_dict(self) -> dict:
        """Convert to ``{name: (min, max)}``, e.g. to persist a global scale."""
        return {
            name: (lo, hi)
            for name, lo, hi in zip(self.names, self.min_values, self.max_values)
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Sequence[float]]) -> Scale:
        names = tuple(data.keys())
        return cls(
            names=names,
            min_values=tuple(float(data[name][0]) for name in names),
            max_values=tuple(float(data[name][1]) for name in names),
        )


def _override_vector(
    override: float | Sequence[float] | Mapping[str, float],
    columns: tuple[str, ...],
    label: str,
) -> np.ndarray:
    """Expand a scalar, positional sequence or per-name mapping to one value per column."""
    if isinstance(override, Mapping):
        missing = [c for c in columns if c not in override]
        if missing:
            raise MalformedBatchError(f"{label} has no value for series {missing}")
        raw = [override[c] for c in columns]
    elif isinstance(override, (Sequence, np.ndarray)) and not isinstance(override, str):
        if len(override) != len(columns):
            raise MalformedBatchError(
                f"{label} has {len(override)} values for {len(columns)} series"
            )
        raw = list(override)
    else:
        raw = [override] * len(columns)

    try:
        vector = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedBatchError(f"{label} must be numeric: {e}") from e
    if not np.isfinite(vector).all():
        raise MalformedBatchError(f"{label} contains NaN/Inf values")
    return vector


def override_for(
    override: None | float | Sequence[float] | Mapping[str, float],
    name: str,
) -> None | float:
    """Value an override gives series ``name``, None when it names no value for it."""
    if override is None:
        return None
    if isinstance(override, Mapping):
        if name not in override:
            return None
        value = override[name]
    elif isinstance(override, (Sequence, np.ndarray)) and not isinstance(override, str):
        # positional overrides cover the series they were given with
        return None
    else:
        value = override
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedBatchError(f"override for {name!r} must be numeric: {e}") from e
    if not np.isfinite(value):
        raise MalformedBatchError(f"override for {name!r} is NaN/Inf")
    return value


def _column_extremes(values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    if values.shape[0] == 0:
        zeros = np.zeros(values.shape[1], dtype=np.float64)
        return zeros, zeros
    with warnings.catch_warnings():
        # all-NaN columns resolve to 0 below
        warnings.simplefilter("ignore", RuntimeWarning)
        data_min = np.nanmin(values, axis=0)
        data_max = np.nanmax(values, axis=0)
    data_min = np.where(np.isnan(data_min), 0.0, data_min)
    data_max = np.where(np.isnan(data_max), 0.0, data_max)
    return data_min, data_max


def resolve_scale(
    batch: ChartBatch,
    max_values: None | float | Sequence[float] | Mapping[str, float] = None,
    min_values: None | float | Sequence[float] | Mapping[str, float] = None,
) -> Scale:
    """
    Resolve the per-series scale of a batch.

    Args:
        batch: Series values (N, C)
        max_values: Override used verbatim: scalar for all series, one value
                    per series, or a mapping by series name. Pass the global
                    maximum here when the data will arrive as partial batches.
        min_values: Same forms as ``max_values``

    Returns:
        Scale. Without overrides max is the batch maximum and min is
        ``min(0, batch minimum)`` so bars share a zero baseline.
    """
    data_min, data_max = _column_extremes(batch.values)

    if max_values is not None:
        maxs = _override_vector(max_values, batch.columns, "max_values")
    else:
        maxs = np.maximum(data_max, 0.0)

    if min_values is not None:
        mins = _override_vector(min_values, batch.columns, "min_values")
    else:
        mins = np.minimum(data_min, 0.0)

    return Scale(
        names=batch.columns,
        min_values=tuple(float(v) for v in mins),
        max_values=tuple(float(v) for v in maxs),
    )
