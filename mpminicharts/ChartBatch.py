#!/usr/bin/env python3
# tab-width:4

"""
Table-like chart data: ordered rows aligned with map points, named numeric
columns (one per series).
"""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from .exceptions import MalformedBatchError


@dataclass(frozen=True, eq=False)
class ChartBatch:
    """
    Validated (N, C) block of series values.

    Attributes:
        columns: Ordered series names, shared by every row
        values: (N, C) float64 array; NaN marks a missing value
    """

    columns: tuple[str, ...]
    values: np.ndarray

    def __post_init__(self):
        columns = tuple(str(c) for c in self.columns)
        if not columns:
            raise MalformedBatchError("batch needs at least one series column")
        if len(set(columns)) != len(columns):
            raise MalformedBatchError(f"duplicate series names: {list(columns)}")

        values = _to_float_array(self.values, "values")
        if values.ndim != 2 or values.shape[1] != len(columns):
            raise MalformedBatchError(
                f"values must have shape (N, {len(columns)}), got {values.shape}"
            )
        if np.isinf(values).any():
            raise MalformedBatchError("batch contains Inf values")

        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "values", values)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[float]],
        columns: Sequence[str],
    ) -> ChartBatch:
        """
        Build from row tuples. Every row must hold exactly one value per column.

        Raises:
            MalformedBatchError: On a row/column count mismatch or non numeric values
        """
        columns = tuple(columns)
        for index, row in enumerate(rows):
            if len(row) != len(columns):
                raise MalformedBatchError(
                    f"row {index} has {len(row)} values, expected {len(columns)} ({list(columns)})"
                )
        if len(rows) == 0:
            return cls(columns, np.empty((0, len(columns)), dtype=np.float64))
        return cls(columns, _to_float_array(rows, "rows"))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Sequence[float]]) -> ChartBatch:
        """Build from ``{series name: values}``; all columns must be the same length."""
        columns = tuple(data.keys())
        lengths = {name: len(data[name]) for name in columns}
        if len(set(lengths.values())) > 1:
            raise MalformedBatchError(f"series lengths differ: {lengths}")
        n_rows = next(iter(lengths.values()), 0)
        if n_rows == 0:
            return cls(columns, np.empty((0, len(columns)), dtype=np.float64))
        stacked = np.column_stack(
            [_to_float_array(data[name], name) for name in columns]
        )
        return cls(columns, stacked)

    @classmethod
    def coerce(cls, data: Any, columns: Sequence[str] | None = None) -> ChartBatch:
        """
        Accept the table shapes callers pass around.

        Args:
            data: ChartBatch, mapping of name -> values, a DataFrame-like object
                  (``.columns`` and ``.to_numpy()``), a 2D array, or a sequence of rows
            columns: Series names, required for arrays and row sequences

        Returns:
            ChartBatch
        """
        if isinstance(data, ChartBatch):
            if columns is not None and tuple(columns) != data.columns:
                return data.select(columns)
            return data

        if isinstance(data, Mapping):
            batch = cls.from_mapping(data)
            return batch.select(columns) if columns is not None else batch

        if hasattr(data, "columns") and hasattr(data, "to_numpy"):
            frame_columns = tuple(str(c) for c in data.columns)
            values = _to_float_array(data.to_numpy(), "data")
            if values.ndim == 1:
                values = values.reshape(-1, 1)
            batch = cls(frame_columns, values)
            return batch.select(columns) if columns is not None else batch

        if columns is None:
            raise MalformedBatchError(
                "columns are required when data has no series names"
            )
        columns = tuple(columns)

        if isinstance(data, np.ndarray):
            values = _to_float_array(data, "data")
            if values.ndim == 1:
                if len(columns) != 1:
                    raise MalformedBatchError(
                        f"1D data needs exactly one column name, got {list(columns)}"
                    )
                values = values.reshape(-1, 1)
            if values.ndim != 2 or values.shape[1] != len(columns):
                raise MalformedBatchError(
                    f"data has shape {values.shape}, expected (N, {len(columns)})"
                )
            return cls(columns, values)

        if len(columns) == 1 and all(np.ndim(v) == 0 for v in data):
            return cls.from_rows([[v] for v in data], columns)
        return cls.from_rows(list(data), columns)

    @property
    def n_rows(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_series(self) -> int:
        return len(self.columns)

    def __len__(self) -> int:
        return self.n_rows

    def column(self, name: str) -> np.ndarray:
        try:
            return self.values[:, self.columns.index(name)]
        except ValueError as e:
            raise MalformedBatchError(f"no series named {name!r}") from e

    def row(self, index: int) -> np.ndarray:
        return self.values[index]

    def select(self, columns: Sequence[str]) -> ChartBatch:
        """Reorder/subset columns by name."""
        columns = tuple(columns)
        missing = [c for c in columns if c not in self.columns]
        if missing:
            raise MalformedBatchError(f"series not in batch: {missing}")
        order = [self.columns.index(c) for c in columns]
        return ChartBatch(columns, self.values[:, order])

    def take(self, indices: Sequence[int]) -> ChartBatch:
        return ChartBatch(self.columns, self.values[list(indices)])


def _to_float_array(values: Any, name: str) -> np.ndarray:
    try:
        array = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedBatchError(f"{name} must be numeric: {e}") from e
    return array
