#!/usr/bin/env python3
# tab-width:4

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any

import numpy as np

from .ChartType import ChartType
from .exceptions import MalformedBatchError

# matplotlib "tab10"
DEFAULT_PALETTE: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)

PALETTE_FOLLOWS = ("update", "populate")

# camelCase names used by the leaflet.minicharts API
OPTION_ALIASES: dict[str, str] = {
    "type": "chart_type",
    "colorPalette": "color_palette",
    "fillColor": "fill_color",
    "maxValues": "max_values",
    "minValues": "min_values",
    "showLabels": "show_labels",
    "labelPrecision": "label_precision",
    "labelText": "label_text",
    "labelMinSize": "label_min_size",
    "labelMaxSize": "label_max_size",
    "legendPosition": "legend_position",
    "initialTime": "initial_time",
    "paletteFollows": "palette_follows",
}

# options that may hold one value per point
PER_POINT_OPTIONS = ("width", "height", "label_text")


@dataclass(frozen=True)
class ChartOptions:
    """Rendering options recognised by populate() and update()."""

    chart_type: ChartType = ChartType.AUTO
    width: float | Sequence[float] = 60.0
    height: float | Sequence[float] = 60.0
    color_palette: str | Sequence[str] = DEFAULT_PALETTE
    fill_color: str | None = None
    max_values: None | float | Sequence[float] | Mapping[str, float] = None
    min_values: None | float | Sequence[float] | Mapping[str, float] = None
    show_labels: bool = False
    label_precision: int = 0
    label_text: None | str | Sequence[str] = None
    label_min_size: float = 8.0
    label_max_size: float = 24.0
    opacity: float = 1.0
    legend: bool = True
    legend_position: str = "upper right"
    initial_time: Any = None
    palette_follows: str = "update"

    def __post_init__(self):
        try:
            object.__setattr__(self, "chart_type", ChartType.parse(self.chart_type))
        except ValueError as e:
            raise MalformedBatchError(str(e)) from e

        for name in ("width", "height"):
            try:
                sizes = np.atleast_1d(np.asarray(getattr(self, name), dtype=np.float64))
            except (TypeError, ValueError) as e:
                raise MalformedBatchError(f"{name} must be numeric: {e}") from e
            if not (sizes > 0).all():
                raise MalformedBatchError(
                    f"{name} must be positive, got {getattr(self, name)}"
                )

        if not 0.0 <= float(self.opacity) <= 1.0:
            raise MalformedBatchError(
                f"opacity must be in [0, 1], got {self.opacity}"
            )
        if int(self.label_precision) < 0:
            raise MalformedBatchError(
                f"label_precision must be >= 0, got {self.label_precision}"
            )
        if self.palette_follows not in PALETTE_FOLLOWS:
            raise MalformedBatchError(
                f"palette_follows must be one of {PALETTE_FOLLOWS}, got {self.palette_follows!r}"
            )

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def normalize_keys(cls, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Map camelCase aliases to field names and reject unknown options."""
        known = cls.option_names()
        normalized = {}
        for key, value in changes.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise MalformedBatchError(f"Unknown chart option: {key!r}")
            normalized[name] = value
        return normalized

    @classmethod
    def from_kwargs(cls, **kwargs) -> ChartOptions:
        return cls(**cls.normalize_keys(kwargs))

    def merged(self, **changes) -> ChartOptions:
        """Return a copy with ``changes`` applied (aliases accepted)."""
        if not changes:
            return self
        return replace(self, **self.normalize_keys(changes))
