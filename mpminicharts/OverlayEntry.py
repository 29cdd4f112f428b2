#!/usr/bin/env python3
# tab-width:4

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import numpy as np

from .ChartGeometry import ChartGeometry


@dataclass
class OverlayEntry:
    """One minichart tied to a layer id and the data it shows."""

    layer_id: Hashable
    lat: float
    lng: float
    columns: tuple[str, ...]
    # time value -> (C,) values; a single None key when there is no time axis
    frames: dict[Any, np.ndarray]
    width: float = 60.0
    height: float = 60.0
    label_text: None | str = None
    current_time: Any = None
    geometry: None | ChartGeometry = None

    # matplotlib artist, owned by MinichartRenderer
    artist: Any = field(default=None, init=False, repr=False)

    @property
    def values(self) -> None | np.ndarray:
        """Values of the displayed frame, None if this layer has no data at that time."""
        return self.frames.get(self.current_time)

    def value_map(self) -> dict[str, float]:
        values = self.values
        if values is None:
            return {}
        return {name: float(v) for name, v in zip(self.columns, values)}
