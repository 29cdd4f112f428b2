#!/usr/bin/env python3


from __future__ import annotations

from enum import Enum


class ChartType(Enum):
    """Kind of minichart drawn at each point."""

    AUTO = "auto"
    BAR = "bar"
    PIE = "pie"
    POLAR_AREA = "polar-area"
    POLAR_RADIUS = "polar-radius"
    CIRCLE = "circle"

    @classmethod
    def parse(cls, value: str | ChartType) -> ChartType:
        if isinstance(value, ChartType):
            return value
        key = str(value).strip().lower().replace("_", "-")
        if key == "polar":
            return cls.POLAR_AREA
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown chart type: {value!r}")


def resolve_chart_type(requested: ChartType, n_series: int) -> ChartType:
    """
    Pick the kind actually drawn.

    One series is always a circle whatever was requested; with more than
    one series AUTO means bar, and CIRCLE falls back to bar as well.
    """
    if n_series == 1:
        return ChartType.CIRCLE
    if requested in (ChartType.AUTO, ChartType.CIRCLE):
        return ChartType.BAR
    return requested
