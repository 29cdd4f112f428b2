#!/usr/bin/env python3
# tab-width:4

"""
Chart geometry: the drawing intent of one minichart, computed without matplotlib.

Shapes are in pixels inside a width x height box whose origin is the lower
left corner; the box is centered on the map point when drawn. Geometries are
frozen and compare by value, so two renders of the same entry can be checked
for equality.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .ChartType import ChartType
from .ScaleResolver import Scale

PIE_START_ANGLE = 90.0


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float  # negative for bars below the zero line
    color: str


@dataclass(frozen=True)
class WedgeShape:
    center_x: float
    center_y: float
    radius: float
    theta1: float
    theta2: float
    color: str


@dataclass(frozen=True)
class CircleShape:
    center_x: float
    center_y: float
    radius: float
    color: str


@dataclass(frozen=True)
class LabelShape:
    text: str
    x: float
    y: float
    fontsize: float


@dataclass(frozen=True)
class ChartGeometry:
    chart_type: ChartType
    width: float
    height: float
    opacity: float
    shapes: tuple[RectShape | WedgeShape | CircleShape, ...]
    labels: tuple[LabelShape, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.shapes


def _ratio(value: float, limit: float) -> float:
    """value / limit clamped to [0, 1]; 0 when the limit is degenerate."""
    if limit <= 1e-12:
        return 0.0
    return min(max(value / limit, 0.0), 1.0)


def format_value(value: float, precision: int) -> str:
    if math.isnan(value):
        return "NA"
    return f"{value:.{int(precision)}f}"


def _label_fontsize(extent: float, min_size: float, max_size: float) -> float:
    return float(min(max_size, max(min_size, extent * 0.35)))


def _bar_shapes(
    values: np.ndarray,
    columns: Sequence[str],
    scale: Scale,
    width: float,
    height: float,
    colors: Sequence[str],
) -> tuple[list[RectShape], float]:
    n = len(columns)
    bar_width = width / n

    # shared zero line: high enough for the deepest negative range
    zero_frac = 0.0
    for name in columns:
        lo = scale.min_for(name)
        hi = scale.max_for(name)
        if lo < 0 and hi - lo > 1e-12:
            zero_frac = max(zero_frac, -lo / (hi - lo))
    y0 = zero_frac * height

    shapes = []
    for i, name in enumerate(columns):
        value = 0.0 if math.isnan(values[i]) else float(values[i])
        if value >= 0:
            bar_height = (height - y0) * _ratio(value, scale.max_for(name))
        else:
            bar_height = -y0 * _ratio(-value, -scale.min_for(name))
        shapes.append(
            RectShape(
                x=i * bar_width,
                y=y0,
                width=bar_width,
                height=bar_height,
                color=colors[i],
            )
        )
    return shapes, y0


def _pie_shapes(
    values: np.ndarray,
    radius: float,
    cx: float,
    cy: float,
    colors: Sequence[str],
) -> list[WedgeShape]:
    magnitudes = np.abs(np.nan_to_num(values, nan=0.0))
    total = float(magnitudes.sum())
    if total <= 1e-12:
        return []

    shapes = []
    start = PIE_START_ANGLE
    for i, magnitude in enumerate(magnitudes):
        if magnitude <= 0:
            continue
        sweep = 360.0 * float(magnitude) / total
        # clockwise from 12 o'clock
        shapes.append(
            WedgeShape(
                center_x=cx,
                center_y=cy,
                radius=radius,
                theta1=start - sweep,
                theta2=start,
                color=colors[i],
            )
        )
        start -= sweep
    return shapes


def _polar_shapes(
    values: np.ndarray,
    columns: Sequence[str],
    scale: Scale,
    radius: float,
    cx: float,
    cy: float,
    colors: Sequence[str],
    area: bool,
) -> list[WedgeShape]:
    sweep = 360.0 / len(columns)
    shapes = []
    for i, name in enumerate(columns):
        value = 0.0 if math.isnan(values[i]) else abs(float(values[i]))
        ratio = _ratio(value, scale.max_abs_for(name))
        r = radius * (math.sqrt(ratio) if area else ratio)
        if r <= 0:
            continue
        theta2 = PIE_START_ANGLE - i * sweep
        shapes.append(
            WedgeShape(
                center_x=cx,
                center_y=cy,
                radius=r,
                theta1=theta2 - sweep,
                theta2=theta2,
                color=colors[i],
            )
        )
    return shapes


def build_geometry(
    values: np.ndarray | None,
    columns: Sequence[str],
    scale: Scale,
    chart_type: ChartType,
    width: float,
    height: float,
    colors: Sequence[str],
    opacity: float = 1.0,
    show_labels: bool = False,
    label_precision: int = 0,
    label_text: str | None = None,
    label_min_size: float = 8.0,
    label_max_size: float = 24.0,
) -> ChartGeometry:
    """
    Compute the geometry of one chart.

    Args:
        values: (C,) current values, or None when the entry has no data to show
        columns: Series names aligned with ``values``
        scale: Scale holding every name in ``columns``
        chart_type: Already resolved kind (see resolve_chart_type)
        width, height: Chart box in pixels
        colors: One color per series

    Returns:
        ChartGeometry
    """
    width = float(width)
    height = float(height)
    cx, cy = width / 2.0, height / 2.0
    radius = min(width, height) / 2.0

    if values is None:
        return ChartGeometry(chart_type, width, height, float(opacity), ())

    values = np.asarray(values, dtype=np.float64)
    labels: list[LabelShape] = []

    if chart_type is ChartType.CIRCLE:
        name = columns[0]
        value = float(values[0])
        magnitude = 0.0 if math.isnan(value) else abs(value)
        r = radius * math.sqrt(_ratio(magnitude, scale.max_abs_for(name)))
        shapes = [CircleShape(cx, cy, r, colors[0])] if r > 0 else []
        # the label has to fit inside the circle
        if show_labels and 2 * r >= label_min_size:
            text = label_text if label_text is not None else format_value(value, label_precision)
            labels.append(
                LabelShape(text, cx, cy, _label_fontsize(2 * r, label_min_size, label_max_size))
            )

    elif chart_type is ChartType.BAR:
        shapes, y0 = _bar_shapes(values, columns, scale, width, height, colors)
        if show_labels and label_text is not None:
            fontsize = _label_fontsize(width, label_min_size, label_max_size)
            labels.append(LabelShape(label_text, cx, height + fontsize / 2.0, fontsize))
        elif show_labels:
            fontsize = _label_fontsize(width / len(columns), label_min_size, label_max_size)
            for i, rect in enumerate(shapes):
                text = format_value(float(values[i]), label_precision)
                # just above the bar top, or below it for negative bars
                offset = fontsize / 2.0 if rect.height >= 0 else -fontsize / 2.0
                labels.append(
                    LabelShape(
                        text,
                        rect.x + rect.width / 2.0,
                        y0 + rect.height + offset,
                        fontsize,
                    )
                )

    else:
        if chart_type is ChartType.PIE:
            shapes = _pie_shapes(values, radius, cx, cy, colors)
        else:
            shapes = _polar_shapes(
                values,
                columns,
                scale,
                radius,
                cx,
                cy,
                colors,
                area=chart_type is ChartType.POLAR_AREA,
            )
        if show_labels and 2 * radius >= label_min_size:
            if label_text is not None:
                text = label_text
            else:
                text = format_value(float(np.nansum(values)), label_precision)
            labels.append(
                LabelShape(text, cx, cy, _label_fontsize(2 * radius, label_min_size, label_max_size))
            )

    return ChartGeometry(
        chart_type=chart_type,
        width=width,
        height=height,
        opacity=float(opacity),
        shapes=tuple(shapes),
        labels=tuple(labels),
    )
