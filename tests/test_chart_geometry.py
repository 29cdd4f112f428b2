"""Tests for chart geometry computation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from mpminicharts import ChartType
from mpminicharts import Scale
from mpminicharts import build_geometry
from mpminicharts.ChartGeometry import CircleShape
from mpminicharts.ChartGeometry import RectShape
from mpminicharts.ChartGeometry import WedgeShape

COLORS = ("#000001", "#000002", "#000003")


def _scale(**limits) -> Scale:
    names = tuple(limits)
    return Scale(
        names=names,
        min_values=tuple(limits[n][0] for n in names),
        max_values=tuple(limits[n][1] for n in names),
    )


def test_bar_heights_are_relative_to_scale_max() -> None:
    geometry = build_geometry(
        np.array([15.0, 5.0]),
        ("hydraulic", "solar"),
        _scale(hydraulic=(0, 30), solar=(0, 10)),
        ChartType.BAR,
        width=40,
        height=60,
        colors=COLORS[:2],
    )

    bars = geometry.shapes
    assert all(isinstance(b, RectShape) for b in bars)
    assert bars[0].height == pytest.approx(30.0)
    assert bars[1].height == pytest.approx(30.0)
    assert bars[0].width == pytest.approx(20.0)
    assert bars[1].x == pytest.approx(20.0)


def test_bar_values_are_clamped_to_the_box() -> None:
    geometry = build_geometry(
        np.array([50.0, 1.0]),
        ("a", "b"),
        _scale(a=(0, 10), b=(0, 10)),
        ChartType.BAR,
        width=20,
        height=20,
        colors=COLORS[:2],
    )

    assert geometry.shapes[0].height == pytest.approx(20.0)


def test_negative_bars_hang_from_shared_zero_line() -> None:
    geometry = build_geometry(
        np.array([-5.0, 10.0]),
        ("a", "b"),
        _scale(a=(-10, 10), b=(0, 10)),
        ChartType.BAR,
        width=20,
        height=40,
        colors=COLORS[:2],
    )

    negative, positive = geometry.shapes
    assert negative.y == pytest.approx(20.0)
    assert negative.height == pytest.approx(-10.0)
    assert positive.height == pytest.approx(20.0)


def test_pie_wedges_split_the_circle() -> None:
    geometry = build_geometry(
        np.array([1.0, 3.0]),
        ("a", "b"),
        _scale(a=(0, 10), b=(0, 10)),
        ChartType.PIE,
        width=40,
        height=40,
        colors=COLORS[:2],
    )

    first, second = geometry.shapes
    assert isinstance(first, WedgeShape)
    assert first.theta2 - first.theta1 == pytest.approx(90.0)
    assert second.theta2 - second.theta1 == pytest.approx(270.0)
    assert first.theta2 == pytest.approx(90.0)
    assert first.radius == pytest.approx(20.0)


def test_pie_with_all_zero_values_is_empty() -> None:
    geometry = build_geometry(
        np.array([0.0, 0.0]),
        ("a", "b"),
        _scale(a=(0, 10), b=(0, 10)),
        ChartType.PIE,
        width=40,
        height=40,
        colors=COLORS[:2],
    )

    assert geometry.is_empty


def test_polar_area_and_radius_scaling() -> None:
    args = (np.array([25.0, 100.0]), ("a", "b"), _scale(a=(0, 100), b=(0, 100)))

    area = build_geometry(*args, ChartType.POLAR_AREA, width=40, height=40, colors=COLORS[:2])
    radius = build_geometry(*args, ChartType.POLAR_RADIUS, width=40, height=40, colors=COLORS[:2])

    assert area.shapes[0].radius == pytest.approx(10.0)
    assert radius.shapes[0].radius == pytest.approx(5.0)
    assert area.shapes[1].radius == pytest.approx(20.0)
    assert area.shapes[0].theta2 - area.shapes[0].theta1 == pytest.approx(180.0)


def test_circle_area_is_proportional_to_value() -> None:
    geometry = build_geometry(
        np.array([25.0]),
        ("total",),
        _scale(total=(0, 100)),
        ChartType.CIRCLE,
        width=40,
        height=40,
        colors=COLORS[:1],
        show_labels=True,
    )

    (circle,) = geometry.shapes
    assert isinstance(circle, CircleShape)
    assert math.pi * circle.radius**2 == pytest.approx(0.25 * math.pi * 20.0**2)
    assert geometry.labels[0].text == "25"


def test_circle_label_hidden_when_too_small() -> None:
    geometry = build_geometry(
        np.array([0.01]),
        ("total",),
        _scale(total=(0, 100)),
        ChartType.CIRCLE,
        width=40,
        height=40,
        colors=COLORS[:1],
        show_labels=True,
        label_min_size=8,
    )

    assert geometry.labels == ()


def test_labels_use_precision_and_custom_text() -> None:
    args = (np.array([1.234, 2.0]), ("a", "b"), _scale(a=(0, 10), b=(0, 10)), ChartType.BAR)

    bars = build_geometry(*args, width=40, height=40, colors=COLORS[:2], show_labels=True, label_precision=1)
    custom = build_geometry(*args, width=40, height=40, colors=COLORS[:2], show_labels=True, label_text="Lyon")

    assert [label.text for label in bars.labels] == ["1.2", "2.0"]
    assert [label.text for label in custom.labels] == ["Lyon"]


def test_missing_frame_gives_empty_geometry() -> None:
    geometry = build_geometry(
        None,
        ("a", "b"),
        _scale(a=(0, 10), b=(0, 10)),
        ChartType.BAR,
        width=40,
        height=40,
        colors=COLORS[:2],
    )

    assert geometry.is_empty
    assert geometry.width == 40.0


def test_identical_inputs_give_equal_geometry() -> None:
    args = dict(
        columns=("a", "b"),
        scale=_scale(a=(0, 10), b=(0, 10)),
        chart_type=ChartType.BAR,
        width=40,
        height=40,
        colors=COLORS[:2],
    )

    assert build_geometry(np.array([1.0, 2.0]), **args) == build_geometry(np.array([1.0, 2.0]), **args)
