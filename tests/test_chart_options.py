"""Tests for chart option parsing."""

from __future__ import annotations

import pytest

from mpminicharts import ChartOptions
from mpminicharts import ChartType
from mpminicharts import MalformedBatchError
from mpminicharts.ChartType import resolve_chart_type


def test_camel_case_aliases_are_accepted() -> None:
    options = ChartOptions.from_kwargs(type="pie", colorPalette=["red"], maxValues=10, showLabels=True)

    assert options.chart_type is ChartType.PIE
    assert options.color_palette == ["red"]
    assert options.max_values == 10
    assert options.show_labels is True


def test_polar_means_polar_area() -> None:
    assert ChartOptions(chart_type="polar").chart_type is ChartType.POLAR_AREA
    assert ChartType.parse("polar_radius") is ChartType.POLAR_RADIUS


@pytest.mark.parametrize(
    "changes",
    [
        {"chart_type": "donut"},
        {"width": 0},
        {"height": [10, -1]},
        {"opacity": 1.5},
        {"palette_follows": "nobody"},
        {"label_precision": -1},
        {"no_such_option": 1},
    ],
)
def test_invalid_options_are_rejected(changes: dict) -> None:
    with pytest.raises(MalformedBatchError):
        ChartOptions().merged(**changes)


def test_merged_returns_updated_copy() -> None:
    base = ChartOptions()
    changed = base.merged(width=30)

    assert changed.width == 30
    assert base.width == 60.0
    assert base.merged() is base


def test_single_series_is_always_a_circle() -> None:
    for requested in ChartType:
        assert resolve_chart_type(requested, 1) is ChartType.CIRCLE


def test_auto_means_bar_for_several_series() -> None:
    assert resolve_chart_type(ChartType.AUTO, 3) is ChartType.BAR
    assert resolve_chart_type(ChartType.PIE, 3) is ChartType.PIE
