"""Tests for drawing registry entries on matplotlib axes."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.offsetbox import AnnotationBbox
from matplotlib.patches import Rectangle, Wedge

from mpminicharts import OverlayRegistry
from mpminicharts import proportional_sizes


def _chart_artists(ax) -> list:
    return [a for a in ax.artists if isinstance(a, AnnotationBbox)]


def test_populate_draws_one_artist_per_entry(ax, energy_points: dict) -> None:
    registry = OverlayRegistry(ax)
    registry.populate(
        energy_points["lat"],
        energy_points["lng"],
        energy_points["data"],
        layer_id=energy_points["layer_id"],
    )

    artists = _chart_artists(ax)
    assert len(artists) == 3
    assert {entry.artist for entry in registry} == set(artists)
    assert registry["A"].artist.xy == (2.0, 45.0)
    patches = registry["A"].artist.offsetbox.get_children()
    assert sum(isinstance(p, Rectangle) for p in patches) == 2


def test_update_replaces_only_the_named_artist(ax, energy_points: dict) -> None:
    registry = OverlayRegistry(ax)
    registry.populate(
        energy_points["lat"],
        energy_points["lng"],
        energy_points["data"],
        layer_id=energy_points["layer_id"],
    )
    artist_a = registry["A"].artist
    artist_b = registry["B"].artist

    registry.update(["B"], chart_type="pie")

    assert registry["A"].artist is artist_a
    assert registry["B"].artist is not artist_b
    assert artist_b not in ax.artists
    assert len(_chart_artists(ax)) == 3
    patches = registry["B"].artist.offsetbox.get_children()
    assert any(isinstance(p, Wedge) for p in patches)


def test_remove_and_clear_take_artists_off_the_axes(ax, energy_points: dict) -> None:
    registry = OverlayRegistry(ax)
    registry.populate(
        energy_points["lat"],
        energy_points["lng"],
        energy_points["data"],
        layer_id=energy_points["layer_id"],
    )

    registry.remove("A")
    assert len(_chart_artists(ax)) == 2

    registry.clear()
    assert _chart_artists(ax) == []
    assert ax.get_legend() is None


def test_legend_lists_series(ax, energy_points: dict) -> None:
    registry = OverlayRegistry(ax)
    registry.populate(
        energy_points["lat"],
        energy_points["lng"],
        energy_points["data"],
        layer_id=energy_points["layer_id"],
    )

    legend = ax.get_legend()
    assert [t.get_text() for t in legend.get_texts()] == ["hydraulic", "solar"]

    registry.update(["A"], legend=False)
    assert ax.get_legend() is None


def test_frame_points_and_render(ax, energy_points: dict, tmp_path) -> None:
    registry = OverlayRegistry(ax, show_labels=True)
    registry.populate(
        energy_points["lat"],
        energy_points["lng"],
        energy_points["data"],
        layer_id=energy_points["layer_id"],
        chart_type="pie",
        width=proportional_sizes([15, 25, 35], max_size=60),
        height=proportional_sizes([15, 25, 35], max_size=60),
    )
    registry.frame_points()

    xmin, xmax = ax.get_xlim()
    assert xmin < 2.0 and xmax > 4.0

    output = tmp_path / "map.png"
    ax.figure.savefig(output)
    assert output.stat().st_size > 0


def test_proportional_sizes_encode_area() -> None:
    sizes = proportional_sizes([25.0, 100.0], max_size=40)

    assert sizes[1] == pytest.approx(40.0)
    assert sizes[0] == pytest.approx(20.0)
    assert np.all(proportional_sizes([0.0, 0.0], max_size=40) > 0)


def teardown_module() -> None:
    plt.close("all")
