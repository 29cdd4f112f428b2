"""Tests for palette assignment."""

from __future__ import annotations

import pytest

from mpminicharts import ColorManager
from mpminicharts import MalformedBatchError
from mpminicharts.ColorManager import palette_colors
from mpminicharts.ColorManager import resolve_palette


def test_palette_cycles_when_shorter_than_series(capsys: pytest.CaptureFixture[str]) -> None:
    """Series i gets palette color i mod P."""

    manager = ColorManager(["#ff0000", "#00ff00"])

    colors = manager.colors_for(["a", "b", "c", "d", "e"])

    assert colors == ("#ff0000", "#00ff00", "#ff0000", "#00ff00", "#ff0000")
    assert "[WARNING]" in capsys.readouterr().out


def test_palette_colors_modulo() -> None:
    palette = ("#000001", "#000002", "#000003")

    colors = palette_colors(7, palette)

    assert all(colors[i] == palette[i % 3] for i in range(7))


def test_single_series_uses_fill_color() -> None:
    assert ColorManager(["#ff0000"], fill_color="blue").colors_for(["total"]) == ("#0000ff",)
    assert ColorManager(["#ff0000", "#00ff00"]).colors_for(["total"]) == ("#ff0000",)


def test_named_colormap_palette() -> None:
    palette = resolve_palette("tab10")

    assert len(palette) == 10
    assert palette[0] == "#1f77b4"


def test_invalid_palettes_are_rejected() -> None:
    with pytest.raises(MalformedBatchError):
        resolve_palette("no-such-colormap")

    with pytest.raises(MalformedBatchError):
        resolve_palette(["not a color"])

    with pytest.raises(MalformedBatchError):
        resolve_palette([])


def test_colors_by_reference_keep_populate_positions() -> None:
    manager = ColorManager(["#000001", "#000002", "#000003", "#000004"])

    colors = manager.colors_by_reference(["solar", "wind", "hydraulic"], ["hydraulic", "solar"])

    # solar keeps position 1, hydraulic position 0, wind comes after the reference
    assert colors == ("#000002", "#000003", "#000001")
