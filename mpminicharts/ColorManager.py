#!/usr/bin/env python3
from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from matplotlib.colors import to_hex

from .exceptions import MalformedBatchError


def resolve_palette(palette: str | Sequence[str]) -> tuple[str, ...]:
    """
    Turn a palette description into a tuple of hex colors.

    Args:
        palette: Sequence of matplotlib color specs, or the name of a
                 matplotlib colormap ("tab10", "Set2", ...)

    Returns:
        Tuple of "#rrggbb" strings
    """
    if isinstance(palette, str):
        import matplotlib  # pylint: disable=import-outside-toplevel

        try:
            cmap = matplotlib.colormaps[palette]
        except KeyError as e:
            raise MalformedBatchError(f"Unknown colormap: {palette!r}") from e

        # Qualitative maps carry their colors, continuous ones get sampled
        listed = getattr(cmap, "colors", None)
        if listed is not None and len(listed) <= 20:
            colors = list(listed)
        else:
            colors = [cmap(x) for x in np.linspace(0.0, 1.0, 10)]
    else:
        colors = list(palette)

    if not colors:
        raise MalformedBatchError("color_palette is empty")

    try:
        return tuple(to_hex(c) for c in colors)
    except ValueError as e:
        raise MalformedBatchError(f"Invalid color in palette: {e}") from e


def palette_colors(n_series: int, palette: Sequence[str]) -> tuple[str, ...]:
    """Series ``i`` gets ``palette[i % len(palette)]``."""
    return tuple(palette[i % len(palette)] for i in range(n_series))


class ColorManager:
    """
    Assigns palette colors to series positions for all charts of a registry.

    A palette shorter than the series count is cycled, with a warning.
    """

    def __init__(
        self,
        palette: str | Sequence[str],
        fill_color: str | None = None,
    ):
        """
        Args:
            palette: Colors or colormap name, see resolve_palette()
            fill_color: Color of single-series circles (default: first palette color)
        """
        self.palette = resolve_palette(palette)
        if fill_color is not None:
            try:
                fill_color = to_hex(fill_color)
            except ValueError as e:
                raise MalformedBatchError(f"Invalid fill_color: {e}") from e
        self.fill_color = fill_color
        self._warned_for: set[int] = set()

    def _warn_if_cycling(self, n_series: int) -> None:
        if n_series > len(self.palette) and n_series not in self._warned_for:
            self._warned_for.add(n_series)
            print(
                f"[WARNING] Palette has {len(self.palette)} colors for {n_series} series, cycling colors"
            )

    def colors_for(self, columns: Sequence[str]) -> tuple[str, ...]:
        """Colors by position in ``columns``."""
        if len(columns) == 1:
            return (self.fill_color or self.palette[0],)
        self._warn_if_cycling(len(columns))
        return palette_colors(len(columns), self.palette)

    def colors_by_reference(
        self,
        columns: Sequence[str],
        reference: Sequence[str],
    ) -> tuple[str, ...]:
        """
        Colors that keep each series' position in ``reference``.

        Series missing from ``reference`` take the palette positions after it,
        in the order they appear in ``columns``.
        """
        if len(columns) == 1 and list(columns) == list(reference):
            return (self.fill_color or self.palette[0],)
        positions = {name: i for i, name in enumerate(reference)}
        next_position = len(reference)
        colors = []
        for name in columns:
            if name not in positions:
                positions[name] = next_position
                next_position += 1
            colors.append(self.palette[positions[name] % len(self.palette)])
        self._warn_if_cycling(next_position)
        return tuple(colors)
