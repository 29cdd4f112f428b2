#!/usr/bin/env python3
# tab-width:4

"""
Overlay Registry

Keyed store of the minicharts drawn on a map. Charts are placed with
populate(), mutated in place with update(), and dropped with remove() or
clear(). The scale fixed at populate time is kept across partial updates so
charts drawn from different slices of a dataset stay comparable.
"""

from __future__ import annotations

from collections.abc import Hashable
from collections.abc import Iterator
from dataclasses import replace
from typing import Any

import numpy as np
from matplotlib.axes import Axes

from .ChartBatch import ChartBatch
from .ChartGeometry import ChartGeometry
from .ChartGeometry import build_geometry
from .ChartGeometry import format_value
from .ChartOptions import PER_POINT_OPTIONS
from .ChartOptions import ChartOptions
from .ChartType import ChartType
from .ChartType import resolve_chart_type
from .ColorManager import ColorManager
from .exceptions import MalformedBatchError
from .exceptions import MissingLayerIdError
from .exceptions import UnknownLayerError
from .MinichartRenderer import MinichartRenderer
from .OverlayEntry import OverlayEntry
from .ScaleResolver import Scale
from .ScaleResolver import override_for
from .ScaleResolver import resolve_scale
from .utils import as_float_vector
from .utils import broadcast_per_row


def _normalize_ids(layer_ids: Any) -> list:
    if isinstance(layer_ids, (str, bytes)) or np.ndim(layer_ids) == 0:
        return [layer_ids]
    if isinstance(layer_ids, np.ndarray):
        return layer_ids.tolist()
    return [k.item() if isinstance(k, np.generic) else k for k in layer_ids]


def _order_times(times: list) -> tuple:
    unique = list(dict.fromkeys(times))
    try:
        return tuple(sorted(unique))
    except TypeError:
        return tuple(unique)


def _check_unique_keys(ids: list, times: list) -> None:
    seen = set()
    for key, t in zip(ids, times):
        if (key, t) in seen:
            if t is None:
                raise MalformedBatchError(f"duplicate layer id {key!r}")
            raise MalformedBatchError(f"duplicate layer id {key!r} at time {t!r}")
        seen.add((key, t))


class OverlayRegistry:
    """
    Minicharts keyed by layer id.

    Handles:
    - Placement of one chart per point (populate)
    - In-place mutation of named charts (update), reusing the fixed scale
    - Removal (remove, clear, or a populate that omits an id)
    - Time frames, legend, popup text
    """

    def __init__(
        self,
        ax: None | Axes = None,
        options: None | ChartOptions = None,
        **option_changes,
    ):
        """
        Args:
            ax: Map axes to draw on (x = longitude, y = latitude); None keeps
                geometry only
            options: Default options for populate()
            **option_changes: Overrides applied to ``options`` (aliases accepted)
        """
        self.renderer = MinichartRenderer(ax) if ax is not None else None
        self.default_options = (options or ChartOptions()).merged(**option_changes)
        self.options = self.default_options
        self.color_manager = ColorManager(
            self.options.color_palette,
            self.options.fill_color,
        )

        self.entries: dict[Hashable, OverlayEntry] = {}
        self.scale: None | Scale = None
        # series names fixed by the last populate
        self.columns: tuple[str, ...] = ()
        # series names shown in the legend (follows the last batch)
        self.legend_columns: tuple[str, ...] = ()
        self.times: tuple = ()
        self.current_time: Any = None

        self._populated = False
        self._has_layer_ids = False

    # ------------------------------------------------------------------
    # container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[OverlayEntry]:
        return iter(self.entries.values())

    def __contains__(self, layer_id: Hashable) -> bool:
        return layer_id in self.entries

    def __getitem__(self, layer_id: Hashable) -> OverlayEntry:
        try:
            return self.entries[layer_id]
        except KeyError as e:
            raise UnknownLayerError([layer_id]) from e

    def get(self, layer_id: Hashable) -> None | OverlayEntry:
        return self.entries.get(layer_id)

    @property
    def layer_ids(self) -> list[Hashable]:
        return list(self.entries.keys())

    @property
    def chart_type(self) -> None | ChartType:
        """Kind drawn for the populated series, None before populate()."""
        if not self.columns:
            return None
        return resolve_chart_type(self.options.chart_type, len(self.columns))

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _colors(
        self,
        columns: tuple[str, ...],
        options: ChartOptions,
        color_manager: ColorManager,
        reference: tuple[str, ...],
    ) -> tuple[str, ...]:
        if options.palette_follows == "populate" and reference:
            return color_manager.colors_by_reference(columns, reference)
        return color_manager.colors_for(columns)

    def _build_geometry(
        self,
        entry: OverlayEntry,
        options: ChartOptions,
        scale: Scale,
        color_manager: ColorManager,
        reference: tuple[str, ...],
    ) -> ChartGeometry:
        return build_geometry(
            entry.values,
            entry.columns,
            scale,
            resolve_chart_type(options.chart_type, len(entry.columns)),
            entry.width,
            entry.height,
            self._colors(entry.columns, options, color_manager, reference),
            opacity=options.opacity,
            show_labels=options.show_labels,
            label_precision=options.label_precision,
            label_text=entry.label_text,
            label_min_size=options.label_min_size,
            label_max_size=options.label_max_size,
        )

    def _current_batch(self) -> ChartBatch:
        """Every frame of every entry, NaN where an entry lacks a series."""
        names = list(
            dict.fromkeys(name for e in self.entries.values() for name in e.columns)
        )
        rows = []
        for entry in self.entries.values():
            for frame in entry.frames.values():
                lookup = dict(zip(entry.columns, frame))
                rows.append([lookup.get(name, np.nan) for name in names])
        return ChartBatch.from_rows(rows, names)

    def _draw(self, entries) -> None:
        if self.renderer is None:
            return
        for entry in entries:
            self.renderer.draw_entry(entry)
        self._draw_legend()
        self.renderer.refresh()

    def _draw_legend(self) -> None:
        if self.renderer is None:
            return
        if self.options.legend and self.entries:
            self.renderer.draw_legend(
                self.legend_entries(),
                self.options.legend_position,
            )
        else:
            self.renderer.remove_legend()

    def _undraw(self, entries) -> None:
        if self.renderer is None:
            return
        for entry in entries:
            self.renderer.remove_entry(entry)

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    def populate(
        self,
        lat,
        lng,
        data,
        layer_id=None,
        time=None,
        columns=None,
        options: None | ChartOptions = None,
        **option_changes,
    ) -> list[OverlayEntry]:
        """
        Place one chart per point, replacing everything populated before.

        Args:
            lat, lng: Coordinates aligned with the rows of ``data``
            data: Series values, see ChartBatch.coerce()
            layer_id: Stable identifiers aligned with the rows; required for update()
            time: Optional time value per row; rows sharing a layer id become frames
            columns: Series names when ``data`` carries none
            options: Options to start from instead of the registry defaults
            **option_changes: Option overrides (width, chart_type, max_values, ...)

        Returns:
            List of OverlayEntry in first-seen layer order

        Raises:
            MalformedBatchError: Misaligned inputs or invalid options; nothing changes
        """
        if "layerId" in option_changes:
            layer_id = option_changes.pop("layerId")
        opts = (options or self.default_options).merged(**option_changes)

        batch = ChartBatch.coerce(data, columns)
        n_rows = batch.n_rows
        lats = as_float_vector(lat, n_rows, "lat")
        lngs = as_float_vector(lng, n_rows, "lng")

        has_ids = layer_id is not None
        if has_ids:
            ids = _normalize_ids(layer_id)
            if len(ids) != n_rows:
                raise MalformedBatchError(
                    f"layer_id has {len(ids)} values for {n_rows} rows"
                )
        else:
            if time is not None:
                raise MalformedBatchError("time frames need layer ids to group rows")
            ids = list(range(n_rows))

        if time is not None:
            times = _normalize_ids(time)
            if len(times) != n_rows:
                raise MalformedBatchError(
                    f"time has {len(times)} values for {n_rows} rows"
                )
            time_values = _order_times(times)
        else:
            times = [None] * n_rows
            time_values = ()
        _check_unique_keys(ids, times)

        current_time = None
        if time_values:
            current_time = (
                opts.initial_time if opts.initial_time is not None else time_values[0]
            )
            if current_time not in time_values:
                raise MalformedBatchError(
                    f"initial_time {current_time!r} is not in the data"
                )

        widths = broadcast_per_row(opts.width, n_rows, "width")
        heights = broadcast_per_row(opts.height, n_rows, "height")
        label_texts = broadcast_per_row(opts.label_text, n_rows, "label_text")

        scale = resolve_scale(batch, opts.max_values, opts.min_values)
        color_manager = ColorManager(opts.color_palette, opts.fill_color)

        entries: dict[Hashable, OverlayEntry] = {}
        for row, (key, t) in enumerate(zip(ids, times)):
            entry = entries.get(key)
            if entry is None:
                entry = OverlayEntry(
                    layer_id=key,
                    lat=float(lats[row]),
                    lng=float(lngs[row]),
                    columns=batch.columns,
                    frames={},
                    width=float(widths[row]),
                    height=float(heights[row]),
                    label_text=None if label_texts[row] is None else str(label_texts[row]),
                    current_time=current_time,
                )
                entries[key] = entry
            entry.frames[t] = batch.values[row].copy()

        for entry in entries.values():
            entry.geometry = self._build_geometry(
                entry, opts, scale, color_manager, batch.columns
            )

        self._undraw(self.entries.values())
        self.entries = entries
        self.scale = scale
        self.columns = batch.columns
        self.legend_columns = batch.columns
        self.times = time_values
        self.current_time = current_time
        self.options = opts
        self.color_manager = color_manager
        self._populated = True
        self._has_layer_ids = has_ids

        self._draw(entries.values())
        print(
            f"[INFO] Populated {len(entries)} {self.chart_type.value} minicharts ({batch.n_series} series)"
        )
        return list(entries.values())

    def update(
        self,
        layer_ids,
        data=None,
        lat=None,
        lng=None,
        time=None,
        columns=None,
        options: None | ChartOptions = None,
        recompute_scale: bool = False,
        **option_changes,
    ) -> list[OverlayEntry]:
        """
        Mutate the named charts in place; all other charts keep their state.

        The scale fixed at populate() is reused. It changes only when this
        call passes max_values/min_values, or recompute_scale=True (which
        infers it from ``data``, or from all current values without data).

        Args:
            layer_ids: Layer ids to update, aligned with the rows of ``data``
            data: New series values (optional: omit to restyle only)
            lat, lng: New coordinates aligned with ``layer_ids`` (optional)
            time: Time value per row; replaces/adds those frames
            columns: Series names when ``data`` carries none
            options: Options to start from instead of the current ones
            recompute_scale: Infer the scale again instead of reusing it
            **option_changes: Option overrides, kept for later updates

        Returns:
            The updated entries, in ``layer_ids`` order

        Raises:
            UnknownLayerError: A layer id was never populated
            MissingLayerIdError: populate() was called without layer ids
            MalformedBatchError: Misaligned inputs or invalid options
        """
        ids = _normalize_ids(layer_ids)
        if not self._populated:
            raise UnknownLayerError(ids)
        if not self._has_layer_ids:
            raise MissingLayerIdError()

        unknown = [key for key in dict.fromkeys(ids) if key not in self.entries]
        if unknown:
            raise UnknownLayerError(unknown)

        option_changes = ChartOptions.normalize_keys(option_changes)
        opts = (options or self.options).merged(**option_changes)
        changed = set(option_changes)
        if options is not None:
            changed |= set(PER_POINT_OPTIONS)

        n_rows = len(ids)
        batch = None
        if data is not None:
            batch = ChartBatch.coerce(data, columns)
            if batch.n_rows != n_rows:
                raise MalformedBatchError(
                    f"{n_rows} layer ids for {batch.n_rows} rows of data"
                )
            # same series in another order is not a new series set
            if set(batch.columns) == set(self.legend_columns):
                batch = batch.select(self.legend_columns)

        if time is not None:
            if batch is None:
                raise MalformedBatchError("time frames need data")
            times = _normalize_ids(time)
            if len(times) != n_rows:
                raise MalformedBatchError(
                    f"time has {len(times)} values for {n_rows} rows"
                )
            _check_unique_keys(ids, times)
        else:
            times = None
            if batch is not None:
                _check_unique_keys(ids, [None] * n_rows)

        lats = as_float_vector(lat, n_rows, "lat") if lat is not None else None
        lngs = as_float_vector(lng, n_rows, "lng") if lng is not None else None
        widths = (
            broadcast_per_row(opts.width, n_rows, "width")
            if "width" in changed
            else None
        )
        heights = (
            broadcast_per_row(opts.height, n_rows, "height")
            if "height" in changed
            else None
        )
        label_texts = (
            broadcast_per_row(opts.label_text, n_rows, "label_text")
            if "label_text" in changed
            else None
        )

        scale = self.scale
        if recompute_scale:
            source = batch if batch is not None else self._current_batch()
            fresh = resolve_scale(
                source,
                opts.max_values if "max_values" in changed else None,
                opts.min_values if "min_values" in changed else None,
            )
            scale = fresh.with_series(scale)
        elif "max_values" in changed or "min_values" in changed:
            source = batch if batch is not None else self._current_batch()
            fresh = resolve_scale(source, opts.max_values, opts.min_values)
            # the side that was not overridden keeps its fixed values
            scale = Scale(
                names=fresh.names,
                min_values=tuple(
                    lo if "min_values" in changed or name not in scale else scale.min_for(name)
                    for name, lo in zip(fresh.names, fresh.min_values)
                ),
                max_values=tuple(
                    hi if "max_values" in changed or name not in scale else scale.max_for(name)
                    for name, hi in zip(fresh.names, fresh.max_values)
                ),
            ).with_series(scale)

        if batch is not None:
            new_names = [name for name in batch.columns if name not in scale]
            if new_names:
                inferred = resolve_scale(batch.select(new_names))
                mins = []
                maxs = []
                for name, lo, hi in zip(
                    inferred.names, inferred.min_values, inferred.max_values
                ):
                    fixed_lo = override_for(opts.min_values, name)
                    fixed_hi = override_for(opts.max_values, name)
                    mins.append(lo if fixed_lo is None else fixed_lo)
                    maxs.append(hi if fixed_hi is None else fixed_hi)
                scale = scale.with_series(
                    Scale(inferred.names, tuple(mins), tuple(maxs))
                )

        if {"color_palette", "fill_color"} & changed:
            color_manager = ColorManager(opts.color_palette, opts.fill_color)
        else:
            color_manager = self.color_manager

        unique_ids = list(dict.fromkeys(ids))
        staged = []
        for key in unique_ids:
            entry = self.entries[key]
            rows = [r for r, k in enumerate(ids) if k == key]
            first = rows[0]
            changes: dict[str, Any] = {}

            if batch is not None:
                entry_batch = batch
                if set(batch.columns) == set(entry.columns):
                    entry_batch = batch.select(entry.columns)
                # frames recorded with another series set no longer apply
                frames = (
                    dict(entry.frames) if entry_batch.columns == entry.columns else {}
                )
                for r in rows:
                    t = times[r] if times is not None else entry.current_time
                    frames[t] = entry_batch.values[r].copy()
                changes["frames"] = frames
                changes["columns"] = entry_batch.columns
            if lats is not None:
                changes["lat"] = float(lats[first])
            if lngs is not None:
                changes["lng"] = float(lngs[first])
            if widths is not None:
                changes["width"] = float(widths[first])
            if heights is not None:
                changes["height"] = float(heights[first])
            if label_texts is not None:
                text = label_texts[first]
                changes["label_text"] = None if text is None else str(text)

            preview = replace(entry, **changes)
            changes["geometry"] = self._build_geometry(
                preview, opts, scale, color_manager, self.columns
            )
            staged.append((entry, changes))

        # everything validated; apply
        for entry, changes in staged:
            for name, value in changes.items():
                setattr(entry, name, value)
        self.scale = scale
        self.options = opts
        self.color_manager = color_manager
        if batch is not None:
            self.legend_columns = batch.columns
        if times is not None:
            self.times = _order_times(list(self.times) + times)

        self._draw(entry for entry, _ in staged)
        return [self.entries[key] for key in unique_ids]

    def show_time(self, time_value: Any) -> list[OverlayEntry]:
        """Display frame ``time_value`` on every chart."""
        if not self.times:
            raise MalformedBatchError("charts were populated without a time axis")
        if time_value not in self.times:
            raise MalformedBatchError(f"no frame at time {time_value!r}")

        for entry in self.entries.values():
            entry.current_time = time_value
            entry.geometry = self._build_geometry(
                entry, self.options, self.scale, self.color_manager, self.columns
            )
        self.current_time = time_value
        self._draw(self.entries.values())
        return list(self.entries.values())

    def remove(self, layer_ids) -> None:
        """Remove the named charts."""
        ids = list(dict.fromkeys(_normalize_ids(layer_ids)))
        unknown = [key for key in ids if key not in self.entries]
        if unknown:
            raise UnknownLayerError(unknown)

        removed = [self.entries.pop(key) for key in ids]
        self._undraw(removed)
        if self.renderer is not None:
            self._draw_legend()
            self.renderer.refresh()

    def clear(self) -> None:
        """Remove every chart and forget the fixed scale."""
        count = len(self.entries)
        self._undraw(self.entries.values())
        self.entries = {}
        self.scale = None
        self.columns = ()
        self.legend_columns = ()
        self.times = ()
        self.current_time = None
        self.options = self.default_options
        self._populated = False
        self._has_layer_ids = False
        if self.renderer is not None:
            self.renderer.remove_legend()
            self.renderer.refresh()
        print(f"[INFO] Cleared {count} minicharts")

    def legend_entries(self) -> list[tuple[str, str]]:
        """(series name, color) pairs in series order."""
        if not self.legend_columns:
            return []
        colors = self._colors(
            self.legend_columns,
            self.options,
            self.color_manager,
            self.columns,
        )
        return list(zip(self.legend_columns, colors))

    def popup_text(self, layer_id: Hashable) -> str:
        """Multi-line summary of a chart's displayed values."""
        entry = self[layer_id]
        lines = [str(entry.layer_id)]
        if entry.current_time is not None:
            lines.append(f"time: {entry.current_time}")
        for name, value in entry.value_map().items():
            lines.append(f"{name}: {format_value(value, self.options.label_precision)}")
        return "\n".join(lines)

    def frame_points(self, pad_ratio: float = 0.1) -> None:
        """Zoom the map axes to the charts."""
        if self.renderer is None or not self.entries:
            return
        self.renderer.frame_points(
            [e.lat for e in self.entries.values()],
            [e.lng for e in self.entries.values()],
            pad_ratio=pad_ratio,
        )

    def get_statistics(self) -> dict[str, Any]:
        chart_type = self.chart_type
        return {
            "entry_count": len(self.entries),
            "series": list(self.columns),
            "chart_type": None if chart_type is None else chart_type.value,
            "scale": None if self.scale is None else self.scale.to_dict(),
            "times": list(self.times),
            "current_time": self.current_time,
            "has_layer_ids": self._has_layer_ids,
        }
