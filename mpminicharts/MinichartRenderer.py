from __future__ import annotations

from collections.abc import Sequence

from matplotlib.axes import Axes
from matplotlib.offsetbox import AnnotationBbox
from matplotlib.offsetbox import DrawingArea
from matplotlib.patches import Circle
from matplotlib.patches import Patch
from matplotlib.patches import Rectangle
from matplotlib.patches import Wedge
from matplotlib.text import Text

from .ChartGeometry import ChartGeometry
from .ChartGeometry import CircleShape
from .ChartGeometry import RectShape
from .ChartGeometry import WedgeShape
from .OverlayEntry import OverlayEntry
from .utils import compute_bounds


class MinichartRenderer:
    """
    Matplotlib renderer for OverlayRegistry.

    - The axes are the map: x is longitude, y is latitude.
    - Each chart is a DrawingArea in pixel units inside an AnnotationBbox
      anchored at the point, so charts keep their size when the map zooms.
    - Entries own their artist; drawing an entry replaces only that artist.
    """

    def __init__(
        self,
        ax: Axes,
        edgecolor: str = "white",
        linewidth: float = 0.5,
        zorder: float = 5.0,
    ):
        self.ax = ax
        self.edgecolor = edgecolor
        self.linewidth = linewidth
        self.zorder = zorder
        self.legend_artist = None

    def _create_patch(self, shape, opacity: float):
        common = {
            "facecolor": shape.color,
            "edgecolor": self.edgecolor,
            "linewidth": self.linewidth,
            "alpha": opacity,
        }
        if isinstance(shape, RectShape):
            return Rectangle((shape.x, shape.y), shape.width, shape.height, **common)
        if isinstance(shape, WedgeShape):
            return Wedge(
                (shape.center_x, shape.center_y),
                shape.radius,
                shape.theta1,
                shape.theta2,
                **common,
            )
        if isinstance(shape, CircleShape):
            return Circle((shape.center_x, shape.center_y), shape.radius, **common)
        raise TypeError(f"Unknown shape: {type(shape).__name__}")

    def _create_chart_artist(
        self,
        geometry: ChartGeometry,
        lng: float,
        lat: float,
    ) -> AnnotationBbox:
        """Create an AnnotationBbox holding the chart patches."""
        area = DrawingArea(geometry.width, geometry.height, 0, 0, clip=False)
        for shape in geometry.shapes:
            area.add_artist(self._create_patch(shape, geometry.opacity))
        for label in geometry.labels:
            area.add_artist(
                Text(
                    label.x,
                    label.y,
                    label.text,
                    fontsize=label.fontsize,
                    horizontalalignment="center",
                    verticalalignment="center",
                )
            )
        artist = AnnotationBbox(
            area,
            (lng, lat),
            xycoords="data",
            frameon=False,
            pad=0.0,
            box_alignment=(0.5, 0.5),
            annotation_clip=True,
        )
        artist.set_zorder(self.zorder)
        return artist

    def draw_entry(self, entry: OverlayEntry) -> None:
        """Draw ``entry.geometry``, replacing the entry's previous artist."""
        self.remove_entry(entry)
        if entry.geometry is None:
            return
        artist = self._create_chart_artist(entry.geometry, entry.lng, entry.lat)
        self.ax.add_artist(artist)
        entry.artist = artist

    def remove_entry(self, entry: OverlayEntry) -> None:
        if entry.artist is not None:
            entry.artist.remove()
            entry.artist = None

    def draw_legend(
        self,
        items: Sequence[tuple[str, str]],
        position: str = "upper right",
    ) -> None:
        """Legend of (series name, color) pairs; an empty list removes it."""
        self.remove_legend()
        if not items:
            return
        handles = [Patch(facecolor=color, label=name) for name, color in items]
        self.legend_artist = self.ax.legend(handles=handles, loc=position)

    def remove_legend(self) -> None:
        if self.legend_artist is not None:
            self.legend_artist.remove()
            self.legend_artist = None

    def frame_points(
        self,
        lats: Sequence[float],
        lngs: Sequence[float],
        pad_ratio: float = 0.1,
    ) -> None:
        """Set the axes limits to the padded bounds of the points."""
        (xmin, xmax), (ymin, ymax) = compute_bounds(lngs, lats, pad_ratio=pad_ratio)
        self.ax.set_xlim(xmin, xmax)
        self.ax.set_ylim(ymin, ymax)

    def refresh(self) -> None:
        canvas = self.ax.figure.canvas if self.ax.figure is not None else None
        if canvas is not None:
            canvas.draw_idle()
