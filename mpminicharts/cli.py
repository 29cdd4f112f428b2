#!/usr/bin/env python3
# tab-width:4

from __future__ import annotations

import sys
from pathlib import Path

import click
from asserttool import ic
from click_auto_help import AHGroup
from clicktool import CONTEXT_SETTINGS
from clicktool import click_add_options
from clicktool import click_global_options
from clicktool import tvicgvd
from configtool import get_config_directory
from eprint import eprint
from globalverbose import gvd

from .ChartType import ChartType
from .exceptions import MinichartsError
from .OverlayRegistry import OverlayRegistry
from .utils import load_rows_from_stdin

APP_NAME = "mpminicharts"

CHART_TYPE_CHOICES = [t.value for t in ChartType] + ["polar"]


@click.group(context_settings=CONTEXT_SETTINGS, no_args_is_help=True, cls=AHGroup)
@click_add_options(click_global_options)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose_inf: bool,
    dict_output: bool,
    verbose: bool = False,
) -> None:
    tty, verbose = tvicgvd(
        ctx=ctx,
        verbose=verbose,
        verbose_inf=verbose_inf,
        ic=ic,
        gvd=gvd,
    )
    config_directory = get_config_directory(click_instance=click, app_name=APP_NAME)
    config_directory.mkdir(exist_ok=True)
    ctx.obj["config_directory"] = config_directory


@cli.command("plot")
@click.option(
    "--type",
    "chart_type",
    type=click.Choice(CHART_TYPE_CHOICES),
    default="auto",
    help="Chart kind (single-series data is always drawn as circles)",
)
@click.option("--width", type=float, default=60.0, help="Chart width in pixels")
@click.option("--height", type=float, default=60.0, help="Chart height in pixels")
@click.option(
    "--palette",
    type=str,
    multiple=True,
    help="Series color, repeat for each series, or one matplotlib colormap name",
)
@click.option(
    "--max-value",
    type=float,
    help="Global maximum for every series (default: data maximum)",
)
@click.option("--show-labels", is_flag=True, help="Draw values on the charts")
@click.option("--label-precision", type=int, default=0, help="Label decimal places")
@click.option("--opacity", type=float, default=1.0, help="Chart opacity in [0, 1]")
@click.option("--no-legend", is_flag=True, help="Do not draw the series legend")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the figure to this file instead of opening a window",
)
@click_add_options(click_global_options)
@click.pass_context
def plot(
    ctx: click.Context,
    chart_type: str,
    width: float,
    height: float,
    palette: tuple[str, ...],
    max_value: float | None,
    show_labels: bool,
    label_precision: int,
    opacity: float,
    no_legend: bool,
    output: Path | None,
    verbose_inf: bool,
    dict_output: bool,
    verbose: bool = False,
) -> None:
    """
    Minicharts on a lng/lat map: reads (layer_id, lat, lng, value...) tuples from stdin via messagepack.

    The first tuple is the header naming the series columns.
    """
    _tty, _verbose = tvicgvd(
        ctx=ctx,
        verbose=verbose,
        verbose_inf=verbose_inf,
        ic=ic,
        gvd=gvd,
    )

    import matplotlib  # pylint: disable=import-outside-toplevel

    if output is not None:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # pylint: disable=import-outside-toplevel

    print("[INFO] Reading minichart rows from stdin...")
    try:
        header, rows = load_rows_from_stdin()
    except MinichartsError as e:
        eprint(f"[ERROR] {e}")
        sys.exit(1)

    if not rows:
        print("[ERROR] No valid rows loaded. Exiting.")
        sys.exit(1)

    series = header[3:]
    if _verbose:
        ic(header, len(rows))

    options = {
        "chart_type": chart_type,
        "width": width,
        "height": height,
        "show_labels": show_labels,
        "label_precision": label_precision,
        "opacity": opacity,
        "legend": not no_legend,
        "max_values": max_value,
    }
    if palette:
        options["color_palette"] = palette[0] if len(palette) == 1 else list(palette)

    fig, ax = plt.subplots(figsize=(10, 8))
    ax.set_xlabel("longitude")
    ax.set_ylabel("latitude")
    ax.grid(True, alpha=0.3)

    registry = OverlayRegistry(ax)
    try:
        registry.populate(
            lat=[row[1] for row in rows],
            lng=[row[2] for row in rows],
            data=[row[3:] for row in rows],
            columns=series,
            layer_id=[row[0] for row in rows],
            **options,
        )
    except MinichartsError as e:
        eprint(f"[ERROR] {e}")
        sys.exit(1)

    registry.frame_points()
    if _verbose:
        ic(registry.get_statistics())

    if output is not None:
        fig.savefig(output, dpi=150, bbox_inches="tight")
        print(f"[INFO] Wrote {output}")
    else:
        plt.show()
