"""Shared fixtures: headless matplotlib axes and the hydraulic/solar sample."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture
def ax():
    fig, ax = plt.subplots()
    yield ax
    plt.close(fig)


@pytest.fixture
def energy_points() -> dict:
    """Three regions with two production series."""

    return {
        "lat": [45.0, 46.0, 47.0],
        "lng": [2.0, 3.0, 4.0],
        "layer_id": ["A", "B", "C"],
        "data": {"hydraulic": [10.0, 20.0, 30.0], "solar": [5.0, 5.0, 5.0]},
    }
