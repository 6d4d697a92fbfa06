"""Shared fixtures for anolekit tests.

Provides a small in-memory lizard table with known category counts and a
CSV copy of it on disk. Matplotlib is forced onto the non-interactive Agg
backend so plotting tests never open windows.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

REPO_DATA = Path(__file__).resolve().parents[1] / "data" / "anoles.csv"


def _make_lizards() -> pd.DataFrame:
    """Two sites of five lizards plus one site of three.

    Site A: Color_morph Brown x3, Green x2 (two morphs).
    Site B: all Green (one morph).
    Site C: Blue, Brown, Green (three morphs, even).
    Height is an exact linear function of Limb at site A (Height = 10 * Limb).
    """
    return pd.DataFrame(
        {
            "Site": ["A"] * 5 + ["B"] * 5 + ["C"] * 3,
            "Color_morph": ["Brown", "Brown", "Brown", "Green", "Green"]
            + ["Green"] * 5
            + ["Blue", "Brown", "Green"],
            "Perch_type": ["Tree", "Shrub", "Tree", "Shrub", "Tree"]
            + ["Tree"] * 5
            + ["Shrub", "Shrub", "Tree"],
            "SVL": [50.0, 52.0, 54.0, 56.0, 58.0]
            + [48.0, 49.0, 50.0, 51.0, 52.0]
            + [55.0, 57.0, np.nan],
            "Tail": [65.0, 67.0, 70.0, 72.0, 75.0]
            + [60.0, 61.0, 63.0, 64.0, 66.0]
            + [71.0, 73.0, 74.0],
            "Limb": [8.0, 9.0, 10.0, 11.0, 12.0]
            + [8.5, 8.7, 9.0, 9.4, 9.9]
            + [9.0, 10.0, 11.0],
            "Height": [80.0, 90.0, 100.0, 110.0, 120.0]
            + [95.0, 101.0, 99.0, 112.0, 118.0]
            + [100.0, 121.0, 139.0],
        }
    )


@pytest.fixture
def lizards() -> pd.DataFrame:
    """Fresh copy of the small lizard table."""
    return _make_lizards()


@pytest.fixture
def lizard_csv(tmp_path: Path) -> Path:
    """The small lizard table written to a CSV file."""
    path = tmp_path / "anoles.csv"
    _make_lizards().to_csv(path, index=False)
    return path


@pytest.fixture
def repo_data() -> Path:
    """The sample dataset shipped with the repository."""
    return REPO_DATA
