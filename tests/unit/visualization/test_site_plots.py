"""Unit tests for the per-site plotting helpers (Agg backend, no display)."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from matplotlib import pyplot as plt
from matplotlib.figure import Figure

from anolekit.tidy import UnknownColumnError
from anolekit.visualization import (
    fit_line,
    plot_site,
    plot_sites_faceted,
    save_figure,
    variable_plot,
)

# ---------------------------------------------------------------------------
# fit_line
# ---------------------------------------------------------------------------


def test_fit_exact_line() -> None:
    x = np.array([1.0, 2.0, 3.0, 4.0])
    fit = fit_line(x, 2.0 * x + 1.0)
    assert fit.slope == pytest.approx(2.0)
    assert fit.intercept == pytest.approx(1.0)
    assert fit.rvalue == pytest.approx(1.0)
    assert fit.n == 4


def test_fit_drops_non_finite_pairs() -> None:
    fit = fit_line([1.0, 2.0, np.nan, 3.0, 4.0], [3.0, 5.0, 100.0, 7.0, np.inf])
    assert fit.n == 3
    assert fit.slope == pytest.approx(2.0)


def test_confidence_band_brackets_prediction() -> None:
    rng = np.random.default_rng(seed=3)
    x = np.linspace(0.0, 10.0, 30)
    y = 0.5 * x + rng.normal(scale=0.4, size=x.size)
    fit = fit_line(x, y)
    xs = np.array([0.0, 5.0, 10.0])
    lower, upper = fit.confidence_band(xs)
    center = fit.predict(xs)
    assert np.all(lower < center)
    assert np.all(center < upper)
    # Band is narrowest near the mean of x.
    widths = upper - lower
    assert widths[1] < widths[0]
    assert widths[1] < widths[2]


def test_wider_confidence_gives_wider_band() -> None:
    x = np.arange(10.0)
    y = x + np.tile([0.3, -0.3], 5)
    narrow = fit_line(x, y, confidence=0.8)
    wide = fit_line(x, y, confidence=0.99)
    lo_n, hi_n = narrow.confidence_band([4.5])
    lo_w, hi_w = wide.confidence_band([4.5])
    assert (hi_w - lo_w)[0] > (hi_n - lo_n)[0]


def test_fit_needs_three_points() -> None:
    with pytest.raises(ValueError, match="at least 3"):
        fit_line([1.0, 2.0], [1.0, 2.0])


def test_fit_rejects_constant_x() -> None:
    with pytest.raises(ValueError, match="constant"):
        fit_line([2.0, 2.0, 2.0], [1.0, 2.0, 3.0])


def test_fit_rejects_bad_confidence() -> None:
    with pytest.raises(ValueError):
        fit_line([1.0, 2.0, 3.0], [1.0, 2.0, 3.0], confidence=1.5)


# ---------------------------------------------------------------------------
# Plots
# ---------------------------------------------------------------------------


def test_plot_site_draws_points_line_and_band(lizards: pd.DataFrame) -> None:
    fig = plot_site(lizards, "A")
    ax = fig.axes[0]

    assert ax.get_title() == "A"
    assert ax.get_xlabel() == "Limb"
    assert ax.get_ylabel() == "Height"
    assert len(ax.collections) == 2  # scatter + confidence band
    assert len(ax.collections[0].get_offsets()) == 5
    (line,) = ax.get_lines()
    # Site A has Height == 10 * Limb exactly.
    xs, ys = line.get_data()
    np.testing.assert_allclose(ys, 10.0 * np.asarray(xs))
    plt.close(fig)


def test_plot_site_passes_point_and_line_kwargs(lizards: pd.DataFrame) -> None:
    fig = plot_site(
        lizards,
        "B",
        point_kws={"s": 50.0, "alpha": 0.5},
        line_kws={"color": "red", "linewidth": 3.0},
    )
    ax = fig.axes[0]
    assert ax.collections[0].get_alpha() == 0.5
    assert ax.get_lines()[0].get_linewidth() == 3.0
    plt.close(fig)


def test_plot_site_unknown_site(lizards: pd.DataFrame) -> None:
    with pytest.raises(ValueError, match="known sites: A, B, C"):
        plot_site(lizards, "Z")


def test_plot_site_matches_label_text(lizards: pd.DataFrame) -> None:
    """An integer site argument finds integer or text site labels."""
    coded = lizards.assign(Site=lizards["Site"].map({"A": 1, "B": 2, "C": 3}))
    fig = plot_site(coded, "1")
    assert len(fig.axes[0].collections[0].get_offsets()) == 5
    plt.close(fig)

    fig = plot_site(lizards.assign(Site=lizards["Site"].map({"A": "1"}).fillna("9")), 1)
    assert len(fig.axes[0].collections[0].get_offsets()) == 5
    plt.close(fig)


def test_fitted_line_spans_finite_x_only(lizards: pd.DataFrame) -> None:
    lizards.loc[0, "Limb"] = np.inf
    fig = plot_site(lizards, "A")
    (line,) = fig.axes[0].get_lines()
    xs = np.asarray(line.get_xdata())
    assert np.all(np.isfinite(xs))
    assert xs.min() == pytest.approx(9.0)
    assert xs.max() == pytest.approx(12.0)
    plt.close(fig)


def test_plot_site_onto_existing_axes(lizards: pd.DataFrame) -> None:
    fig, ax = plt.subplots()
    returned = plot_site(lizards, "C", "SVL", "Tail", ax=ax)
    assert returned is fig
    # Site C has a missing SVL, leaving two points: no line is drawn.
    assert len(ax.get_lines()) == 0
    plt.close(fig)


def test_variable_plot_with_column_names(lizards: pd.DataFrame) -> None:
    fig = variable_plot(lizards, "A", "SVL", "Tail", color="green")
    ax = fig.axes[0]
    assert ax.get_xlabel() == "SVL"
    assert ax.get_ylabel() == "Tail"
    assert ax.get_lines()[0].get_color() == "green"
    plt.close(fig)


def test_variable_plot_with_callable(lizards: pd.DataFrame) -> None:
    fig = variable_plot(lizards, "A", "SVL", lambda d: d["Tail"] / d["SVL"])
    assert isinstance(fig, Figure)
    assert fig.axes[0].get_ylabel() == "<expression>"
    plt.close(fig)


def test_variable_plot_unknown_column(lizards: pd.DataFrame) -> None:
    with pytest.raises(UnknownColumnError):
        variable_plot(lizards, "A", "snout_length", "Tail")


def test_faceted_one_panel_per_site(lizards: pd.DataFrame) -> None:
    fig = plot_sites_faceted(lizards, ncols=2)
    titled = [ax for ax in fig.axes if ax.get_title()]
    assert [ax.get_title() for ax in titled] == ["A", "B", "C"]
    # 2x2 grid: the spare panel is hidden.
    assert len(fig.axes) == 4
    assert not fig.axes[3].axison
    plt.close(fig)


def test_save_figure(tmp_path: Path, lizards: pd.DataFrame) -> None:
    fig = plot_site(lizards, "A")
    path = save_figure(fig, tmp_path / "nested" / "site_A.png", dpi=50)
    assert path.exists()
    assert path.stat().st_size > 0
    assert not plt.fignum_exists(fig.number)
