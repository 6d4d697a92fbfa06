"""Per-site scatter plots with a least-squares line and confidence band.

:func:`plot_site` draws one measurement against another for the lizards of a
single site. :func:`variable_plot` accepts arbitrary column references for
both axes. :func:`plot_sites_faceted` puts every site on its own panel with
independent axis scales.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from matplotlib import pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from scipy import stats

from anolekit.tidy import ColumnRef, column_label, resolve_column

__all__ = [
    "LinearFit",
    "fit_line",
    "plot_site",
    "plot_sites_faceted",
    "save_figure",
    "variable_plot",
]

logger = logging.getLogger(__name__)

_MIN_FIT_POINTS = 3


# ---------------------------------------------------------------------------
# Linear fit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinearFit:
    """Ordinary least-squares fit of ``y = intercept + slope * x``.

    Attributes:
        slope: Fitted slope.
        intercept: Fitted intercept.
        rvalue: Pearson correlation coefficient.
        pvalue: Two-sided p-value for a zero slope.
        n: Number of points used.
        x_mean: Mean of the fitted x values.
        sxx: Sum of squared x deviations from ``x_mean``.
        residual_std: Residual standard error, ``sqrt(SSE / (n - 2))``.
        confidence: Confidence level for :meth:`confidence_band`.
    """

    slope: float
    intercept: float
    rvalue: float
    pvalue: float
    n: int
    x_mean: float
    sxx: float
    residual_std: float
    confidence: float = 0.95

    def predict(self, xs: Any) -> np.ndarray:
        """Fitted mean response at *xs*."""
        return self.intercept + self.slope * np.asarray(xs, dtype=float)

    def confidence_band(self, xs: Any) -> tuple[np.ndarray, np.ndarray]:
        """Lower and upper bounds of the mean-response confidence interval."""
        xs = np.asarray(xs, dtype=float)
        t_crit = stats.t.ppf(0.5 + self.confidence / 2.0, self.n - 2)
        se = self.residual_std * np.sqrt(
            1.0 / self.n + (xs - self.x_mean) ** 2 / self.sxx
        )
        center = self.predict(xs)
        return center - t_crit * se, center + t_crit * se


def fit_line(x: Any, y: Any, confidence: float = 0.95) -> LinearFit:
    """Fit a straight line through the finite ``(x, y)`` pairs.

    Args:
        x: Predictor values.
        y: Response values, same length as *x*.
        confidence: Confidence level in (0, 1) for the band.

    Returns:
        The fitted :class:`LinearFit`.

    Raises:
        ValueError: If *x* and *y* differ in length, *confidence* is out of
            range, fewer than three finite pairs remain, or *x* is constant.
    """
    x_arr = np.asarray(x, dtype=float).reshape(-1)
    y_arr = np.asarray(y, dtype=float).reshape(-1)
    if x_arr.shape != y_arr.shape:
        raise ValueError(f"x and y differ in length: {x_arr.size} vs {y_arr.size}")
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must be in (0, 1), got {confidence}")

    finite = np.isfinite(x_arr) & np.isfinite(y_arr)
    x_arr, y_arr = x_arr[finite], y_arr[finite]
    if x_arr.size < _MIN_FIT_POINTS:
        raise ValueError(
            f"need at least {_MIN_FIT_POINTS} finite points to fit, got {x_arr.size}"
        )
    if np.ptp(x_arr) == 0:
        raise ValueError("x is constant; slope is undefined")

    result = stats.linregress(x_arr, y_arr)
    residuals = y_arr - (result.intercept + result.slope * x_arr)
    n = int(x_arr.size)
    x_mean = float(x_arr.mean())
    return LinearFit(
        slope=float(result.slope),
        intercept=float(result.intercept),
        rvalue=float(result.rvalue),
        pvalue=float(result.pvalue),
        n=n,
        x_mean=x_mean,
        sxx=float(np.sum((x_arr - x_mean) ** 2)),
        residual_std=float(math.sqrt(np.sum(residuals**2) / (n - 2))),
        confidence=confidence,
    )


# ---------------------------------------------------------------------------
# Shared drawing helper
# ---------------------------------------------------------------------------


def _draw_scatter_with_fit(
    ax: Axes,
    x_values: pd.Series,
    y_values: pd.Series,
    point_kws: dict[str, Any],
    line_kws: dict[str, Any],
    confidence: float,
) -> LinearFit | None:
    """Scatter the points and overlay the fitted line with its band.

    Returns the fit, or ``None`` when there are too few points to fit (the
    points are still drawn).
    """
    ax.scatter(x_values, y_values, **point_kws)

    try:
        fit = fit_line(x_values, y_values, confidence=confidence)
    except ValueError as exc:
        logger.warning("Skipping fitted line: %s", exc)
        return None

    x_arr = x_values.to_numpy(dtype=float, na_value=np.nan)
    y_arr = y_values.to_numpy(dtype=float, na_value=np.nan)
    x_fit = x_arr[np.isfinite(x_arr) & np.isfinite(y_arr)]
    xs = np.linspace(float(x_fit.min()), float(x_fit.max()), 100)
    (line,) = ax.plot(xs, fit.predict(xs), **line_kws)
    lower, upper = fit.confidence_band(xs)
    ax.fill_between(xs, lower, upper, color=line.get_color(), alpha=0.2, linewidth=0)
    return fit


def _site_rows(data: pd.DataFrame, site: str, site_column: str) -> pd.DataFrame:
    if site_column not in data.columns:
        raise KeyError(site_column)
    labels = data[site_column]
    rows = data.loc[labels.notna() & (labels.astype(str) == str(site))]
    if rows.empty:
        known = ", ".join(str(s) for s in sorted(labels.dropna().unique(), key=str))
        raise ValueError(f"no observations for site {site!r}; known sites: {known}")
    return rows


def _axes_for(ax: Axes | None) -> tuple[Figure, Axes]:
    if ax is None:
        fig, ax = plt.subplots(figsize=(5, 4))
        return fig, ax
    return ax.figure, ax


# ---------------------------------------------------------------------------
# Public plotting functions
# ---------------------------------------------------------------------------


def plot_site(
    data: pd.DataFrame,
    site: str,
    x: ColumnRef = "Limb",
    y: ColumnRef = "Height",
    *,
    site_column: str = "Site",
    ax: Axes | None = None,
    point_kws: dict[str, Any] | None = None,
    line_kws: dict[str, Any] | None = None,
    confidence: float = 0.95,
) -> Figure:
    """Scatter *y* against *x* for one site, with a fitted line.

    Args:
        data: Lizard table.
        site: Value of *site_column* to keep.
        x: Column reference for the horizontal axis.
        y: Column reference for the vertical axis.
        site_column: Column holding the site label.
        ax: Axes to draw on; a new figure is created when omitted.
        point_kws: Extra keyword arguments for ``Axes.scatter``.
        line_kws: Extra keyword arguments for ``Axes.plot`` (fitted line).
        confidence: Confidence level of the shaded band.

    Returns:
        The figure containing the plot.

    Raises:
        ValueError: If *site* has no rows.
        UnknownColumnError: If *x* or *y* names a missing column.
    """
    rows = _site_rows(data, site, site_column)
    x_values = resolve_column(rows, x)
    y_values = resolve_column(rows, y)
    fig, ax = _axes_for(ax)
    _draw_scatter_with_fit(
        ax,
        x_values,
        y_values,
        point_kws=dict(point_kws or {}),
        line_kws=dict(line_kws or {}),
        confidence=confidence,
    )
    ax.set_title(str(site))
    ax.set_xlabel(column_label(x))
    ax.set_ylabel(column_label(y))
    return fig


def variable_plot(
    data: pd.DataFrame,
    site: str,
    x: ColumnRef,
    y: ColumnRef,
    **kwargs: Any,
) -> Figure:
    """Like :func:`plot_site` with required axes and shared styling.

    Keyword arguments are applied to both the points and the fitted line,
    so only properties both artists understand belong here (``color``,
    ``alpha``, ``zorder``, ``label``).
    """
    return plot_site(data, site, x, y, point_kws=kwargs, line_kws=kwargs)


def plot_sites_faceted(
    data: pd.DataFrame,
    x: ColumnRef = "Limb",
    y: ColumnRef = "Height",
    *,
    site_column: str = "Site",
    ncols: int = 2,
    point_kws: dict[str, Any] | None = None,
    line_kws: dict[str, Any] | None = None,
    confidence: float = 0.95,
) -> Figure:
    """One panel per site, each with its own axis ranges."""
    sites = sorted(data[site_column].dropna().unique(), key=str)
    if not sites:
        raise ValueError("no sites to plot")

    ncols = max(1, min(ncols, len(sites)))
    nrows = math.ceil(len(sites) / ncols)
    fig, axes = plt.subplots(
        nrows, ncols, figsize=(4 * ncols, 3.5 * nrows), squeeze=False
    )
    axes_flat = axes.flatten()

    for ax, site in zip(axes_flat, sites):
        plot_site(
            data,
            site,
            x,
            y,
            site_column=site_column,
            ax=ax,
            point_kws=point_kws,
            line_kws=line_kws,
            confidence=confidence,
        )
    for ax in axes_flat[len(sites) :]:
        ax.axis("off")

    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, dpi: int = 150) -> Path:
    """Write *fig* as an image at *path* and close it.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(path), dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info("Figure saved to %s", path)
    return path
