"""Site scatter plots with fitted lines."""

from .site_plots import (
    LinearFit,
    fit_line,
    plot_site,
    plot_sites_faceted,
    save_figure,
    variable_plot,
)

__all__ = [
    "LinearFit",
    "fit_line",
    "plot_site",
    "plot_sites_faceted",
    "save_figure",
    "variable_plot",
]
