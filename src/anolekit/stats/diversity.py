"""Shannon diversity of category labels, per value list and per group."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

__all__ = [
    "diversity_by_group",
    "diversity_by_group_inline",
    "shannon_diversity",
]

logger = logging.getLogger(__name__)


def shannon_diversity(values: Any) -> float:
    """Effective number of categories, ``exp(-sum(p_i * log(p_i)))``.

    ``p_i`` is the proportion of observations in category ``i``. Missing
    values are not a category. With no observations the sum is empty and the
    result is ``exp(0) == 1.0``.

    Args:
        values: Category labels (list, array, or Series).

    Returns:
        Diversity between 1 (one category) and the number of categories
        (all equally common).
    """
    counts = (
        pd.Series(values, dtype=object).value_counts(dropna=True).to_numpy(dtype=float)
    )
    if counts.size == 0:
        return 1.0
    proportions = counts / counts.sum()
    return float(np.exp(-np.sum(proportions * np.log(proportions))))


def diversity_by_group(
    data: pd.DataFrame, by: str, **named_columns: str
) -> pd.DataFrame:
    """Shannon diversity of one or more category columns within each group.

    Example::

        diversity_by_group(
            lizards,
            "Site",
            color_diversity="Color_morph",
            perch_diversity="Perch_type",
        )

    Args:
        data: Input frame.
        by: Grouping column.
        **named_columns: Output column name -> category column to summarize.

    Returns:
        One row per group (``by`` as a regular column) and one column per
        keyword.

    Raises:
        ValueError: If no output columns were requested.
        KeyError: If *by* or a category column is not in *data*.
    """
    if not named_columns:
        raise ValueError("diversity_by_group() needs at least one name=column pair")
    for column in (by, *named_columns.values()):
        if column not in data.columns:
            raise KeyError(column)

    result = data.groupby(by, sort=True).agg(
        **{
            name: pd.NamedAgg(column=column, aggfunc=shannon_diversity)
            for name, column in named_columns.items()
        }
    )
    logger.debug("Diversity computed for %d group(s) of %s", len(result), by)
    return result.reset_index()


def diversity_by_group_inline(
    data: pd.DataFrame, by: str, column: str
) -> pd.DataFrame:
    """Same quantity as :func:`diversity_by_group`, spelled out step by step.

    Counts each (group, category) pair, turns counts into within-group
    proportions, then collapses each group to ``exp(-sum(p * log(p)))``.
    The result column is named ``diversity``.
    """
    counts = (
        data.dropna(subset=[column])
        .groupby([by, column], sort=True)
        .size()
        .rename("n_i")
        .reset_index()
    )
    counts["prop_i"] = counts["n_i"] / counts.groupby(by)["n_i"].transform("sum")
    counts["plogp"] = counts["prop_i"] * np.log(counts["prop_i"])
    # Groups whose categories are all missing sum to 0, i.e. diversity 1.
    groups = pd.Index(data[by].dropna().unique(), name=by).sort_values()
    summary = (
        counts.groupby(by, sort=True)["plogp"].sum().reindex(groups, fill_value=0.0)
    )
    return np.exp(-summary).rename("diversity").reset_index()
