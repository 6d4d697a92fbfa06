"""Data-frame helpers that take column references instead of values.

A helper such as :func:`above_mean` cannot receive the column values
directly: the caller only knows *which* column it wants, and the values
exist only relative to the frame the helper is given. So the caller passes a
reference and the helper resolves it against the frame:

- a column name, ``"SVL"``;
- a callable taking the frame, ``lambda d: d["SVL"] / d["Limb"]``, the same
  convention ``DataFrame.assign`` and ``DataFrame.loc`` accept.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

import pandas as pd

__all__ = [
    "ColumnRef",
    "UnknownColumnError",
    "above_mean",
    "add_one_to_col",
    "column_label",
    "resolve_column",
]

ColumnRef = Union[str, Callable[[pd.DataFrame], pd.Series]]


class UnknownColumnError(KeyError):
    """A column name did not match any column of the frame."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(name)
        self.name = name
        self.available = available

    def __str__(self) -> str:
        return (
            f"column {self.name!r} not found; "
            f"available columns: {', '.join(self.available)}"
        )


def resolve_column(data: pd.DataFrame, ref: ColumnRef) -> pd.Series:
    """Evaluate a column reference against *data*.

    Raises:
        UnknownColumnError: If *ref* is a name that is not a column of *data*.
        TypeError: If *ref* is neither a string nor a callable, or the
            callable does not return a Series.
    """
    if isinstance(ref, str):
        if ref not in data.columns:
            raise UnknownColumnError(ref, [str(c) for c in data.columns])
        return data[ref]
    if callable(ref):
        values = ref(data)
        if not isinstance(values, pd.Series):
            raise TypeError(
                f"column reference {column_label(ref)} returned "
                f"{type(values).__name__}, expected a Series"
            )
        return values
    raise TypeError(
        f"column reference must be a name or a callable, not {type(ref).__name__}"
    )


def column_label(ref: ColumnRef) -> str:
    """Human-readable label for *ref* (used for axis titles)."""
    if isinstance(ref, str):
        return ref
    name = getattr(ref, "__name__", None)
    if name and name != "<lambda>":
        return name
    return "<expression>"


def above_mean(data: pd.DataFrame, variable: ColumnRef) -> pd.DataFrame:
    """Rows of *data* where *variable* is above its mean (missing values ignored)."""
    values = resolve_column(data, variable)
    return data.loc[values > values.mean(skipna=True)]


def add_one_to_col(
    data: pd.DataFrame, variable: ColumnRef, var_name: str
) -> pd.DataFrame:
    """Return a copy of *data* with a new column ``var_name = variable + 1``."""
    if not isinstance(var_name, str) or not var_name:
        raise TypeError("var_name must be a non-empty string")
    return data.assign(**{var_name: resolve_column(data, variable) + 1})
