"""Summary statistics and the family of normalize functions.

The normalize variants compute the same thing and differ only in how they
accept the missing-value switch:

- :func:`normalize` takes arbitrary keyword arguments and forwards them to
  :func:`mean` and :func:`std`, so ``na_rm=True`` works without ever being
  declared in its own signature.
- :func:`normalize_with_default` declares ``na_rm=True`` as a default; it can
  be overridden by position or by keyword.
- :func:`normalize_keyword_only` places ``na_rm`` after ``*`` so it can only
  be overridden by keyword.
- :func:`normalize_general` adds a ``method`` option resolved by
  :func:`match_arg`.

Missing values (NaN, ``None``, ``pd.NA``) propagate through every statistic
unless ``na_rm=True`` drops them first. Outputs keep the input's positions,
so a missing input stays missing in the normalized output.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

__all__ = [
    "NORMALIZE_METHODS",
    "arithmetic_mean",
    "match_arg",
    "mean",
    "normalize",
    "normalize_general",
    "normalize_keyword_only",
    "normalize_with_default",
    "std",
]

NORMALIZE_METHODS: tuple[str, ...] = ("sd", "mean", "center")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _as_float_array(x: Any) -> np.ndarray:
    """Convert a sequence, array, or Series to a 1-D float array (NaN for missing)."""
    if isinstance(x, pd.Series):
        return x.to_numpy(dtype=float, na_value=np.nan)
    array = np.asarray(x)
    if array.dtype == object:
        # numpy cannot cast pd.NA; the nullable float array can.
        return pd.array(array.reshape(-1), dtype="Float64").to_numpy(
            dtype=float, na_value=np.nan
        )
    return array.astype(float).reshape(-1)


def _wrap_like(x: Any, out: np.ndarray) -> np.ndarray | pd.Series:
    """Return *out* as a Series aligned with *x* when *x* is a Series."""
    if isinstance(x, pd.Series):
        return pd.Series(out, index=x.index, name=x.name)
    return out


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def mean(x: Any, na_rm: bool = False) -> float:
    """Arithmetic mean with opt-in missing-value removal.

    Args:
        x: Numeric values.
        na_rm: Drop missing values before averaging.

    Returns:
        The mean, or NaN if any value is missing (and *na_rm* is False) or no
        values remain.
    """
    values = _as_float_array(x)
    if na_rm:
        values = values[~np.isnan(values)]
    if values.size == 0:
        return float("nan")
    return float(values.sum() / values.size)


def std(x: Any, na_rm: bool = False) -> float:
    """Sample standard deviation (``n - 1`` denominator).

    Args:
        x: Numeric values.
        na_rm: Drop missing values first.

    Returns:
        The standard deviation, or NaN when a value is missing (and *na_rm*
        is False) or fewer than two values remain.
    """
    values = _as_float_array(x)
    if na_rm:
        values = values[~np.isnan(values)]
    if values.size < 2:
        return float("nan")
    return float(np.std(values, ddof=1))


def arithmetic_mean(x: Sequence[float]) -> float:
    """Hand-written mean: the sum divided by the count."""
    return sum(x) / len(x)


# ---------------------------------------------------------------------------
# Option matching
# ---------------------------------------------------------------------------


def match_arg(
    value: str | None, choices: Sequence[str], arg_name: str = "method"
) -> str:
    """Resolve *value* against an ordered list of allowed *choices*.

    ``None`` selects the first choice. An exact match wins; otherwise
    *value* may be an unambiguous prefix of exactly one choice
    (``"m"`` -> ``"mean"``).

    Args:
        value: Requested option, possibly abbreviated.
        choices: Allowed options; the first is the default.
        arg_name: Argument name used in the error message.

    Returns:
        The matched choice.

    Raises:
        ValueError: If *value* matches no choice or more than one.
    """
    if not choices:
        raise ValueError("match_arg() needs at least one choice")
    if value is None:
        return choices[0]
    if value in choices:
        return value

    matches = [c for c in choices if value and c.startswith(value)]
    if len(matches) == 1:
        return matches[0]

    options = ", ".join(repr(c) for c in choices)
    if len(matches) > 1:
        raise ValueError(f"{arg_name}={value!r} is ambiguous; one of {options}")
    raise ValueError(f"{arg_name} should be one of {options}, not {value!r}")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize(x: Any, **kwargs: Any) -> np.ndarray | pd.Series:
    """Center *x* on its mean and divide by its standard deviation.

    Any keyword arguments are passed straight through to :func:`mean` and
    :func:`std`. ``normalize(x, na_rm=True)`` therefore works even though
    ``na_rm`` is not a parameter of this function, and an unsupported
    keyword raises ``TypeError`` from the inner call.
    """
    values = _as_float_array(x)
    mean_val = mean(values, **kwargs)
    stdev = std(values, **kwargs)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = (values - mean_val) / stdev
    return _wrap_like(x, out)


def normalize_with_default(
    x: Any, na_rm: bool = True, **kwargs: Any
) -> np.ndarray | pd.Series:
    """Like :func:`normalize`, but ignore missing values unless told otherwise.

    ``na_rm`` is an ordinary positional-or-keyword parameter, so
    ``normalize_with_default(x, False)`` and
    ``normalize_with_default(x, na_rm=False)`` are equivalent.
    """
    values = _as_float_array(x)
    mean_val = mean(values, na_rm=na_rm, **kwargs)
    stdev = std(values, na_rm=na_rm, **kwargs)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = (values - mean_val) / stdev
    return _wrap_like(x, out)


def normalize_keyword_only(
    x: Any, *, na_rm: bool = True, **kwargs: Any
) -> np.ndarray | pd.Series:
    """Like :func:`normalize_with_default`, but ``na_rm`` is keyword-only.

    A second positional argument is a ``TypeError`` instead of silently
    landing in ``na_rm``.
    """
    values = _as_float_array(x)
    mean_val = mean(values, na_rm=na_rm, **kwargs)
    stdev = std(values, na_rm=na_rm, **kwargs)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = (values - mean_val) / stdev
    return _wrap_like(x, out)


def normalize_general(
    x: Any,
    method: str | None = "sd",
    *,
    na_rm: bool = True,
) -> np.ndarray | pd.Series:
    """Normalize *x* by one of several conventions.

    Methods:
        ``"sd"``: ``(x - mean) / sd`` (z-score, the default).
        ``"mean"``: ``x / mean`` (relative to the mean).
        ``"center"``: ``x - mean`` (centered, scale unchanged).

    Args:
        x: Numeric values.
        method: One of :data:`NORMALIZE_METHODS`, or an unambiguous prefix
            of one. ``None`` selects ``"sd"``.
        na_rm: Ignore missing values when computing the mean and sd.

    Returns:
        Normalized values, Series in / Series out.

    Raises:
        ValueError: If *method* does not match a known method.
    """
    method = match_arg(method, NORMALIZE_METHODS)
    values = _as_float_array(x)
    mean_val = mean(values, na_rm=na_rm)

    with np.errstate(divide="ignore", invalid="ignore"):
        if method == "sd":
            out = (values - mean_val) / std(values, na_rm=na_rm)
        elif method == "mean":
            out = values / mean_val
        else:
            out = values - mean_val
    return _wrap_like(x, out)
