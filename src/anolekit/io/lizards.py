"""Loader for the lizard (anole) measurement table.

The table is a delimited text file with one row per captured lizard. Only the
``Site`` column is required; known measurement columns are coerced to numeric
so a stray non-numeric cell becomes a missing value instead of turning the
whole column into strings.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

__all__ = [
    "CATEGORY_COLUMNS",
    "DEFAULT_DATA_PATH",
    "MEASUREMENT_COLUMNS",
    "REQUIRED_COLUMNS",
    "LizardDataError",
    "load_lizards",
]

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "data/anoles.csv"

REQUIRED_COLUMNS: tuple[str, ...] = ("Site",)
CATEGORY_COLUMNS: tuple[str, ...] = ("Site", "Color_morph", "Perch_type")
MEASUREMENT_COLUMNS: tuple[str, ...] = (
    "SVL",
    "Tail",
    "Limb",
    "Height",
    "Diameter",
    "Mass",
)


class LizardDataError(ValueError):
    """Raised when a lizard table is present but structurally unusable."""


def load_lizards(path: str | Path = DEFAULT_DATA_PATH) -> pd.DataFrame:
    """Read the lizard measurement table from *path*.

    Args:
        path: Path to a comma-delimited file with a header row.

    Returns:
        DataFrame with category columns read as text (so site ``01`` stays
        ``"01"``) and stripped of surrounding whitespace, and measurement columns as floats (unparseable cells become NaN).

    Raises:
        FileNotFoundError: If *path* does not exist.
        LizardDataError: If a required column is missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Lizard data file not found: {path}")

    # Category columns stay text even when every label looks numeric.
    header = pd.read_csv(path, nrows=0).columns
    frame = pd.read_csv(
        path, dtype={c: str for c in header if str(c).strip() in CATEGORY_COLUMNS}
    )
    frame.columns = [str(c).strip() for c in frame.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise LizardDataError(
            f"{path} is missing required column(s): {', '.join(missing)}"
        )

    for column in CATEGORY_COLUMNS:
        if column in frame.columns:
            frame[column] = frame[column].map(
                lambda v: v.strip() if isinstance(v, str) else v
            )

    for column in MEASUREMENT_COLUMNS:
        if column not in frame.columns:
            continue
        coerced = pd.to_numeric(frame[column], errors="coerce")
        n_bad = int(coerced.isna().sum() - frame[column].isna().sum())
        if n_bad:
            logger.warning(
                "%s: %d non-numeric value(s) in column %s set to missing",
                path.name,
                n_bad,
                column,
            )
        frame[column] = coerced.astype(float)

    logger.info(
        "Loaded %d lizard(s) from %s (%d site(s))",
        len(frame),
        path,
        frame["Site"].nunique(dropna=True),
    )
    return frame
