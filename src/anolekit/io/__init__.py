"""Data loaders for the lizard measurement table."""

from .lizards import (
    CATEGORY_COLUMNS,
    DEFAULT_DATA_PATH,
    MEASUREMENT_COLUMNS,
    REQUIRED_COLUMNS,
    LizardDataError,
    load_lizards,
)

__all__ = [
    "CATEGORY_COLUMNS",
    "DEFAULT_DATA_PATH",
    "MEASUREMENT_COLUMNS",
    "REQUIRED_COLUMNS",
    "LizardDataError",
    "load_lizards",
]
