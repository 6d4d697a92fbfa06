"""Summary statistics, normalization variants, and Shannon diversity."""

from .diversity import (
    diversity_by_group,
    diversity_by_group_inline,
    shannon_diversity,
)
from .summary import (
    NORMALIZE_METHODS,
    arithmetic_mean,
    match_arg,
    mean,
    normalize,
    normalize_general,
    normalize_keyword_only,
    normalize_with_default,
    std,
)

__all__ = [
    "NORMALIZE_METHODS",
    "arithmetic_mean",
    "diversity_by_group",
    "diversity_by_group_inline",
    "match_arg",
    "mean",
    "normalize",
    "normalize_general",
    "normalize_keyword_only",
    "normalize_with_default",
    "shannon_diversity",
    "std",
]
