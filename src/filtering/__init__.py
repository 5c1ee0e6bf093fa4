from __future__ import annotations

from .filters import (
    FILTER_OPTION_LIMIT,
    FilterOptions,
    FilterState,
    apply_filters,
    get_filter_options,
    search_grants,
)

__all__ = [
    "FILTER_OPTION_LIMIT",
    "FilterOptions",
    "FilterState",
    "apply_filters",
    "get_filter_options",
    "search_grants",
]
