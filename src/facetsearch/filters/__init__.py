"""
Faceted Filters for Listing Search

This module provides the faceted filter strategies that turn request
parameters into constraints on a shared listing query: keyword search,
hierarchical categories, flat tags, numeric ranges and date ranges.

Key Components:
- Filter: Abstract base class for all filters
- FilterRegistry: Catalog of named filters with priority ordering
- FilterFactory: Factory for creating filters from configuration
- Specialized filter implementations for each filter kind
"""

from .base import (
    ActiveFilterEntry,
    DateRangeValue,
    Filter,
    FilterKind,
    FilterSource,
    RangeValue,
    RenderOption,
)
from .registry import FilterRegistry
from .factory import FilterFactory
from .keyword import KeywordFilter
from .category import CategoryFilter
from .tag import TagFilter
from .range import RangeFilter
from .date_range import DateRangeFilter

__all__ = [
    "ActiveFilterEntry",
    "DateRangeValue",
    "Filter",
    "FilterKind",
    "FilterSource",
    "RangeValue",
    "RenderOption",
    "FilterRegistry",
    "FilterFactory",
    "KeywordFilter",
    "CategoryFilter",
    "TagFilter",
    "RangeFilter",
    "DateRangeFilter",
]
