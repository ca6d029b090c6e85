"""
Search composition and rendering.

- SearchQuery: builds the listing query for a request
- FilterRenderer: describes filter controls, search forms and active filters
"""

from .composer import SearchQuery, ORDERBY_FIELDS, ORDERBY_LABELS
from .renderer import (
    ActiveFilterChip,
    FilterRenderer,
    OrderbyDescriptor,
    RenderDescriptor,
    SearchFormDescriptor,
)

__all__ = [
    "SearchQuery",
    "ORDERBY_FIELDS",
    "ORDERBY_LABELS",
    "FilterRenderer",
    "RenderDescriptor",
    "OrderbyDescriptor",
    "SearchFormDescriptor",
    "ActiveFilterChip",
]
