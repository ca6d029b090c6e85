"""
Keyword search filter.

Free-text search box. The value is a single sanitized line of text; it only
counts as active once the trimmed text reaches ``min_length`` characters.
"""

from typing import Any, Dict

from facetsearch.filters.base import Filter, FilterKind, FilterSource, sanitize_text_field
from facetsearch.query import ListingQuery


MAX_KEYWORD_LENGTH = 200


class KeywordFilter(Filter):
    """
    Keyword (full-text) filter.

    Configuration options:
    - min_length: Minimum trimmed length before the keyword is active (default: 2)
    - placeholder: Placeholder text for the search input
    """

    DEFAULTS: Dict[str, Any] = {
        'name': 'keyword',
        'label': 'Search',
        'source': FilterSource.CUSTOM.value,
        'placeholder': 'Search listings...',
        'min_length': 2,
    }

    @property
    def kind(self) -> str:
        return FilterKind.TEXT.value

    @property
    def min_length(self) -> int:
        try:
            return int(self._config.get('min_length', 2))
        except (TypeError, ValueError):
            return 2

    def sanitize(self, value: Any) -> str:
        sanitized = sanitize_text_field(value)
        if len(sanitized) > MAX_KEYWORD_LENGTH:
            sanitized = sanitized[:MAX_KEYWORD_LENGTH].rstrip()
        return sanitized

    def is_active(self, value: Any) -> bool:
        return isinstance(value, str) and len(value.strip()) >= self.min_length

    def modify_query(self, query: ListingQuery, value: Any) -> None:
        """Set the query's search term."""
        if not self.is_active(value):
            return
        query.set('s', value.strip())

    def _load_options(self) -> Dict[str, str]:
        return {}

    def get_display_value(self, value: Any) -> str:
        return f'"{value if value is not None else ""}"'

    def get_attributes(self) -> Dict[str, Any]:
        attributes = super().get_attributes()
        attributes.update({
            'type': 'search',
            'placeholder': self._config.get('placeholder') or '',
            'minlength': self.min_length,
            'class': 'facet-filter__input facet-filter__input--search',
        })
        return attributes
