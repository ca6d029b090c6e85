"""
Flat multi-select tag filter.

Checkbox group over a flat taxonomy. Only the most used tags are offered,
capped at ``max_items``, so large vocabularies stay usable.
"""

from typing import Any, Dict, List, Optional

from facetsearch.filters.base import (
    Filter,
    FilterKind,
    FilterSource,
    RenderOption,
    absint,
    is_empty_value,
)
from facetsearch.query import ConstraintKind, ListingQuery
from facetsearch.terms import TermProvider


class TagFilter(Filter):
    """
    Filter listings by one or more tags.

    Configuration options:
    - source_key: Taxonomy name (default: listing_tag)
    - max_items: Maximum number of tags offered (default: 20)
    - hide_empty: Skip tags without listings (default: True)
    """

    DEFAULTS: Dict[str, Any] = {
        'name': 'tag',
        'label': 'Tags',
        'source': FilterSource.TAXONOMY.value,
        'source_key': 'listing_tag',
        'multiple': True,
        'hide_empty': True,
        'max_items': 20,
    }

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        terms: Optional[TermProvider] = None,
        hooks: Any = None,
    ):
        super().__init__(config, hooks=hooks)
        # Tags are always multi-select
        self._config['multiple'] = True
        self.terms = terms

    @property
    def kind(self) -> str:
        return FilterKind.CHECKBOX.value

    @property
    def max_items(self) -> int:
        return absint(self._config.get('max_items', 20)) or 20

    @property
    def hide_empty(self) -> bool:
        return bool(self._config.get('hide_empty', True))

    def is_active(self, value: Any) -> bool:
        return isinstance(value, (list, tuple)) and any(absint(v) for v in value)

    def modify_query(self, query: ListingQuery, value: Any) -> None:
        """Append one taxonomy-membership constraint listing every selected tag."""
        if not self.is_active(value):
            return

        tax_query = query.get_constraint_group(ConstraintKind.TAXONOMY)
        tax_query.append({
            'taxonomy': self.source_key,
            'field': 'term_id',
            'terms': list(value),
            'operator': 'IN',
        })
        query.set_constraint_group(ConstraintKind.TAXONOMY, tax_query)

    def _load_options(self) -> Dict[str, str]:
        options: Dict[str, str] = {}
        if self.terms is not None:
            terms = self.terms.get_terms(
                self.source_key,
                hide_empty=self.hide_empty,
                orderby='count',
                order='DESC',
                number=self.max_items,
            )
            for term in terms:
                options[str(term.term_id)] = term.name
        return options or super()._load_options()

    def get_checkbox_options(self, selected_value: Any = None) -> List[RenderOption]:
        """Independent checkbox options, at most ``max_items`` of them."""
        if not isinstance(selected_value, (list, tuple)):
            selected_value = [] if is_empty_value(selected_value) else [selected_value]

        options = []
        for index, (opt_value, opt_label) in enumerate(self.get_options().items()):
            if index >= self.max_items:
                break
            options.append(RenderOption(
                value=opt_value,
                label=opt_label,
                selected=self.is_option_selected(opt_value, selected_value),
            ))
        return options

    def get_display_value(self, value: Any) -> str:
        if self.terms is None:
            return super().get_display_value(value)

        if not isinstance(value, (list, tuple)):
            value = [value]
        names = []
        for term_id in value:
            term = self.terms.get_term(absint(term_id), self.source_key)
            if term is not None:
                names.append(term.name)
        return ', '.join(names)
