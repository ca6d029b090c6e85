"""
Hierarchical category filter.

Select control over a hierarchical taxonomy. Options are rendered as a
depth-first walk of the term tree, each level indented one unit deeper
than its parent.
"""

from typing import Any, Dict, List, Optional

from facetsearch.filters.base import (
    Filter,
    FilterKind,
    FilterSource,
    RenderOption,
    absint,
)
from facetsearch.query import ConstraintKind, ListingQuery
from facetsearch.terms import Term, TermProvider


# Guards against cyclic or pathological parent graphs
MAX_DEPTH = 10


class CategoryFilter(Filter):
    """
    Filter listings by a hierarchical taxonomy term.

    Configuration options:
    - source_key: Taxonomy name (default: listing_category)
    - multiple: Allow several terms (default: False)
    - empty_option: Label of the "no selection" option
    - hierarchical: Render options as an indented tree (default: True)
    - hide_empty: Skip terms without listings (default: True)
    """

    DEFAULTS: Dict[str, Any] = {
        'name': 'category',
        'label': 'Category',
        'source': FilterSource.TAXONOMY.value,
        'source_key': 'listing_category',
        'multiple': False,
        'empty_option': 'All Categories',
        'hierarchical': True,
        'hide_empty': True,
    }

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        terms: Optional[TermProvider] = None,
        hooks: Any = None,
    ):
        super().__init__(config, hooks=hooks)
        self.terms = terms
        self._cached_terms: Optional[List[Term]] = None

    @property
    def kind(self) -> str:
        return FilterKind.SELECT.value

    @property
    def hierarchical(self) -> bool:
        return bool(self._config.get('hierarchical', True))

    @property
    def hide_empty(self) -> bool:
        return bool(self._config.get('hide_empty', True))

    def is_active(self, value: Any) -> bool:
        if isinstance(value, (list, tuple)):
            return any(absint(v) for v in value)
        if isinstance(value, bool) or value is None:
            return False
        if isinstance(value, (int, float)):
            return value > 0
        if isinstance(value, str):
            return absint(value) > 0 and not value.strip().startswith('-')
        return False

    def modify_query(self, query: ListingQuery, value: Any) -> None:
        """Append one taxonomy-membership constraint for the selected terms."""
        if not self.is_active(value):
            return

        terms = list(value) if isinstance(value, (list, tuple)) else [value]
        tax_query = query.get_constraint_group(ConstraintKind.TAXONOMY)
        tax_query.append({
            'taxonomy': self.source_key,
            'field': 'term_id',
            'terms': terms,
            'operator': 'IN',
        })
        query.set_constraint_group(ConstraintKind.TAXONOMY, tax_query)

    def _load_options(self) -> Dict[str, str]:
        options = {str(term.term_id): term.name for term in self.get_terms()}
        # Static options only fill in when the taxonomy has no terms
        return options or super()._load_options()

    def get_terms(self) -> List[Term]:
        """The taxonomy's terms, fetched from the term source once per instance."""
        if self._cached_terms is None:
            if self.terms is None:
                self._cached_terms = []
            else:
                self._cached_terms = list(self.terms.get_terms(self.source_key, hide_empty=self.hide_empty))
        return self._cached_terms

    def get_hierarchical_options(self, selected_value: Any = None) -> List[RenderOption]:
        """
        Walk the term tree depth-first from the root terms.

        Args:
            selected_value: Current (sanitized) filter value

        Returns:
            Options in render order, each carrying its depth
        """
        children: Dict[int, List[Term]] = {}
        for term in self.get_terms():
            children.setdefault(term.parent, []).append(term)
        return self._walk_terms(children, selected_value, parent=0, depth=0)

    def _walk_terms(
        self,
        children: Dict[int, List[Term]],
        selected_value: Any,
        parent: int,
        depth: int,
    ) -> List[RenderOption]:
        if depth > MAX_DEPTH:
            return []

        options: List[RenderOption] = []
        for term in children.get(parent, []):
            options.append(RenderOption(
                value=str(term.term_id),
                label=term.name,
                selected=self.is_option_selected(term.term_id, selected_value),
                depth=depth,
            ))
            options.extend(self._walk_terms(children, selected_value, term.term_id, depth + 1))
        return options

    def get_display_value(self, value: Any) -> str:
        if self.terms is None:
            return super().get_display_value(value)

        ids = value if isinstance(value, (list, tuple)) else [value]
        names = []
        for term_id in ids:
            term = self.terms.get_term(absint(term_id), self.source_key)
            if term is not None:
                names.append(term.name)
        return ', '.join(names)

    def get_attributes(self) -> Dict[str, Any]:
        attributes = super().get_attributes()
        if self.multiple:
            attributes['multiple'] = True
        return attributes
