"""
Tests for the flat multi-select tag filter.
"""

from facetsearch.filters.base import FilterKind
from facetsearch.filters.tag import TagFilter
from facetsearch.query import ConstraintKind, ListingQuery
from facetsearch.terms import InMemoryTermProvider, Term


class TestTagFilter:
    """Test TagFilter behaviour."""

    def test_defaults(self):
        """Test tags are always a checkbox group."""
        filter_obj = TagFilter({'multiple': False})
        assert filter_obj.kind == FilterKind.CHECKBOX.value
        assert filter_obj.multiple is True
        assert filter_obj.max_items == 20
        assert filter_obj.get_attributes()['name'] == 'q_tag[]'

    def test_sanitize(self):
        """Test values become lists of non-negative ids."""
        filter_obj = TagFilter()
        assert filter_obj.sanitize(["4", "7"]) == [4, 7]
        assert filter_obj.sanitize("4") == [4]
        assert filter_obj.sanitize("garbage") == [0]
        assert filter_obj.sanitize(None) == []
        assert filter_obj.sanitize("") == []

    def test_sanitize_is_idempotent(self):
        """Test sanitizing sanitized ids changes nothing."""
        filter_obj = TagFilter()
        once = filter_obj.sanitize(["-3", "x", "5"])
        assert filter_obj.sanitize(once) == once

    def test_is_active(self):
        """Test a list with any positive id is active."""
        filter_obj = TagFilter()
        assert filter_obj.is_active([0, 4])
        assert not filter_obj.is_active([0])
        assert not filter_obj.is_active([])
        assert not filter_obj.is_active(4)

    def test_modify_query(self):
        """Test one IN constraint lists every selected tag."""
        filter_obj = TagFilter()
        query = ListingQuery()
        filter_obj.modify_query(query, [4, 7])

        assert query.get_constraint_group(ConstraintKind.TAXONOMY) == [{
            'taxonomy': 'listing_tag',
            'field': 'term_id',
            'terms': [4, 7],
            'operator': 'IN',
        }]

    def test_options_ordered_by_count(self, term_provider):
        """Test options are the most used tags first."""
        filter_obj = TagFilter(terms=term_provider)
        assert list(filter_obj.get_options().values()) == ['Wifi', 'Pets', 'Parking']

    def test_options_capped_at_max_items(self):
        """Test only the max_items most used tags are offered."""
        terms = [
            Term(term_id=100 + i, name=f"Tag {i}", taxonomy='listing_tag', count=i + 1)
            for i in range(25)
        ]
        filter_obj = TagFilter({'max_items': 5}, terms=InMemoryTermProvider(terms))

        options = filter_obj.get_checkbox_options()
        assert len(options) == 5
        assert [o.label for o in options] == ['Tag 24', 'Tag 23', 'Tag 22', 'Tag 21', 'Tag 20']

    def test_checkbox_options_mark_selection(self, term_provider):
        """Test selected tags are flagged."""
        filter_obj = TagFilter(terms=term_provider)
        options = filter_obj.get_checkbox_options([12])
        assert {o.value: o.selected for o in options} == {'10': False, '12': True, '11': False}

    def test_checkbox_options_accept_scalar_selection(self, term_provider):
        """Test a scalar selection is treated as a one-element list."""
        filter_obj = TagFilter(terms=term_provider)
        selected = [o.value for o in filter_obj.get_checkbox_options("10") if o.selected]
        assert selected == ['10']

    def test_static_options_capped(self):
        """Test static fallback options also respect max_items."""
        static = {str(i): f"Option {i}" for i in range(10)}
        filter_obj = TagFilter({'options': static, 'max_items': 3})
        assert len(filter_obj.get_checkbox_options()) == 3

    def test_display_value(self, term_provider):
        """Test selected tags are shown by name."""
        filter_obj = TagFilter(terms=term_provider)
        assert filter_obj.get_display_value([10, 12]) == 'Wifi, Pets'
