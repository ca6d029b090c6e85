"""
Tests for the keyword search filter.
"""

from facetsearch.filters.base import FilterKind
from facetsearch.filters.keyword import MAX_KEYWORD_LENGTH, KeywordFilter
from facetsearch.query import ListingQuery


class TestKeywordFilter:
    """Test KeywordFilter behaviour."""

    def test_defaults(self):
        """Test default name, label and kind."""
        filter_obj = KeywordFilter()
        assert filter_obj.name == 'keyword'
        assert filter_obj.label == 'Search'
        assert filter_obj.kind == FilterKind.TEXT.value
        assert filter_obj.url_param == 'q_keyword'
        assert filter_obj.min_length == 2

    def test_sanitize_strips_markup(self):
        """Test keywords are reduced to one clean line."""
        filter_obj = KeywordFilter()
        assert filter_obj.sanitize("  <em>pizza</em>   oven ") == "pizza oven"
        assert filter_obj.sanitize(None) == ""
        assert filter_obj.sanitize(["pizza"]) == ""

    def test_sanitize_truncates_long_keywords(self):
        """Test keywords are capped at the maximum length."""
        filter_obj = KeywordFilter()
        assert len(filter_obj.sanitize("a" * 500)) == MAX_KEYWORD_LENGTH

    def test_sanitize_is_idempotent(self):
        """Test sanitizing a sanitized keyword changes nothing."""
        filter_obj = KeywordFilter()
        once = filter_obj.sanitize("<b>hot</b>  dogs")
        assert filter_obj.sanitize(once) == once

    def test_min_length(self):
        """Test keywords shorter than min_length are inactive."""
        filter_obj = KeywordFilter({'min_length': 3})
        assert not filter_obj.is_active("ab")
        assert not filter_obj.is_active("  ab  ")
        assert filter_obj.is_active("abc")

    def test_default_min_length(self):
        """Test a single character is inactive by default."""
        filter_obj = KeywordFilter()
        assert not filter_obj.is_active("a")
        assert filter_obj.is_active("ab")
        assert not filter_obj.is_active("  ")
        assert not filter_obj.is_active(None)

    def test_modify_query_sets_search_term(self):
        """Test an active keyword becomes the query's search term."""
        filter_obj = KeywordFilter()
        query = ListingQuery()
        filter_obj.modify_query(query, "pizza")
        assert query.get('s') == "pizza"

    def test_modify_query_ignores_inactive(self):
        """Test an inactive keyword leaves the query untouched."""
        filter_obj = KeywordFilter()
        query = ListingQuery()
        filter_obj.modify_query(query, "p")
        assert query.get('s') is None

    def test_display_value_is_quoted(self):
        """Test keywords are displayed in quotes."""
        assert KeywordFilter().get_display_value("pizza") == '"pizza"'

    def test_attributes(self):
        """Test the search input attributes."""
        attributes = KeywordFilter({'placeholder': 'Find...'}).get_attributes()
        assert attributes['type'] == 'search'
        assert attributes['placeholder'] == 'Find...'
        assert attributes['minlength'] == 2
        assert attributes['name'] == 'q_keyword'

    def test_has_no_options(self):
        """Test keyword filters never offer options."""
        assert KeywordFilter({'options': {'a': 'A'}}).get_options() == {}
