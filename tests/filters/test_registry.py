"""
Tests for the filter registry.
"""

import threading

from facetsearch.filters.base import FilterKind, FilterSource
from facetsearch.filters.category import CategoryFilter
from facetsearch.filters.keyword import KeywordFilter
from facetsearch.filters.range import RangeFilter
from facetsearch.filters.registry import FilterRegistry
from facetsearch.filters.tag import TagFilter


class RecordingHooks:
    """Stand-in hook relay recording registry notifications."""

    def __init__(self):
        self.events = []

    def filter_registered(self, name, filter):
        self.events.append(('registered', name))

    def filter_unregistered(self, name, filter):
        self.events.append(('unregistered', name))


class TestRegistration:
    """Test registering and removing filters."""

    def test_register_and_lookup(self):
        """Test a registered filter can be found by name."""
        registry = FilterRegistry()
        keyword = KeywordFilter()

        assert registry.register(keyword) is True
        assert registry.get('keyword') is keyword
        assert registry.has('keyword')
        assert 'keyword' in registry
        assert registry.count() == 1
        assert len(registry) == 1

    def test_duplicate_name_rejected(self):
        """Test a second filter under the same name is refused."""
        registry = FilterRegistry()
        first = KeywordFilter()

        assert registry.register(first) is True
        assert registry.register(KeywordFilter({'label': 'Other'})) is False
        assert registry.count() == 1
        assert registry.get('keyword') is first

    def test_nameless_filter_rejected(self):
        """Test a filter without a name cannot be registered."""
        registry = FilterRegistry()
        assert registry.register(RangeFilter()) is False
        assert registry.count() == 0

    def test_unregister(self):
        """Test unregistering removes the filter once."""
        registry = FilterRegistry()
        registry.register(KeywordFilter())

        assert registry.unregister('keyword') is True
        assert registry.unregister('keyword') is False
        assert registry.get('keyword') is None

    def test_hooks_notified(self):
        """Test registry changes are announced to the hook relay."""
        hooks = RecordingHooks()
        registry = FilterRegistry(hooks=hooks)
        registry.register(KeywordFilter())
        registry.register(KeywordFilter())
        registry.unregister('keyword')

        assert hooks.events == [('registered', 'keyword'), ('unregistered', 'keyword')]

    def test_reset(self):
        """Test reset drops every filter."""
        registry = FilterRegistry()
        registry.register(KeywordFilter())
        registry.register(TagFilter())
        registry.reset()
        assert registry.count() == 0

    def test_concurrent_registration(self):
        """Test parallel registrations of distinct names all land."""
        registry = FilterRegistry()

        def register_batch(offset):
            for i in range(50):
                registry.register(RangeFilter({'name': f"range_{offset}_{i}"}))

        threads = [threading.Thread(target=register_batch, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert registry.count() == 200


class TestGetAll:
    """Test listing and ordering filters."""

    def test_priority_order(self):
        """Test filters are listed by ascending priority."""
        registry = FilterRegistry()
        registry.register(TagFilter({'priority': 20}))
        registry.register(KeywordFilter({'priority': 5}))

        assert [f.priority for f in registry.get_all()] == [5, 20]

    def test_ties_keep_registration_order(self):
        """Test equal priorities keep registration order in both directions."""
        registry = FilterRegistry()
        for name in ('b', 'a', 'c'):
            registry.register(RangeFilter({'name': name, 'priority': 10}))

        assert [f.name for f in registry.get_all()] == ['b', 'a', 'c']
        assert [f.name for f in registry.get_all(order='DESC')] == ['b', 'a', 'c']

    def test_order_by_name_desc(self):
        """Test ordering by name in descending order."""
        registry = FilterRegistry()
        for name in ('b', 'a', 'c'):
            registry.register(RangeFilter({'name': name}))

        assert [f.name for f in registry.get_all(orderby='name', order='desc')] == ['c', 'b', 'a']

    def test_unknown_orderby_falls_back(self):
        """Test an unknown orderby sorts by priority."""
        registry = FilterRegistry()
        registry.register(TagFilter({'priority': 20}))
        registry.register(KeywordFilter({'priority': 5}))

        assert [f.name for f in registry.get_all(orderby='color')] == ['keyword', 'tag']

    def test_filter_by_kind_and_source(self):
        """Test kind and source narrow the listing."""
        registry = FilterRegistry()
        registry.register(KeywordFilter())
        registry.register(CategoryFilter())
        registry.register(TagFilter())

        assert [f.name for f in registry.get_all(kind=FilterKind.CHECKBOX.value)] == ['tag']
        taxonomy = registry.get_all(source=FilterSource.TAXONOMY.value)
        assert sorted(f.name for f in taxonomy) == ['category', 'tag']

    def test_disabled_filters_hidden(self):
        """Test disabled filters are skipped unless asked for."""
        registry = FilterRegistry()
        registry.register(KeywordFilter({'active': False}))

        assert registry.get_all() == []
        assert len(registry.get_all(active_only=False)) == 1


class TestActiveFilters:
    """Test reading values and active filters from a request."""

    def test_get_filter_value(self, registry):
        """Test a single filter's value is sanitized."""
        assert registry.get_filter_value('category', {'q_category': '3'}) == 3
        assert registry.get_filter_value('missing', {}) is None

    def test_active_iff_is_active(self, registry):
        """Test exactly the filters with an active value are reported."""
        params = {'q_keyword': 'p', 'q_category': '3', 'q_tag[]': ['0']}
        active = registry.get_active_filters(params)

        assert list(active) == ['category']
        entry = active['category']
        assert entry.value == 3
        assert entry.display_value == 'Pizza'
        assert entry.label == 'Category'

    def test_active_filters_in_priority_order(self, registry):
        """Test active entries follow filter priority."""
        params = {'q_tag[]': ['10'], 'q_keyword': 'pizza', 'q_category': '1'}
        assert list(registry.get_active_filters(params)) == ['keyword', 'category', 'tag']

    def test_no_params(self, registry):
        """Test an empty request has no active filters."""
        assert registry.get_active_filters({}) == {}

    def test_default_config(self):
        """Test the base configuration is exposed as a copy."""
        config = FilterRegistry.get_default_config()
        config['priority'] = 99
        assert FilterRegistry.get_default_config()['priority'] == 10
