"""
Tests for the filter renderer.
"""

from urllib.parse import parse_qs, urlsplit

from facetsearch.filters.category import CategoryFilter
from facetsearch.filters.date_range import DateRangeFilter
from facetsearch.filters.range import RangeFilter
from facetsearch.filters.registry import FilterRegistry
from facetsearch.search.renderer import NO_RESULTS_MESSAGE, FilterRenderer
from facetsearch.terms import InMemoryTermProvider


def query_of(url):
    return parse_qs(urlsplit(url).query)


class TestDescribe:
    """Test single-filter descriptors."""

    def test_category_tree_with_empty_option(self, renderer):
        """Test single-select categories start with an empty option and walk the tree."""
        descriptor = renderer.render_filter('category', {'q_category': '3'})

        labels = [o.label for o in descriptor.options]
        assert labels == ['All Categories', 'Food', 'Restaurants', 'Pizza', 'Hotels']
        assert descriptor.options[0].value == ''
        assert descriptor.options[0].selected is False
        assert [o.value for o in descriptor.options if o.selected] == ['3']
        assert descriptor.is_active is True
        assert descriptor.display_value == 'Pizza'

    def test_empty_option_selected_without_value(self, renderer):
        """Test the empty option is selected when nothing is chosen."""
        descriptor = renderer.render_filter('category', {})
        assert descriptor.options[0].selected is True
        assert descriptor.is_active is False
        assert descriptor.display_value == ''

    def test_category_without_terms_uses_static_options(self):
        """Test a category with no term tree falls back to static options."""
        registry = FilterRegistry()
        registry.register(CategoryFilter({'options': {'7': 'Seven'}}))
        descriptor = FilterRenderer(registry).render_filter('category', {'q_category': '7'})

        assert [(o.value, o.selected) for o in descriptor.options] == [('', False), ('7', True)]

    def test_blank_empty_option_is_omitted(self):
        """Test no empty option is added when its label is blank."""
        registry = FilterRegistry()
        registry.register(CategoryFilter({'options': {'7': 'Seven'}, 'empty_option': ''}))
        descriptor = FilterRenderer(registry).render_filter('category', {})

        assert [(o.value, o.label) for o in descriptor.options] == [('7', 'Seven')]

    def test_category_terms_fetched_once_across_renders(self, category_terms):
        """Test repeated renders reuse the category's term list."""
        calls = []

        class CountingTermProvider(InMemoryTermProvider):
            def get_terms(self, taxonomy, **kwargs):
                calls.append((taxonomy, kwargs.get('parent')))
                return super().get_terms(taxonomy, **kwargs)

        registry = FilterRegistry()
        registry.register(CategoryFilter(terms=CountingTermProvider(category_terms)))
        renderer = FilterRenderer(registry)

        first = renderer.render_filter('category', {'q_category': '3'})
        second = renderer.render_filter('category', {})

        assert [o.label for o in first.options] == [o.label for o in second.options]
        assert len(first.options) == 5
        assert calls == [('listing_category', None)]

    def test_tag_checkboxes(self, renderer):
        """Test tags render as independent checkboxes."""
        descriptor = renderer.render_filter('tag', {'q_tag[]': ['12']})
        assert [o.label for o in descriptor.options] == ['Wifi', 'Pets', 'Parking']
        assert [o.value for o in descriptor.options if o.selected] == ['12']

    def test_keyword_has_no_options(self, renderer):
        """Test text filters describe no options."""
        descriptor = renderer.render_filter('keyword', {'q_keyword': 'pizza'})
        assert descriptor.options == []
        assert descriptor.value == 'pizza'
        assert descriptor.attributes['type'] == 'search'

    def test_unknown_filter(self, renderer):
        """Test unknown names describe nothing."""
        assert renderer.render_filter('missing', {}) is None


class TestSearchForm:
    """Test search form descriptors."""

    def test_all_filters_in_priority_order(self, renderer):
        """Test the form lists every filter plus the sort control."""
        form = renderer.render_search_form({})
        assert [d.name for d in form.filters] == ['keyword', 'category', 'tag']
        assert form.orderby is not None
        assert form.method == 'get'
        assert form.css_classes == ['facet-search-form']

    def test_include_and_exclude(self, renderer):
        """Test the form can be narrowed to some filters."""
        form = renderer.render_search_form({}, filters=['tag', 'keyword'], exclude=['tag'], show_orderby=False)
        assert [d.name for d in form.filters] == ['keyword']
        assert form.orderby is None

    def test_form_options(self, renderer):
        """Test action, submit and extra classes are carried."""
        form = renderer.render_search_form({}, show_submit=False, action='/search/', css_class='compact')
        assert form.action == '/search/'
        assert form.show_submit is False
        assert form.css_classes == ['facet-search-form', 'compact']

    def test_orderby_descriptor(self, renderer):
        """Test the sort control reflects the request."""
        orderby = renderer.render_orderby({'q_orderby': 'title', 'q_order': 'ASC'})
        assert orderby.param == 'q_orderby'
        assert orderby.order_param == 'q_order'
        assert orderby.current == 'title'
        assert orderby.order == 'ASC'
        assert [o.value for o in orderby.options if o.selected] == ['title']


class TestActiveFilters:
    """Test active filter chips and remove links."""

    def test_chips_with_remove_urls(self, renderer):
        """Test each chip links to the request without that filter."""
        params = {'q_keyword': 'pizza', 'q_category': '3', 'q_orderby': 'title'}
        chips = renderer.render_active_filters(params, '/listings/')

        assert [c.name for c in chips] == ['keyword', 'category']
        assert chips[0].display_value == '"pizza"'
        assert chips[1].label == 'Category'

        remove_keyword = chips[0].remove_url
        assert remove_keyword.startswith('/listings/?')
        assert query_of(remove_keyword) == {'q_category': ['3'], 'q_orderby': ['title']}

    def test_remove_bracketed_param(self, renderer):
        """Test removing a multi-value filter drops its bracketed key."""
        params = {'q_tag[]': ['10', '12'], 'q_keyword': 'pizza'}
        chips = {c.name: c for c in renderer.render_active_filters(params, '/listings/')}
        assert query_of(chips['tag'].remove_url) == {'q_keyword': ['pizza']}

    def test_remove_last_filter(self, renderer):
        """Test removing the only parameter yields the bare base URL."""
        chips = renderer.render_active_filters({'q_category': '3'}, '/listings/')
        assert chips[0].remove_url == '/listings/'

    def test_remove_range_and_date_params(self, registry, search_query):
        """Test range-style filters remove both of their parameters."""
        price = RangeFilter({'name': 'price'})
        opened = DateRangeFilter({'name': 'opened'})
        registry.register(price)
        registry.register(opened)
        renderer = FilterRenderer(registry, search_query)
        params = {
            'q_price_min': '5', 'q_price_max': '9',
            'q_opened_start': '2024-01-01', 'q_opened_end': '2024-02-01',
        }

        assert query_of(renderer.build_remove_filter_url(price, params, '/l/?page=1')) == {
            'page': ['1'], 'q_opened_start': ['2024-01-01'], 'q_opened_end': ['2024-02-01'],
        }
        assert query_of(renderer.build_remove_filter_url(opened, params)) == {
            'q_price_min': ['5'], 'q_price_max': ['9'],
        }

    def test_no_results(self, renderer):
        """Test the no-results descriptor."""
        assert renderer.render_no_results('/listings/') == {
            'message': NO_RESULTS_MESSAGE,
            'clear_url': '/listings/',
        }
