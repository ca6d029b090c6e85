"""
Search Query Composer

Builds the listing query for one request: keyword search, the registered
filters in priority order, and the requested ordering.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from facetsearch.core.config.models import SearchSettings
from facetsearch.filters.base import ActiveFilterEntry, sanitize_key
from facetsearch.filters.registry import FilterRegistry
from facetsearch.query import ListingQuery


# Registered filter whose value drives keyword search
KEYWORD_FILTER = 'keyword'


# Public orderby value -> storage orderby
ORDERBY_FIELDS: Dict[str, str] = {
    'date': 'post_date',
    'title': 'post_title',
    'views': 'meta_value_num',
    'random': 'rand',
}

ORDERBY_LABELS: Dict[str, str] = {
    'date': 'Newest First',
    'title': 'Title A-Z',
    'views': 'Most Viewed',
    'random': 'Random',
}

DEFAULT_ORDERBY = 'date'
DEFAULT_ORDER = 'DESC'


def _scalar_param(params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    return value if isinstance(value, str) else ''


class SearchQuery:
    """
    Composes registered filters and request parameters into a ListingQuery.

    Request parameters use the configured prefix: ``{prefix}_keyword``,
    ``{prefix}_orderby`` and ``{prefix}_order`` next to each filter's own
    parameters.
    """

    def __init__(
        self,
        registry: FilterRegistry,
        settings: Optional[SearchSettings] = None,
        plugin_manager: Any = None,
    ):
        """
        Initialize the composer.

        Args:
            registry: Registry holding the filters to apply
            settings: Search settings (defaults when omitted)
            plugin_manager: Optional PluginManager whose hooks are notified
        """
        self.registry = registry
        self.settings = settings or SearchSettings()
        self._hooks = plugin_manager.hook if plugin_manager is not None else None
        self.logger = logging.getLogger(__name__)

    def param_name(self, suffix: str) -> str:
        """Request parameter key for ``suffix``, e.g. ``q_orderby``."""
        return f"{self.settings.param_prefix}_{suffix}"

    def apply_filters(
        self,
        query: ListingQuery,
        params: Mapping[str, Any],
        active_filters: Optional[Dict[str, ActiveFilterEntry]] = None,
    ) -> Dict[str, ActiveFilterEntry]:
        """
        Let every active filter modify the query, in priority order.

        Args:
            query: Query to modify
            params: Decoded request parameters
            active_filters: Entries already computed for ``params``

        Returns:
            Active filter entries keyed by filter name
        """
        if active_filters is None:
            active_filters = self.registry.get_active_filters(params)

        for name, entry in active_filters.items():
            filter_instance = self.registry.get(name)
            if filter_instance is None:
                # Unregistered since the snapshot was read
                continue
            filter_instance.modify_query(query, entry.value)

        self.logger.debug(f"Applied {len(active_filters)} active filters: {list(active_filters)}")
        if self._hooks is not None:
            self._hooks.search_query_modified(query=query, active_filters=active_filters)
        return active_filters

    def apply_orderby(self, query: ListingQuery, params: Mapping[str, Any]) -> None:
        """Apply ``{prefix}_orderby`` / ``{prefix}_order`` when the ordering is known."""
        orderby = sanitize_key(_scalar_param(params, self.param_name('orderby')))
        if not orderby or orderby not in ORDERBY_FIELDS:
            return

        if orderby == 'views':
            query.set('meta_key', self.settings.views_meta_key)
        query.set('orderby', ORDERBY_FIELDS[orderby])
        query.set('order', self.get_current_order(params))

    def apply_keyword_search(
        self,
        query: ListingQuery,
        params: Mapping[str, Any],
        active_filters: Optional[Dict[str, ActiveFilterEntry]] = None,
    ) -> None:
        """
        Search title, content and the searchable fields for the keyword.

        The keyword is the sanitized value of the registered ``keyword``
        filter, and only applies while that filter is active.
        """
        if active_filters is None:
            active_filters = self.registry.get_active_filters(params)
        entry = active_filters.get(KEYWORD_FILTER)
        if entry is None or not isinstance(entry.value, str) or not entry.value:
            return

        keyword = entry.value

        query.set('s', keyword)
        meta_keys = self.get_searchable_meta_keys()
        if meta_keys:
            query.set('meta_search', True)
            query.set('search_meta_keys', meta_keys)
        query.set('keyword', keyword)

    def get_searchable_meta_keys(self) -> List[str]:
        """Configured searchable field keys plus those added by plugins."""
        keys = list(self.settings.searchable_meta_keys)
        if self._hooks is not None:
            for extra in self._hooks.searchable_meta_keys(keys=list(keys)):
                keys.extend(extra or [])

        sanitized = []
        for key in keys:
            key = sanitize_key(key)
            if key and key not in sanitized:
                sanitized.append(key)
        return sanitized

    def build_query(self, params: Mapping[str, Any], **args: Any) -> ListingQuery:
        """
        Build a fully composed query for one request.

        Args:
            params: Decoded request parameters
            **args: Query variables overriding the defaults

        Returns:
            The composed ListingQuery
        """
        query_args = {
            'post_type': self.settings.post_type,
            'post_status': self.settings.post_status,
            'posts_per_page': self.settings.posts_per_page,
        }
        query_args.update(args)

        query = ListingQuery(query_args)
        active_filters = self.registry.get_active_filters(params)
        self.apply_keyword_search(query, params, active_filters)
        self.apply_filters(query, params, active_filters)
        self.apply_orderby(query, params)
        return query

    def get_orderby_options(self) -> Dict[str, str]:
        return dict(ORDERBY_LABELS)

    def get_current_orderby(self, params: Mapping[str, Any]) -> str:
        orderby = sanitize_key(_scalar_param(params, self.param_name('orderby')))
        return orderby if orderby in ORDERBY_FIELDS else DEFAULT_ORDERBY

    def get_current_order(self, params: Mapping[str, Any]) -> str:
        order = sanitize_key(_scalar_param(params, self.param_name('order'))).upper()
        return order if order in ('ASC', 'DESC') else DEFAULT_ORDER

    def get_current_keyword(self, params: Mapping[str, Any]) -> str:
        """Sanitized keyword as submitted, active or not."""
        value = self.registry.get_filter_value(KEYWORD_FILTER, params)
        return value if isinstance(value, str) else ''
