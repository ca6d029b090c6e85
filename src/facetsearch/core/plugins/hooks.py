"""
Plugin Hook Specifications

This module defines the hook specifications that plugins can implement.
Plugins mark their implementations with ``hookimpl``:

    from facetsearch.core.plugins import hookimpl

    @hookimpl
    def register_filters(registry, terms, settings):
        registry.register(MyFilter({'name': 'rating'}))
"""

from typing import Any, Dict, List, Optional

import pluggy

# Create hook specification markers
hookspec = pluggy.HookspecMarker("facetsearch")
hookimpl = pluggy.HookimplMarker("facetsearch")


class RegistryHooks:
    """Hook specifications for filter registration."""

    @hookspec
    def register_filters(self, registry, terms, settings) -> None:
        """Register additional filters at bootstrap.

        Called once after the default and configured filters are registered.

        Args:
            registry: The FilterRegistry being populated
            terms: Term provider used by taxonomy filters
            settings: SearchSettings of the search surface
        """

    @hookspec
    def filter_registered(self, name: str, filter) -> None:
        """Notification that a filter was added to a registry.

        Args:
            name: Filter name
            filter: The registered filter instance
        """

    @hookspec
    def filter_unregistered(self, name: str, filter) -> None:
        """Notification that a filter was removed from a registry.

        Args:
            name: Filter name
            filter: The removed filter instance
        """


class FilterHooks:
    """Hook specifications that adjust filter behaviour."""

    @hookspec(firstresult=True)
    def filter_options(self, options: Dict[str, str], filter) -> Optional[Dict[str, str]]:
        """Replace the options a filter computed.

        The first implementation returning a mapping wins; returning None
        keeps the computed options.

        Args:
            options: Options computed by the filter, value to label
            filter: The filter the options belong to

        Returns:
            Replacement option map or None
        """


class SearchHooks:
    """Hook specifications for query composition."""

    @hookspec
    def searchable_meta_keys(self, keys: List[str]) -> Optional[List[str]]:
        """Add field keys searched by keyword queries.

        Args:
            keys: Keys already configured

        Returns:
            Additional keys to search, or None
        """

    @hookspec
    def search_query_modified(self, query, active_filters: Dict[str, Any]) -> None:
        """Notification after active filters were applied to a query.

        Args:
            query: The ListingQuery that was modified
            active_filters: Active filter entries keyed by filter name
        """
