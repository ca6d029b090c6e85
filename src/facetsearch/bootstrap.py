"""
Composition root.

Wires configuration, the term source, plugins and the filter registry
together. Everything the CLI (or an embedding application) needs for one
search surface is built here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from facetsearch.core.config.models import AppConfig, SearchSettings
from facetsearch.core.plugins import PluginManager
from facetsearch.filters.base import Filter
from facetsearch.filters.category import CategoryFilter
from facetsearch.filters.factory import FilterFactory
from facetsearch.filters.keyword import KeywordFilter
from facetsearch.filters.registry import FilterRegistry
from facetsearch.filters.tag import TagFilter
from facetsearch.search.composer import SearchQuery
from facetsearch.search.renderer import FilterRenderer
from facetsearch.terms import InMemoryTermProvider, Term, TermProvider


logger = logging.getLogger(__name__)


@dataclass
class SearchContext:
    """Everything built for one search surface."""
    config: AppConfig
    terms: TermProvider
    plugins: Optional[PluginManager]
    registry: FilterRegistry
    search_query: SearchQuery
    renderer: FilterRenderer


def build_terms(config: AppConfig) -> InMemoryTermProvider:
    """In-memory term source holding the terms declared in configuration."""
    return InMemoryTermProvider(
        Term(
            term_id=term.id,
            name=term.name,
            taxonomy=term.taxonomy,
            slug=term.slug,
            parent=term.parent,
            count=term.count,
        )
        for term in config.terms
    )


def build_plugin_manager(config: AppConfig, use_entry_points: bool = True) -> Optional[PluginManager]:
    """Load the configured plugins, or return None when plugins are disabled."""
    if not config.enable_plugins:
        return None
    plugin_manager = PluginManager(modules=config.plugins, use_entry_points=use_entry_points)
    plugin_manager.load_all_plugins()
    return plugin_manager


def _shared_filter_config(settings: SearchSettings) -> Dict[str, Any]:
    return {
        'param_prefix': settings.param_prefix,
        'meta_key_prefix': settings.meta_key_prefix,
        'date_format': settings.date_format,
    }


def default_filters(settings: SearchSettings, terms: Optional[TermProvider], hooks: Any = None) -> List[Filter]:
    """The keyword, category and tag filters every search surface starts with."""
    shared = _shared_filter_config(settings)
    return [
        KeywordFilter(dict(shared, priority=5), hooks=hooks),
        CategoryFilter(dict(shared, priority=10), terms=terms, hooks=hooks),
        TagFilter(dict(shared, priority=20), terms=terms, hooks=hooks),
    ]


def build_registry(
    config: Optional[AppConfig] = None,
    terms: Optional[TermProvider] = None,
    plugin_manager: Optional[PluginManager] = None,
) -> FilterRegistry:
    """
    Build and populate the filter registry.

    Default filters are registered first, then filters from configuration,
    then whatever plugins add through ``register_filters``.

    Args:
        config: Application configuration (defaults when omitted)
        terms: Term source (built from the configured terms when omitted)
        plugin_manager: Loaded plugins, if any

    Returns:
        The populated registry

    Raises:
        FilterConfigurationError: If a configured filter is invalid
    """
    config = config or AppConfig()
    settings = config.search
    if terms is None:
        terms = build_terms(config)
    hooks = plugin_manager.hook if plugin_manager is not None else None

    registry = FilterRegistry(hooks=hooks)

    if settings.register_default_filters:
        for filter_instance in default_filters(settings, terms, hooks):
            registry.register(filter_instance)

    configured = FilterFactory.create_from_settings(
        [filter_settings.to_filter_config() for filter_settings in settings.filters],
        terms=terms,
        hooks=hooks,
        defaults=_shared_filter_config(settings),
    )
    for filter_instance in configured:
        registry.register(filter_instance)

    if hooks is not None:
        hooks.register_filters(registry=registry, terms=terms, settings=settings)

    logger.info(f"Registry ready with {registry.count()} filters")
    return registry


def build_context(config: Optional[AppConfig] = None, use_entry_points: bool = True) -> SearchContext:
    """Build the complete search surface described by ``config``."""
    config = config or AppConfig()
    terms = build_terms(config)
    plugin_manager = build_plugin_manager(config, use_entry_points=use_entry_points)
    registry = build_registry(config, terms=terms, plugin_manager=plugin_manager)
    search_query = SearchQuery(registry, config.search, plugin_manager=plugin_manager)
    return SearchContext(
        config=config,
        terms=terms,
        plugins=plugin_manager,
        registry=registry,
        search_query=search_query,
        renderer=FilterRenderer(registry, search_query),
    )
