"""
Filter Factory for creating filter instances from configuration.

Provides a centralized factory that turns configuration dictionaries (from
YAML files, plugins or code) into filter instances, keyed by the ``type``
of each entry.
"""

import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from facetsearch.core.exceptions import ErrorCode, FilterConfigurationError
from facetsearch.filters.base import Filter
from facetsearch.filters.category import CategoryFilter
from facetsearch.filters.date_range import DateRangeFilter
from facetsearch.filters.keyword import KeywordFilter
from facetsearch.filters.range import RangeFilter
from facetsearch.filters.tag import TagFilter
from facetsearch.terms import TermProvider


logger = logging.getLogger(__name__)


class FilterFactory:
    """
    Factory class for creating filter instances from configuration.

    Filter types map to classes through ``FILTER_REGISTRY``; plugins can add
    their own types with ``register_filter_type``.
    """

    # Registry of available filter types
    FILTER_REGISTRY: Dict[str, Type[Filter]] = {
        'keyword': KeywordFilter,
        'category': CategoryFilter,
        'tag': TagFilter,
        'range': RangeFilter,
        'date_range': DateRangeFilter,
    }

    @staticmethod
    def _accepts_terms(filter_class: Type[Filter]) -> bool:
        return 'terms' in inspect.signature(filter_class.__init__).parameters

    @classmethod
    def create_filter(
        cls,
        filter_type: str,
        config: Optional[Dict[str, Any]] = None,
        terms: Optional[TermProvider] = None,
        hooks: Any = None,
    ) -> Filter:
        """
        Create a single filter instance.

        Args:
            filter_type: Type of filter to create
            config: Configuration for the filter
            terms: Option source for taxonomy-backed filters
            hooks: Optional pluggy hook relay handed to the filter

        Returns:
            Filter instance

        Raises:
            FilterConfigurationError: If filter type is unknown
        """
        if filter_type not in cls.FILTER_REGISTRY:
            available_types = ', '.join(sorted(cls.FILTER_REGISTRY.keys()))
            raise FilterConfigurationError(
                f"Unknown filter type '{filter_type}'. Available types: {available_types}",
                error_code=ErrorCode.FILTER_UNKNOWN_TYPE,
                filter_name=(config or {}).get('name'),
                filter_type=filter_type,
            )

        filter_class = cls.FILTER_REGISTRY[filter_type]
        if cls._accepts_terms(filter_class):
            return filter_class(config, terms=terms, hooks=hooks)
        return filter_class(config, hooks=hooks)

    @classmethod
    def create_from_settings(
        cls,
        filter_configs: List[Mapping[str, Any]],
        terms: Optional[TermProvider] = None,
        hooks: Any = None,
        defaults: Optional[Dict[str, Any]] = None,
    ) -> List[Filter]:
        """
        Create filters from a list of configuration dictionaries.

        Each entry needs a ``type``; every other key is handed to the filter.
        ``defaults`` (e.g. the parameter prefix) fill in keys an entry does
        not set itself.

        Args:
            filter_configs: List of filter configuration dictionaries
            terms: Option source for taxonomy-backed filters
            hooks: Optional pluggy hook relay handed to each filter
            defaults: Configuration applied under every entry

        Returns:
            Filter instances in configuration order

        Raises:
            FilterConfigurationError: If an entry is invalid
        """
        filters = []
        seen_names = set()
        for i, entry in enumerate(filter_configs):
            entry = dict(entry)
            filter_type = entry.pop('type', None)
            if not filter_type:
                raise FilterConfigurationError(
                    f"Filter configuration {i} missing 'type' field",
                    filter_name=entry.get('name'),
                )

            config = dict(defaults or {})
            config.update({k: v for k, v in entry.items() if v is not None})

            filter_instance = cls.create_filter(filter_type, config, terms=terms, hooks=hooks)
            if not filter_instance.name:
                raise FilterConfigurationError(
                    f"Filter configuration {i} ({filter_type}) missing 'name' field",
                    error_code=ErrorCode.FILTER_MISSING_NAME,
                    filter_type=filter_type,
                )
            if filter_instance.name in seen_names:
                raise FilterConfigurationError(
                    f"Filter configuration {i} reuses the name '{filter_instance.name}'",
                    error_code=ErrorCode.FILTER_DUPLICATE_NAME,
                    filter_name=filter_instance.name,
                    filter_type=filter_type,
                )
            seen_names.add(filter_instance.name)

            errors = filter_instance.validate_config()
            if errors:
                raise FilterConfigurationError(
                    f"Error creating filter {i} ({filter_type}): {'; '.join(errors)}",
                    filter_name=filter_instance.name,
                    filter_type=filter_type,
                )
            filters.append(filter_instance)

        return filters

    @classmethod
    def get_available_filters(cls) -> Dict[str, Dict[str, Any]]:
        """
        Get information about all available filter types.

        Returns:
            Dictionary mapping filter types to their kind, class and defaults
        """
        filter_info = {}

        for filter_type, filter_class in cls.FILTER_REGISTRY.items():
            doc = inspect.getdoc(filter_class) or ''
            filter_info[filter_type] = {
                'class': filter_class.__name__,
                'description': doc.splitlines()[0] if doc else '',
                'defaults': dict(filter_class.DEFAULTS),
            }
            try:
                filter_info[filter_type]['kind'] = filter_class({'name': filter_type}).kind
            except TypeError as e:
                logger.warning(f"Cannot instantiate filter type '{filter_type}': {e}")
                filter_info[filter_type]['kind'] = ''

        return filter_info

    @classmethod
    def validate_filter_config(cls, filter_type: str, config: Dict[str, Any]) -> List[str]:
        """
        Validate a filter configuration without registering the filter.

        Args:
            filter_type: Type of filter to validate
            config: Configuration to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        try:
            filter_instance = cls.create_filter(filter_type, config)
        except FilterConfigurationError as e:
            return [e.message]
        return filter_instance.validate_config()

    @classmethod
    def register_filter_type(cls, filter_type: str, filter_class: Type[Filter]) -> None:
        """
        Register a new filter type.

        Args:
            filter_type: Name of the filter type
            filter_class: Filter class to register
        """
        if not (inspect.isclass(filter_class) and issubclass(filter_class, Filter)):
            raise FilterConfigurationError(
                "Filter class must inherit from Filter",
                filter_type=filter_type,
            )

        cls.FILTER_REGISTRY[filter_type] = filter_class

    @classmethod
    def unregister_filter_type(cls, filter_type: str) -> None:
        """
        Unregister a filter type.

        Args:
            filter_type: Name of the filter type to remove
        """
        if filter_type in cls.FILTER_REGISTRY:
            del cls.FILTER_REGISTRY[filter_type]
