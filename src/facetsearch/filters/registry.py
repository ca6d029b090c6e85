"""
Filter Registry

Catalog of named filters for one search surface. The registry is populated
once at bootstrap and then read by every request, so reads go through an
immutable snapshot while writes build a new snapshot under a lock and swap
it in.
"""

import logging
import threading
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from facetsearch.filters.base import ActiveFilterEntry, Filter


class FilterRegistry:
    """
    Registry of named filters.

    Filter names are unique; registering a second filter under an existing
    name is rejected rather than overwriting the first one.
    """

    ORDERBY_FIELDS = ('priority', 'name')

    def __init__(self, hooks: Any = None):
        """
        Initialize an empty registry.

        Args:
            hooks: Optional pluggy hook relay notified with
                ``filter_registered`` / ``filter_unregistered``
        """
        self._lock = threading.Lock()
        self._filters: Mapping[str, Filter] = MappingProxyType({})
        self._hooks = hooks
        self.logger = logging.getLogger(__name__)

    def register(self, filter_instance: Filter) -> bool:
        """
        Register a filter under its name.

        Args:
            filter_instance: Filter to register

        Returns:
            True if registered, False if the name is empty or already taken
        """
        name = filter_instance.name
        if not name:
            self.logger.warning(f"Refusing to register {filter_instance.__class__.__name__} without a name")
            return False

        with self._lock:
            if name in self._filters:
                self.logger.warning(f"Filter '{name}' is already registered")
                return False
            updated = dict(self._filters)
            updated[name] = filter_instance
            self._filters = MappingProxyType(updated)

        self.logger.debug(f"Registered filter {filter_instance!r}")
        if self._hooks is not None:
            self._hooks.filter_registered(name=name, filter=filter_instance)
        return True

    def unregister(self, name: str) -> bool:
        """
        Remove a filter by name.

        Returns:
            True if a filter was removed, False if none was registered
        """
        with self._lock:
            if name not in self._filters:
                return False
            updated = dict(self._filters)
            removed = updated.pop(name)
            self._filters = MappingProxyType(updated)

        self.logger.debug(f"Unregistered filter '{name}'")
        if self._hooks is not None:
            self._hooks.filter_unregistered(name=name, filter=removed)
        return True

    def get(self, name: str) -> Optional[Filter]:
        return self._filters.get(name)

    def has(self, name: str) -> bool:
        return name in self._filters

    def get_all(
        self,
        kind: Optional[str] = None,
        source: Optional[str] = None,
        active_only: bool = True,
        orderby: str = 'priority',
        order: str = 'ASC',
    ) -> List[Filter]:
        """
        List registered filters.

        Ties keep registration order, in both directions.

        Args:
            kind: Only filters of this kind
            source: Only filters with this source
            active_only: Skip filters whose ``active`` option is off
            orderby: ``priority`` or ``name``
            order: ``ASC`` or ``DESC``

        Returns:
            Matching filters in the requested order
        """
        filters = list(self._filters.values())

        if kind is not None:
            filters = [f for f in filters if f.kind == kind]
        if source is not None:
            filters = [f for f in filters if f.source == source]
        if active_only:
            filters = [f for f in filters if f.enabled]

        if orderby not in self.ORDERBY_FIELDS:
            self.logger.warning(f"Unknown orderby '{orderby}', falling back to priority")
            orderby = 'priority'

        if orderby == 'name':
            def sort_key(f: Filter) -> Any:
                return f.name
        else:
            def sort_key(f: Filter) -> Any:
                return f.priority

        return sorted(filters, key=sort_key, reverse=str(order).upper() == 'DESC')

    def count(self) -> int:
        return len(self._filters)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def reset(self) -> None:
        """Drop every registered filter. Intended for tests."""
        with self._lock:
            self._filters = MappingProxyType({})

    def get_filter_value(self, name: str, params: Mapping[str, Any]) -> Any:
        """
        Sanitized request value of one filter.

        Returns:
            The sanitized value, or None if no such filter is registered
        """
        filter_instance = self.get(name)
        if filter_instance is None:
            return None
        return filter_instance.sanitize(filter_instance.get_value_from_request(params))

    def get_active_filters(self, params: Mapping[str, Any]) -> Dict[str, ActiveFilterEntry]:
        """
        Filters constraining the given request, in priority order.

        Args:
            params: Decoded request parameters

        Returns:
            Mapping of filter name to its active-filter projection
        """
        active: Dict[str, ActiveFilterEntry] = {}
        for filter_instance in self.get_all():
            value = filter_instance.sanitize(filter_instance.get_value_from_request(params))
            if not filter_instance.is_active(value):
                continue
            active[filter_instance.name] = ActiveFilterEntry(
                name=filter_instance.name,
                label=filter_instance.label,
                value=value,
                display_value=filter_instance.get_display_value(value),
            )
        return active

    @staticmethod
    def get_default_config() -> Dict[str, Any]:
        """Base configuration every filter starts from."""
        return dict(Filter.DEFAULT_CONFIG)

    def __repr__(self) -> str:
        return f"FilterRegistry(filters={list(self._filters)!r})"
