"""
Filter Renderer

Turns filters and request parameters into render descriptors. Descriptors
are plain data; templating them into markup is left to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

from facetsearch.filters.base import ActiveFilterEntry, Filter, FilterKind, RenderOption
from facetsearch.filters.category import CategoryFilter
from facetsearch.filters.date_range import DateRangeFilter
from facetsearch.filters.range import RangeFilter
from facetsearch.filters.registry import FilterRegistry
from facetsearch.filters.tag import TagFilter
from facetsearch.search.composer import SearchQuery


NO_RESULTS_MESSAGE = "No listings found matching your criteria."


@dataclass
class RenderDescriptor:
    """
    Everything a template needs to render one filter control.

    Attributes:
        name: Filter name
        kind: Filter kind, selects the control template
        label: Display label
        value: Current sanitized value
        options: Selectable options in render order
        display_value: Human-readable rendering of the value
        is_active: Whether the value constrains results
        attributes: Control attributes (id, name, class, extras)
    """
    name: str
    kind: str
    label: str
    value: Any
    options: List[RenderOption] = field(default_factory=list)
    display_value: str = ''
    is_active: bool = False
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class OrderbyDescriptor:
    """Sort control of the search form."""
    param: str
    order_param: str
    current: str
    order: str
    options: List[RenderOption] = field(default_factory=list)


@dataclass
class SearchFormDescriptor:
    """
    A complete search form.

    Attributes:
        action: Form action URL ("" submits to the current page)
        method: HTTP method
        filters: Filter controls in priority order
        orderby: Sort control, or None when hidden
        show_submit: Whether submit and clear controls are shown
        css_classes: Classes of the form element
    """
    action: str
    method: str = 'get'
    filters: List[RenderDescriptor] = field(default_factory=list)
    orderby: Optional[OrderbyDescriptor] = None
    show_submit: bool = True
    css_classes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ActiveFilterChip:
    """An active filter together with the URL that removes it."""
    entry: ActiveFilterEntry
    remove_url: str

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def label(self) -> str:
        return self.entry.label

    @property
    def display_value(self) -> str:
        return self.entry.display_value


def _with_query(base_url: str, params: Mapping[str, Any]) -> str:
    if not params:
        return base_url
    separator = '&' if '?' in base_url else '?'
    return base_url + separator + urlencode(list(params.items()), doseq=True)


class FilterRenderer:
    """
    Builds render descriptors for registered filters.
    """

    def __init__(self, registry: FilterRegistry, search_query: Optional[SearchQuery] = None):
        self.registry = registry
        self.search_query = search_query or SearchQuery(registry)
        self.logger = logging.getLogger(__name__)

    def describe(self, filter_instance: Filter, value: Any) -> RenderDescriptor:
        """
        Describe one filter control for a given value.

        Args:
            filter_instance: Filter to describe
            value: Sanitized current value

        Returns:
            The filter's render descriptor
        """
        return RenderDescriptor(
            name=filter_instance.name,
            kind=filter_instance.kind,
            label=filter_instance.label,
            value=value,
            options=self._build_options(filter_instance, value),
            display_value=filter_instance.get_display_value(value) if filter_instance.is_active(value) else '',
            is_active=filter_instance.is_active(value),
            attributes=filter_instance.get_attributes(),
        )

    def _build_options(self, filter_instance: Filter, value: Any) -> List[RenderOption]:
        if isinstance(filter_instance, TagFilter):
            return filter_instance.get_checkbox_options(value)

        if isinstance(filter_instance, CategoryFilter) and filter_instance.hierarchical:
            options = filter_instance.get_hierarchical_options(value)
            if not options:
                # No term tree, fall back to the flat option map
                options = self._flat_options(filter_instance, value)
        elif filter_instance.kind in (FilterKind.SELECT.value, FilterKind.CHECKBOX.value):
            options = self._flat_options(filter_instance, value)
        else:
            return []

        empty_label = filter_instance.config.get('empty_option') or ''
        if filter_instance.kind == FilterKind.SELECT.value and not filter_instance.multiple and empty_label:
            options.insert(0, RenderOption(value='', label=empty_label, selected=not filter_instance.is_active(value)))
        return options

    @staticmethod
    def _flat_options(filter_instance: Filter, value: Any) -> List[RenderOption]:
        return [
            RenderOption(value=opt_value, label=opt_label, selected=filter_instance.is_option_selected(opt_value, value))
            for opt_value, opt_label in filter_instance.get_options().items()
        ]

    def render_filter(self, name: str, params: Mapping[str, Any]) -> Optional[RenderDescriptor]:
        """
        Describe a registered filter with its value taken from the request.

        Returns:
            The descriptor, or None if no such filter is registered
        """
        filter_instance = self.registry.get(name)
        if filter_instance is None:
            return None
        value = filter_instance.sanitize(filter_instance.get_value_from_request(params))
        return self.describe(filter_instance, value)

    def render_orderby(self, params: Mapping[str, Any]) -> OrderbyDescriptor:
        current = self.search_query.get_current_orderby(params)
        return OrderbyDescriptor(
            param=self.search_query.param_name('orderby'),
            order_param=self.search_query.param_name('order'),
            current=current,
            order=self.search_query.get_current_order(params),
            options=[
                RenderOption(value=value, label=label, selected=value == current)
                for value, label in self.search_query.get_orderby_options().items()
            ],
        )

    def render_search_form(
        self,
        params: Mapping[str, Any],
        filters: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
        show_orderby: bool = True,
        show_submit: bool = True,
        action: str = "",
        css_class: str = "",
    ) -> SearchFormDescriptor:
        """
        Describe the search form.

        Args:
            params: Decoded request parameters
            filters: Only include these filter names
            exclude: Leave out these filter names
            show_orderby: Include the sort control
            show_submit: Include submit and clear controls
            action: Form action URL
            css_class: Extra class for the form element

        Returns:
            The form descriptor
        """
        selected = self.registry.get_all()
        if filters:
            wanted = set(filters)
            selected = [f for f in selected if f.name in wanted]
        if exclude:
            excluded = set(exclude)
            selected = [f for f in selected if f.name not in excluded]

        css_classes = ['facet-search-form']
        if css_class:
            css_classes.append(css_class)

        return SearchFormDescriptor(
            action=action,
            filters=[
                self.describe(f, f.sanitize(f.get_value_from_request(params)))
                for f in selected
            ],
            orderby=self.render_orderby(params) if show_orderby else None,
            show_submit=show_submit,
            css_classes=css_classes,
        )

    def render_active_filters(self, params: Mapping[str, Any], base_url: str = "") -> List[ActiveFilterChip]:
        """
        Active filters of the request, each with a URL that removes it.

        Args:
            params: Decoded request parameters
            base_url: URL the remove links point at

        Returns:
            One chip per active filter, in priority order
        """
        chips = []
        for name, entry in self.registry.get_active_filters(params).items():
            filter_instance = self.registry.get(name)
            if filter_instance is None:
                continue
            chips.append(ActiveFilterChip(
                entry=entry,
                remove_url=self.build_remove_filter_url(filter_instance, params, base_url),
            ))
        return chips

    def build_remove_filter_url(self, filter_instance: Filter, params: Mapping[str, Any], base_url: str = "") -> str:
        """URL of the current request without the filter's parameter(s)."""
        param = filter_instance.url_param
        removed = {param, f"{param}[]"}
        if isinstance(filter_instance, RangeFilter):
            removed.update((filter_instance.url_param_min, filter_instance.url_param_max))
        if isinstance(filter_instance, DateRangeFilter):
            removed.update((filter_instance.url_param_start, filter_instance.url_param_end))

        remaining = {key: value for key, value in params.items() if key not in removed}
        return _with_query(base_url, remaining)

    def render_no_results(self, base_url: str = "") -> Dict[str, str]:
        """Message and clear-all link shown when a query has no results."""
        return {'message': NO_RESULTS_MESSAGE, 'clear_url': base_url}
