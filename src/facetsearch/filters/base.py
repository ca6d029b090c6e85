"""
Abstract Filter Base Classes

Defines the faceted-filter contract and the value shapes shared by every
filter kind. A filter knows how to read its raw value from request
parameters, sanitize it into a canonical shape, decide whether that value
is active, describe it for display and contribute one constraint to a
shared ListingQuery.

Sanitizers and activity checks never raise: invalid input degrades to the
kind's empty shape, which is always inactive.
"""

import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, TypedDict

from facetsearch.query import ListingQuery


DEFAULT_PARAM_PREFIX = "q"


class FilterKind(str, Enum):
    """Built-in filter kinds. Custom filters may report any other string."""
    TEXT = "text"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RANGE = "range"
    DATE_RANGE = "date_range"


class FilterSource(str, Enum):
    """Where a filter's values come from."""
    TAXONOMY = "taxonomy"
    FIELD = "field"
    CUSTOM = "custom"


class RangeValue(TypedDict):
    """Sanitized value of a numeric range filter."""
    min: str
    max: str


class DateRangeValue(TypedDict):
    """Sanitized value of a date range filter (ISO ``YYYY-MM-DD`` sides)."""
    start: str
    end: str


@dataclass(frozen=True)
class ActiveFilterEntry:
    """
    Projection of one filter that is constraining the current request.

    Attributes:
        name: Filter name
        label: Display label of the filter
        value: Sanitized filter value
        display_value: Human-readable rendering of the value
    """
    name: str
    label: str
    value: Any
    display_value: str


@dataclass(frozen=True)
class RenderOption:
    """
    One selectable option of a discrete filter control.

    Attributes:
        value: Option value as posted on the wire
        label: Option label without indentation
        selected: Whether the option matches the current value
        depth: Nesting depth for hierarchical options (0 for roots)
    """
    value: str
    label: str
    selected: bool = False
    depth: int = 0

    @property
    def indent(self) -> str:
        return INDENT_UNIT * self.depth

    @property
    def display_label(self) -> str:
        return self.indent + self.label


# Two non-breaking spaces per hierarchy level
INDENT_UNIT = "\u00a0\u00a0"

# Longer digit strings cannot be ids and coerce to 0
MAX_ID_DIGITS = 19

_INT_PREFIX = re.compile(r'^\s*([+-]?[0-9]+)')
_TAG_RE = re.compile(r'<[^>]*>')
_WHITESPACE_RE = re.compile(r'\s+')
_KEY_RE = re.compile(r'[^a-z0-9_\-]')


def absint(value: Any) -> int:
    """
    Coerce any value to a non-negative integer.

    Numeric strings are read up to the first non-digit, negative numbers
    become their absolute value and anything non-numeric becomes 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return abs(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return abs(int(value))
    if isinstance(value, bytes):
        value = value.decode('utf-8', 'ignore')
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if not match:
            return 0
        digits = match.group(1).lstrip('+-').lstrip('0')
        if len(digits) > MAX_ID_DIGITS:
            return 0
        return abs(int(match.group(1)))
    return 0


def is_empty_value(value: Any) -> bool:
    """Loose emptiness check: None, False, 0, '', '0' and empty containers."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == '' or value == '0'
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def sanitize_text_field(value: Any) -> str:
    """Strip markup and collapse whitespace of a single-line text value."""
    if value is None or isinstance(value, (list, tuple, set, dict)):
        return ""
    if isinstance(value, bool):
        text = "1" if value else ""
    elif isinstance(value, bytes):
        text = value.decode('utf-8', 'ignore')
    else:
        text = str(value)
    text = _TAG_RE.sub('', text)
    return _WHITESPACE_RE.sub(' ', text).strip()


def sanitize_key(value: Any) -> str:
    """Lowercase a key and drop everything but ``a-z0-9_-``."""
    return _KEY_RE.sub('', str(value or '').lower())


def humanize(name: str) -> str:
    """Turn ``price_range`` or ``price-range`` into ``Price Range``."""
    words = name.replace('_', ' ').replace('-', ' ').split(' ')
    return ' '.join(word[:1].upper() + word[1:] for word in words)


class Filter(ABC):
    """
    Abstract base class for all faceted filters.

    Concrete filters override ``kind`` and whichever of ``sanitize``,
    ``is_active``, ``modify_query``, ``_load_options`` and
    ``get_display_value`` differ from the defaults. Configuration is merged
    from ``DEFAULT_CONFIG``, the subclass ``DEFAULTS`` and the caller's
    dictionary, in that order.
    """

    DEFAULT_CONFIG: Dict[str, Any] = {
        'name': '',
        'type': FilterKind.SELECT.value,
        'label': '',
        'source': FilterSource.CUSTOM.value,
        'source_key': '',
        'options': {},
        'multiple': False,
        'empty_option': '',
        'query_callback': None,
        'priority': 10,
        'active': True,
        'class': '',
        'attributes': {},
        'param_prefix': DEFAULT_PARAM_PREFIX,
    }

    DEFAULTS: Dict[str, Any] = {}

    def __init__(self, config: Optional[Dict[str, Any]] = None, hooks: Any = None):
        """
        Initialize the filter with configuration.

        Args:
            config: Filter configuration dictionary
            hooks: Optional pluggy hook relay used for the ``filter_options``
                hook when options are first computed
        """
        merged = dict(self.DEFAULT_CONFIG)
        merged.update(self.DEFAULTS)
        merged.update(config or {})
        merged['type'] = self.kind

        if not merged.get('label') and merged.get('name'):
            merged['label'] = humanize(str(merged['name']))

        self._config = merged
        self._hooks = hooks
        self._cached_options: Optional[Dict[str, str]] = None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def kind(self) -> str:
        """Filter kind, used to pick the UI control and sanitizer family."""

    @property
    def name(self) -> str:
        return str(self._config.get('name') or '')

    @property
    def label(self) -> str:
        return str(self._config.get('label') or '')

    @property
    def source(self) -> str:
        return str(self._config.get('source') or '')

    @property
    def source_key(self) -> str:
        return str(self._config.get('source_key') or '')

    @property
    def priority(self) -> int:
        try:
            return int(self._config.get('priority', 10))
        except (TypeError, ValueError):
            return 10

    @property
    def multiple(self) -> bool:
        return bool(self._config.get('multiple'))

    @property
    def enabled(self) -> bool:
        """Whether the filter takes part in composition at all."""
        return self._config.get('active', True) is True

    @property
    def config(self) -> Dict[str, Any]:
        return dict(self._config)

    @property
    def url_param(self) -> str:
        """Request parameter key, ``{prefix}_{name}``."""
        prefix = self._config.get('param_prefix') or DEFAULT_PARAM_PREFIX
        return f"{prefix}_{self.name}"

    @property
    def filter_id(self) -> str:
        return f"facet-filter-{self.name}"

    def get_value_from_request(self, params: Mapping[str, Any]) -> Any:
        """
        Read this filter's raw value from request parameters.

        Multi-value filters are posted as ``name[]`` on the wire; both the
        bare key and the bracketed key are accepted, and a single value is
        wrapped in a list.

        Args:
            params: Decoded request parameters

        Returns:
            The raw, unsanitized value or None when the parameter is absent
        """
        param = self.url_param
        if param in params:
            value = params[param]
        elif f"{param}[]" in params:
            value = params[f"{param}[]"]
        else:
            return None

        if self.multiple and not isinstance(value, (list, tuple)):
            return [] if is_empty_value(value) else [value]
        return value

    def sanitize(self, value: Any) -> Any:
        """
        Default sanitizer, chosen by kind.

        Select and checkbox values are term-style ids and go through
        ``absint``; checkbox and multi-value filters always produce a list.
        Every other kind is treated as plain text, element-wise for lists.
        """
        if self.kind in (FilterKind.SELECT.value, FilterKind.CHECKBOX.value):
            if isinstance(value, (list, tuple)):
                return [absint(v) for v in value]
            if self.kind == FilterKind.CHECKBOX.value or self.multiple:
                return [] if is_empty_value(value) else [absint(value)]
            return absint(value)

        if isinstance(value, (list, tuple)):
            return [sanitize_text_field(v) for v in value]
        if isinstance(value, str):
            return sanitize_text_field(value)
        return value

    def is_active(self, value: Any) -> bool:
        """
        Whether ``value`` constrains the result set.

        Lists need one non-empty element ('' and '0' count as empty),
        numbers must be positive and strings non-blank.
        """
        if isinstance(value, (list, tuple)):
            return any(not is_empty_value(v) for v in value)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value > 0
        if isinstance(value, str):
            return not is_empty_value(value.strip())
        return value is not None

    def modify_query(self, query: ListingQuery, value: Any) -> None:
        """
        Apply this filter to the shared query.

        The base implementation only runs a configured ``query_callback``,
        which receives ``(query, value, filter)``.
        """
        if not self.is_active(value):
            return
        callback: Optional[Callable[..., Any]] = self._config.get('query_callback')
        if callback is not None and callable(callback):
            callback(query, value, self)

    def get_options(self) -> Dict[str, str]:
        """
        Selectable options keyed by value.

        Computed once per instance; plugins implementing ``filter_options``
        may replace the computed map before it is cached.
        """
        if self._cached_options is not None:
            return self._cached_options

        options = self._load_options()
        if self._hooks is not None:
            replaced = self._hooks.filter_options(options=options, filter=self)
            if replaced is not None:
                options = dict(replaced)

        self._cached_options = options
        return self._cached_options

    def _load_options(self) -> Dict[str, str]:
        static = self._config.get('options') or {}
        return {str(k): str(v) for k, v in dict(static).items()}

    def get_display_value(self, value: Any) -> str:
        """Human-readable value for active-filter chips."""
        options = self.get_options()
        if isinstance(value, (list, tuple)):
            return ', '.join(options.get(str(v), str(v)) for v in value)
        if value is None:
            return ''
        return options.get(str(value), str(value))

    def get_attributes(self) -> Dict[str, Any]:
        """Common render attributes for the filter control."""
        attributes: Dict[str, Any] = {
            'id': self.filter_id,
            'name': self.url_param + ('[]' if self.multiple else ''),
        }
        if self._config.get('class'):
            attributes['class'] = self._config['class']
        extra = self._config.get('attributes')
        if isinstance(extra, dict):
            attributes.update(extra)
        return attributes

    def is_option_selected(self, option_value: Any, current_value: Any) -> bool:
        """Compare string-normalized option values against the current value."""
        option_value = str(option_value)
        if isinstance(current_value, (list, tuple)):
            return option_value in [str(v) for v in current_value]
        if current_value is None:
            return False
        return str(current_value) == option_value

    def validate_config(self) -> List[str]:
        """
        Validate the filter configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        if not self.name:
            errors.append("Filter name cannot be empty")
        elif sanitize_key(self.name) != self.name:
            errors.append(f"Filter name '{self.name}' may only contain a-z, 0-9, '_' and '-'")
        callback = self._config.get('query_callback')
        if callback is not None and not callable(callback):
            errors.append("query_callback must be callable")
        return errors

    def __str__(self) -> str:
        return f"{self.name} ({self.kind})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"
