"""
Date range filter.

Filters listings on a date field between a start and an end date. Both
sides are ISO ``YYYY-MM-DD`` strings; anything that is not a real calendar
date is dropped.
"""

import re
from datetime import date
from typing import Any, Dict, Mapping, Optional

from dateutil import parser as date_parser

from facetsearch.filters.base import (
    DateRangeValue,
    Filter,
    FilterKind,
    FilterSource,
    sanitize_text_field,
)
from facetsearch.filters.range import DEFAULT_META_KEY_PREFIX, field_meta_key
from facetsearch.query import ConstraintKind, ListingQuery


DEFAULT_DATE_FORMAT = "%Y-%m-%d"

_ISO_DATE_RE = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')


class DateRangeFilter(Filter):
    """
    Filter listings on a date field.

    Configuration options:
    - source_key: Field the range applies to (default: the filter name)
    - min / max: Earliest and latest selectable dates (any parseable format)
    - date_format: strftime format used for display (default: %Y-%m-%d)
    - start_label / end_label: Labels of the two inputs
    - start_placeholder / end_placeholder: Input placeholders
    """

    DEFAULTS: Dict[str, Any] = {
        'source': FilterSource.FIELD.value,
        'min': '',
        'max': '',
        'date_format': DEFAULT_DATE_FORMAT,
        'start_label': 'From',
        'end_label': 'To',
        'start_placeholder': 'Start date',
        'end_placeholder': 'End date',
        'meta_key_prefix': DEFAULT_META_KEY_PREFIX,
    }

    @property
    def kind(self) -> str:
        return FilterKind.DATE_RANGE.value

    @property
    def url_param_start(self) -> str:
        return self.url_param + '_start'

    @property
    def url_param_end(self) -> str:
        return self.url_param + '_end'

    @property
    def meta_key(self) -> str:
        return field_meta_key(self._config)

    def get_value_from_request(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Read the ``_start`` and ``_end`` parameters instead of a single one."""
        return {
            'start': params.get(self.url_param_start, ''),
            'end': params.get(self.url_param_end, ''),
        }

    def sanitize(self, value: Any) -> DateRangeValue:
        if isinstance(value, Mapping):
            return DateRangeValue(
                start=self._sanitize_date(value['start']) if 'start' in value else '',
                end=self._sanitize_date(value['end']) if 'end' in value else '',
            )
        return DateRangeValue(start='', end='')

    @staticmethod
    def _sanitize_date(value: Any) -> str:
        if not value:
            return ''
        text = sanitize_text_field(value)
        if not _ISO_DATE_RE.match(text):
            return ''
        year, month, day = (int(part) for part in text.split('-'))
        try:
            date(year, month, day)
        except ValueError:
            return ''
        return text

    def is_active(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        return value.get('start', '') != '' or value.get('end', '') != ''

    def modify_query(self, query: ListingQuery, value: Any) -> None:
        """Append one date comparison: BETWEEN, >= or <=."""
        if not self.is_active(value):
            return

        start = value.get('start', '')
        end = value.get('end', '')

        if start != '' and end != '':
            constraint = {'key': self.meta_key, 'value': [start, end], 'type': 'DATE', 'compare': 'BETWEEN'}
        elif start != '':
            constraint = {'key': self.meta_key, 'value': start, 'type': 'DATE', 'compare': '>='}
        else:
            constraint = {'key': self.meta_key, 'value': end, 'type': 'DATE', 'compare': '<='}

        meta_query = query.get_constraint_group(ConstraintKind.META)
        meta_query.append(constraint)
        query.set_constraint_group(ConstraintKind.META, meta_query)

    def _load_options(self) -> Dict[str, str]:
        return {}

    def format_date(self, value: str) -> str:
        """Render an ISO date with the configured display format."""
        date_format = self._config.get('date_format') or DEFAULT_DATE_FORMAT
        try:
            return date_parser.isoparse(value).strftime(date_format)
        except (ValueError, OverflowError):
            return value

    def get_display_value(self, value: Any) -> str:
        if not isinstance(value, Mapping):
            return ''
        start = value.get('start', '')
        end = value.get('end', '')

        if start != '' and end != '':
            return f"{self.format_date(start)} - {self.format_date(end)}"
        if start != '':
            return f"From {self.format_date(start)}"
        if end != '':
            return f"Until {self.format_date(end)}"
        return ''

    def _bound(self, key: str) -> Optional[str]:
        raw = self._config.get(key)
        if not raw:
            return None
        try:
            return date_parser.parse(str(raw)).date().isoformat()
        except (ValueError, OverflowError):
            self.logger.warning(f"Ignoring unparseable {key} bound '{raw}' on filter '{self.name}'")
            return None

    def get_attributes(self) -> Dict[str, Any]:
        attributes = super().get_attributes()
        bounds = {}
        for key in ('min', 'max'):
            bound = self._bound(key)
            if bound:
                bounds[key] = bound

        attributes['inputs'] = {
            'start': {
                'type': 'date',
                'id': self.filter_id + '-start',
                'name': self.url_param_start,
                'label': self._config.get('start_label'),
                'placeholder': self._config.get('start_placeholder'),
                'class': 'facet-filter__input facet-filter__input--date',
                **bounds,
            },
            'end': {
                'type': 'date',
                'id': self.filter_id + '-end',
                'name': self.url_param_end,
                'label': self._config.get('end_label'),
                'placeholder': self._config.get('end_placeholder'),
                'class': 'facet-filter__input facet-filter__input--date',
                **bounds,
            },
        }
        return attributes
