"""
Numeric range filter.

Filters listings on a numeric field between a minimum and a maximum. Both
bounds are kept as strings so the user's precision survives the round trip
through the request.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from facetsearch.filters.base import (
    Filter,
    FilterKind,
    FilterSource,
    RangeValue,
    sanitize_key,
)
from facetsearch.query import ConstraintKind, ListingQuery


DEFAULT_META_KEY_PREFIX = "_listing_"

# Largest accepted order of magnitude for submitted numbers
MAX_NUMBER_DIGITS = 30

_NUMERIC_RE = re.compile(r'^\s*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$')


def field_meta_key(filter_config: Mapping[str, Any]) -> str:
    """Storage key of the field a range-style filter compares against."""
    prefix = filter_config.get('meta_key_prefix') or DEFAULT_META_KEY_PREFIX
    source_key = filter_config.get('source_key') or filter_config.get('name') or ''
    return prefix + sanitize_key(source_key)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    text = str(value)
    if not _NUMERIC_RE.match(text):
        return None
    try:
        return Decimal(text.strip())
    except InvalidOperation:
        return None


class RangeFilter(Filter):
    """
    Filter listings on a numeric field.

    Configuration options:
    - source_key: Field the range applies to (default: the filter name)
    - min / max: Bounds that submitted values are clamped to
    - step: Input step; fractional steps keep decimal places (default: 1)
    - prefix / suffix: Unit decoration for display, e.g. "$"
    - min_placeholder / max_placeholder: Input placeholders
    - meta_key_prefix: Storage prefix of field keys (default: _listing_)
    """

    DEFAULTS: Dict[str, Any] = {
        'source': FilterSource.FIELD.value,
        'min': None,
        'max': None,
        'step': 1,
        'min_placeholder': 'Min',
        'max_placeholder': 'Max',
        'prefix': '',
        'suffix': '',
        'meta_key_prefix': DEFAULT_META_KEY_PREFIX,
    }

    @property
    def kind(self) -> str:
        return FilterKind.RANGE.value

    @property
    def url_param_min(self) -> str:
        return self.url_param + '_min'

    @property
    def url_param_max(self) -> str:
        return self.url_param + '_max'

    @property
    def meta_key(self) -> str:
        return field_meta_key(self._config)

    def get_value_from_request(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Read the ``_min`` and ``_max`` parameters instead of a single one."""
        return {
            'min': params.get(self.url_param_min, ''),
            'max': params.get(self.url_param_max, ''),
        }

    def sanitize(self, value: Any) -> RangeValue:
        if isinstance(value, Mapping):
            return RangeValue(
                min=self._sanitize_number(value['min']) if 'min' in value else '',
                max=self._sanitize_number(value['max']) if 'max' in value else '',
            )
        return RangeValue(min='', max='')

    def _decimal_places(self) -> Optional[int]:
        """Decimal places kept for fractional steps, None for integer steps."""
        step = self._config.get('step', 1)
        step_value = _to_decimal(step)
        if step_value is None or step_value <= 0:
            return None
        if step_value != step_value.to_integral_value():
            exponent = step_value.normalize().as_tuple().exponent
            return max(1, -exponent if isinstance(exponent, int) else 1)
        return None

    def _sanitize_number(self, value: Any) -> str:
        if value is None or value == '':
            return ''
        number = _to_decimal(value)
        if number is None:
            return ''

        try:
            lower = _to_decimal(self._config.get('min'))
            upper = _to_decimal(self._config.get('max'))

            # Huge magnitudes are clamped or dropped before any integer conversion
            if number.adjusted() > MAX_NUMBER_DIGITS:
                if upper is not None and number > upper:
                    number = upper
                elif lower is not None and number < lower:
                    number = lower
                else:
                    return ''

            places = self._decimal_places()
            if places is None:
                number = Decimal(int(number))
            else:
                number = number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)

            if lower is not None and number < lower:
                number = lower
            if upper is not None and number > upper:
                number = upper

            if places is None:
                if number == number.to_integral_value():
                    return str(int(number))
                return format(number.normalize(), 'f')
            return format(number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP), 'f')
        except (InvalidOperation, OverflowError, ValueError):
            return ''

    def is_active(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        return value.get('min', '') != '' or value.get('max', '') != ''

    def modify_query(self, query: ListingQuery, value: Any) -> None:
        """Append one numeric comparison: BETWEEN, >= or <=."""
        if not self.is_active(value):
            return

        minimum = value.get('min', '')
        maximum = value.get('max', '')

        if minimum != '' and maximum != '':
            constraint = {'key': self.meta_key, 'value': [minimum, maximum], 'type': 'NUMERIC', 'compare': 'BETWEEN'}
        elif minimum != '':
            constraint = {'key': self.meta_key, 'value': minimum, 'type': 'NUMERIC', 'compare': '>='}
        else:
            constraint = {'key': self.meta_key, 'value': maximum, 'type': 'NUMERIC', 'compare': '<='}

        meta_query = query.get_constraint_group(ConstraintKind.META)
        meta_query.append(constraint)
        query.set_constraint_group(ConstraintKind.META, meta_query)

    def _load_options(self) -> Dict[str, str]:
        return {}

    def get_display_value(self, value: Any) -> str:
        if not isinstance(value, Mapping):
            return ''
        minimum = value.get('min', '')
        maximum = value.get('max', '')
        prefix = self._config.get('prefix') or ''
        suffix = self._config.get('suffix') or ''

        if minimum != '' and maximum != '':
            return f"{prefix}{minimum}{suffix} - {prefix}{maximum}{suffix}"
        if minimum != '':
            return f"{prefix}{minimum}{suffix} or more"
        if maximum != '':
            return f"Up to {prefix}{maximum}{suffix}"
        return ''

    def get_attributes(self) -> Dict[str, Any]:
        attributes = super().get_attributes()
        bounds = {}
        if self._config.get('min') is not None:
            bounds['min'] = self._config['min']
        if self._config.get('max') is not None:
            bounds['max'] = self._config['max']

        attributes['inputs'] = {
            'min': {
                'type': 'number',
                'id': self.filter_id + '-min',
                'name': self.url_param_min,
                'placeholder': self._config.get('min_placeholder'),
                'class': 'facet-filter__input facet-filter__input--min',
                'step': self._config.get('step'),
                **bounds,
            },
            'max': {
                'type': 'number',
                'id': self.filter_id + '-max',
                'name': self.url_param_max,
                'placeholder': self._config.get('max_placeholder'),
                'class': 'facet-filter__input facet-filter__input--max',
                'step': self._config.get('step'),
                **bounds,
            },
        }
        if self._config.get('prefix'):
            attributes['prefix'] = self._config['prefix']
        if self._config.get('suffix'):
            attributes['suffix'] = self._config['suffix']
        return attributes
