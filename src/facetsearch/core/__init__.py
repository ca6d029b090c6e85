"""
Core facetsearch Package

Contains core infrastructure components: configuration, plugins and error
handling.
"""

from facetsearch.core.exceptions import (
    FacetSearchError,
    ConfigurationError,
    FilterConfigurationError,
    PluginError,
    ErrorCode,
    ErrorContext,
    RecoverySuggestion
)

__all__ = [
    'FacetSearchError',
    'ConfigurationError',
    'FilterConfigurationError',
    'PluginError',
    'ErrorCode',
    'ErrorContext',
    'RecoverySuggestion',
]
