"""
Core Exception Hierarchy for facetsearch

Provides error classification with error codes, recovery suggestions and
context information for the outer layers (configuration, filter factory,
plugin loading). The filter engine itself never raises: sanitizers and
activity checks degrade to empty values instead.
"""

import sys
import time
import traceback
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Standard error codes for different error categories."""

    # Configuration errors (3000-3999)
    CONFIG_INVALID_FORMAT = 3001
    CONFIG_MISSING_REQUIRED = 3002
    CONFIG_INVALID_VALUE = 3003
    CONFIG_FILE_NOT_FOUND = 3004
    CONFIG_SCHEMA_VALIDATION = 3006

    # Filter errors (4000-4999)
    FILTER_UNKNOWN_TYPE = 4001
    FILTER_INVALID_CONFIG = 4002
    FILTER_MISSING_NAME = 4003
    FILTER_DUPLICATE_NAME = 4004

    # Validation errors (5000-5999)
    VALIDATION_INVALID_INPUT = 5001
    VALIDATION_MISSING_FIELD = 5002
    VALIDATION_TYPE_MISMATCH = 5003

    # Plugin errors (7000-7999)
    PLUGIN_NOT_FOUND = 7001
    PLUGIN_LOAD_FAILED = 7002
    PLUGIN_VALIDATION_FAILED = 7003
    PLUGIN_EXECUTION_FAILED = 7004

    # Generic/unknown errors (9000-9999)
    UNKNOWN_ERROR = 9000
    INTERNAL_ERROR = 9001


@dataclass
class ErrorContext:
    """Contextual information about an error occurrence."""

    operation: str = ""
    filter_name: Optional[str] = None
    file_path: Optional[str] = None
    plugin: Optional[str] = None
    correlation_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    system_info: Dict[str, Any] = field(default_factory=dict)
    user_context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            'operation': self.operation,
            'filter_name': self.filter_name,
            'file_path': self.file_path,
            'plugin': self.plugin,
            'correlation_id': self.correlation_id,
            'timestamp': self.timestamp,
            'system_info': self.system_info,
            'user_context': self.user_context,
        }


@dataclass
class RecoverySuggestion:
    """Structured recovery suggestion for error resolution."""

    action: str
    description: str
    command: Optional[str] = None
    priority: int = 1  # 1 = highest

    def to_dict(self) -> Dict[str, Any]:
        """Convert suggestion to dictionary."""
        return {
            'action': self.action,
            'description': self.description,
            'command': self.command,
            'priority': self.priority,
        }


class FacetSearchError(Exception):
    """
    Base exception for all facetsearch errors.

    Carries an error code, recovery suggestions and a context object so the
    CLI can print a useful message and debug information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = True,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        """
        Initialize facetsearch error.

        Args:
            message: Human-readable error description
            error_code: Standardized error code
            context: Contextual information about the error
            cause: Original exception that caused this error
            recoverable: Whether the caller can log and continue
            suggestions: List of recovery suggestions
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.stack_trace = traceback.format_exc()

        if not self.context.correlation_id:
            self.context.correlation_id = str(uuid.uuid4())[:8]

        if not self.context.system_info:
            self.context.system_info = {
                'platform': sys.platform,
                'python_version': sys.version,
            }

    def add_suggestion(self, suggestion: RecoverySuggestion) -> None:
        """Add a recovery suggestion to the error."""
        self.suggestions.append(suggestion)
        self.suggestions.sort(key=lambda s: s.priority)

    def get_user_message(self) -> str:
        """Get user-friendly error message with suggestions."""
        lines = [f"Error: {self.message}"]

        if self.error_code != ErrorCode.UNKNOWN_ERROR:
            lines.append(f"Error Code: {self.error_code.value}")

        if self.context.correlation_id:
            lines.append(f"Correlation ID: {self.context.correlation_id}")

        if self.suggestions:
            lines.append("\nSuggested solutions:")
            for i, suggestion in enumerate(self.suggestions[:3], 1):
                lines.append(f"  {i}. {suggestion.action}")
                lines.append(f"     {suggestion.description}")
                if suggestion.command:
                    lines.append(f"     Command: {suggestion.command}")

        return "\n".join(lines)

    def get_debug_info(self) -> Dict[str, Any]:
        """Get comprehensive debug information."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code.value,
            'recoverable': self.recoverable,
            'context': self.context.to_dict(),
            'cause': {
                'type': type(self.cause).__name__ if self.cause else None,
                'message': str(self.cause) if self.cause else None
            },
            'suggestions': [s.to_dict() for s in self.suggestions],
            'stack_trace': self.stack_trace
        }


class ConfigurationError(FacetSearchError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_INVALID_FORMAT,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if config_key:
            context.user_context['config_key'] = config_key
            context.user_context['config_value'] = config_value

        kwargs['context'] = context
        kwargs['error_code'] = error_code

        super().__init__(message, **kwargs)

        if error_code == ErrorCode.CONFIG_FILE_NOT_FOUND:
            self.add_suggestion(RecoverySuggestion(
                action="Create configuration file",
                description="Create a configuration file using the default template.",
                command="facetsearch config init",
                priority=1
            ))
        elif error_code in (ErrorCode.CONFIG_INVALID_VALUE, ErrorCode.CONFIG_SCHEMA_VALIDATION):
            self.add_suggestion(RecoverySuggestion(
                action="Check configuration values",
                description="Review the configuration file for invalid values and correct them.",
                command="facetsearch config validate",
                priority=1
            ))


class FilterConfigurationError(FacetSearchError):
    """Exception raised when a filter cannot be built from its configuration."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILTER_INVALID_CONFIG,
        filter_name: Optional[str] = None,
        filter_type: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if filter_name:
            context.filter_name = filter_name
        if filter_type:
            context.user_context['filter_type'] = filter_type

        kwargs['context'] = context
        kwargs['error_code'] = error_code

        super().__init__(message, **kwargs)

        if error_code == ErrorCode.FILTER_UNKNOWN_TYPE:
            self.add_suggestion(RecoverySuggestion(
                action="Use a registered filter type",
                description="List the available filter types and fix the 'type' key.",
                command="facetsearch filters --types",
                priority=1
            ))


class PluginError(FacetSearchError):
    """Exception for plugin discovery and loading errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.PLUGIN_LOAD_FAILED,
        plugin: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if plugin:
            context.plugin = plugin

        kwargs['context'] = context
        kwargs['error_code'] = error_code

        super().__init__(message, **kwargs)


def config_error(message: str, key: Optional[str] = None, **kwargs) -> ConfigurationError:
    """Create a configuration error with standard suggestions."""
    return ConfigurationError(message, config_key=key, **kwargs)


def filter_error(message: str, name: Optional[str] = None, **kwargs) -> FilterConfigurationError:
    """Create a filter configuration error with filter context."""
    return FilterConfigurationError(message, filter_name=name, **kwargs)
