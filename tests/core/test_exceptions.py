"""
Tests for the exception hierarchy.
"""

from facetsearch.core.exceptions import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    FacetSearchError,
    FilterConfigurationError,
    PluginError,
    RecoverySuggestion,
    config_error,
    filter_error,
)


class TestFacetSearchError:
    """Test the base error."""

    def test_defaults(self):
        """Test default code, context and correlation id."""
        error = FacetSearchError("boom")
        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.error_code == ErrorCode.UNKNOWN_ERROR
        assert error.recoverable is True
        assert len(error.context.correlation_id) == 8
        assert 'platform' in error.context.system_info

    def test_suggestions_sorted_by_priority(self):
        """Test suggestions are kept in priority order."""
        error = FacetSearchError("boom")
        error.add_suggestion(RecoverySuggestion(action="Later", description="", priority=3))
        error.add_suggestion(RecoverySuggestion(action="First", description="", priority=1))
        assert [s.action for s in error.suggestions] == ["First", "Later"]

    def test_user_message(self):
        """Test the user message lists code and suggestions."""
        error = FacetSearchError(
            "boom",
            error_code=ErrorCode.INTERNAL_ERROR,
            context=ErrorContext(correlation_id="abc12345"),
            suggestions=[RecoverySuggestion(action="Retry", description="Try again", command="run")],
        )
        message = error.get_user_message()
        assert "Error: boom" in message
        assert "Error Code: 9001" in message
        assert "Correlation ID: abc12345" in message
        assert "1. Retry" in message
        assert "Command: run" in message

    def test_debug_info(self):
        """Test debug information includes the cause."""
        cause = ValueError("bad")
        info = FacetSearchError("boom", cause=cause).get_debug_info()
        assert info['error_type'] == 'FacetSearchError'
        assert info['cause'] == {'type': 'ValueError', 'message': 'bad'}


class TestSpecializedErrors:
    """Test the specialized errors."""

    def test_configuration_error_context(self):
        """Test configuration errors record the offending key."""
        error = ConfigurationError("bad", error_code=ErrorCode.CONFIG_INVALID_VALUE, config_key="x", config_value=1)
        assert error.context.user_context == {'config_key': 'x', 'config_value': 1}
        assert error.suggestions[0].command == "facetsearch config validate"

    def test_configuration_error_without_suggestions(self):
        """Test format errors carry no canned suggestion."""
        assert ConfigurationError("bad").suggestions == []

    def test_filter_error_context(self):
        """Test filter errors record name and type."""
        error = FilterConfigurationError(
            "bad", error_code=ErrorCode.FILTER_UNKNOWN_TYPE, filter_name="size", filter_type="slider"
        )
        assert error.context.filter_name == "size"
        assert error.context.user_context['filter_type'] == "slider"
        assert error.suggestions[0].command == "facetsearch filters --types"

    def test_plugin_error(self):
        """Test plugin errors record the plugin."""
        error = PluginError("bad", plugin="mine")
        assert error.error_code == ErrorCode.PLUGIN_LOAD_FAILED
        assert error.context.plugin == "mine"
        assert isinstance(error, FacetSearchError)

    def test_helpers(self):
        """Test the convenience constructors."""
        assert config_error("bad", key="k").context.user_context['config_key'] == "k"
        assert filter_error("bad", name="n").context.filter_name == "n"
