"""
Configuration Manager

Handles hierarchical configuration loading, validation, and management
with support for CLI args → environment variables → config files → defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from facetsearch.core.config.models import AppConfig, FilterSettings, SearchSettings, TermSettings
from facetsearch.core.exceptions import ConfigurationError, ErrorCode
from facetsearch.filters.factory import FilterFactory


logger = logging.getLogger(__name__)

DEFAULT_FILTER_NAMES = ('keyword', 'category', 'tag')


class ConfigManager:
    """
    Manages application configuration with hierarchical loading and validation.

    Configuration sources in order of precedence:
    1. CLI arguments (highest priority)
    2. Environment variables
    3. Configuration files
    4. Default values (lowest priority)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._config_paths = self._get_default_config_paths()

    def _get_default_config_paths(self) -> List[Path]:
        """Get default configuration file search paths."""
        search_paths = [
            Path.cwd() / "facetsearch.yaml",
            Path.cwd() / "facetsearch.yml",
            Path.cwd() / ".facetsearch.yaml",
            Path.cwd() / ".facetsearch.yml",
            Path.home() / ".config" / "facetsearch" / "config.yaml",
        ]

        # Add XDG config directory if available
        xdg_config = os.environ.get('XDG_CONFIG_HOME')
        if xdg_config:
            search_paths.append(Path(xdg_config) / "facetsearch" / "config.yaml")

        return search_paths

    def load_config(
        self,
        cli_args: Optional[Dict[str, Any]] = None,
        env_prefix: str = "FACETSEARCH_"
    ) -> AppConfig:
        """
        Load and validate configuration from all sources.

        Args:
            cli_args: Dictionary of CLI arguments
            env_prefix: Prefix for environment variables

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Load from configuration file
        file_config = self._load_config_file()
        if file_config:
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    "Configuration file must contain a mapping at the top level",
                    error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                )
            config_data.update(file_config)

        # Override with environment variables
        env_config = self._load_env_config(env_prefix)
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        # Override with CLI arguments
        if cli_args:
            cli_config = self._normalize_cli_args(cli_args)
            config_data = self._deep_merge(config_data, cli_config)

        # Validate and create configuration
        try:
            self._config = AppConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}",
                error_code=ErrorCode.CONFIG_SCHEMA_VALIDATION,
                cause=e,
            )

        logger.debug(f"Loaded configuration with {len(self._config.search.filters)} configured filters")
        return self._config

    def _resolve_config_file(self) -> Optional[Path]:
        if self.config_file:
            if not self.config_file.exists():
                raise ConfigurationError(
                    f"Configuration file not found: {self.config_file}",
                    error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                    config_key="config_file",
                    config_value=str(self.config_file),
                )
            return self.config_file

        # If no specific file provided, search default locations
        for path in self._config_paths:
            if path.exists() and path.is_file():
                return path
        return None

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        config_file = self._resolve_config_file()
        if config_file is None:
            return None

        logger.info(f"Loading configuration from {config_file}")
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() in {'.yaml', '.yml'}:
                    return yaml.safe_load(f) or {}
                elif config_file.suffix.lower() == '.json':
                    return json.load(f)
                else:
                    # Try YAML first, then JSON
                    content = f.read()
                    try:
                        return yaml.safe_load(content) or {}
                    except yaml.YAMLError:
                        return json.loads(content)
        except (IOError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_file}: {e}",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                cause=e,
            )

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        # Define environment variable mappings
        env_mappings = {
            # Search configuration
            f"{prefix}PARAM_PREFIX": ("search", "param_prefix", str),
            f"{prefix}META_KEY_PREFIX": ("search", "meta_key_prefix", str),
            f"{prefix}DATE_FORMAT": ("search", "date_format", str),
            f"{prefix}POST_TYPE": ("search", "post_type", str),
            f"{prefix}POSTS_PER_PAGE": ("search", "posts_per_page", int),
            f"{prefix}SEARCHABLE_META_KEYS": ("search", "searchable_meta_keys", self._parse_list),
            f"{prefix}VIEWS_META_KEY": ("search", "views_meta_key", str),
            f"{prefix}REGISTER_DEFAULT_FILTERS": ("search", "register_default_filters", self._parse_bool),

            # Plugin settings
            f"{prefix}ENABLE_PLUGINS": ("enable_plugins", None, self._parse_bool),
            f"{prefix}PLUGINS": ("plugins", None, self._parse_list),

            # General settings
            f"{prefix}LOG_LEVEL": ("log_level", None, str),
            f"{prefix}VERBOSE": ("verbose", None, self._parse_bool),
            f"{prefix}DEBUG": ("debug", None, self._parse_bool),
        }

        for env_var, (section, key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    parsed_value = parser(value)
                    if key is None:
                        # Top-level setting
                        env_config[section] = parsed_value
                    else:
                        # Nested setting
                        if section not in env_config:
                            env_config[section] = {}
                        env_config[section][key] = parsed_value
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(
                        f"Invalid value for {env_var}: {value} ({e})",
                        error_code=ErrorCode.CONFIG_INVALID_VALUE,
                        config_key=env_var,
                        config_value=value,
                    )

        return env_config

    def _normalize_cli_args(self, cli_args: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize CLI arguments to configuration structure."""
        normalized: Dict[str, Any] = {}

        # Map CLI arguments to configuration sections
        cli_mappings = {
            # Direct mappings to top level
            'verbose': 'verbose',
            'debug': 'debug',
            'log_level': 'log_level',
            'plugins': 'plugins',
            'enable_plugins': 'enable_plugins',

            # Search section
            'param_prefix': ('search', 'param_prefix'),
            'prefix': ('search', 'param_prefix'),
            'date_format': ('search', 'date_format'),
            'per_page': ('search', 'posts_per_page'),
            'posts_per_page': ('search', 'posts_per_page'),
            'no_default_filters': ('search', 'register_default_filters'),
        }

        for cli_key, value in cli_args.items():
            if value is None:
                continue
            if cli_key == 'no_default_filters':
                value = not value

            mapping = cli_mappings.get(cli_key)
            if mapping:
                if isinstance(mapping, tuple):
                    section, key = mapping
                    if section not in normalized:
                        normalized[section] = {}
                    normalized[section][key] = value
                else:
                    normalized[mapping] = value

        return normalized

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _parse_bool(value: Union[str, bool]) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in {'true', '1', 'yes', 'on', 'enabled'}
        return bool(value)

    @staticmethod
    def _parse_list(value: Union[str, List[str]]) -> List[str]:
        """Parse list value from string."""
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            # Split by comma and strip whitespace
            return [item.strip() for item in value.split(',') if item.strip()]
        return []

    def validate_config(self, config: Optional[AppConfig] = None) -> List[str]:
        """
        Validate configuration and return list of warnings/issues.

        Args:
            config: Configuration to validate (uses loaded config if None)

        Returns:
            List of validation warnings/issues
        """
        if config is None:
            config = self._config

        if config is None:
            return ["No configuration loaded"]

        warnings = []
        search = config.search

        # Validate configured filters against the factory
        for filter_settings in search.filters:
            errors = FilterFactory.validate_filter_config(
                filter_settings.type, filter_settings.to_filter_config()
            )
            for error in errors:
                warnings.append(f"Filter '{filter_settings.name}': {error}")

            if search.register_default_filters and filter_settings.name in DEFAULT_FILTER_NAMES:
                warnings.append(
                    f"Filter '{filter_settings.name}' clashes with a default filter and will not be registered"
                )

        # Validate the term tree
        term_ids = {(term.taxonomy, term.id) for term in config.terms}
        for term in config.terms:
            if term.parent and (term.taxonomy, term.parent) not in term_ids:
                warnings.append(
                    f"Term {term.id} ('{term.name}') has unknown parent {term.parent} in taxonomy '{term.taxonomy}'"
                )
            if term.parent == term.id:
                warnings.append(f"Term {term.id} ('{term.name}') is its own parent")

        # Check for taxonomy filters without terms
        taxonomies = {term.taxonomy for term in config.terms}
        for filter_settings in search.filters:
            if filter_settings.source == 'taxonomy' and filter_settings.source_key \
                    and filter_settings.source_key not in taxonomies and not filter_settings.options:
                warnings.append(
                    f"Filter '{filter_settings.name}' uses taxonomy '{filter_settings.source_key}' which has no terms"
                )

        if config.plugins and not config.enable_plugins:
            warnings.append("Plugins are listed but the plugin system is disabled")

        return warnings

    def generate_schema(self, output_file: Optional[Path] = None) -> Dict[str, Any]:
        """
        Generate JSON schema for configuration.

        Args:
            output_file: Optional file to write schema to

        Returns:
            JSON schema dictionary
        """
        schema = AppConfig.model_json_schema()

        if output_file:
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(schema, f, indent=2)

        return schema

    def create_example_config(self, output_file: Path, profile: str = "default") -> None:
        """
        Create example configuration file.

        Args:
            output_file: Path to write configuration file
            profile: Configuration profile (default, directory)
        """
        if profile == "directory":
            config = AppConfig(
                search=SearchSettings(
                    searchable_meta_keys=["_listing_address", "_listing_phone"],
                    filters=[
                        FilterSettings(
                            name="price", type="range", label="Price",
                            priority=30, min=0, max=1000, step=10, prefix="$",
                        ),
                        FilterSettings(
                            name="opened", type="date_range", label="Opened",
                            priority=40,
                        ),
                    ],
                ),
                terms=[
                    TermSettings(id=1, name="Restaurants", slug="restaurants", taxonomy="listing_category", count=12),
                    TermSettings(id=2, name="Italian", slug="italian", taxonomy="listing_category", parent=1, count=5),
                    TermSettings(id=3, name="Hotels", slug="hotels", taxonomy="listing_category", count=7),
                    TermSettings(id=10, name="Wifi", slug="wifi", taxonomy="listing_tag", count=9),
                    TermSettings(id=11, name="Parking", slug="parking", taxonomy="listing_tag", count=4),
                ],
            )
        else:
            # Default configuration
            config = AppConfig()

        # Drop unset filter keys so the file only shows what the filters override
        config_dict = config.model_dump(mode='json', exclude_none=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)

    @property
    def config(self) -> Optional[AppConfig]:
        """Get the loaded configuration."""
        return self._config
