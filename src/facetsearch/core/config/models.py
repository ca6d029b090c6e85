"""
Configuration Models

Pydantic models for type-safe configuration management with validation,
defaults, and field documentation.
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


_NAME_RE = re.compile(r'^[a-z0-9_\-]+$')
_PREFIX_RE = re.compile(r'^[A-Za-z][A-Za-z0-9_]*$')

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class FilterSettings(BaseModel):
    """
    Configuration of one filter built from settings.

    Unset keys stay None so the filter's own defaults apply. Keys not listed
    here (``min``, ``step``, ``max_items``...) are passed to the filter as-is.
    """

    name: str = Field(description="Unique filter name, also the request parameter suffix")
    type: str = Field(description="Filter type: keyword, category, tag, range, date_range or a plugin type")
    label: Optional[str] = Field(default=None, description="Display label (derived from the name if unset)")
    source: Optional[str] = Field(default=None, description="Value source: taxonomy, field or custom")
    source_key: Optional[str] = Field(default=None, description="Taxonomy name or field key")
    multiple: Optional[bool] = Field(default=None, description="Allow several values")
    priority: Optional[int] = Field(default=None, description="Render and query order, ascending")
    active: Optional[bool] = Field(default=None, description="Whether the filter takes part in composition")
    options: Optional[Dict[str, str]] = Field(default=None, description="Static option map, value to label")

    model_config = ConfigDict(extra="allow")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Filter names become request parameter keys."""
        if not _NAME_RE.match(v):
            raise ValueError(f"Filter name '{v}' may only contain a-z, 0-9, '_' and '-'")
        return v

    @field_validator('source')
    @classmethod
    def validate_source(cls, v):
        """Validate the value source is a known one."""
        if v is not None:
            valid_sources = {'taxonomy', 'field', 'custom'}
            if v.lower() not in valid_sources:
                raise ValueError(f"Filter source must be one of: {', '.join(sorted(valid_sources))}")
            return v.lower()
        return v

    @field_validator('options', mode='before')
    @classmethod
    def normalize_options(cls, v):
        """Option keys and labels are strings on the wire."""
        if isinstance(v, dict):
            return {str(key): str(label) for key, label in v.items()}
        return v

    def to_filter_config(self) -> Dict[str, Any]:
        """Configuration dictionary handed to the filter factory."""
        return self.model_dump(exclude_none=True)


class TermSettings(BaseModel):
    """A taxonomy term declared in configuration."""

    id: int = Field(ge=1, description="Term ID")
    name: str = Field(description="Term display name")
    taxonomy: str = Field(description="Taxonomy the term belongs to")
    slug: str = Field(default="", description="URL slug")
    parent: int = Field(default=0, ge=0, description="Parent term ID, 0 for root terms")
    count: int = Field(default=0, ge=0, description="Number of listings using the term")


class SearchSettings(BaseModel):
    """Configuration of the search surface and its filters."""

    param_prefix: str = Field(
        default="q",
        description="Prefix of request parameters, e.g. q_keyword"
    )
    meta_key_prefix: str = Field(
        default="_listing_",
        description="Storage prefix of field keys used by range filters"
    )
    date_format: str = Field(
        default="%Y-%m-%d",
        description="strftime format for displayed dates"
    )
    post_type: str = Field(
        default="listing",
        description="Content type queried for listings"
    )
    post_status: str = Field(
        default="publish",
        description="Status of listings included in results"
    )
    posts_per_page: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Results per page"
    )
    searchable_meta_keys: List[str] = Field(
        default=[],
        description="Field keys searched in addition to title and content"
    )
    views_meta_key: str = Field(
        default="_listing_views_count",
        description="Field holding the view counter, used by the 'views' ordering"
    )
    register_default_filters: bool = Field(
        default=True,
        description="Register the keyword, category and tag filters at bootstrap"
    )
    filters: List[FilterSettings] = Field(
        default=[],
        description="Additional filters built from configuration"
    )

    @field_validator('param_prefix')
    @classmethod
    def validate_param_prefix(cls, v):
        """The prefix must be a valid request parameter name."""
        if not _PREFIX_RE.match(v):
            raise ValueError("param_prefix must start with a letter and contain only letters, digits and '_'")
        return v

    @field_validator('searchable_meta_keys')
    @classmethod
    def validate_searchable_meta_keys(cls, v):
        """Drop empty keys and normalize case."""
        return [key.strip().lower() for key in v if key and key.strip()]

    @model_validator(mode='after')
    def validate_unique_filter_names(self):
        """Filter names must be unique within the search surface."""
        seen = set()
        for filter_settings in self.filters:
            if filter_settings.name in seen:
                raise ValueError(f"Duplicate filter name in configuration: {filter_settings.name}")
            seen.add(filter_settings.name)
        return self


class AppConfig(BaseModel):
    """Root application configuration model."""

    # Metadata
    version: str = Field(default="1.0", description="Configuration version")

    # Core Configuration Sections
    search: SearchSettings = Field(default_factory=SearchSettings, description="Search configuration")
    terms: List[TermSettings] = Field(default=[], description="Taxonomy terms for the in-memory term source")

    # Plugin Settings
    enable_plugins: bool = Field(
        default=True,
        description="Enable plugin system"
    )
    plugins: List[str] = Field(
        default=[],
        description="Importable module names of plugins to load"
    )

    # General Settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level"
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging output"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed logging"
    )

    model_config = ConfigDict(
        extra="forbid",  # Forbid extra fields
        validate_assignment=True,  # Validate on assignment
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate the log level is one the logging module knows."""
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return level

    @model_validator(mode='after')
    def validate_term_ids(self):
        """Term IDs must be unique per taxonomy."""
        seen = set()
        for term in self.terms:
            key = (term.taxonomy, term.id)
            if key in seen:
                raise ValueError(f"Duplicate term id {term.id} in taxonomy '{term.taxonomy}'")
            seen.add(key)
        return self

    def get_effective_log_level(self) -> str:
        """Debug and verbose flags override the configured level."""
        if self.debug:
            return 'DEBUG'
        if self.verbose:
            return 'INFO'
        return self.log_level
