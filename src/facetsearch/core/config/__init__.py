"""
Configuration Management Package

Provides Pydantic-based configuration models and management for facetsearch.
"""

from facetsearch.core.config.models import AppConfig, FilterSettings, SearchSettings, TermSettings
from facetsearch.core.config.manager import ConfigManager

__all__ = [
    "AppConfig",
    "FilterSettings",
    "SearchSettings",
    "TermSettings",
    "ConfigManager",
]
