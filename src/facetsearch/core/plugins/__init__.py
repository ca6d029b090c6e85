"""
facetsearch Plugin System

This module provides the plugin architecture for facetsearch, enabling
third-party extensions through a pluggy-based system. Plugins can:

- Register additional filters at bootstrap
- Observe filter registration and removal
- Replace the options a filter offers
- Extend the fields searched by keyword queries
- Observe composed queries

Key Components:
- PluginManager: Plugin discovery, loading and unloading
- Hook specifications: Interfaces for plugin hooks
- hookimpl: Marker for plugin hook implementations
"""

from .hooks import FilterHooks, RegistryHooks, SearchHooks, hookimpl, hookspec
from .manager import ENTRY_POINT_GROUP, PluginManager

__all__ = [
    'PluginManager',
    'ENTRY_POINT_GROUP',
    'RegistryHooks',
    'FilterHooks',
    'SearchHooks',
    'hookimpl',
    'hookspec',
]
