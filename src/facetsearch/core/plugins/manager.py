"""
Plugin Manager

Central management for facetsearch plugins: discovery from configured module
names and the ``facetsearch.plugins`` entry-point group, loading into a
pluggy plugin manager, and unloading.
"""

import importlib
import logging
from importlib.metadata import entry_points
from typing import Any, Dict, List, Optional

import pluggy

from facetsearch.core.exceptions import ErrorCode, PluginError
from .hooks import FilterHooks, RegistryHooks, SearchHooks


ENTRY_POINT_GROUP = "facetsearch.plugins"


class PluginManager:
    """
    Plugin management for facetsearch.

    Wraps a ``pluggy.PluginManager`` with the facetsearch hook specifications
    and keeps track of which plugins were loaded from where. Load failures
    are logged and reported as False so one broken plugin does not stop the
    others.
    """

    def __init__(self, modules: Optional[List[str]] = None, use_entry_points: bool = True):
        """
        Initialize the plugin manager.

        Args:
            modules: Importable module names to load as plugins
            use_entry_points: Also discover plugins from entry points
        """
        self.logger = logging.getLogger(__name__)
        self.modules = list(modules or [])
        self.use_entry_points = use_entry_points

        # Create pluggy plugin manager
        self.pm = pluggy.PluginManager("facetsearch")
        self.pm.add_hookspecs(RegistryHooks)
        self.pm.add_hookspecs(FilterHooks)
        self.pm.add_hookspecs(SearchHooks)

        self._loaded_plugins: Dict[str, Dict[str, Any]] = {}

    @property
    def hook(self) -> Any:
        """The pluggy hook relay used to call plugin hooks."""
        return self.pm.hook

    def discover_plugins(self) -> List[Dict[str, Any]]:
        """
        Discover all available plugins from configured sources.

        Returns:
            List of plugin metadata dictionaries
        """
        discovered = [
            {'name': module_name, 'module': module_name, 'type': 'module'}
            for module_name in self.modules
        ]

        # Discover from entry points (if enabled)
        if self.use_entry_points:
            discovered.extend(self._discover_from_entry_points())

        self.logger.info(f"Discovered {len(discovered)} plugins")
        return discovered

    def _discover_from_entry_points(self) -> List[Dict[str, Any]]:
        """Discover plugins from entry points."""
        plugins = []
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            plugins.append({
                'name': ep.name,
                'version': getattr(ep.dist, 'version', '') if ep.dist else '',
                'entry_point': ep,
                'type': 'entry_point',
            })
        return plugins

    def _load_plugin_module(self, plugin_info: Dict[str, Any]) -> Any:
        """Import the object a plugin entry refers to."""
        if plugin_info['type'] == 'entry_point':
            return plugin_info['entry_point'].load()
        if plugin_info['type'] == 'module':
            return importlib.import_module(plugin_info['module'])
        raise PluginError(
            f"Unknown plugin type: {plugin_info['type']}",
            error_code=ErrorCode.PLUGIN_VALIDATION_FAILED,
            plugin=plugin_info.get('name'),
        )

    def load_plugin(self, plugin_info: Dict[str, Any]) -> bool:
        """
        Load a single plugin.

        Args:
            plugin_info: Plugin metadata dictionary

        Returns:
            True if plugin was loaded successfully
        """
        plugin_name = plugin_info['name']

        if plugin_name in self._loaded_plugins:
            self.logger.warning(f"Plugin '{plugin_name}' is already loaded")
            return False

        try:
            self.logger.info(f"Loading plugin: {plugin_name}")
            plugin_module = self._load_plugin_module(plugin_info)
            self.pm.register(plugin_module, name=plugin_name)
        except Exception as e:
            self.logger.error(f"Failed to load plugin '{plugin_name}': {e}")
            return False

        self._loaded_plugins[plugin_name] = dict(plugin_info, plugin=plugin_module)
        self.logger.info(f"Successfully loaded plugin: {plugin_name}")
        return True

    def register(self, plugin: Any, name: Optional[str] = None) -> bool:
        """
        Register an already imported plugin object.

        Args:
            plugin: Module, class or instance carrying ``hookimpl`` functions
            name: Plugin name (defaults to pluggy's canonical name)

        Returns:
            True if the plugin was registered
        """
        plugin_name = name or self.pm.get_canonical_name(plugin)
        if plugin_name in self._loaded_plugins:
            self.logger.warning(f"Plugin '{plugin_name}' is already loaded")
            return False

        try:
            self.pm.register(plugin, name=plugin_name)
        except (ValueError, pluggy.PluginValidationError) as e:
            self.logger.error(f"Failed to register plugin '{plugin_name}': {e}")
            return False

        self._loaded_plugins[plugin_name] = {'name': plugin_name, 'type': 'object', 'plugin': plugin}
        return True

    def unload_plugin(self, plugin_name: str) -> bool:
        """
        Unload a plugin.

        Args:
            plugin_name: Name of plugin to unload

        Returns:
            True if plugin was unloaded successfully
        """
        if plugin_name not in self._loaded_plugins:
            self.logger.warning(f"Plugin '{plugin_name}' is not loaded")
            return False

        self.pm.unregister(name=plugin_name)
        del self._loaded_plugins[plugin_name]
        self.logger.info(f"Unloaded plugin: {plugin_name}")
        return True

    def load_all_plugins(self) -> int:
        """
        Load all discovered plugins.

        Returns:
            Number of successfully loaded plugins
        """
        discovered = self.discover_plugins()
        loaded_count = 0

        for plugin_info in discovered:
            if self.load_plugin(plugin_info):
                loaded_count += 1

        self.logger.info(f"Loaded {loaded_count} of {len(discovered)} discovered plugins")
        return loaded_count

    def get_loaded_plugins(self) -> List[str]:
        return list(self._loaded_plugins)

    def is_loaded(self, plugin_name: str) -> bool:
        return plugin_name in self._loaded_plugins

    def get_plugin_status(self) -> Dict[str, Dict[str, Any]]:
        """
        Status of every loaded plugin.

        Returns:
            Mapping of plugin name to its source type and implemented hooks
        """
        status = {}
        for plugin_name, info in self._loaded_plugins.items():
            hookcallers = self.pm.get_hookcallers(info['plugin']) or []
            status[plugin_name] = {
                'type': info['type'],
                'version': info.get('version', ''),
                'hooks': sorted(caller.name for caller in hookcallers),
            }
        return status
