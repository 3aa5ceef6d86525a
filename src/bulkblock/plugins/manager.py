"""pluggy manager preloaded with the bulkblock hook specs.

Third-party plugins are installed packages that advertise an object in the
``bulkblock.plugins`` entry-point group.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from bulkblock.plugins.hookspecs import BulkBlockHookSpec

PROJECT_NAME = "bulkblock"
ENTRY_POINT_GROUP = "bulkblock.plugins"

logger = logging.getLogger(__name__)


class PluginManager(pluggy.PluginManager):
    """Hook registry for post-block and post-batch events."""

    def __init__(self) -> None:
        super().__init__(PROJECT_NAME)
        self.add_hookspecs(BulkBlockHookSpec)

    def load_entry_points(self) -> list[str]:
        """Load installed plugins and return every registered plugin name."""
        found = self.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("%d plugin(s) found in %s", found, ENTRY_POINT_GROUP)
        for plugin in self.get_plugins():
            if inspect.isclass(plugin):
                self._swap_for_instance(plugin)
        return self.plugin_names()

    def add(self, plugin: object, name: str | None = None) -> str:
        """Register *plugin* under *name*, defaulting to its class name."""
        plugin_name = name or type(plugin).__name__
        self.register(plugin, name=plugin_name)
        return plugin_name

    def plugin_names(self) -> list[str]:
        names = (self.get_name(plugin) or type(plugin).__name__ for plugin in self.get_plugins())
        return sorted(names)

    def _swap_for_instance(self, plugin_cls: type) -> None:
        # Hook calls on a bare class would leave ``self`` unbound.
        name = self.get_name(plugin_cls) or plugin_cls.__name__
        self.unregister(plugin_cls)
        try:
            instance = plugin_cls()
        except Exception:
            logger.warning("Skipping plugin %s: constructor raised", name, exc_info=True)
            return
        self.register(instance, name=name)
