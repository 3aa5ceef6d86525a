"""Extension layer: plugin system via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from bulkblock.plugins.hookspecs import hookimpl
from bulkblock.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
