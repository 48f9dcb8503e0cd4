"""Extension layer — lifecycle hooks via pluggy.

Discovery: entry points in the ``contactctl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from contactctl.plugins.event_bus import EventBus
from contactctl.plugins.hookspecs import hookimpl
from contactctl.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager", "hookimpl"]
