"""Notification layer: synchronous event dispatch via pluggy.

INVARIANT: Listener failures are warnings, never errors.
"""

from graphnet.plugins.event_bus import EventBus
from graphnet.plugins.hookspecs import hookimpl
from graphnet.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager", "hookimpl"]
