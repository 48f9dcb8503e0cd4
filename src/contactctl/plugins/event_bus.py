"""Synchronous lifecycle event dispatch via pluggy.

Contact mutations are single-threaded and synchronous, so hooks run
inline on the caller's thread, in registration order.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from contactctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Dispatch named hooks with keyword payloads.

    Returns a list of warning strings instead of raising, so callers can
    attach them to a ServiceResult.
    """

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> list[str]:
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook spec named %s", hook_name)
            return []

        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", hook_name, exc, exc_info=True)
            return [f"Plugin hook {hook_name} failed: {exc}"]
        return []
