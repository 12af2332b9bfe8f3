"""Plugin registry - fixed mapping from plugin name to plugin instance."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from pullie.plugins.base import BasePlugin

if TYPE_CHECKING:
    from pullie.config import Settings

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Registry of the plugins a .pullierc may reference.

    Lookup is a case-sensitive match on the plugin name. Unknown names give
    None rather than raising.
    """

    def __init__(self):
        self._plugins: Dict[str, BasePlugin] = {}

    def register(self, name: str, plugin: BasePlugin) -> None:
        """Register a plugin instance under ``name``."""
        if name in self._plugins:
            logger.warning(f"Plugin '{name}' already registered, overwriting")
        self._plugins[name] = plugin

    def get(self, name: Optional[str]) -> Optional[BasePlugin]:
        """Get a plugin by name."""
        if name is None:
            return None
        return self._plugins.get(name)

    def has(self, name: Optional[str]) -> bool:
        """Check if a plugin is registered."""
        return name in self._plugins

    def names(self) -> List[str]:
        """Get all registered plugin names, in registration order."""
        return list(self._plugins)

    def items(self):
        return self._plugins.items()

    def count(self) -> int:
        """Get total number of registered plugins."""
        return len(self._plugins)

    def __contains__(self, name: object) -> bool:
        return name in self._plugins


def build_default_registry(settings: Settings) -> PluginRegistry:
    """Build the registry of bundled plugins.

    The set of plugin names is fixed; a new registry is built for every
    event so plugins never share state across requests.
    """
    from pullie.plugins.jira import JiraPlugin
    from pullie.plugins.required_file import RequiredFilePlugin
    from pullie.plugins.reviewers import ReviewersPlugin
    from pullie.plugins.welcome import WelcomePlugin
    from pullie.plugins.wip import WIPPlugin

    registry = PluginRegistry()
    registry.register("jira", JiraPlugin(settings.jira))
    registry.register("requiredFile", RequiredFilePlugin())
    registry.register("reviewers", ReviewersPlugin(settings.reviewers_comment_format))
    registry.register("welcome", WelcomePlugin())
    registry.register("wip", WIPPlugin())
    return registry
