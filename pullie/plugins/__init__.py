"""Plugin system for Pullie.

Imports are lazy so that the merge engine and CLI can load the registry
contract without pulling in aiohttp-backed plugins.
"""

__all__ = [
    "BasePlugin",
    "PluginRegistry",
    "build_default_registry",
    "JiraPlugin",
    "RequiredFilePlugin",
    "ReviewersPlugin",
    "WelcomePlugin",
    "WIPPlugin",
]


def __getattr__(name):
    if name == "BasePlugin":
        from pullie.plugins.base import BasePlugin
        return BasePlugin
    if name in ("PluginRegistry", "build_default_registry"):
        from pullie.plugins import registry
        return getattr(registry, name)
    if name == "JiraPlugin":
        from pullie.plugins.jira import JiraPlugin
        return JiraPlugin
    if name == "RequiredFilePlugin":
        from pullie.plugins.required_file import RequiredFilePlugin
        return RequiredFilePlugin
    if name == "ReviewersPlugin":
        from pullie.plugins.reviewers import ReviewersPlugin
        return ReviewersPlugin
    if name == "WelcomePlugin":
        from pullie.plugins.welcome import WelcomePlugin
        return WelcomePlugin
    if name == "WIPPlugin":
        from pullie.plugins.wip import WIPPlugin
        return WIPPlugin
    raise AttributeError(f"module 'pullie.plugins' has no attribute {name!r}")
