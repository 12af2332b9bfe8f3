"""Data models for webhook payloads and plugin references."""

from .events import PullRequestEvent, WebhookContext
from .plugin_ref import (
    ConfiguredPlugin,
    NamedPlugin,
    PluginRef,
    UnparsedPlugin,
    dump_plugin_list,
    parse_plugin_list,
    parse_plugin_ref,
)

__all__ = [
    'PullRequestEvent',
    'WebhookContext',
    'ConfiguredPlugin',
    'NamedPlugin',
    'PluginRef',
    'UnparsedPlugin',
    'dump_plugin_list',
    'parse_plugin_list',
    'parse_plugin_ref',
]
