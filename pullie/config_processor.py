"""Config processor - merges org-level and repo-level .pullierc files.

A repo's ``plugins`` value is either a plain list, applied as an include
list on top of the org's plugins, or a merge manifest::

    {"exclude": ["jira"], "include": ["wip", {"plugin": "requiredFile", "config": {...}}]}

which first drops the excluded names from the org's list and then applies
the include list to the result.
"""

import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from pullie.models.plugin_ref import (
    NamedPlugin,
    PluginRef,
    UnparsedPlugin,
    dump_plugin_list,
    parse_plugin_list,
    parse_plugin_ref,
)
from pullie.plugins.registry import PluginRegistry
from pullie.utils.merge import deep_merge

logger = logging.getLogger(__name__)

OnInvalidPlugin = Callable[[Optional[str]], None]


def resolve_config(
    org_config: Optional[Dict[str, Any]],
    repo_config: Optional[Dict[str, Any]],
    registry: PluginRegistry,
    on_invalid_plugin: Optional[OnInvalidPlugin] = None,
) -> Dict[str, Any]:
    """Process org-level and repo-level config into one merged config.

    Args:
        org_config: Org-level config, may be None
        repo_config: Repo-level config, may be None
        registry: Registry used to validate plugin names and merge plugin configs
        on_invalid_plugin: Called with the name of every unknown plugin in an include list

    Returns:
        The merged config. Its ``plugins`` list is free of duplicate names.
    """
    if not org_config:
        org_config = {"plugins": []}

    if not repo_config:
        return copy.deepcopy(org_config)

    rest_of_org = {k: v for k, v in org_config.items() if k != "plugins"}
    rest_of_repo = {k: v for k, v in repo_config.items() if k != "plugins"}

    config = deep_merge(rest_of_org, rest_of_repo)
    org_plugins = org_config.get("plugins")
    repo_plugins = repo_config.get("plugins")
    plugins = copy.deepcopy(org_plugins)

    if isinstance(repo_plugins, list):
        plugins = apply_include_list(org_plugins, repo_plugins, registry, on_invalid_plugin)
    elif isinstance(repo_plugins, dict):
        exclude = repo_plugins.get("exclude")
        include = repo_plugins.get("include")
        if isinstance(exclude, list):
            plugins = apply_exclude_list(plugins, exclude)
        if isinstance(include, list):
            plugins = apply_include_list(plugins, include, registry, on_invalid_plugin)
    else:
        # Not a list or a manifest, keep the org's plugins as they are
        logger.debug(f"[ConfigProcessor] Ignoring repo plugins of type {type(repo_plugins).__name__}")

    config["plugins"] = plugins
    return config


def apply_include_list(
    org_plugins: Any,
    include_list: Iterable[Any],
    registry: PluginRegistry,
    on_invalid_plugin: Optional[OnInvalidPlugin] = None,
) -> List[Any]:
    """Merge ``include_list`` into ``org_plugins`` and return the new list.

    ``org_plugins`` is never mutated. Existing entries keep their position;
    new entries are appended in include-list order. Names unknown to the
    registry are reported and skipped.
    """
    merged = _index_by_name(parse_plugin_list(copy.deepcopy(org_plugins)))

    for raw in include_list:
        to_include = parse_plugin_ref(copy.deepcopy(raw))
        plugin = registry.get(to_include.name)
        if plugin is None:
            if on_invalid_plugin:
                on_invalid_plugin(to_include.name)
            continue

        existing = merged.get(to_include.name)
        if existing is None:
            merged[to_include.name] = to_include
        elif isinstance(to_include, NamedPlugin):
            # A bare name never overrides an existing entry
            continue
        elif isinstance(existing, NamedPlugin) or existing.config is None:
            merged[to_include.name] = to_include
        elif to_include.config is not None:
            merged[to_include.name] = existing.with_config(
                plugin.merge_config(existing.config, to_include.config)
            )

    return dump_plugin_list(list(merged.values()))


def apply_exclude_list(org_plugins: Any, exclude_names: Iterable[str]) -> List[Any]:
    """Return ``org_plugins`` without the entries named in ``exclude_names``.

    Entries that cannot be matched by name are left in place.
    """
    excluded = {name for name in exclude_names if isinstance(name, str)}
    refs = parse_plugin_list(copy.deepcopy(org_plugins))
    return dump_plugin_list([ref for ref in refs if ref.name is None or ref.name not in excluded])


def _index_by_name(refs: List[PluginRef]) -> Dict[Any, PluginRef]:
    """Key references by plugin name, keeping order.

    Unparsed entries get a key of their own so they stay in place. A name
    that shows up twice keeps its first entry.
    """
    indexed: Dict[Any, PluginRef] = {}
    for position, ref in enumerate(refs):
        if isinstance(ref, UnparsedPlugin):
            indexed[("unparsed", position)] = ref
        elif ref.name not in indexed:
            indexed[ref.name] = ref
    return indexed


__all__ = [
    "resolve_config",
    "apply_include_list",
    "apply_exclude_list",
]
