"""Plugin references - entries of a ``plugins`` list in a .pullierc.

A raw entry is either a bare plugin name (``"reviewers"``) or an object
(``{"plugin": "requiredFile", "config": {...}}``). Anything else is kept as
an ``UnparsedPlugin`` so it can be carried through merges untouched.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class NamedPlugin:
    """Bare plugin name."""

    name: str

    @property
    def config(self) -> Optional[Dict[str, Any]]:
        return None

    def to_raw(self) -> str:
        return self.name


@dataclass(frozen=True)
class ConfiguredPlugin:
    """Plugin object; ``config`` is None when the object had no config key."""

    name: str
    config: Any = None

    def with_config(self, config: Any) -> "ConfiguredPlugin":
        return ConfiguredPlugin(name=self.name, config=config)

    def to_raw(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {"plugin": self.name}
        if self.config is not None:
            raw["config"] = self.config
        return raw


@dataclass(frozen=True)
class UnparsedPlugin:
    """Entry that is neither a name nor an object with a ``plugin`` field."""

    raw: Any

    @property
    def name(self) -> Optional[str]:
        return None

    @property
    def config(self) -> Optional[Dict[str, Any]]:
        return None

    def to_raw(self) -> Any:
        return self.raw


PluginRef = Union[NamedPlugin, ConfiguredPlugin, UnparsedPlugin]


def parse_plugin_ref(raw: Any) -> PluginRef:
    """Turn a raw list entry into its tagged form."""
    if isinstance(raw, str):
        return NamedPlugin(raw)
    if isinstance(raw, dict) and isinstance(raw.get("plugin"), str) and raw["plugin"]:
        return ConfiguredPlugin(name=raw["plugin"], config=raw.get("config"))
    return UnparsedPlugin(raw)


def parse_plugin_list(raw_list: Any) -> List[PluginRef]:
    """Parse a raw ``plugins`` list. Non-list values yield an empty list."""
    if not isinstance(raw_list, list):
        return []
    return [parse_plugin_ref(raw) for raw in raw_list]


def dump_plugin_list(refs: List[PluginRef]) -> List[Any]:
    """Materialize tagged references back into raw JSON values."""
    return [ref.to_raw() for ref in refs]
