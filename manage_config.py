#!/usr/bin/env python3
"""Pullie config management CLI tool."""

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from pullie.config import Settings
from pullie.config_processor import resolve_config
from pullie.models.plugin_ref import UnparsedPlugin, parse_plugin_list
from pullie.plugins.registry import PluginRegistry, build_default_registry


def get_registry() -> PluginRegistry:
    """Create the registry of bundled plugins."""
    return build_default_registry(Settings.from_env())


def load_json_file(path: str):
    """Load a JSON file, or return None for '-' (no config)."""
    if path == "-":
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def cmd_list(args):
    """List all bundled plugins."""
    registry = get_registry()

    print(f"{'Name':<16} {'Edits':<8} {'Ready for review'}")
    print("-" * 42)

    for name, plugin in registry.items():
        edits = "Yes" if plugin.processes_edits else "No"
        ready = "Yes" if plugin.processes_ready_for_review else "No"
        print(f"{name:<16} {edits:<8} {ready}")


def cmd_resolve(args):
    """Resolve an org-level and a repo-level .pullierc into the effective config."""
    registry = get_registry()
    try:
        org_config = load_json_file(args.org_config)
        repo_config = load_json_file(args.repo_config)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading config: {e}")
        sys.exit(1)

    invalid = []
    config = resolve_config(org_config, repo_config, registry, invalid.append)

    print(json.dumps(config, indent=2, ensure_ascii=False))
    for name in invalid:
        print(f"Warning: unknown plugin '{name}' was skipped", file=sys.stderr)


def cmd_doctor(args):
    """Run health checks on a .pullierc file."""
    issues = []

    try:
        config = load_json_file(args.path)
    except OSError as e:
        print(f"Cannot read {args.path}: {e}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"{args.path} has invalid JSON: {e}")
        sys.exit(1)

    if not isinstance(config, dict):
        print(f"{args.path} must contain a JSON object")
        sys.exit(1)

    registry = get_registry()
    plugins = config.get("plugins")

    if isinstance(plugins, dict):
        exclude = plugins.get("exclude", [])
        if not isinstance(exclude, list) or not all(isinstance(n, str) for n in exclude):
            issues.append("'plugins.exclude' must be a list of plugin names")
        include = plugins.get("include", [])
        if not isinstance(include, list):
            issues.append("'plugins.include' must be a list")
            include = []
        entries = include
    elif isinstance(plugins, list):
        entries = plugins
    else:
        issues.append("'plugins' must be a list or an {include, exclude} object")
        entries = []

    seen = set()
    for ref in parse_plugin_list(entries):
        if isinstance(ref, UnparsedPlugin):
            issues.append(f"Cannot understand plugin entry: {json.dumps(ref.raw)}")
            continue
        if not registry.has(ref.name):
            issues.append(f"Unknown plugin '{ref.name}'")
        if ref.name in seen:
            issues.append(f"Plugin '{ref.name}' is listed more than once")
        seen.add(ref.name)

    if issues:
        print(f"Found {len(issues)} issue(s):")
        for i, issue in enumerate(issues, 1):
            print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        print(f"All checks passed. {len(seen)} plugin(s) referenced.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Pullie config manager")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List bundled plugins")

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Resolve org and repo configs")
    resolve_parser.add_argument("org_config", help="Org-level .pullierc ('-' for none)")
    resolve_parser.add_argument("repo_config", help="Repo-level .pullierc ('-' for none)")

    # doctor
    doctor_parser = subparsers.add_parser("doctor", help="Check a .pullierc for problems")
    doctor_parser.add_argument("path", help="Path to the .pullierc")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "resolve": cmd_resolve,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
