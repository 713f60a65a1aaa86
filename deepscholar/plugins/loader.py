"""Load comparison plugins from a versioned JSON config file."""

from __future__ import annotations

import importlib
import inspect
import json
from pathlib import Path
from typing import Any

from deepscholar.plugins.base import PLUGIN_API_VERSION, PLUGIN_CONFIG_VERSION
from deepscholar.plugins.exceptions import PluginConfigError, PluginLoadError
from deepscholar.plugins.manager import PluginManager

_ENTRY_KEYS = {"entrypoint", "options", "enabled"}
_HOOKS = ("on_compare_start", "on_compare_end")


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    """Build a plugin manager from ``{"config_version": 1, "plugins": [...]}``."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise PluginConfigError(f"Plugin config is not valid JSON ({config_path}): {error}") from error

    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config must be a JSON object ({config_path}).")

    if raw.get("config_version") != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            f"Unsupported plugin config version {raw.get('config_version')!r}; "
            f"expected {PLUGIN_CONFIG_VERSION}."
        )

    entries = raw.get("plugins")
    if not isinstance(entries, list):
        raise PluginConfigError("Plugin config key 'plugins' must be a JSON array.")

    plugins = [
        plugin
        for position, entry in enumerate(entries, start=1)
        if (plugin := _build_plugin(entry, position=position)) is not None
    ]
    return PluginManager(plugins=tuple(plugins))


def _build_plugin(entry: Any, *, position: int) -> object | None:
    if not isinstance(entry, dict):
        raise PluginConfigError(f"Plugin entry #{position} must be a JSON object.")

    unknown = sorted(set(entry) - _ENTRY_KEYS)
    if unknown:
        raise PluginConfigError(
            f"Plugin entry #{position} has unsupported keys: {', '.join(unknown)}"
        )

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise PluginConfigError(f"Plugin entry #{position} key 'enabled' must be boolean.")
    if not enabled:
        return None

    entrypoint = entry.get("entrypoint")
    if not isinstance(entrypoint, str) or ":" not in entrypoint:
        raise PluginConfigError(
            f"Plugin entry #{position} key 'entrypoint' must look like 'module:attribute'."
        )

    options = entry.get("options", {})
    if not isinstance(options, dict):
        raise PluginConfigError(f"Plugin entry #{position} key 'options' must be a JSON object.")

    target = _resolve_entrypoint(entrypoint, position=position)
    plugin = _instantiate(target, entrypoint=entrypoint, options=options, position=position)
    _check_plugin(plugin, entrypoint=entrypoint, position=position)
    return plugin


def _resolve_entrypoint(entrypoint: str, *, position: int) -> object:
    module_name, _, attribute = entrypoint.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as error:
        raise PluginLoadError(
            f"Plugin entry #{position} could not import module '{module_name}': {error}"
        ) from error

    target = getattr(module, attribute, None)
    if target is None:
        raise PluginLoadError(
            f"Plugin entry #{position} found no attribute '{attribute}' in '{module_name}'."
        )
    return target


def _instantiate(
    target: object,
    *,
    entrypoint: str,
    options: dict[str, Any],
    position: int,
) -> object:
    if not (inspect.isclass(target) or callable(target)):
        if options:
            raise PluginLoadError(
                f"Plugin entry #{position} '{entrypoint}' is not callable and cannot take options."
            )
        return target
    try:
        return target(**options)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{position} failed to build '{entrypoint}' "
            f"with options {sorted(options)}: {error}"
        ) from error


def _check_plugin(plugin: object, *, entrypoint: str, position: int) -> None:
    declared = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
    expected_major = PLUGIN_API_VERSION.split(".", 1)[0]
    if declared.split(".", 1)[0] != expected_major:
        raise PluginLoadError(
            f"Plugin entry #{position} '{entrypoint}' declares api_version {declared!r}; "
            f"supported major version is {expected_major}."
        )
    if not any(callable(getattr(plugin, hook, None)) for hook in _HOOKS):
        raise PluginLoadError(
            f"Plugin entry #{position} '{entrypoint}' implements none of: {', '.join(_HOOKS)}."
        )
