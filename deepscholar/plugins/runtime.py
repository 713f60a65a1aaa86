"""Activation of the plugin manager used by comparisons."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import os
from pathlib import Path
from typing import Iterator

from deepscholar.plugins.base import PLUGIN_CONFIG_ENV_VAR
from deepscholar.plugins.loader import load_plugin_manager_from_file
from deepscholar.plugins.manager import PluginManager

_ACTIVE: ContextVar[PluginManager | None] = ContextVar(
    "deepscholar_active_plugin_manager",
    default=None,
)
_NO_PLUGINS = PluginManager(plugins=())
_env_cache: dict[str, PluginManager] = {}


def get_active_plugin_manager() -> PluginManager:
    """Context override first, then ``DEEPSCHOLAR_PLUGIN_CONFIG``, else no plugins."""
    manager = _ACTIVE.get()
    if manager is not None:
        return manager

    config_path = os.getenv(PLUGIN_CONFIG_ENV_VAR, "").strip()
    if not config_path:
        return _NO_PLUGINS

    cached = _env_cache.get(config_path)
    if cached is None:
        cached = load_plugin_manager_from_file(config_path)
        _env_cache.clear()
        _env_cache[config_path] = cached
    return cached


@contextmanager
def use_plugin_manager(manager: PluginManager) -> Iterator[PluginManager]:
    token = _ACTIVE.set(manager)
    try:
        yield manager
    finally:
        _ACTIVE.reset(token)


@contextmanager
def use_plugins_from_config(path: str | Path) -> Iterator[PluginManager]:
    with use_plugin_manager(load_plugin_manager_from_file(path)) as manager:
        yield manager


def reset_plugin_runtime_cache() -> None:
    """Forget the manager loaded from the environment (for tests)."""
    _env_cache.clear()
