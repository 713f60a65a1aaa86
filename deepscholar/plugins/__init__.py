"""Plugin subsystem for comparison lifecycle hooks."""

from deepscholar.plugins.base import (
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_ENV_VAR,
    PLUGIN_CONFIG_VERSION,
    CompareEndEvent,
    CompareStartEvent,
    LifecyclePlugin,
)
from deepscholar.plugins.exceptions import PluginConfigError, PluginError, PluginLoadError
from deepscholar.plugins.loader import load_plugin_manager_from_file
from deepscholar.plugins.manager import CompareHookSession, PluginDiagnostic, PluginManager
from deepscholar.plugins.reference import LifecycleTracePlugin
from deepscholar.plugins.runtime import (
    get_active_plugin_manager,
    reset_plugin_runtime_cache,
    use_plugin_manager,
    use_plugins_from_config,
)

__all__ = [
    "PLUGIN_API_VERSION",
    "PLUGIN_CONFIG_VERSION",
    "PLUGIN_CONFIG_ENV_VAR",
    "PluginError",
    "PluginConfigError",
    "PluginLoadError",
    "CompareStartEvent",
    "CompareEndEvent",
    "LifecyclePlugin",
    "CompareHookSession",
    "PluginDiagnostic",
    "PluginManager",
    "LifecycleTracePlugin",
    "load_plugin_manager_from_file",
    "get_active_plugin_manager",
    "use_plugin_manager",
    "use_plugins_from_config",
    "reset_plugin_runtime_cache",
]
