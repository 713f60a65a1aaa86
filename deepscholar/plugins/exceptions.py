"""Plugin subsystem exceptions."""


class PluginError(Exception):
    """Base class for comparison plugin errors."""


class PluginConfigError(PluginError):
    """Plugin config file is malformed or has an unsupported version."""


class PluginLoadError(PluginError):
    """Plugin entrypoint could not be imported, built or validated."""
