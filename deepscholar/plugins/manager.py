"""Plugin manager and the per-comparison hook session it hands out."""

from __future__ import annotations

from dataclasses import dataclass, field
import warnings

from deepscholar.plugins.base import CompareEndEvent, CompareStartEvent


@dataclass(frozen=True, slots=True)
class PluginDiagnostic:
    """A hook that raised while one comparison was running."""

    plugin_name: str
    hook: str
    error_type: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "plugin_name": self.plugin_name,
            "hook": self.hook,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass(slots=True)
class CompareHookSession:
    """Runs the start and end hooks of a single comparison.

    A failing hook never aborts the comparison. It is recorded on this session
    only, so a manager shared by a long-lived server does not pile up failures
    from earlier requests.
    """

    plugins: tuple[object, ...]
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)

    def start(self, event: CompareStartEvent) -> None:
        self._run_hook("on_compare_start", event)

    def end(self, event: CompareEndEvent) -> list[PluginDiagnostic]:
        self._run_hook("on_compare_end", event)
        return list(self.diagnostics)

    def _run_hook(self, hook: str, event: CompareStartEvent | CompareEndEvent) -> None:
        for plugin in self.plugins:
            callback = getattr(plugin, hook, None)
            if not callable(callback):
                continue
            try:
                callback(event)
            except Exception as error:
                self._record_failure(plugin, hook, error)

    def _record_failure(self, plugin: object, hook: str, error: Exception) -> None:
        diagnostic = PluginDiagnostic(
            plugin_name=str(getattr(plugin, "name", type(plugin).__name__)),
            hook=hook,
            error_type=type(error).__name__,
            message=str(error),
        )
        self.diagnostics.append(diagnostic)
        warnings.warn(
            f"DeepScholar plugin failure in {diagnostic.plugin_name}.{hook} "
            f"({diagnostic.error_type}): {diagnostic.message}",
            RuntimeWarning,
            stacklevel=4,
        )


@dataclass(frozen=True, slots=True)
class PluginManager:
    """Loaded lifecycle plugins. Holds no per-comparison state."""

    plugins: tuple[object, ...] = ()

    def open_session(self) -> CompareHookSession:
        return CompareHookSession(plugins=self.plugins)
