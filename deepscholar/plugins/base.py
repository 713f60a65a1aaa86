"""Versioned plugin interfaces and comparison lifecycle payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

PLUGIN_API_VERSION = "1.0"
PLUGIN_CONFIG_VERSION = 1
PLUGIN_CONFIG_ENV_VAR = "DEEPSCHOLAR_PLUGIN_CONFIG"

LifecycleStatus = Literal["ok", "error"]


@dataclass(frozen=True, slots=True)
class CompareStartEvent:
    left_id: str | None
    right_id: str | None
    field: str
    mode: str
    left_line_count: int
    right_line_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class CompareEndEvent:
    left_id: str | None
    right_id: str | None
    status: LifecycleStatus
    identical: bool | None = None
    summary: dict[str, int] | None = None
    error_type: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class LifecyclePlugin:
    """Base no-op lifecycle plugin interface (API v1.x)."""

    api_version = PLUGIN_API_VERSION
    name = "lifecycle-plugin"

    def on_compare_start(self, event: CompareStartEvent) -> None:
        return None

    def on_compare_end(self, event: CompareEndEvent) -> None:
        return None
