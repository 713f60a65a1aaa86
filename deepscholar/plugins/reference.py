"""Reference lifecycle plugin implementation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from deepscholar.plugins.base import CompareEndEvent, CompareStartEvent, LifecyclePlugin


@dataclass(slots=True)
class LifecycleTracePlugin(LifecyclePlugin):
    """Appends one NDJSON record per comparison hook."""

    output_path: str = "runs/plugins/compare-trace.ndjson"
    name: str = "compare-trace"

    def on_compare_start(self, event: CompareStartEvent) -> None:
        self._append("on_compare_start", event)

    def on_compare_end(self, event: CompareEndEvent) -> None:
        self._append("on_compare_end", event)

    def _append(self, hook: str, event: object) -> None:
        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        record = {"hook": hook, "plugin": self.name, "event": asdict(event)}
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=True, sort_keys=True, separators=(",", ":")) + "\n")
