"""Comparison service: record fetch, field selection, diff and annotation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from deepscholar.briefs import (
    BriefRecord,
    BriefSource,
    CompareField,
    field_text,
    number_drafts,
    version_display_name,
)
from deepscholar.diff import (
    AnnotatedLine,
    DiffOperation,
    SideBySideView,
    annotate_diff,
    compute_line_diff,
    ensure_text,
    render_side_by_side,
    split_lines,
    summarize,
)
from deepscholar.plugins import (
    CompareEndEvent,
    CompareStartEvent,
    PluginDiagnostic,
    get_active_plugin_manager,
)

CompareMode = Literal["unified", "side_by_side"]
COMPARE_MODES: tuple[CompareMode, ...] = ("unified", "side_by_side")


@dataclass(slots=True)
class ComparisonResult:
    """Outcome of one comparison request."""

    field: str
    mode: CompareMode
    left_label: str
    right_label: str
    left_id: str | None = None
    right_id: str | None = None
    operations: list[DiffOperation] = field(default_factory=list)
    lines: list[AnnotatedLine] = field(default_factory=list)
    side_by_side: SideBySideView | None = None
    plugin_diagnostics: list[PluginDiagnostic] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        if self.side_by_side is not None:
            return [line.to_dict() for line in self.side_by_side.left] == [
                line.to_dict() for line in self.side_by_side.right
            ]
        return all(op.type.value == "equal" for op in self.operations)

    def summary(self) -> dict[str, int]:
        return summarize(self.operations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "left_id": self.left_id,
            "right_id": self.right_id,
            "left_label": self.left_label,
            "right_label": self.right_label,
            "field": self.field,
            "mode": self.mode,
            "identical": self.identical,
            "summary": self.summary(),
            "operations": [op.to_dict() for op in self.operations],
            "lines": [line.to_dict() for line in self.lines],
            "side_by_side": self.side_by_side.to_dict() if self.side_by_side is not None else None,
            "plugin_diagnostics": [diagnostic.to_dict() for diagnostic in self.plugin_diagnostics],
        }


def normalize_compare_mode(value: str) -> CompareMode:
    normalized = value.strip().lower().replace("-", "_")
    if normalized not in COMPARE_MODES:
        raise ValueError(
            f"Invalid compare mode '{value}'. Supported modes: unified, side-by-side"
        )
    return normalized  # type: ignore[return-value]


def compare_texts(
    old_text: str,
    new_text: str,
    *,
    mode: CompareMode = "unified",
    left_label: str = "left",
    right_label: str = "right",
    left_id: str | None = None,
    right_id: str | None = None,
    field: str = "text",
) -> ComparisonResult:
    """Compare two text blobs in unified (diffed) or side-by-side (raw) mode."""
    ensure_text(old_text, "old_text")
    ensure_text(new_text, "new_text")
    if mode not in COMPARE_MODES:
        raise ValueError(f"Unsupported compare mode: {mode}")

    hooks = get_active_plugin_manager().open_session()
    hooks.start(
        CompareStartEvent(
            left_id=left_id,
            right_id=right_id,
            field=field,
            mode=mode,
            left_line_count=len(split_lines(old_text)),
            right_line_count=len(split_lines(new_text)),
        )
    )

    result = ComparisonResult(
        field=field,
        mode=mode,
        left_label=left_label,
        right_label=right_label,
        left_id=left_id,
        right_id=right_id,
    )
    try:
        if mode == "side_by_side":
            result.side_by_side = render_side_by_side(old_text, new_text)
        else:
            result.operations = compute_line_diff(old_text, new_text)
            result.lines = annotate_diff(
                result.operations,
                left_label=left_label,
                right_label=right_label,
            )
    except Exception as error:
        hooks.end(
            CompareEndEvent(
                left_id=left_id,
                right_id=right_id,
                status="error",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        )
        raise

    result.plugin_diagnostics = hooks.end(
        CompareEndEvent(
            left_id=left_id,
            right_id=right_id,
            status="ok",
            identical=result.identical,
            summary=result.summary(),
        )
    )
    return result


def compare_briefs(
    source: BriefSource,
    left_id: str,
    right_id: str,
    *,
    field: CompareField = "all",
    mode: CompareMode = "unified",
    left_label: str | None = None,
    right_label: str | None = None,
) -> ComparisonResult:
    """Fetch two brief versions and compare the selected field."""
    left = source.get_brief(left_id)
    right = source.get_brief(right_id)

    if left_label is None or right_label is None:
        labels = _version_labels(source, left)
        if right_id not in labels:
            labels.update(_version_labels(source, right))
        left_label = left_label or labels.get(left_id) or _record_label(left)
        right_label = right_label or labels.get(right_id) or _record_label(right)

    return compare_texts(
        field_text(left, field),
        field_text(right, field),
        mode=mode,
        left_label=left_label,
        right_label=right_label,
        left_id=left_id,
        right_id=right_id,
        field=field,
    )


def _version_labels(source: BriefSource, brief: BriefRecord) -> dict[str, str]:
    return {
        version.id: version_display_name(version)
        for version in number_drafts(source.list_versions(brief.id))
    }


def _record_label(brief: BriefRecord) -> str:
    return version_display_name(brief.to_version())
