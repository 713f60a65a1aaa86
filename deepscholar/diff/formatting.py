"""CLI-friendly rendering for annotated diffs."""

from __future__ import annotations

from typing import Iterable

from deepscholar.diff.annotate import AnnotatedLine, SideBySideView
from deepscholar.diff.models import WordOperation

_PREFIXES = {
    "equal": "  ",
    "delete": "- ",
    "insert": "+ ",
    "modified": "~ ",
}


def render_diff_summary(summary: dict[str, int]) -> str:
    return (
        f"equal={summary.get('equal', 0)} modified={summary.get('modified', 0)} "
        f"delete={summary.get('delete', 0)} insert={summary.get('insert', 0)}"
    )


def render_unified(lines: Iterable[AnnotatedLine]) -> str:
    rendered: list[str] = []
    for line in lines:
        prefix = _PREFIXES.get(line.type, "  ")
        if line.kind == "blank":
            rendered.append(prefix.rstrip())
            continue
        if line.type == "modified":
            body = "".join(_render_word(word.type, word.text) for word in line.words)
        else:
            body = line.text
        if line.kind == "heading":
            body = body.upper()
        if line.badge:
            body = f"[{line.badge}] {body}"
        rendered.append(f"{prefix}{body}")
    return "\n".join(rendered)


def render_word_diff(operations: Iterable[WordOperation]) -> str:
    """Inline markup: deletions as ``[-x-]``, insertions as ``{+x+}``."""
    return "".join(_render_word(op.type.value, op.text) for op in operations)


def render_side_by_side_text(
    view: SideBySideView,
    *,
    left_label: str = "left",
    right_label: str = "right",
    width: int = 48,
) -> str:
    column = max(8, width)
    rows = [f"{_fit(left_label, column)} | {right_label}", f"{'-' * column}-+-{'-' * column}"]
    total = max(len(view.left), len(view.right))
    for index in range(total):
        left = view.left[index] if index < len(view.left) else None
        right = view.right[index] if index < len(view.right) else None
        left_text = _pane_text(left.kind, left.text) if left is not None else ""
        right_text = _pane_text(right.kind, right.text) if right is not None else ""
        rows.append(f"{_fit(left_text, column)} | {right_text}".rstrip())
    return "\n".join(rows)


def _render_word(word_type: str, text: str) -> str:
    if word_type == "delete":
        return f"[-{text}-]"
    if word_type == "insert":
        return f"{{+{text}+}}"
    return text


def _pane_text(kind: str, text: str) -> str:
    if kind == "heading":
        return text.upper()
    return text


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 3] + "..."
    return text.ljust(width)
