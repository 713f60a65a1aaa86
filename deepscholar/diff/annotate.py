"""Presentation mapping for line diffs (unified) and raw panes (side by side)."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Iterable, Literal

from deepscholar.diff.engine import HEADING_MARKER, compute_word_diff, split_lines
from deepscholar.diff.models import Delete, DiffOperation, Equal, Insert, Modified

LineKind = Literal["heading", "blank", "text"]
WordSide = Literal["left", "right"]

_HEADING_PREFIX = re.compile(r"^\s*#\s*")


@dataclass(frozen=True, slots=True)
class AnnotatedWord:
    type: str
    text: str
    side: WordSide | None = None
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "text": self.text,
            "side": self.side,
            "title": self.title,
        }


@dataclass(frozen=True, slots=True)
class AnnotatedLine:
    """One presentation-ready line of a unified diff."""

    type: str
    kind: LineKind
    text: str
    words: tuple[AnnotatedWord, ...] = ()
    title: str | None = None
    badge: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "kind": self.kind,
            "text": self.text,
            "words": [word.to_dict() for word in self.words],
            "title": self.title,
            "badge": self.badge,
        }


@dataclass(frozen=True, slots=True)
class PaneLine:
    kind: LineKind
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "text": self.text}


@dataclass(frozen=True, slots=True)
class SideBySideView:
    """Old and new documents split into independent, unannotated panes."""

    left: tuple[PaneLine, ...] = field(default_factory=tuple)
    right: tuple[PaneLine, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "left": [line.to_dict() for line in self.left],
            "right": [line.to_dict() for line in self.right],
        }


def is_display_heading(text: str) -> bool:
    return text.strip().startswith(HEADING_MARKER)


def strip_heading_marker(text: str) -> str:
    return _HEADING_PREFIX.sub("", text, count=1)


def classify_line(text: str) -> tuple[LineKind, str]:
    """Return the display kind of a line and its displayed text."""
    if is_display_heading(text):
        return "heading", strip_heading_marker(text)
    if text.strip() == "":
        return "blank", ""
    return "text", text


def removed_title(left_label: str) -> str:
    return f"Removed from {left_label}"


def added_title(right_label: str) -> str:
    return f"Added in {right_label}"


def annotate_diff(
    operations: Iterable[DiffOperation],
    *,
    left_label: str = "left",
    right_label: str = "right",
) -> list[AnnotatedLine]:
    lines: list[AnnotatedLine] = []
    for op in operations:
        if isinstance(op, Modified):
            lines.append(_annotate_modified(op, left_label=left_label, right_label=right_label))
            continue

        kind, text = classify_line(op.text)
        if isinstance(op, Equal) or kind == "blank":
            lines.append(AnnotatedLine(type=op.type.value, kind=kind, text=text))
        elif isinstance(op, Delete):
            lines.append(
                AnnotatedLine(
                    type=op.type.value,
                    kind=kind,
                    text=text,
                    title=removed_title(left_label),
                    badge=f"REMOVED FROM {left_label.upper()}" if kind == "heading" else None,
                )
            )
        elif isinstance(op, Insert):
            lines.append(
                AnnotatedLine(
                    type=op.type.value,
                    kind=kind,
                    text=text,
                    title=added_title(right_label),
                    badge=f"ADDED IN {right_label.upper()}" if kind == "heading" else None,
                )
            )
    return lines


def render_side_by_side(old_text: str, new_text: str) -> SideBySideView:
    return SideBySideView(
        left=tuple(PaneLine(*classify_line(line)) for line in split_lines(old_text)),
        right=tuple(PaneLine(*classify_line(line)) for line in split_lines(new_text)),
    )


def _annotate_modified(op: Modified, *, left_label: str, right_label: str) -> AnnotatedLine:
    heading = is_display_heading(op.old_text)
    if heading:
        kind: LineKind = "heading"
    elif op.old_text.strip() == "" and op.new_text.strip() == "":
        kind = "blank"
    else:
        kind = "text"

    # Markers are stripped only for heading pairs; a body line keeps a stray "#".
    old_display = strip_heading_marker(op.old_text) if heading else op.old_text
    new_display = strip_heading_marker(op.new_text) if heading else op.new_text

    words: list[AnnotatedWord] = []
    for word in compute_word_diff(old_display, new_display):
        if isinstance(word, Delete):
            words.append(
                AnnotatedWord(type=word.type.value, text=word.text, side="left", title=removed_title(left_label))
            )
        elif isinstance(word, Insert):
            words.append(
                AnnotatedWord(type=word.type.value, text=word.text, side="right", title=added_title(right_label))
            )
        else:
            words.append(AnnotatedWord(type=word.type.value, text=word.text))

    return AnnotatedLine(
        type=op.type.value,
        kind=kind,
        text="" if kind == "blank" else new_display,
        words=tuple(words),
    )
