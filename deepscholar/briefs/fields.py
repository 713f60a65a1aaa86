"""Field selection: builds the text blob compared for each brief."""

from __future__ import annotations

from typing import Literal

from deepscholar.briefs.models import BriefRecord

CompareField = Literal["all", "title", "abstract", "content", "thinking"]

COMPARE_FIELDS: tuple[CompareField, ...] = ("all", "content", "title", "abstract", "thinking")
FIELD_LABELS: dict[CompareField, str] = {
    "all": "All Content",
    "content": "Content",
    "title": "Title",
    "abstract": "Abstract",
    "thinking": "Thinking",
}

ABSTRACT_PLACEHOLDER = "No abstract provided"
THINKING_PLACEHOLDER = "No thinking notes provided"


def normalize_compare_field(value: str) -> CompareField:
    normalized = value.strip().lower()
    if normalized not in COMPARE_FIELDS:
        raise ValueError(
            f"Invalid compare field '{value}'. "
            f"Supported fields: {', '.join(COMPARE_FIELDS)}"
        )
    return normalized  # type: ignore[return-value]


def field_text(brief: BriefRecord | None, field: CompareField) -> str:
    """Return the text of ``field``; ``all`` joins every field under headings.

    Empty abstract/thinking fields are replaced by the same placeholder on
    every brief so two empty fields compare as equal.
    """
    if brief is None:
        return ""
    if field == "all":
        return (
            f"# TITLE\n{brief.title}\n\n"
            f"# ABSTRACT\n{brief.abstract or ABSTRACT_PLACEHOLDER}\n\n"
            f"# CONTENT\n{brief.response}\n\n"
            f"# THINKING\n{brief.thinking or THINKING_PLACEHOLDER}"
        )
    if field == "title":
        return brief.title
    if field == "abstract":
        return brief.abstract or ""
    if field == "content":
        return brief.response
    if field == "thinking":
        return brief.thinking or ""
    raise ValueError(f"Unsupported compare field: {field}")
