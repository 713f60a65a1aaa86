"""Stable public API surface for DeepScholar brief comparison.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path

from deepscholar.briefs import (
    BriefError,
    BriefFetchError,
    BriefNotFoundError,
    BriefRecord,
    BriefSource,
    BriefVersion,
    FileBriefSource,
    HttpBriefSource,
    RemoteSourceConfig,
    field_text,
    open_brief_source,
)
from deepscholar.compare import (
    ComparisonResult,
    CompareMode,
    compare_briefs,
    compare_texts,
)
from deepscholar.diff import (
    AnnotatedLine,
    AnnotatedWord,
    Delete,
    DiffError,
    DiffInputError,
    DiffOperation,
    Equal,
    Insert,
    Modified,
    SideBySideView,
    WordOperation,
    annotate_diff,
    compute_line_diff,
    compute_word_diff,
    render_side_by_side,
)

__version__ = "0.1.0"


def compare_files(
    left: str | Path,
    right: str | Path,
    *,
    mode: CompareMode = "unified",
    left_label: str | None = None,
    right_label: str | None = None,
) -> ComparisonResult:
    """Compare two UTF-8 text files.

    Args:
        left: Path to the old document.
        right: Path to the new document.
        mode: ``"unified"`` for the annotated diff, ``"side_by_side"`` for raw panes.
        left_label: Label for the old side; defaults to the file name.
        right_label: Label for the new side; defaults to the file name.

    Returns:
        Structured comparison result.
    """
    left_path = Path(left)
    right_path = Path(right)
    return compare_texts(
        left_path.read_text(encoding="utf-8"),
        right_path.read_text(encoding="utf-8"),
        mode=mode,
        left_label=left_label or left_path.name,
        right_label=right_label or right_path.name,
    )


__all__ = [
    "__version__",
    "compute_line_diff",
    "compute_word_diff",
    "annotate_diff",
    "render_side_by_side",
    "field_text",
    "compare_texts",
    "compare_briefs",
    "compare_files",
    "open_brief_source",
    "ComparisonResult",
    "CompareMode",
    "DiffOperation",
    "WordOperation",
    "Equal",
    "Delete",
    "Insert",
    "Modified",
    "AnnotatedLine",
    "AnnotatedWord",
    "SideBySideView",
    "DiffError",
    "DiffInputError",
    "BriefError",
    "BriefFetchError",
    "BriefNotFoundError",
    "BriefRecord",
    "BriefVersion",
    "BriefSource",
    "FileBriefSource",
    "HttpBriefSource",
    "RemoteSourceConfig",
]
