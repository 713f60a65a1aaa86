"""Diff subsystem for DeepScholar brief comparison."""

from deepscholar.diff.annotate import (
    AnnotatedLine,
    AnnotatedWord,
    PaneLine,
    SideBySideView,
    annotate_diff,
    classify_line,
    render_side_by_side,
)
from deepscholar.diff.engine import (
    HEADING_MARKER,
    compute_line_diff,
    compute_word_diff,
    ensure_text,
    is_heading,
    split_lines,
    tokenize,
)
from deepscholar.diff.exceptions import DiffError, DiffInputError
from deepscholar.diff.formatting import (
    render_diff_summary,
    render_side_by_side_text,
    render_unified,
    render_word_diff,
)
from deepscholar.diff.models import (
    Delete,
    DiffOperation,
    Equal,
    Insert,
    Modified,
    OpType,
    WordOperation,
    reconstruct_new,
    reconstruct_old,
    summarize,
)

__all__ = [
    "HEADING_MARKER",
    "OpType",
    "Equal",
    "Delete",
    "Insert",
    "Modified",
    "DiffOperation",
    "WordOperation",
    "DiffError",
    "DiffInputError",
    "compute_line_diff",
    "compute_word_diff",
    "ensure_text",
    "is_heading",
    "split_lines",
    "tokenize",
    "reconstruct_old",
    "reconstruct_new",
    "summarize",
    "AnnotatedLine",
    "AnnotatedWord",
    "PaneLine",
    "SideBySideView",
    "annotate_diff",
    "classify_line",
    "render_side_by_side",
    "render_diff_summary",
    "render_unified",
    "render_side_by_side_text",
    "render_word_diff",
]
