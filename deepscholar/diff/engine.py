"""Edit-distance diff engine: line alignment with word-level refinement."""

from __future__ import annotations

import re
from typing import Callable, Sequence

from deepscholar.diff.exceptions import DiffInputError
from deepscholar.diff.models import (
    Delete,
    DiffOperation,
    Equal,
    Insert,
    Modified,
    WordOperation,
)

HEADING_MARKER = "# "

_TOKEN_SPLIT = re.compile(r"(\s+)")


def is_heading(line: str) -> bool:
    """Pairing predicate: a line is a heading when it starts with the marker."""
    return line.startswith(HEADING_MARKER)


def split_lines(text: str) -> list[str]:
    """Split a document on newlines; the empty document has no lines."""
    if not text:
        return []
    return text.split("\n")


def tokenize(line: str) -> list[str]:
    """Split a line into alternating non-whitespace and whitespace runs."""
    return [token for token in _TOKEN_SPLIT.split(line) if token]


def compute_line_diff(old_text: str, new_text: str) -> list[DiffOperation]:
    """Align two documents line by line.

    Differing lines at aligned positions are reported as ``Modified`` when both
    are headings or neither is; otherwise they become a deletion and an
    insertion, with deletion preferred on equal cost.
    """
    ensure_text(old_text, "old_text")
    ensure_text(new_text, "new_text")
    return _align(split_lines(old_text), split_lines(new_text), pair=_same_kind)


def compute_word_diff(old_line: str, new_line: str) -> list[WordOperation]:
    """Diff two lines token by token (no ``Modified`` at this level)."""
    ensure_text(old_line, "old_line")
    ensure_text(new_line, "new_line")
    return _align(tokenize(old_line), tokenize(new_line), pair=None)  # type: ignore[return-value]


def distance_matrix(old: Sequence[str], new: Sequence[str]) -> list[list[int]]:
    """Levenshtein matrix of size ``(len(old) + 1) x (len(new) + 1)``."""
    rows = len(old) + 1
    cols = len(new) + 1
    matrix = [[0] * cols for _ in range(rows)]
    for j in range(cols):
        matrix[0][j] = j
    for i in range(1, rows):
        previous = matrix[i - 1]
        current = matrix[i]
        current[0] = i
        old_item = old[i - 1]
        for j in range(1, cols):
            if old_item == new[j - 1]:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
    return matrix


def _align(
    old: Sequence[str],
    new: Sequence[str],
    *,
    pair: Callable[[str, str], bool] | None,
) -> list[DiffOperation]:
    matrix = distance_matrix(old, new)
    operations: list[DiffOperation] = []
    i = len(old)
    j = len(new)

    # Walks from the bottom-right corner; 0 <= i <= len(old) and
    # 0 <= j <= len(new) hold on every iteration.
    while i > 0 or j > 0:
        if i > 0 and j > 0:
            old_item = old[i - 1]
            new_item = new[j - 1]
            if old_item == new_item:
                operations.append(Equal(old_item))
                i -= 1
                j -= 1
                continue
            if pair is not None and pair(old_item, new_item):
                operations.append(Modified(old_item, new_item))
                i -= 1
                j -= 1
                continue

        if i > 0 and (j == 0 or matrix[i - 1][j] <= matrix[i][j - 1]):
            operations.append(Delete(old[i - 1]))
            i -= 1
        else:
            operations.append(Insert(new[j - 1]))
            j -= 1

    operations.reverse()
    return operations


def _same_kind(old_line: str, new_line: str) -> bool:
    return is_heading(old_line) == is_heading(new_line)


def ensure_text(value: object, name: str) -> None:
    if not isinstance(value, str):
        raise DiffInputError(f"{name} must be a string, got {type(value).__name__}")
