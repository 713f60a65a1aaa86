"""Diff operation variants for line- and word-level comparison."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterable, Union


class OpType(str, Enum):
    EQUAL = "equal"
    DELETE = "delete"
    INSERT = "insert"
    MODIFIED = "modified"


@dataclass(frozen=True, slots=True)
class Equal:
    """Unchanged line or token."""

    text: str
    type: ClassVar[OpType] = OpType.EQUAL

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "text": self.text}


@dataclass(frozen=True, slots=True)
class Delete:
    """Line or token present only in the old document."""

    text: str
    type: ClassVar[OpType] = OpType.DELETE

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "text": self.text}


@dataclass(frozen=True, slots=True)
class Insert:
    """Line or token present only in the new document."""

    text: str
    type: ClassVar[OpType] = OpType.INSERT

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "text": self.text}


@dataclass(frozen=True, slots=True)
class Modified:
    """Aligned old/new line pair of the same kind whose content differs."""

    old_text: str
    new_text: str
    type: ClassVar[OpType] = OpType.MODIFIED

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "old_text": self.old_text,
            "new_text": self.new_text,
        }


DiffOperation = Union[Equal, Delete, Insert, Modified]
WordOperation = Union[Equal, Delete, Insert]


def reconstruct_old(operations: Iterable[DiffOperation], separator: str = "\n") -> str:
    """Rebuild the old side from an operation sequence."""
    parts: list[str] = []
    for op in operations:
        if isinstance(op, (Equal, Delete)):
            parts.append(op.text)
        elif isinstance(op, Modified):
            parts.append(op.old_text)
    return separator.join(parts)


def reconstruct_new(operations: Iterable[DiffOperation], separator: str = "\n") -> str:
    """Rebuild the new side from an operation sequence."""
    parts: list[str] = []
    for op in operations:
        if isinstance(op, (Equal, Insert)):
            parts.append(op.text)
        elif isinstance(op, Modified):
            parts.append(op.new_text)
    return separator.join(parts)


def summarize(operations: Iterable[DiffOperation]) -> dict[str, int]:
    counts = {op_type.value: 0 for op_type in OpType}
    for op in operations:
        counts[op.type.value] += 1
    return counts
