"""Version grouping, labels and default comparison targets."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Sequence

from deepscholar.briefs.models import BriefVersion

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(slots=True)
class VersionGroup:
    """A version number with its published version and its drafts."""

    version_number: int
    version: BriefVersion | None = None
    drafts: list[BriefVersion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version_number": self.version_number,
            "version": self.version.to_dict() if self.version is not None else None,
            "drafts": [draft.to_dict() for draft in self.drafts],
        }


def group_versions(versions: Sequence[BriefVersion]) -> list[VersionGroup]:
    """Group by version number, newest first; drafts sorted by latest edit.

    Drafts get ``draft_number`` counting up from the oldest, so the most
    recently edited draft carries the highest number.
    """
    groups: dict[int, VersionGroup] = {}
    for version in versions:
        group = groups.setdefault(version.version_number, VersionGroup(version.version_number))
        if version.is_draft:
            group.drafts.append(version)
        else:
            group.version = version

    for group in groups.values():
        group.drafts.sort(key=_last_edit, reverse=True)
        total = len(group.drafts)
        group.drafts = [
            replace(draft, draft_number=total - index) for index, draft in enumerate(group.drafts)
        ]

    return [groups[number] for number in sorted(groups, reverse=True)]


def number_drafts(versions: Sequence[BriefVersion]) -> list[BriefVersion]:
    """Return versions in grouped order with draft numbers assigned."""
    ordered: list[BriefVersion] = []
    for group in group_versions(versions):
        if group.version is not None:
            ordered.append(group.version)
        ordered.extend(group.drafts)
    return ordered


def version_display_name(version: BriefVersion) -> str:
    if version.is_draft:
        return f"Draft {version.draft_number or 1} (v{version.version_number})"
    return version.change_log or f"Version {version.version_number}"


def version_options(
    versions: Sequence[BriefVersion],
    *,
    exclude_id: str | None = None,
) -> list[tuple[str, str]]:
    """Selectable ``(id, label)`` pairs; the other side's version is excluded."""
    options: list[tuple[str, str]] = []
    for group in group_versions(versions):
        if group.version is not None and group.version.id != exclude_id:
            options.append((group.version.id, version_display_name(group.version)))
        for draft in group.drafts:
            if draft.id == exclude_id:
                continue
            options.append((draft.id, f"↳ Draft {draft.draft_number} (v{draft.version_number})"))
    return options


def default_compare_target(versions: Sequence[BriefVersion], current_id: str) -> str | None:
    """Pick the neighbour of ``current_id``: previous entry first, else next."""
    if len(versions) < 2:
        return None
    ids = [version.id for version in versions]
    if current_id not in ids:
        return None
    index = ids.index(current_id)
    if index > 0:
        return ids[index - 1]
    if index < len(ids) - 1:
        return ids[index + 1]
    return None


def _last_edit(version: BriefVersion) -> datetime:
    return _parse_timestamp(version.updated_at) or _parse_timestamp(version.created_at) or _EPOCH


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
