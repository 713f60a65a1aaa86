"""JSON library file source for brief records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from deepscholar.briefs.exceptions import BriefNotFoundError, BriefSourceError
from deepscholar.briefs.models import BriefRecord, BriefVersion


def read_brief_library(path: str | Path) -> list[BriefRecord]:
    """Read a ``{"briefs": [...]}`` library file."""
    target = Path(path)
    try:
        raw_text = target.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise BriefSourceError(f"Brief library is not valid UTF-8 text: {target}") from error
    except OSError as error:
        raise BriefSourceError(f"Unable to read brief library: {target} ({error})") from error

    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as error:
        raise BriefSourceError(f"Brief library is not valid JSON: {target} ({error})") from error

    if not isinstance(payload, dict) or not isinstance(payload.get("briefs"), list):
        raise BriefSourceError(f"Brief library must be an object with a 'briefs' array: {target}")

    return [BriefRecord.from_dict(entry) for entry in payload["briefs"]]


class FileBriefSource:
    """Serve briefs from a JSON library loaded once at construction."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._briefs: dict[str, BriefRecord] = {}
        for brief in read_brief_library(self.path):
            if brief.id in self._briefs:
                raise BriefSourceError(f"Duplicate brief id in library: {brief.id}")
            self._briefs[brief.id] = brief

    def get_brief(self, brief_id: str) -> BriefRecord:
        try:
            return self._briefs[brief_id]
        except KeyError as error:
            raise BriefNotFoundError(f"Brief not found: {brief_id}") from error

    def list_versions(self, brief_id: str) -> list[BriefVersion]:
        brief = self.get_brief(brief_id)
        root_id = brief.parent_brief_id or brief.id
        family = [
            candidate
            for candidate in self._briefs.values()
            if candidate.id == root_id or candidate.parent_brief_id == root_id
        ]
        family.sort(key=lambda candidate: candidate.version_number, reverse=True)
        return [candidate.to_version() for candidate in family]

    def list_briefs(self) -> list[dict[str, Any]]:
        """Summaries of root briefs (those without a parent)."""
        return [
            {
                "id": brief.id,
                "title": brief.title,
                "version_number": brief.version_number,
                "versions": len(self.list_versions(brief.id)),
            }
            for brief in self._briefs.values()
            if brief.parent_brief_id is None
        ]
