"""Brief record source contract."""

from __future__ import annotations

from typing import Protocol

from deepscholar.briefs.models import BriefRecord, BriefVersion


class BriefSource(Protocol):
    """Protocol for services that supply brief records by id."""

    def get_brief(self, brief_id: str) -> BriefRecord:
        """Return the record for ``brief_id`` or raise ``BriefNotFoundError``."""

    def list_versions(self, brief_id: str) -> list[BriefVersion]:
        """Return every version in the family of ``brief_id``, newest first."""
