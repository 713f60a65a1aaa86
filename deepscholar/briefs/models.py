"""Brief record and version models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from deepscholar.briefs.exceptions import BriefValidationError


@dataclass(slots=True)
class BriefRecord:
    """One stored version (published or draft) of a research brief."""

    id: str
    title: str
    response: str = ""
    abstract: str = ""
    thinking: str = ""
    version_number: int = 1
    is_draft: bool = False
    is_active: bool = False
    change_log: str | None = None
    parent_brief_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "response": self.response,
            "thinking": self.thinking,
            "versionNumber": self.version_number,
            "isDraft": self.is_draft,
            "isActive": self.is_active,
            "changeLog": self.change_log,
            "parentBriefId": self.parent_brief_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_version(self) -> "BriefVersion":
        return BriefVersion(
            id=self.id,
            version_number=self.version_number,
            created_at=self.created_at or "",
            updated_at=self.updated_at,
            is_draft=self.is_draft,
            is_active=self.is_active,
            change_log=self.change_log,
        )

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "BriefRecord":
        if not isinstance(raw, dict):
            raise BriefValidationError("Brief payload must be a JSON object.")
        brief_id = raw.get("id")
        if not isinstance(brief_id, str) or not brief_id:
            raise BriefValidationError("Brief payload is missing a string 'id'.")
        title = raw.get("title")
        if not isinstance(title, str):
            raise BriefValidationError(f"Brief {brief_id} is missing a string 'title'.")

        # Export payloads carry the body as 'content'; stored records as 'response'.
        body = raw.get("response") or raw.get("content") or ""
        return cls(
            id=brief_id,
            title=title,
            response=_text(body, "response", brief_id),
            abstract=_text(raw.get("abstract"), "abstract", brief_id),
            thinking=_text(raw.get("thinking"), "thinking", brief_id),
            version_number=_version_number(_pick(raw, "versionNumber", "version_number"), brief_id),
            is_draft=bool(_pick(raw, "isDraft", "is_draft")),
            is_active=bool(_pick(raw, "isActive", "is_active")),
            change_log=_optional_text(raw, "changeLog", "change_log", brief_id),
            parent_brief_id=_optional_text(raw, "parentBriefId", "parent_brief_id", brief_id),
            created_at=_optional_text(raw, "createdAt", "created_at", brief_id),
            updated_at=_optional_text(raw, "updatedAt", "updated_at", brief_id),
        )


@dataclass(slots=True)
class BriefVersion:
    """Version listing entry used for selection and labelling."""

    id: str
    version_number: int
    created_at: str
    updated_at: str | None = None
    is_draft: bool = False
    is_active: bool = False
    change_log: str | None = None
    draft_number: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "version_number": self.version_number,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "is_draft": self.is_draft,
            "is_active": self.is_active,
            "change_log": self.change_log,
            "draft_number": self.draft_number,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "BriefVersion":
        if not isinstance(raw, dict):
            raise BriefValidationError("Version entry must be a JSON object.")
        version_id = raw.get("id")
        if not isinstance(version_id, str) or not version_id:
            raise BriefValidationError("Version entry is missing a string 'id'.")
        return cls(
            id=version_id,
            version_number=_version_number(_pick(raw, "versionNumber", "version_number"), version_id),
            created_at=_optional_text(raw, "createdAt", "created_at", version_id) or "",
            updated_at=_optional_text(raw, "updatedAt", "updated_at", version_id),
            is_draft=bool(_pick(raw, "isDraft", "is_draft")),
            is_active=bool(_pick(raw, "isActive", "is_active")),
            change_log=_optional_text(raw, "changeLog", "change_log", version_id),
        )


def _pick(raw: dict[str, Any], camel: str, snake: str) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake)


def _text(value: Any, name: str, brief_id: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BriefValidationError(f"Brief {brief_id} field '{name}' must be a string.")
    return value


def _optional_text(raw: dict[str, Any], camel: str, snake: str, brief_id: str) -> str | None:
    value = _pick(raw, camel, snake)
    if value is None or isinstance(value, str):
        return value
    raise BriefValidationError(f"Brief {brief_id} field '{camel}' must be a string or null.")


def _version_number(value: Any, brief_id: str) -> int:
    if value is None:
        return 1
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise BriefValidationError(
            f"Brief {brief_id} field 'versionNumber' must be a positive integer."
        )
    return value
