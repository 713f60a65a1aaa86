import json
from pathlib import Path

import pytest

from deepscholar.briefs import (
    BriefNotFoundError,
    BriefRecord,
    BriefSourceError,
    BriefValidationError,
    BriefVersion,
    FileBriefSource,
    HttpBriefSource,
    open_brief_source,
    read_brief_library,
)

LIBRARY = Path(__file__).resolve().parents[1] / "examples" / "briefs" / "library.json"


def _write_library(path: Path, briefs: list[dict]) -> Path:
    path.write_text(json.dumps({"briefs": briefs}), encoding="utf-8")
    return path


def test_read_brief_library_parses_camel_case_records() -> None:
    briefs = read_brief_library(LIBRARY)

    assert [brief.id for brief in briefs][:2] == ["brief-ocean", "brief-ocean-v2"]
    v2 = briefs[1]
    assert v2.version_number == 2
    assert v2.is_active is True
    assert v2.parent_brief_id == "brief-ocean"
    assert v2.change_log == "Expanded findings"


def test_file_source_get_brief_and_not_found() -> None:
    source = FileBriefSource(LIBRARY)

    assert source.get_brief("brief-soil").title == "Soil Carbon"
    with pytest.raises(BriefNotFoundError, match="Brief not found: missing"):
        source.get_brief("missing")


def test_file_source_lists_whole_family_from_any_member() -> None:
    source = FileBriefSource(LIBRARY)

    from_root = [version.id for version in source.list_versions("brief-ocean")]
    from_draft = [version.id for version in source.list_versions("draft-ocean-a")]

    assert from_root == from_draft
    assert set(from_root) == {"brief-ocean", "brief-ocean-v2", "draft-ocean-a", "draft-ocean-b"}
    assert from_root[-1] == "brief-ocean"


def test_file_source_lists_root_briefs_only() -> None:
    source = FileBriefSource(LIBRARY)

    assert source.list_briefs() == [
        {"id": "brief-ocean", "title": "Ocean Warming", "version_number": 1, "versions": 4},
        {"id": "brief-soil", "title": "Soil Carbon", "version_number": 1, "versions": 1},
    ]


def test_file_source_rejects_duplicate_ids(tmp_path: Path) -> None:
    path = _write_library(
        tmp_path / "dupes.json",
        [{"id": "b1", "title": "One"}, {"id": "b1", "title": "Again"}],
    )
    with pytest.raises(BriefSourceError, match="Duplicate brief id"):
        FileBriefSource(path)


def test_read_brief_library_rejects_bad_files(tmp_path: Path) -> None:
    not_json = tmp_path / "broken.json"
    not_json.write_text("{not json", encoding="utf-8")
    wrong_shape = tmp_path / "list.json"
    wrong_shape.write_text("[]", encoding="utf-8")

    with pytest.raises(BriefSourceError, match="not valid JSON"):
        read_brief_library(not_json)
    with pytest.raises(BriefSourceError, match="'briefs' array"):
        read_brief_library(wrong_shape)
    with pytest.raises(BriefSourceError, match="Unable to read"):
        read_brief_library(tmp_path / "missing.json")


def test_brief_record_from_dict_accepts_snake_case_and_content_alias() -> None:
    brief = BriefRecord.from_dict(
        {
            "id": "b9",
            "title": "Export",
            "content": "# Body",
            "version_number": 3,
            "is_draft": True,
        }
    )

    assert brief.response == "# Body"
    assert brief.version_number == 3
    assert brief.is_draft is True
    assert brief.to_dict()["versionNumber"] == 3


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"title": "No id"}, "missing a string 'id'"),
        ({"id": "b1", "title": 7}, "string 'title'"),
        ({"id": "b1", "title": "T", "abstract": ["x"]}, "'abstract' must be a string"),
        ({"id": "b1", "title": "T", "versionNumber": 0}, "positive integer"),
        ({"id": "b1", "title": "T", "updatedAt": 1700000000}, "'updatedAt' must be a string"),
        ({"id": "b1", "title": "T", "changeLog": 5}, "'changeLog' must be a string"),
        ({"id": "b1", "title": "T", "created_at": 3.5}, "'createdAt' must be a string"),
        ({"id": "b1", "title": "T", "parentBriefId": 12}, "'parentBriefId' must be a string"),
    ],
)
def test_brief_record_validation_errors(payload: dict, message: str) -> None:
    with pytest.raises(BriefValidationError, match=message):
        BriefRecord.from_dict(payload)


def test_library_with_numeric_timestamp_is_rejected_on_load(tmp_path: Path) -> None:
    path = _write_library(
        tmp_path / "numeric.json",
        [
            {"id": "a", "title": "A", "createdAt": "2026-01-01T00:00:00Z"},
            {"id": "b", "title": "B", "parentBriefId": "a", "updatedAt": 1700000000},
        ],
    )

    with pytest.raises(BriefValidationError, match="Brief b field 'updatedAt'"):
        FileBriefSource(path)


def test_version_entry_validates_optional_text_fields() -> None:
    version = BriefVersion.from_dict({"id": "v1", "versionNumber": 2, "changeLog": None})

    assert version.created_at == ""
    assert version.change_log is None
    with pytest.raises(BriefValidationError, match="'changeLog' must be a string or null"):
        BriefVersion.from_dict({"id": "v1", "changeLog": 5})


def test_open_brief_source_prefers_library(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEEPSCHOLAR_API_URL", "http://api.test")

    assert isinstance(open_brief_source(library=LIBRARY), FileBriefSource)

    remote = open_brief_source()
    try:
        assert isinstance(remote, HttpBriefSource)
        assert remote.config.base_url == "http://api.test"
    finally:
        remote.close()


def test_open_brief_source_requires_some_source(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEEPSCHOLAR_API_URL", raising=False)

    with pytest.raises(ValueError, match="brief source is required"):
        open_brief_source()
