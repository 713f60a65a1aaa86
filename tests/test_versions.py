from pathlib import Path

from deepscholar.briefs import (
    BriefVersion,
    FileBriefSource,
    default_compare_target,
    group_versions,
    number_drafts,
    version_display_name,
    version_options,
)

LIBRARY = Path(__file__).resolve().parents[1] / "examples" / "briefs" / "library.json"


def _ocean_versions() -> list[BriefVersion]:
    return FileBriefSource(LIBRARY).list_versions("brief-ocean")


def test_group_versions_newest_first_with_numbered_drafts() -> None:
    groups = group_versions(_ocean_versions())

    assert [group.version_number for group in groups] == [2, 1]
    latest = groups[0]
    assert latest.version is not None and latest.version.id == "brief-ocean-v2"
    assert [(draft.id, draft.draft_number) for draft in latest.drafts] == [
        ("draft-ocean-b", 2),
        ("draft-ocean-a", 1),
    ]
    assert groups[1].drafts == []


def test_number_drafts_flattens_in_display_order() -> None:
    ordered = number_drafts(_ocean_versions())

    assert [version.id for version in ordered] == [
        "brief-ocean-v2",
        "draft-ocean-b",
        "draft-ocean-a",
        "brief-ocean",
    ]


def test_version_display_names() -> None:
    labels = [version_display_name(version) for version in number_drafts(_ocean_versions())]

    assert labels == ["Expanded findings", "Draft 2 (v2)", "Draft 1 (v2)", "Initial version"]
    assert version_display_name(BriefVersion(id="x", version_number=4, created_at="")) == "Version 4"


def test_version_options_mark_drafts_and_exclude_other_side() -> None:
    options = version_options(_ocean_versions(), exclude_id="brief-ocean")

    assert options == [
        ("brief-ocean-v2", "Expanded findings"),
        ("draft-ocean-b", "↳ Draft 2 (v2)"),
        ("draft-ocean-a", "↳ Draft 1 (v2)"),
    ]


def test_default_compare_target_prefers_previous_entry() -> None:
    ordered = number_drafts(_ocean_versions())

    assert default_compare_target(ordered, "brief-ocean") == "draft-ocean-a"
    assert default_compare_target(ordered, "brief-ocean-v2") == "draft-ocean-b"
    assert default_compare_target(ordered, "unknown") is None
    assert default_compare_target(ordered[:1], "brief-ocean-v2") is None


def test_drafts_without_update_time_fall_back_to_creation_time() -> None:
    versions = [
        BriefVersion(id="old", version_number=1, created_at="2026-01-01T00:00:00Z", is_draft=True),
        BriefVersion(id="new", version_number=1, created_at="2026-03-01T00:00:00Z", is_draft=True),
    ]

    (group,) = group_versions(versions)

    assert group.version is None
    assert [(draft.id, draft.draft_number) for draft in group.drafts] == [("new", 2), ("old", 1)]
