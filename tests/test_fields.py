import pytest

from deepscholar.briefs import (
    ABSTRACT_PLACEHOLDER,
    THINKING_PLACEHOLDER,
    BriefRecord,
    field_text,
    normalize_compare_field,
)
from deepscholar.diff import Delete, Equal, Insert, compute_line_diff


def _brief(brief_id: str, **overrides: object) -> BriefRecord:
    values = {
        "id": brief_id,
        "title": "Ocean Warming",
        "response": "Alpha",
        "abstract": "",
        "thinking": "",
    }
    values.update(overrides)
    return BriefRecord(**values)  # type: ignore[arg-type]


def test_all_fields_layout_uses_synthetic_headings() -> None:
    brief = _brief("b1", abstract="Short abstract.", thinking="Notes.")

    assert field_text(brief, "all") == (
        "# TITLE\nOcean Warming\n\n"
        "# ABSTRACT\nShort abstract.\n\n"
        "# CONTENT\nAlpha\n\n"
        "# THINKING\nNotes."
    )


def test_all_fields_substitutes_placeholders_for_empty_fields() -> None:
    text = field_text(_brief("b1"), "all")

    assert f"# ABSTRACT\n{ABSTRACT_PLACEHOLDER}\n" in text
    assert text.endswith(f"# THINKING\n{THINKING_PLACEHOLDER}")


def test_empty_abstracts_compare_as_equal_in_all_fields_view() -> None:
    left = _brief("b1", response="Alpha")
    right = _brief("b2", response="Beta")

    operations = compute_line_diff(field_text(left, "all"), field_text(right, "all"))

    assert Equal("# ABSTRACT") in operations
    assert Equal(ABSTRACT_PLACEHOLDER) in operations
    assert Equal(THINKING_PLACEHOLDER) in operations
    assert not any(
        isinstance(op, (Delete, Insert)) and op.text in {ABSTRACT_PLACEHOLDER, THINKING_PLACEHOLDER}
        for op in operations
    )


def test_single_field_selection() -> None:
    brief = _brief("b1", abstract="Abs", thinking="Think")

    assert field_text(brief, "title") == "Ocean Warming"
    assert field_text(brief, "abstract") == "Abs"
    assert field_text(brief, "content") == "Alpha"
    assert field_text(brief, "thinking") == "Think"
    assert field_text(_brief("b2"), "abstract") == ""


def test_missing_brief_yields_empty_text() -> None:
    assert field_text(None, "all") == ""


def test_normalize_compare_field() -> None:
    assert normalize_compare_field(" Content ") == "content"
    with pytest.raises(ValueError, match="Invalid compare field 'body'"):
        normalize_compare_field("body")
