from pathlib import Path

import pytest
from typer.testing import CliRunner

from deepscholar.cli.app import app

LIBRARY = Path(__file__).resolve().parents[1] / "examples" / "briefs" / "library.json"


def test_cli_ui_check_starts_and_stops_server() -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["ui", "--check", "--library", str(LIBRARY), "--left", "brief-ocean"],
    )

    assert result.exit_code == 0
    assert "ui check ok" in result.stdout
    assert "left=brief-ocean" in result.stdout


def test_cli_ui_without_source_is_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEEPSCHOLAR_API_URL", raising=False)
    runner = CliRunner()
    result = runner.invoke(app, ["ui", "--check"])

    assert result.exit_code == 2
    assert "ui failed" in result.output


def test_cli_ui_with_unreadable_library_fails(tmp_path: Path) -> None:
    broken = tmp_path / "library.json"
    broken.write_text("{", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(app, ["ui", "--check", "--library", str(broken)])

    assert result.exit_code == 1
    assert "not valid JSON" in result.output
