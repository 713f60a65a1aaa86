import json
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
import time
import webbrowser
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any

import typer

from deepscholar.briefs import (
    COMPARE_FIELDS,
    BriefError,
    BriefFetchError,
    BriefSource,
    default_compare_target,
    group_versions,
    normalize_compare_field,
    number_drafts,
    open_brief_source,
    version_options,
)
from deepscholar.compare import ComparisonResult, compare_briefs, compare_texts
from deepscholar.diff import (
    compute_word_diff,
    render_diff_summary,
    render_side_by_side_text,
    render_unified,
    render_word_diff,
)
from deepscholar.ui import UIServerConfig, build_ui_url, start_ui_server

app = typer.Typer(help="DeepScholar brief comparison CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    no_color: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()


def _resolve_cli_version() -> str:
    try:
        return package_version("deepscholar")
    except PackageNotFoundError:
        from deepscholar import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show DeepScholar version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI color output.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.no_color = no_color
    _OUTPUT_OPTIONS.stable_json = stable_json


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
        )
    typer.echo(rendered, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _report_failure(
    message: str,
    *,
    json_output: bool,
    exit_code: int,
    retryable: bool = False,
    **context: Any,
) -> None:
    if json_output:
        _echo_json(
            {
                "status": "error",
                "exit_code": exit_code,
                "message": message,
                "retryable": retryable,
                **context,
            }
        )
    else:
        _echo(message, err=True)


def _emit_result(
    result: ComparisonResult,
    *,
    json_output: bool,
    message: str,
    **context: Any,
) -> None:
    if json_output:
        _echo_json(
            {
                **result.to_dict(),
                "status": "ok",
                "exit_code": 0,
                "message": message,
                **context,
            }
        )
        return

    if result.side_by_side is not None:
        _echo(
            render_side_by_side_text(
                result.side_by_side,
                left_label=result.left_label,
                right_label=result.right_label,
            )
        )
        return

    _echo(f"{result.left_label} -> {result.right_label} ({result.field})")
    _echo(render_diff_summary(result.summary()))
    if result.identical:
        _echo("no differences")
        return
    _echo(render_unified(result.lines))


def _open_source(
    *,
    library: Path | None,
    api_url: str | None,
    api_token: str | None,
    timeout: float,
    json_output: bool,
    command: str,
) -> BriefSource:
    try:
        return open_brief_source(
            library=library,
            api_url=api_url,
            api_token=api_token,
            timeout=timeout,
        )
    except ValueError as error:
        _report_failure(f"{command} failed: {error}", json_output=json_output, exit_code=2)
        raise typer.Exit(code=2) from error
    except BriefError as error:
        _report_failure(f"{command} failed: {error}", json_output=json_output, exit_code=1)
        raise typer.Exit(code=1) from error


def _close_source(source: BriefSource) -> None:
    close = getattr(source, "close", None)
    if callable(close):
        close()


def _fetch_failure(command: str, error: BriefError, *, json_output: bool, **context: Any) -> typer.Exit:
    retryable = error.retryable if isinstance(error, BriefFetchError) else False
    message = f"{command} failed: {error}"
    if retryable and not json_output:
        message += " (retryable)"
    _report_failure(
        message,
        json_output=json_output,
        exit_code=1,
        retryable=retryable,
        **context,
    )
    return typer.Exit(code=1)


@app.command()
def diff(
    left: Path = typer.Argument(..., help="Path to the old text document."),
    right: Path = typer.Argument(..., help="Path to the new text document."),
    side_by_side: bool = typer.Option(
        False,
        "--side-by-side",
        help="Show both documents in raw panes instead of a diff.",
    ),
    left_label: str | None = typer.Option(
        None,
        "--left-label",
        help="Label for the old document (defaults to file name).",
    ),
    right_label: str | None = typer.Option(
        None,
        "--right-label",
        help="Label for the new document (defaults to file name).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable diff output.",
    ),
) -> None:
    """Diff two text documents line by line with word-level refinement."""
    try:
        left_text = left.read_text(encoding="utf-8")
        right_text = right.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        _report_failure(
            f"diff failed: {error}",
            json_output=json_output,
            exit_code=1,
            left_path=str(left),
            right_path=str(right),
        )
        raise typer.Exit(code=1) from error

    result = compare_texts(
        left_text,
        right_text,
        mode="side_by_side" if side_by_side else "unified",
        left_label=left_label or left.name,
        right_label=right_label or right.name,
    )
    _emit_result(
        result,
        json_output=json_output,
        message="diff completed",
        left_path=str(left),
        right_path=str(right),
    )


@app.command()
def words(
    old: str = typer.Argument(..., help="Old line of text."),
    new: str = typer.Argument(..., help="New line of text."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable word operations.",
    ),
) -> None:
    """Diff two lines token by token."""
    operations = compute_word_diff(old, new)
    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "message": "word diff completed",
                "operations": [op.to_dict() for op in operations],
            }
        )
        return
    _echo(render_word_diff(operations))


@app.command()
def compare(
    left_id: str = typer.Argument(..., help="Brief version id for the old side."),
    right_id: str = typer.Argument(..., help="Brief version id for the new side."),
    library: Path | None = typer.Option(
        None,
        "--library",
        help="JSON brief library file to read versions from.",
    ),
    api_url: str | None = typer.Option(
        None,
        "--api-url",
        help="DeepScholar API base URL (defaults to DEEPSCHOLAR_API_URL).",
    ),
    api_token: str | None = typer.Option(
        None,
        "--api-token",
        help="Bearer token for the API (defaults to DEEPSCHOLAR_API_TOKEN).",
    ),
    timeout: float = typer.Option(
        10.0,
        "--timeout",
        help="HTTP timeout in seconds for API requests.",
    ),
    field: str = typer.Option(
        "all",
        "--field",
        help=f"Field to compare: {', '.join(COMPARE_FIELDS)}.",
    ),
    side_by_side: bool = typer.Option(
        False,
        "--side-by-side",
        help="Show both versions in raw panes instead of a diff.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable comparison output.",
    ),
) -> None:
    """Compare two versions of a research brief."""
    try:
        compare_field = normalize_compare_field(field)
    except ValueError as error:
        _report_failure(f"compare failed: {error}", json_output=json_output, exit_code=2)
        raise typer.Exit(code=2) from error

    source = _open_source(
        library=library,
        api_url=api_url,
        api_token=api_token,
        timeout=timeout,
        json_output=json_output,
        command="compare",
    )
    try:
        result = compare_briefs(
            source,
            left_id,
            right_id,
            field=compare_field,
            mode="side_by_side" if side_by_side else "unified",
        )
    except BriefError as error:
        raise _fetch_failure(
            "compare",
            error,
            json_output=json_output,
            left_id=left_id,
            right_id=right_id,
        ) from error
    finally:
        _close_source(source)

    _emit_result(result, json_output=json_output, message="compare completed")


@app.command()
def versions(
    brief_id: str = typer.Argument(..., help="Any version id of the brief."),
    library: Path | None = typer.Option(
        None,
        "--library",
        help="JSON brief library file to read versions from.",
    ),
    api_url: str | None = typer.Option(
        None,
        "--api-url",
        help="DeepScholar API base URL (defaults to DEEPSCHOLAR_API_URL).",
    ),
    api_token: str | None = typer.Option(
        None,
        "--api-token",
        help="Bearer token for the API (defaults to DEEPSCHOLAR_API_TOKEN).",
    ),
    timeout: float = typer.Option(
        10.0,
        "--timeout",
        help="HTTP timeout in seconds for API requests.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable version listing.",
    ),
) -> None:
    """List versions and drafts of a brief, newest first."""
    source = _open_source(
        library=library,
        api_url=api_url,
        api_token=api_token,
        timeout=timeout,
        json_output=json_output,
        command="versions",
    )
    try:
        ordered = number_drafts(source.list_versions(brief_id))
    except BriefError as error:
        raise _fetch_failure("versions", error, json_output=json_output, brief_id=brief_id) from error
    finally:
        _close_source(source)

    default_target = default_compare_target(ordered, brief_id)
    options = version_options(ordered)

    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "message": "versions listed",
                "brief_id": brief_id,
                "groups": [group.to_dict() for group in group_versions(ordered)],
                "options": [{"id": option_id, "label": label} for option_id, label in options],
                "default_compare": default_target,
            }
        )
        return

    active_ids = {version.id for version in ordered if version.is_active}
    for option_id, label in options:
        marker = " (active)" if option_id in active_ids else ""
        current = "* " if option_id == brief_id else "  "
        _echo(f"{current}{label}{marker}  [{option_id}]")
    if default_target:
        _echo(f"default compare: {brief_id} -> {default_target}")


@app.command()
def ui(
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        help="Host interface to bind local UI server.",
    ),
    port: int = typer.Option(
        4310,
        "--port",
        help="Port for local UI server (0 selects an ephemeral port).",
    ),
    library: Path | None = typer.Option(
        None,
        "--library",
        help="JSON brief library file to read versions from.",
    ),
    api_url: str | None = typer.Option(
        None,
        "--api-url",
        help="DeepScholar API base URL (defaults to DEEPSCHOLAR_API_URL).",
    ),
    api_token: str | None = typer.Option(
        None,
        "--api-token",
        help="Bearer token for the API (defaults to DEEPSCHOLAR_API_TOKEN).",
    ),
    left: str | None = typer.Option(
        None,
        "--left",
        help="Optional brief version id to pre-select on the left.",
    ),
    right: str | None = typer.Option(
        None,
        "--right",
        help="Optional brief version id to pre-select on the right.",
    ),
    browser: bool = typer.Option(
        False,
        "--browser/--no-browser",
        help="Open the local UI URL in default browser.",
    ),
    check: bool = typer.Option(
        False,
        "--check",
        help="Start server, verify startup path, then exit.",
    ),
) -> None:
    """Launch the local brief comparison UI."""
    # Check mode binds an ephemeral port so parallel test runs never collide.
    effective_port = 0 if check else port
    config = UIServerConfig(
        host=host,
        port=effective_port,
        library=library,
        api_url=api_url,
        api_token=api_token,
    )

    with ExitStack() as stack:
        try:
            server, _thread = stack.enter_context(start_ui_server(config))
        except ValueError as error:
            _echo(f"ui failed: {error}", err=True)
            raise typer.Exit(code=2) from error
        except BriefError as error:
            _echo(f"ui failed: {error}", err=True)
            raise typer.Exit(code=1) from error

        bound_host, bound_port = server.server_address[:2]
        ui_url = build_ui_url(str(bound_host), int(bound_port), left=left, right=right)

        if check:
            _echo(f"ui check ok: {ui_url}")
            return

        _echo(f"ui running: {ui_url}")

        if browser:
            webbrowser.open(ui_url)

        try:
            while True:
                time.sleep(0.25)
        except KeyboardInterrupt:
            _echo("ui stopped")


def main() -> None:
    app()
