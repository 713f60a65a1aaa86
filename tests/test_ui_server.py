import json
from pathlib import Path
from urllib.error import HTTPError
from urllib.request import urlopen

import httpx
import pytest

from deepscholar.briefs import HttpBriefSource, RemoteSourceConfig
from deepscholar.ui import UIServerConfig, build_ui_url, create_ui_server, start_ui_server

LIBRARY = Path(__file__).resolve().parents[1] / "examples" / "briefs" / "library.json"


def _get_json(url: str) -> dict:
    with urlopen(url, timeout=5) as response:  # noqa: S310 (local test server)
        return json.loads(response.read().decode("utf-8"))


def _get_error(url: str) -> tuple[int, dict]:
    try:
        with urlopen(url, timeout=5) as response:  # noqa: S310
            return response.getcode(), json.loads(response.read().decode("utf-8"))
    except HTTPError as error:
        return error.code, json.loads(error.read().decode("utf-8"))


def test_ui_server_smoke_and_core_render_path() -> None:
    config = UIServerConfig(host="127.0.0.1", port=0, library=LIBRARY)

    with start_ui_server(config) as (server, _thread):
        host, port = server.server_address[:2]
        base_url = f"http://{host}:{port}"

        with urlopen(base_url + "/", timeout=5) as response:  # noqa: S310
            html = response.read().decode("utf-8")

        assert "<h1>DeepScholar Brief Compare</h1>" in html
        assert "for=\"leftSelect\"" in html
        assert "for=\"rightSelect\"" in html
        assert "for=\"fieldSelect\"" in html
        assert "id=\"retryButton\"" in html
        assert "Deleted" in html and "Added" in html

        briefs_payload = _get_json(base_url + "/api/briefs")
        assert [brief["id"] for brief in briefs_payload["briefs"]] == ["brief-ocean", "brief-soil"]

        versions_payload = _get_json(base_url + "/api/versions?brief=brief-ocean")
        assert [version["id"] for version in versions_payload["versions"]] == [
            "brief-ocean-v2",
            "draft-ocean-b",
            "draft-ocean-a",
            "brief-ocean",
        ]
        assert versions_payload["versions"][1]["label"] == "Draft 2 (v2)"
        assert versions_payload["default_compare"] == "draft-ocean-a"

        compare_payload = _get_json(
            base_url + "/api/compare?left=draft-ocean-a&right=draft-ocean-b&field=content"
        )
        assert compare_payload["summary"]["modified"] == 1
        assert compare_payload["left_label"] == "Draft 1 (v2)"
        assert compare_payload["lines"][0] == {
            "badge": None,
            "kind": "heading",
            "text": "Introduction",
            "title": None,
            "type": "equal",
            "words": [],
        }

        side_payload = _get_json(
            base_url + "/api/compare?left=brief-ocean&right=brief-ocean-v2&mode=side-by-side"
        )
        assert side_payload["mode"] == "side_by_side"
        assert side_payload["operations"] == []
        assert side_payload["side_by_side"]["left"][0] == {"kind": "heading", "text": "TITLE"}


def test_ui_server_error_statuses() -> None:
    config = UIServerConfig(host="127.0.0.1", port=0, library=LIBRARY)

    with start_ui_server(config) as (server, _thread):
        host, port = server.server_address[:2]
        base_url = f"http://{host}:{port}"

        status, payload = _get_error(base_url + "/api/compare?left=brief-ocean")
        assert status == 400
        assert "left and right" in payload["error"]

        status, payload = _get_error(base_url + "/api/compare?left=brief-ocean&right=missing")
        assert status == 404
        assert payload == {"error": "Brief not found: missing", "retryable": False}

        status, payload = _get_error(
            base_url + "/api/compare?left=brief-ocean&right=brief-soil&field=body"
        )
        assert status == 400
        assert "Invalid compare field" in payload["error"]

        status, payload = _get_error(base_url + "/api/versions")
        assert status == 400

        status, _payload = _get_error(base_url + "/api/unknown")
        assert status == 404


def test_ui_server_reports_retryable_fetch_failures() -> None:
    source = HttpBriefSource(
        RemoteSourceConfig(base_url="http://api.test"),
        transport=httpx.MockTransport(lambda request: httpx.Response(502)),
    )
    config = UIServerConfig(host="127.0.0.1", port=0, source=source)

    with start_ui_server(config) as (server, _thread):
        host, port = server.server_address[:2]
        base_url = f"http://{host}:{port}"

        status, payload = _get_error(base_url + "/api/compare?left=a&right=b")
        briefs_status, briefs_payload = _get_error(base_url + "/api/briefs")

    source.close()
    assert status == 502
    assert payload["retryable"] is True
    assert briefs_status == 200
    assert briefs_payload == {"briefs": []}


def test_build_ui_url_encodes_query() -> None:
    assert build_ui_url("127.0.0.1", 4310) == "http://127.0.0.1:4310/"
    assert (
        build_ui_url("127.0.0.1", 4310, left="brief one", right="b2", field="title")
        == "http://127.0.0.1:4310/?left=brief%20one&right=b2&field=title"
    )


class _ClosableSource:
    def __init__(self) -> None:
        self.closed = False

    def get_brief(self, brief_id: str):
        raise AssertionError("not used")

    def list_versions(self, brief_id: str):
        return []

    def close(self) -> None:
        self.closed = True


def test_ui_server_closes_the_source_it_opened(monkeypatch: pytest.MonkeyPatch) -> None:
    opened = _ClosableSource()
    monkeypatch.setattr("deepscholar.ui.server.open_brief_source", lambda **_kwargs: opened)

    with start_ui_server(UIServerConfig(host="127.0.0.1", port=0, api_url="http://api.test")):
        assert opened.closed is False

    assert opened.closed is True


def test_ui_server_leaves_caller_source_open() -> None:
    provided = _ClosableSource()

    with start_ui_server(UIServerConfig(host="127.0.0.1", port=0, source=provided)):
        pass

    assert provided.closed is False


def test_ui_server_closes_opened_source_when_bind_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    opened = _ClosableSource()
    monkeypatch.setattr("deepscholar.ui.server.open_brief_source", lambda **_kwargs: opened)

    busy = UIServerConfig(host="127.0.0.1", port=0, source=_ClosableSource())

    with start_ui_server(busy) as (server, _thread):
        busy_port = server.server_address[1]
        with pytest.raises(OSError):
            create_ui_server(UIServerConfig(host="127.0.0.1", port=busy_port, api_url="http://api.test"))
        assert opened.closed is True
