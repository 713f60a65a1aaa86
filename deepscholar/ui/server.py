"""Local-first UI server for brief version comparison."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import json
from pathlib import Path
import threading
from typing import Any, Iterator
from urllib.parse import parse_qs, quote, urlparse

from deepscholar.briefs import (
    BriefError,
    BriefFetchError,
    BriefNotFoundError,
    BriefSource,
    BriefSourceError,
    default_compare_target,
    group_versions,
    normalize_compare_field,
    number_drafts,
    open_brief_source,
    version_display_name,
    version_options,
)
from deepscholar.compare import compare_briefs, normalize_compare_mode


@dataclass(slots=True)
class UIServerConfig:
    host: str = "127.0.0.1"
    port: int = 4310
    library: Path | None = None
    api_url: str | None = None
    api_token: str | None = None
    source: BriefSource | None = None


def build_ui_url(
    host: str,
    port: int,
    *,
    left: str | None = None,
    right: str | None = None,
    field: str | None = None,
) -> str:
    query_parts: list[str] = []
    if left:
        query_parts.append(f"left={quote(left)}")
    if right:
        query_parts.append(f"right={quote(right)}")
    if field:
        query_parts.append(f"field={quote(field)}")
    query = "&".join(query_parts)
    suffix = f"/?{query}" if query else "/"
    return f"http://{host}:{port}{suffix}"


class BriefCompareServer(ThreadingHTTPServer):
    """Threading server that closes the brief source it opened itself."""

    owned_source: BriefSource | None = None

    def server_close(self) -> None:
        try:
            super().server_close()
        finally:
            source, self.owned_source = self.owned_source, None
            if source is not None:
                _close_source(source)


def create_ui_server(config: UIServerConfig) -> BriefCompareServer:
    source = config.source
    owns_source = source is None
    if source is None:
        source = open_brief_source(
            library=config.library,
            api_url=config.api_url,
            api_token=config.api_token,
        )

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            parsed = urlparse(self.path)
            route = parsed.path
            query = parse_qs(parsed.query)

            if route == "/":
                self._write_html(_render_index_html())
                return

            if route == "/api/briefs":
                self._handle_briefs()
                return

            if route == "/api/versions":
                self._handle_versions(query)
                return

            if route == "/api/compare":
                self._handle_compare(query)
                return

            self._write_json(404, {"error": "Not found", "retryable": False})

        def _handle_briefs(self) -> None:
            list_briefs = getattr(source, "list_briefs", None)
            try:
                briefs = list_briefs() if callable(list_briefs) else []
            except BriefSourceError as error:
                self._write_json(502, {"error": str(error), "retryable": False})
                return
            self._write_json(200, {"briefs": briefs})

        def _handle_versions(self, query: dict[str, list[str]]) -> None:
            brief_id = _first(query.get("brief"))
            if not brief_id:
                self._write_json(
                    400,
                    {"error": "Missing required query param: brief", "retryable": False},
                )
                return

            try:
                versions = number_drafts(source.list_versions(brief_id))
            except BriefError as error:
                self._write_source_error(error)
                return

            self._write_json(
                200,
                {
                    "brief_id": brief_id,
                    "versions": [
                        {**version.to_dict(), "label": version_display_name(version)}
                        for version in versions
                    ],
                    "groups": [group.to_dict() for group in group_versions(versions)],
                    "options": [
                        {"id": option_id, "label": label}
                        for option_id, label in version_options(versions)
                    ],
                    "default_compare": default_compare_target(versions, brief_id),
                },
            )

        def _handle_compare(self, query: dict[str, list[str]]) -> None:
            left_id = _first(query.get("left"))
            right_id = _first(query.get("right"))

            if not left_id or not right_id:
                self._write_json(
                    400,
                    {
                        "error": "Missing required query params: left and right",
                        "retryable": False,
                    },
                )
                return

            try:
                field = normalize_compare_field(_first(query.get("field")) or "all")
                mode = normalize_compare_mode(_first(query.get("mode")) or "unified")
            except ValueError as error:
                self._write_json(400, {"error": str(error), "retryable": False})
                return

            try:
                result = compare_briefs(source, left_id, right_id, field=field, mode=mode)
            except BriefError as error:
                self._write_source_error(error)
                return

            self._write_json(200, result.to_dict())

        def _write_source_error(self, error: BriefError) -> None:
            if isinstance(error, BriefNotFoundError):
                self._write_json(404, {"error": str(error), "retryable": False})
                return
            retryable = error.retryable if isinstance(error, BriefFetchError) else False
            self._write_json(502, {"error": str(error), "retryable": retryable})

        def _write_html(self, html: str) -> None:
            body = html.encode("utf-8")
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def _write_json(self, status_code: int, payload: dict[str, Any]) -> None:
            body = json.dumps(payload, ensure_ascii=True, sort_keys=True).encode("utf-8")
            self.send_response(status_code)
            self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Cache-Control", "no-store")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, _format: str, *_args: object) -> None:
            return

    try:
        server = BriefCompareServer((config.host, config.port), Handler)
    except OSError:
        if owns_source:
            _close_source(source)
        raise
    if owns_source:
        server.owned_source = source
    return server


@contextmanager
def start_ui_server(config: UIServerConfig) -> Iterator[tuple[BriefCompareServer, threading.Thread]]:
    server = create_ui_server(config)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server, thread
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=2)


def _close_source(source: BriefSource) -> None:
    close = getattr(source, "close", None)
    if callable(close):
        close()


def _first(values: list[str] | None) -> str | None:
    if not values:
        return None
    return values[0]


def _render_index_html() -> str:
    return """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>DeepScholar Brief Compare</title>
  <style>
    :root {
      --bg: #f7f4ed;
      --panel: #fffdfa;
      --ink: #1f2933;
      --accent: #0f766e;
      --deleted: #b91c1c;
      --deleted-bg: #fde8e8;
      --added: #047857;
      --added-bg: #dcfce7;
      --muted: #6b7280;
      --border: #d6d3d1;
    }

    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: "Avenir Next", "Trebuchet MS", "Segoe UI", sans-serif;
      color: var(--ink);
      background: var(--bg);
      min-height: 100vh;
    }

    header {
      padding: 20px 24px 14px;
      border-bottom: 1px solid var(--border);
      background: var(--panel);
    }

    h1 { margin: 0; font-size: 1.52rem; letter-spacing: 0.02em; }

    .controls {
      display: grid;
      grid-template-columns: repeat(4, minmax(160px, 1fr));
      gap: 12px;
      margin-top: 14px;
    }

    label { display: block; font-size: 0.85rem; margin-bottom: 6px; font-weight: 700; }

    select, input[type="text"] {
      width: 100%;
      padding: 8px 10px;
      border: 1px solid var(--border);
      border-radius: 8px;
      background: var(--panel);
      color: var(--ink);
    }

    .actions { margin-top: 12px; display: flex; gap: 8px; align-items: center; }
    button {
      border: 1px solid var(--accent);
      background: var(--accent);
      color: #fff;
      border-radius: 8px;
      padding: 7px 14px;
      cursor: pointer;
    }
    button.secondary { background: var(--panel); color: var(--accent); }
    #status { color: var(--muted); font-size: 0.9rem; }
    #status.error { color: var(--deleted); }

    .legend { display: flex; gap: 14px; font-size: 0.85rem; margin-left: auto; }
    .legend span { padding: 2px 8px; border-radius: 6px; }

    main { padding: 18px 24px; }
    .diff { background: var(--panel); border: 1px solid var(--border); border-radius: 10px; padding: 14px; }
    .line { white-space: pre-wrap; padding: 2px 6px; border-radius: 4px; margin: 1px 0; }
    .line.heading { font-weight: 700; margin-top: 10px; }
    .line.blank { min-height: 1em; }
    .line.delete, .word.delete { background: var(--deleted-bg); color: var(--deleted); text-decoration: line-through; }
    .line.insert, .word.insert { background: var(--added-bg); color: var(--added); }
    .badge { font-size: 0.7rem; font-weight: 700; margin-right: 8px; padding: 1px 6px; border-radius: 4px; border: 1px solid currentColor; }
    .panes { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
    .pane h2 { font-size: 1rem; margin: 0 0 8px; }
    .empty { color: var(--muted); }
  </style>
</head>
<body>
  <header>
    <h1>DeepScholar Brief Compare</h1>
    <div class="controls">
      <div>
        <label for="briefSelect">Brief</label>
        <select id="briefSelect"></select>
      </div>
      <div>
        <label for="leftSelect">From</label>
        <select id="leftSelect"></select>
      </div>
      <div>
        <label for="rightSelect">To</label>
        <select id="rightSelect"></select>
      </div>
      <div>
        <label for="fieldSelect">Field</label>
        <select id="fieldSelect">
          <option value="all">All fields</option>
          <option value="content">Content</option>
          <option value="title">Title</option>
          <option value="abstract">Abstract</option>
          <option value="thinking">Thinking</option>
        </select>
      </div>
    </div>
    <div class="actions">
      <button id="compareButton" type="button">Compare</button>
      <button id="modeButton" class="secondary" type="button">Side by side</button>
      <button id="retryButton" class="secondary" type="button" hidden>Retry</button>
      <span id="status"></span>
      <div class="legend">
        <span class="word delete">Deleted</span>
        <span class="word insert">Added</span>
      </div>
    </div>
  </header>
  <main>
    <div id="output" class="diff"><div class="empty">Select two versions to compare.</div></div>
  </main>
  <script>
    const state = { mode: "unified", versions: [] };
    const briefSelect = document.getElementById("briefSelect");
    const leftSelect = document.getElementById("leftSelect");
    const rightSelect = document.getElementById("rightSelect");
    const fieldSelect = document.getElementById("fieldSelect");
    const modeButton = document.getElementById("modeButton");
    const retryButton = document.getElementById("retryButton");
    const statusLine = document.getElementById("status");
    const output = document.getElementById("output");

    function setStatus(message, isError, retryable) {
      statusLine.textContent = message || "";
      statusLine.className = isError ? "error" : "";
      retryButton.hidden = !(isError && retryable);
    }

    function fillSelect(select, options, selected) {
      select.innerHTML = "";
      options.forEach((option) => {
        const item = document.createElement("option");
        item.value = option.id;
        item.textContent = option.label;
        if (option.id === selected) {
          item.selected = true;
        }
        select.appendChild(item);
      });
    }

    function renderWords(words) {
      const line = document.createElement("div");
      line.className = "line modified";
      words.forEach((word) => {
        const span = document.createElement("span");
        span.className = "word " + word.type;
        span.textContent = word.text;
        if (word.title) {
          span.title = word.title;
        }
        line.appendChild(span);
      });
      return line;
    }

    function renderUnified(payload) {
      output.innerHTML = "";
      if (!payload.lines.length) {
        output.innerHTML = "<div class='empty'>Both versions are empty.</div>";
        return;
      }
      payload.lines.forEach((line) => {
        if (line.type === "modified") {
          const node = renderWords(line.words);
          node.classList.add(line.kind);
          output.appendChild(node);
          return;
        }
        const node = document.createElement("div");
        node.className = "line " + line.type + " " + line.kind;
        if (line.title) {
          node.title = line.title;
        }
        if (line.badge) {
          const badge = document.createElement("span");
          badge.className = "badge";
          badge.textContent = line.badge;
          node.appendChild(badge);
        }
        node.appendChild(document.createTextNode(line.text));
        output.appendChild(node);
      });
    }

    function renderPane(title, lines) {
      const pane = document.createElement("div");
      pane.className = "pane";
      const heading = document.createElement("h2");
      heading.textContent = title;
      pane.appendChild(heading);
      lines.forEach((line) => {
        const node = document.createElement("div");
        node.className = "line " + line.kind;
        node.textContent = line.text;
        pane.appendChild(node);
      });
      return pane;
    }

    function renderSideBySide(payload) {
      output.innerHTML = "";
      const panes = document.createElement("div");
      panes.className = "panes";
      panes.appendChild(renderPane(payload.left_label, payload.side_by_side.left));
      panes.appendChild(renderPane(payload.right_label, payload.side_by_side.right));
      output.appendChild(panes);
    }

    async function fetchJson(url) {
      const res = await fetch(url);
      const payload = await res.json();
      if (!res.ok) {
        const error = new Error(payload.error || "Request failed");
        error.retryable = !!payload.retryable;
        throw error;
      }
      return payload;
    }

    async function loadCompare() {
      if (!leftSelect.value || !rightSelect.value) {
        setStatus("Pick two versions to compare.", true, false);
        return;
      }
      setStatus("Loading comparison...");
      const query = new URLSearchParams({
        left: leftSelect.value,
        right: rightSelect.value,
        field: fieldSelect.value,
        mode: state.mode,
      });
      try {
        const payload = await fetchJson("/api/compare?" + query.toString());
        if (state.mode === "side_by_side") {
          renderSideBySide(payload);
        } else {
          renderUnified(payload);
        }
        const summary = payload.summary || {};
        setStatus(
          payload.identical
            ? "No differences."
            : "equal=" + (summary.equal || 0) +
              " modified=" + (summary.modified || 0) +
              " delete=" + (summary.delete || 0) +
              " insert=" + (summary.insert || 0)
        );
      } catch (err) {
        setStatus(err.message || "Unable to load comparison.", true, err.retryable);
      }
    }

    async function loadVersions(briefId, preferredLeft, preferredRight) {
      try {
        const payload = await fetchJson("/api/versions?" + new URLSearchParams({ brief: briefId }));
        state.versions = payload.options;
        const left = preferredLeft || briefId;
        const right = preferredRight || payload.default_compare || "";
        fillSelect(leftSelect, payload.options, left);
        fillSelect(rightSelect, payload.options, right);
        if (leftSelect.value && rightSelect.value) {
          await loadCompare();
        }
      } catch (err) {
        setStatus(err.message || "Unable to load versions.", true, err.retryable);
      }
    }

    async function loadBriefs() {
      const params = new URLSearchParams(window.location.search);
      const left = params.get("left");
      const right = params.get("right");
      if (params.get("field")) {
        fieldSelect.value = params.get("field");
      }
      try {
        const payload = await fetchJson("/api/briefs");
        const options = payload.briefs.map((brief) => ({ id: brief.id, label: brief.title }));
        if (left && !options.some((option) => option.id === left)) {
          options.unshift({ id: left, label: left });
        }
        fillSelect(briefSelect, options, left);
        if (briefSelect.value) {
          await loadVersions(briefSelect.value, left, right);
        }
      } catch (err) {
        setStatus(err.message || "Unable to load briefs.", true, err.retryable);
      }
    }

    document.getElementById("compareButton").addEventListener("click", loadCompare);
    retryButton.addEventListener("click", loadCompare);
    fieldSelect.addEventListener("change", loadCompare);
    briefSelect.addEventListener("change", () => loadVersions(briefSelect.value));
    modeButton.addEventListener("click", () => {
      state.mode = state.mode === "unified" ? "side_by_side" : "unified";
      modeButton.textContent = state.mode === "unified" ? "Side by side" : "Diff view";
      loadCompare();
    });

    loadBriefs();
  </script>
</body>
</html>
"""
