"""Select a brief source from a library path or an API URL."""

from __future__ import annotations

import os
from pathlib import Path

from deepscholar.briefs.base import BriefSource
from deepscholar.briefs.remote import API_URL_ENV_VAR, HttpBriefSource, RemoteSourceConfig
from deepscholar.briefs.store import FileBriefSource


def open_brief_source(
    *,
    library: str | Path | None = None,
    api_url: str | None = None,
    api_token: str | None = None,
    timeout: float = 10.0,
) -> BriefSource:
    """A library file wins over an API URL; the URL may come from the environment."""
    if library is not None:
        return FileBriefSource(library)
    if api_url or os.getenv(API_URL_ENV_VAR, "").strip():
        return HttpBriefSource(
            RemoteSourceConfig.from_env(base_url=api_url, token=api_token, timeout=timeout)
        )
    raise ValueError(
        f"A brief source is required: pass --library or --api-url (or set {API_URL_ENV_VAR})."
    )
