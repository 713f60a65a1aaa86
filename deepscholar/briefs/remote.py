"""HTTP source reading briefs from the DeepScholar export API."""

from __future__ import annotations

from dataclasses import dataclass
import json
import os
from typing import Any

import httpx

from deepscholar.briefs.exceptions import (
    BriefFetchError,
    BriefNotFoundError,
    BriefValidationError,
)
from deepscholar.briefs.models import BriefRecord, BriefVersion

API_URL_ENV_VAR = "DEEPSCHOLAR_API_URL"
API_TOKEN_ENV_VAR = "DEEPSCHOLAR_API_TOKEN"


@dataclass(slots=True)
class RemoteSourceConfig:
    base_url: str
    token: str | None = None
    timeout: float = 10.0

    @classmethod
    def from_env(
        cls,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float = 10.0,
    ) -> "RemoteSourceConfig":
        """Build config from explicit values, falling back to the environment."""
        resolved_url = (base_url or os.getenv(API_URL_ENV_VAR, "")).strip()
        if not resolved_url:
            raise ValueError(
                f"DeepScholar API URL is required. Set {API_URL_ENV_VAR} or pass --api-url."
            )
        resolved_token = (token or os.getenv(API_TOKEN_ENV_VAR, "")).strip() or None
        return cls(base_url=resolved_url.rstrip("/"), token=resolved_token, timeout=timeout)


class HttpBriefSource:
    """Fetch brief records as JSON exports over HTTP."""

    def __init__(
        self,
        config: RemoteSourceConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self.config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        )

    def __enter__(self) -> "HttpBriefSource":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_brief(self, brief_id: str) -> BriefRecord:
        payload = self._fetch_export(brief_id)
        return BriefRecord.from_dict(_with_version_fields(payload))

    def list_versions(self, brief_id: str) -> list[BriefVersion]:
        payload = self._fetch_export(brief_id)
        raw_versions = payload.get("versions")
        if not raw_versions:
            return [BriefRecord.from_dict(_with_version_fields(payload)).to_version()]
        if not isinstance(raw_versions, list):
            raise BriefValidationError(f"Brief {brief_id} export has a non-array 'versions' field.")
        versions = [BriefVersion.from_dict(entry) for entry in raw_versions]
        versions.sort(key=lambda version: version.version_number, reverse=True)
        return versions

    def _fetch_export(self, brief_id: str) -> dict[str, Any]:
        try:
            response = self._client.get(
                f"/api/export/brief/{brief_id}",
                params={"format": "json", "includeMetadata": "true"},
            )
        except httpx.TimeoutException as error:
            raise BriefFetchError(f"Timed out fetching brief {brief_id}: {error}") from error
        except httpx.TransportError as error:
            raise BriefFetchError(f"Could not reach DeepScholar API for brief {brief_id}: {error}") from error

        if response.status_code == 404:
            raise BriefNotFoundError(f"Brief not found: {brief_id}")
        if response.status_code >= 400:
            raise BriefFetchError(
                f"DeepScholar API returned HTTP {response.status_code} for brief {brief_id}",
                retryable=response.status_code >= 500 or response.status_code == 429,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise BriefValidationError(f"Brief {brief_id} export is not valid JSON.") from error
        return _unwrap(payload, brief_id)


def _unwrap(payload: Any, brief_id: str) -> dict[str, Any]:
    if isinstance(payload, dict):
        for key in ("brief", "data"):
            nested = payload.get(key)
            if isinstance(nested, dict):
                return nested
        return payload
    raise BriefValidationError(f"Brief {brief_id} export must be a JSON object.")


def _with_version_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Fill version fields from the export's own entry in its versions list."""
    if "versionNumber" in payload or "version_number" in payload:
        return payload
    versions = payload.get("versions")
    if not isinstance(versions, list):
        return payload
    for entry in versions:
        if isinstance(entry, dict) and entry.get("id") == payload.get("id"):
            merged = dict(payload)
            for key in ("versionNumber", "changeLog", "isDraft", "createdAt", "updatedAt"):
                if key in entry and key not in merged:
                    merged[key] = entry[key]
            return merged
    return payload
