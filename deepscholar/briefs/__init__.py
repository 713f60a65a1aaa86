"""Brief records, field selection and record sources."""

from deepscholar.briefs.base import BriefSource
from deepscholar.briefs.exceptions import (
    BriefError,
    BriefFetchError,
    BriefNotFoundError,
    BriefSourceError,
    BriefValidationError,
)
from deepscholar.briefs.fields import (
    ABSTRACT_PLACEHOLDER,
    COMPARE_FIELDS,
    FIELD_LABELS,
    THINKING_PLACEHOLDER,
    CompareField,
    field_text,
    normalize_compare_field,
)
from deepscholar.briefs.models import BriefRecord, BriefVersion
from deepscholar.briefs.remote import (
    API_TOKEN_ENV_VAR,
    API_URL_ENV_VAR,
    HttpBriefSource,
    RemoteSourceConfig,
)
from deepscholar.briefs.factory import open_brief_source
from deepscholar.briefs.store import FileBriefSource, read_brief_library
from deepscholar.briefs.versions import (
    VersionGroup,
    default_compare_target,
    group_versions,
    number_drafts,
    version_display_name,
    version_options,
)

__all__ = [
    "BriefSource",
    "BriefError",
    "BriefFetchError",
    "BriefNotFoundError",
    "BriefSourceError",
    "BriefValidationError",
    "ABSTRACT_PLACEHOLDER",
    "THINKING_PLACEHOLDER",
    "COMPARE_FIELDS",
    "FIELD_LABELS",
    "CompareField",
    "field_text",
    "normalize_compare_field",
    "BriefRecord",
    "BriefVersion",
    "API_URL_ENV_VAR",
    "API_TOKEN_ENV_VAR",
    "HttpBriefSource",
    "RemoteSourceConfig",
    "FileBriefSource",
    "read_brief_library",
    "open_brief_source",
    "VersionGroup",
    "group_versions",
    "number_drafts",
    "version_display_name",
    "version_options",
    "default_compare_target",
]
