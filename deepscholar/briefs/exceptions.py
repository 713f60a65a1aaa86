"""Brief record subsystem exceptions."""


class BriefError(Exception):
    """Base class for brief record errors."""


class BriefNotFoundError(BriefError):
    """Requested brief id does not exist in the source."""


class BriefValidationError(BriefError):
    """Brief payload is missing required fields or has the wrong shape."""


class BriefSourceError(BriefError):
    """Brief library could not be read or parsed."""


class BriefFetchError(BriefError):
    """Remote brief fetch failed; callers may retry."""

    def __init__(self, message: str, *, retryable: bool = True, status_code: int | None = None) -> None:
        super().__init__(message)
        self.retryable = retryable
        self.status_code = status_code
