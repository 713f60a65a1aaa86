"""Diff subsystem exceptions."""


class DiffError(Exception):
    """Base class for diff errors."""


class DiffInputError(DiffError, TypeError):
    """Diff input is not a text string."""
