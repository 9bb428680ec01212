"""Errors raised by adsets. None of them are caught internally."""


class AdsetsError(Exception):
    """Base class for all adsets errors."""


class NotFoundError(AdsetsError, LookupError):
    """Something that was looked up by name does not exist."""


class PathNotFoundError(NotFoundError, FileNotFoundError):
    """The requested dataset directory does not exist on any search path."""


class SubclassNotFoundError(NotFoundError):
    """A subclass name matches none of the multiclass subproblems."""


class InvalidVariantError(AdsetsError, ValueError):
    """A mode string is not one of the supported values."""


class EmptyDataError(AdsetsError, ValueError):
    """The requested anomaly data has no instances."""
