"""Exceptions for review context operations."""


class ReviewContextError(Exception):
    """Base exception for all review context operations."""


class ConfigurationError(ReviewContextError, ValueError):
    """Raised when a budget or limit is supplied with an invalid value."""


class SourceFileError(ReviewContextError):
    """Raised when a source file cannot be read or parsed."""
