# src/jobboard/errors.py
"""Exceptions raised by the job board pipeline."""


class DataSourceError(RuntimeError):
    """The sheet could not be fetched or came back empty."""


class FilterValidationError(ValueError):
    """User-supplied filter input was rejected; the message is user-facing."""
