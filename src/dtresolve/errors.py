"""
Resolution errors.

Only raised in strict mode. The default behaviour falls back to the current
instant (relative expressions) or returns None (absolute input).
"""
from typing import Any, Optional


class DateTimeResolutionError(ValueError):
    """Base class for values that cannot be resolved to an instant."""

    def __init__(self, message: str, value: Any = None, time_zone: Optional[str] = None):
        super().__init__(message)
        self.value = value
        self.time_zone = time_zone


class InvalidExpressionError(DateTimeResolutionError):
    """A "now"-based string that is not a well-formed relative expression."""


class InvalidDateTimeError(DateTimeResolutionError):
    """Absolute input that cannot be turned into a date and time."""
