"""Errors raised while turning check-in history into a progress report."""
from typing import Any, Optional


class ProgressReportError(Exception):
    """
    Base class for rejected report input.

    Carries enough context for the caller to point at the offending entry:
    its position in the submitted history, its raw timestamp and the
    indicator field involved.
    """

    kind = "ProgressReportError"

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        timestamp: Optional[Any] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.index = index
        self.timestamp = timestamp
        self.field = field

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "error": self.kind,
            "message": self.message,
            "index": self.index,
            "timestamp": None if self.timestamp is None else str(self.timestamp),
            "field": self.field,
        }


class EmptyHistory(ProgressReportError):
    """No usable check-ins were supplied."""

    kind = "EmptyHistory"

    def __init__(self, message: str = "Not enough data: history must contain at least one entry."):
        super().__init__(message)


class InvalidTimestamp(ProgressReportError):
    kind = "InvalidTimestamp"


class OutOfRangeValue(ProgressReportError):
    kind = "OutOfRangeValue"


class UnknownEnumValue(ProgressReportError):
    kind = "UnknownEnumValue"


class MissingIndicator(ProgressReportError):
    kind = "MissingIndicator"


class MalformedEntry(ProgressReportError):
    """A history item or its answers are not key/value objects."""

    kind = "MalformedEntry"
