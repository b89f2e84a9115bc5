"""Exception hierarchy for the calendar/time-zone engine::

    ZoneTimeError
    ├── UnknownZoneError   (also LookupError)
    ├── ZoneDataError      (also ValueError)
    └── InvalidDateError   (also ValueError)
"""

from __future__ import annotations

from typing import Optional


class ZoneTimeError(Exception):
    """Base class for calendar/zone errors.

    Args:
        message: Human-readable error description.
        context: Optional dict of structured metadata.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__(message)


class UnknownZoneError(ZoneTimeError, LookupError):
    """Raised when a zone name resolves to neither a zone nor a link."""

    def __init__(self, name: str):
        super().__init__(f"Time zone '{name}' not found", context={"zone": name})


class ZoneDataError(ZoneTimeError, ValueError):
    """Raised for a malformed packed zone record or data file."""


class InvalidDateError(ZoneTimeError, ValueError):
    """Raised when text does not match the requested date format."""

    def __init__(self, text: str, pattern: str, reason: str = ""):
        message = f"'{text}' does not match format '{pattern}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, context={"text": text, "format": pattern})
