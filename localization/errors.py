"""Exception hierarchy for the translation engine.

Missing keys and missing placeholder values are *not* exceptions; they
surface as marker strings. The classes below cover the few places where
the engine does raise::

    LocalizationError
    ├── MissingTemplateError       (also TypeError)
    ├── MessageFormatError
    └── MessageFormatSyntaxError   (also ValueError)
"""

from __future__ import annotations

from typing import Optional


class LocalizationError(Exception):
    """Base class for translation engine errors.

    Args:
        message: Human-readable error description.
        context: Optional dict of structured metadata.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__(message)


class MissingTemplateError(LocalizationError, TypeError):
    """Raised when something other than a string reaches the interpolator."""

    def __init__(self, template: object):
        super().__init__(
            f"Cannot interpolate {type(template).__name__!s}; expected a string template",
            context={"template": template},
        )


class MessageFormatError(LocalizationError):
    """Raised inside a compiled message while it is being evaluated.

    The message text is what `MessageFormatRegistry.format` shows to the
    caller, so keep it readable.
    """


class MessageFormatSyntaxError(LocalizationError, ValueError):
    """Raised when a MessageFormat source string cannot be compiled."""

    def __init__(self, reason: str, source: str, position: int):
        super().__init__(
            f"MessageFormat syntax error at {position}: {reason}",
            context={"source": source, "position": position},
        )
