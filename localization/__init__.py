"""Translation engine.

`TranslationContext` resolves dotted keys against per-locale tables,
falls back across locales, pluralizes and interpolates.
`MessageFormatRegistry` evaluates compiled plural/select messages.
"""

from .errors import LocalizationError, MessageFormatError, MessageFormatSyntaxError, MissingTemplateError
from .i18n_manager import TranslationContext
from .interpolation import interpolate, prepare_options
from .message_format import MessageFormatRegistry, compile_message
from .pluralization import PluralizationRules

__all__ = [
    "LocalizationError",
    "MessageFormatError",
    "MessageFormatRegistry",
    "MessageFormatSyntaxError",
    "MissingTemplateError",
    "PluralizationRules",
    "TranslationContext",
    "compile_message",
    "interpolate",
    "prepare_options",
]
