"""Calendar and time-zone engine.

Packed zone records are decoded into `Zone` offset histories held by a
`ZoneRegistry`; `Moment` views an instant in a zone and locale and
formats, parses and humanizes it.
"""

from .errors import InvalidDateError, UnknownZoneError, ZoneDataError, ZoneTimeError
from .formatter import expand_format, format
from .locales import LocaleData, available_locales, define_locale, get_locale
from .moment import Moment
from .parser import parse
from .registry import ZoneRegistry, default_registry, normalize_name, set_default_registry
from .relative import humanize, relative_time_threshold
from .timezone_translator import TimezoneTranslator
from .zone import Country, Zone, pack, unpack

__all__ = [
    "Country",
    "InvalidDateError",
    "LocaleData",
    "Moment",
    "TimezoneTranslator",
    "UnknownZoneError",
    "Zone",
    "ZoneDataError",
    "ZoneRegistry",
    "ZoneTimeError",
    "available_locales",
    "default_registry",
    "define_locale",
    "expand_format",
    "format",
    "get_locale",
    "humanize",
    "normalize_name",
    "pack",
    "parse",
    "relative_time_threshold",
    "set_default_registry",
    "unpack",
]
