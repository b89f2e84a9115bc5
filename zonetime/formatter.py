"""Moment-style format strings.

Tokens (``YYYY``, ``MMM``, ``Do``, ``HH``, ``Z`` ...) are replaced by the
matching field of a `Moment`; text in ``[brackets]`` and characters
escaped with a backslash are copied as-is. Locale long formats (``LT``,
``LL``, ``l`` ...) are expanded before the token pass.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple, Union

from .locales import LocaleData, get_locale

if TYPE_CHECKING:
    from .moment import Moment
    from .zone import Instant, Zone

FORMATTING_TOKENS = re.compile(
    r"(\[[^\[]*\])|(\\)?("
    r"[Hh]mm(?:ss)?|Mo|MM?M?M?|Do|DDDo|DD?D?D?|ddd?d?|do?|w[ow]?|W[oW]?|Qo?"
    r"|YYYYYY|YYYYY|YYYY|YY|Y|gg(?:ggg?)?|GG(?:GGG?)?|e|E|a|A|hh?|HH?|kk?"
    r"|mm?|ss?|S{1,9}|x|X|zz?|ZZ?|.)",
    re.DOTALL,
)
LOCAL_FORMATTING_TOKENS = re.compile(r"(\[[^\[]*\])|(\\)?(LTS|LT|LL?L?L?|l{1,4})")

DEFAULT_FORMAT = "YYYY-MM-DDTHH:mm:ssZ"
DEFAULT_FORMAT_UTC = "YYYY-MM-DDTHH:mm:ss[Z]"

TokenFunction = Callable[["Moment"], str]
FORMAT_TOKENS: Dict[str, TokenFunction] = {}


def zero_fill(number: int, target_length: int, force_sign: bool = False) -> str:
    digits = str(abs(int(number))).rjust(target_length, "0")
    if number < 0:
        return "-" + digits
    return ("+" if force_sign else "") + digits


def add_format_token(
    token: Optional[str],
    padded: Optional[Tuple] = None,
    ordinal: Optional[str] = None,
    getter: Callable[["Moment"], int] = None,
) -> None:
    if token:
        FORMAT_TOKENS[token] = lambda m: str(getter(m))
    if padded:
        name, length = padded[0], padded[1]
        force_sign = len(padded) > 2 and padded[2]
        FORMAT_TOKENS[name] = lambda m: zero_fill(getter(m), length, force_sign)
    if ordinal:
        FORMAT_TOKENS[ordinal] = lambda m: m.locale_data.ordinal(getter(m), token)


def _offset(moment: "Moment", separator: str) -> str:
    offset = moment.utc_offset()
    sign = "+"
    if offset < 0:
        offset = -offset
        sign = "-"
    return sign + zero_fill(int(offset / 60), 2) + separator + zero_fill(int(offset) % 60, 2)


def _year_token(moment: "Moment") -> str:
    year = moment.year()
    return zero_fill(year, 4) if year <= 9999 else f"+{year}"


def _fraction(length: int) -> TokenFunction:
    if length == 1:
        return lambda m: str(m.milliseconds() // 100)
    if length == 2:
        return lambda m: zero_fill(m.milliseconds() // 10, 2)
    return lambda m: zero_fill(m.milliseconds() * 10 ** (length - 3), length)


def _hour12(moment: "Moment") -> int:
    return moment.hours() % 12 or 12


# Months, quarters and days
add_format_token("M", ("MM", 2), "Mo", lambda m: m.month())
FORMAT_TOKENS["MMM"] = lambda m: m.locale_data.months_short[m.month() - 1]
FORMAT_TOKENS["MMMM"] = lambda m: m.locale_data.months[m.month() - 1]
add_format_token("Q", None, "Qo", lambda m: m.quarter())
add_format_token("D", ("DD", 2), "Do", lambda m: m.date())
add_format_token("DDD", ("DDDD", 3), "DDDo", lambda m: m.day_of_year())

# Weekdays
add_format_token("d", None, "do", lambda m: m.day())
FORMAT_TOKENS["dd"] = lambda m: m.locale_data.weekdays_min[m.day()]
FORMAT_TOKENS["ddd"] = lambda m: m.locale_data.weekdays_short[m.day()]
FORMAT_TOKENS["dddd"] = lambda m: m.locale_data.weekdays[m.day()]
add_format_token("e", None, None, lambda m: m.weekday())
add_format_token("E", None, None, lambda m: m.iso_weekday())

# Weeks
add_format_token("w", ("ww", 2), "wo", lambda m: m.week())
add_format_token("W", ("WW", 2), "Wo", lambda m: m.iso_week())

# Years
FORMAT_TOKENS["Y"] = _year_token
add_format_token(None, ("YY", 2), None, lambda m: m.year() % 100)
add_format_token(None, ("YYYY", 4), None, lambda m: m.year())
add_format_token(None, ("YYYYY", 5), None, lambda m: m.year())
add_format_token(None, ("YYYYYY", 6, True), None, lambda m: m.year())
add_format_token(None, ("gg", 2), None, lambda m: m.week_year() % 100)
add_format_token(None, ("gggg", 4), None, lambda m: m.week_year())
add_format_token(None, ("ggggg", 5), None, lambda m: m.week_year())
add_format_token(None, ("GG", 2), None, lambda m: m.iso_week_year() % 100)
add_format_token(None, ("GGGG", 4), None, lambda m: m.iso_week_year())
add_format_token(None, ("GGGGG", 5), None, lambda m: m.iso_week_year())

# Time of day
FORMAT_TOKENS["a"] = lambda m: m.locale_data.meridiem(m.hours(), m.minutes(), True)
FORMAT_TOKENS["A"] = lambda m: m.locale_data.meridiem(m.hours(), m.minutes(), False)
add_format_token("H", ("HH", 2), None, lambda m: m.hours())
add_format_token("h", ("hh", 2), None, _hour12)
add_format_token("k", ("kk", 2), None, lambda m: m.hours() or 24)
FORMAT_TOKENS["hmm"] = lambda m: f"{_hour12(m)}{zero_fill(m.minutes(), 2)}"
FORMAT_TOKENS["hmmss"] = lambda m: f"{_hour12(m)}{zero_fill(m.minutes(), 2)}{zero_fill(m.seconds(), 2)}"
FORMAT_TOKENS["Hmm"] = lambda m: f"{m.hours()}{zero_fill(m.minutes(), 2)}"
FORMAT_TOKENS["Hmmss"] = lambda m: f"{m.hours()}{zero_fill(m.minutes(), 2)}{zero_fill(m.seconds(), 2)}"
add_format_token("m", ("mm", 2), None, lambda m: m.minutes())
add_format_token("s", ("ss", 2), None, lambda m: m.seconds())
for _length in range(1, 10):
    FORMAT_TOKENS["S" * _length] = _fraction(_length)

# Offsets and timestamps
FORMAT_TOKENS["Z"] = lambda m: _offset(m, ":")
FORMAT_TOKENS["ZZ"] = lambda m: _offset(m, "")
FORMAT_TOKENS["z"] = lambda m: m.zone_abbr()
FORMAT_TOKENS["zz"] = lambda m: m.zone_abbr()
FORMAT_TOKENS["X"] = lambda m: str(m.unix())
FORMAT_TOKENS["x"] = lambda m: str(m.value_of())


def remove_formatting_tokens(text: str) -> str:
    if re.match(r"\[[\s\S]", text):
        return re.sub(r"^\[|\]$", "", text)
    return text.replace("\\", "")


def expand_format(pattern: str, locale: Union[str, LocaleData, None] = None) -> str:
    """Replace long-format tokens (``LT``, ``LL``, ``l`` ...) with their patterns."""
    data = get_locale(locale)

    def replace(match):
        return data.long_date_format(match.group(0)) or match.group(0)

    # Long formats may refer to each other
    for _ in range(5):
        expanded = LOCAL_FORMATTING_TOKENS.sub(replace, pattern)
        if expanded == pattern:
            break
        pattern = expanded
    return pattern


def format_moment(moment: "Moment", pattern: Optional[str] = None) -> str:
    if pattern is None:
        pattern = DEFAULT_FORMAT if moment.is_local() else DEFAULT_FORMAT_UTC

    output = []
    for match in FORMATTING_TOKENS.finditer(expand_format(pattern, moment.locale_data)):
        token = match.group(0)
        function = FORMAT_TOKENS.get(token)
        output.append(function(moment) if function else remove_formatting_tokens(token))
    return "".join(output)


def format(
    instant: "Instant",
    pattern: Optional[str] = None,
    locale: Union[str, LocaleData, None] = "en",
    zone: Optional["Zone"] = None,
) -> str:
    """Format the UTC `instant` in `zone` (UTC if omitted) and `locale`."""
    from .moment import Moment

    return format_moment(Moment.of(instant, zone=zone, locale=locale), pattern)
