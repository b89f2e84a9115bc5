"""Parse text against a moment-style format string.

Each format token is matched in turn against the rest of the input. In
forgiving mode a token may be found after some skipped characters and
unmatched literals are ignored; in strict mode every token and every
character of the input has to line up.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Callable, Dict, Optional, Sequence, Tuple, Union

from .errors import InvalidDateError
from .formatter import FORMATTING_TOKENS, expand_format, remove_formatting_tokens
from .locales import LocaleData, get_locale
from .moment import LocaleArg, Moment, ZoneArg
from .weeks import date_from_iso_week, date_from_week, day_of_week, week_of_year
from .zone import Instant

if TYPE_CHECKING:
    from .registry import ZoneRegistry

logger = logging.getLogger(__name__)

MATCH1 = r"\d"
MATCH2 = r"\d\d"
MATCH3 = r"\d{3}"
MATCH4 = r"\d{4}"
MATCH1TO2 = r"\d\d?"
MATCH1TO3 = r"\d{1,3}"
MATCH1TO4 = r"\d{1,4}"
MATCH3TO4 = r"\d\d\d\d?"
MATCH5TO6 = r"\d\d\d\d\d\d?"
MATCH1TO6 = r"[+-]?\d{1,6}"
MATCH_UNSIGNED = r"\d+"
MATCH_SIGNED = r"[+-]?\d+"
MATCH_OFFSET = r"Z|[+-]\d\d:?\d\d"
MATCH_SHORT_OFFSET = r"Z|[+-]\d\d(?::?\d\d)?"
MATCH_TIMESTAMP = r"[+-]?\d+(?:\.\d{1,3})?"


def two_digit_year(value: int) -> int:
    return value + (1900 if value > 68 else 2000)


def offset_from_string(text: str) -> int:
    """Minutes east of UTC for ``Z``, ``+05``, ``-0330`` or ``+05:30``."""
    if text.upper() == "Z":
        return 0
    match = re.match(r"([+-])(\d\d):?(\d\d)?", text)
    minutes = int(match.group(2)) * 60 + int(match.group(3) or 0)
    return minutes if match.group(1) == "+" else -minutes


@dataclass
class _Parsed:
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    hour: Optional[int] = None
    minute: Optional[int] = None
    second: Optional[int] = None
    millisecond: Optional[int] = None
    day_of_year: Optional[int] = None
    weekday: Optional[int] = None
    week: Optional[int] = None
    week_year: Optional[int] = None
    iso_week: Optional[int] = None
    iso_week_year: Optional[int] = None
    is_pm: Optional[bool] = None
    big_hour: bool = False
    offset: Optional[int] = None
    timestamp: Optional[float] = None


Setter = Callable[[str, _Parsed, LocaleData], None]
RegexSpec = Union[str, Callable[[LocaleData, bool], str]]


def _names(*names: Sequence[str]) -> str:
    words = sorted({n for group in names for n in group}, key=len, reverse=True)
    return "|".join(re.escape(word) for word in words)


def _set(attribute: str, convert: Callable[[str], int] = int) -> Setter:
    def setter(text: str, parsed: _Parsed, locale: LocaleData) -> None:
        setattr(parsed, attribute, convert(text))

    return setter


def _set_month_name() -> Setter:
    def setter(text: str, parsed: _Parsed, locale: LocaleData) -> None:
        wanted = text.lower()
        for index, (long_name, short_name) in enumerate(zip(locale.months, locale.months_short)):
            if wanted in (long_name.lower(), short_name.lower()):
                parsed.month = index + 1
                return
        raise ValueError(f"invalid month name {text!r}")

    return setter


def _set_weekday_name(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    wanted = text.lower()
    for names in (locale.weekdays, locale.weekdays_short, locale.weekdays_min):
        for index, name in enumerate(names):
            if wanted == name.lower():
                parsed.weekday = index
                return
    raise ValueError(f"invalid weekday name {text!r}")


def _set_ordinal(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.day = int(re.match(r"\d+", text).group(0))


def _set_year(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.year = two_digit_year(int(text)) if len(text) == 2 else int(text)


def _set_quarter(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.month = (int(text) - 1) * 3 + 1


def _set_hour12(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.hour = int(text)
    parsed.big_hour = True


def _set_meridiem(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.is_pm = locale.is_pm(text)


def _set_fraction(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.millisecond = int(float("0." + text) * 1000)


def _set_compact_time(big_hour: bool, with_seconds: bool) -> Setter:
    def setter(text: str, parsed: _Parsed, locale: LocaleData) -> None:
        cut = len(text) - (4 if with_seconds else 2)
        parsed.hour = int(text[:cut])
        parsed.minute = int(text[cut:cut + 2])
        if with_seconds:
            parsed.second = int(text[cut + 2:])
        parsed.big_hour = big_hour

    return setter


def _set_offset(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.offset = offset_from_string(text)


def _set_timestamp(scale: int) -> Setter:
    def setter(text: str, parsed: _Parsed, locale: LocaleData) -> None:
        parsed.timestamp = float(text) * scale

    return setter


def _set_locale_weekday(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.weekday = (int(text) + locale.dow) % 7


def _set_iso_weekday(text: str, parsed: _Parsed, locale: LocaleData) -> None:
    parsed.weekday = int(text) % 7


def _both(regex: str) -> Tuple[str, str]:
    return regex, regex


# token -> (forgiving regex, strict regex, setter)
PARSE_TOKENS: Dict[str, Tuple[RegexSpec, RegexSpec, Setter]] = {
    "M": (MATCH1TO2, MATCH1TO2, _set("month")),
    "MM": (MATCH1TO2, MATCH2, _set("month")),
    "MMM": (
        lambda loc, strict: _names(loc.months, loc.months_short),
        lambda loc, strict: _names(loc.months_short),
        _set_month_name(),
    ),
    "MMMM": (
        lambda loc, strict: _names(loc.months, loc.months_short),
        lambda loc, strict: _names(loc.months),
        _set_month_name(),
    ),
    "Q": (MATCH1, MATCH1, _set_quarter),
    "D": (MATCH1TO2, MATCH1TO2, _set("day")),
    "DD": (MATCH1TO2, MATCH2, _set("day")),
    "Do": (
        lambda loc, strict: f"{loc.ordinal_parse}|\\d{{1,2}}",
        lambda loc, strict: loc.ordinal_parse,
        _set_ordinal,
    ),
    "DDD": (MATCH1TO3, MATCH1TO3, _set("day_of_year")),
    "DDDD": (MATCH3, MATCH3, _set("day_of_year")),
    "d": (MATCH1TO2, MATCH1, _set("weekday")),
    "e": (MATCH1TO2, MATCH1, _set_locale_weekday),
    "E": (MATCH1TO2, MATCH1, _set_iso_weekday),
    "dd": (lambda loc, strict: _names(loc.weekdays_min), lambda loc, strict: _names(loc.weekdays_min), _set_weekday_name),
    "ddd": (lambda loc, strict: _names(loc.weekdays_short), lambda loc, strict: _names(loc.weekdays_short), _set_weekday_name),
    "dddd": (
        lambda loc, strict: _names(loc.weekdays, loc.weekdays_short, loc.weekdays_min),
        lambda loc, strict: _names(loc.weekdays),
        _set_weekday_name,
    ),
    "w": (MATCH1TO2, MATCH1TO2, _set("week")),
    "ww": (MATCH1TO2, MATCH2, _set("week")),
    "W": (MATCH1TO2, MATCH1TO2, _set("iso_week")),
    "WW": (MATCH1TO2, MATCH2, _set("iso_week")),
    "gg": (MATCH1TO2, MATCH2, _set("week_year", lambda t: two_digit_year(int(t)))),
    "gggg": (MATCH1TO4, MATCH4, _set("week_year")),
    "GG": (MATCH1TO2, MATCH2, _set("iso_week_year", lambda t: two_digit_year(int(t)))),
    "GGGG": (MATCH1TO4, MATCH4, _set("iso_week_year")),
    "YY": (MATCH1TO2, MATCH2, _set("year", lambda t: two_digit_year(int(t)))),
    "YYYY": (MATCH1TO4, MATCH4, _set_year),
    "YYYYY": (MATCH1TO6, r"\d{5}", _set("year")),
    "YYYYYY": (MATCH1TO6, r"[+-]\d{6}", _set("year")),
    "Y": _both(MATCH_SIGNED) + (_set("year"),),
    "a": (lambda loc, strict: loc.meridiem_parse, lambda loc, strict: loc.meridiem_parse, _set_meridiem),
    "A": (lambda loc, strict: loc.meridiem_parse, lambda loc, strict: loc.meridiem_parse, _set_meridiem),
    "H": (MATCH1TO2, MATCH1TO2, _set("hour")),
    "HH": (MATCH1TO2, MATCH2, _set("hour")),
    "k": (MATCH1TO2, MATCH1TO2, _set("hour")),
    "kk": (MATCH1TO2, MATCH2, _set("hour")),
    "h": (MATCH1TO2, MATCH1TO2, _set_hour12),
    "hh": (MATCH1TO2, MATCH2, _set_hour12),
    "hmm": _both(MATCH3TO4) + (_set_compact_time(True, False),),
    "hmmss": _both(MATCH5TO6) + (_set_compact_time(True, True),),
    "Hmm": _both(MATCH3TO4) + (_set_compact_time(False, False),),
    "Hmmss": _both(MATCH5TO6) + (_set_compact_time(False, True),),
    "m": (MATCH1TO2, MATCH1TO2, _set("minute")),
    "mm": (MATCH1TO2, MATCH2, _set("minute")),
    "s": (MATCH1TO2, MATCH1TO2, _set("second")),
    "ss": (MATCH1TO2, MATCH2, _set("second")),
    "S": (MATCH1TO3, MATCH1, _set_fraction),
    "SS": (MATCH1TO3, MATCH2, _set_fraction),
    "SSS": (MATCH1TO3, MATCH3, _set_fraction),
    "Z": _both(MATCH_SHORT_OFFSET) + (_set_offset,),
    "ZZ": _both(MATCH_OFFSET) + (_set_offset,),
    "X": _both(MATCH_TIMESTAMP) + (_set_timestamp(1000),),
    "x": _both(MATCH_SIGNED) + (_set_timestamp(1),),
}
for _length in range(4, 10):
    PARSE_TOKENS["S" * _length] = _both(MATCH_UNSIGNED) + (_set_fraction,)


def _token_regex(token: str, locale: LocaleData, strict: bool) -> re.Pattern:
    entry = PARSE_TOKENS.get(token)
    if entry is None:
        return re.compile(re.escape(remove_formatting_tokens(token)))
    spec = entry[1] if strict else entry[0]
    if callable(spec):
        spec = spec(locale, strict)
    return re.compile(spec, re.IGNORECASE)


def _current_week_day(today: date, weekday: int, dow: int) -> date:
    start = today - timedelta(days=(day_of_week(today) - dow) % 7)
    return start + timedelta(days=(weekday - dow) % 7)


def _fill_date(parsed: _Parsed, today: date, locale: LocaleData) -> None:
    """Work out the calendar date from day-of-year, week or partial fields."""
    if parsed.day_of_year is not None:
        year = parsed.year if parsed.year is not None else today.year
        start = date(year, 1, 1)
        found = start + timedelta(days=parsed.day_of_year - 1)
        if parsed.day_of_year < 1 or found.year != year:
            raise ValueError(f"day of year {parsed.day_of_year} out of range")
        parsed.year, parsed.month, parsed.day = found.year, found.month, found.day
        return

    if parsed.month is None and parsed.day is None:
        found = None
        if parsed.iso_week is not None or parsed.iso_week_year is not None:
            week_year = parsed.iso_week_year if parsed.iso_week_year is not None else today.isocalendar()[0]
            iso_weekday = (parsed.weekday or 7) if parsed.weekday is not None else 1
            found = date_from_iso_week(week_year, parsed.iso_week or 1, iso_weekday)
        elif parsed.week is not None or parsed.week_year is not None:
            current_week, current_year = week_of_year(today, locale.dow, locale.doy)
            week_year = parsed.week_year if parsed.week_year is not None else current_year
            weekday = parsed.weekday if parsed.weekday is not None else locale.dow
            week = parsed.week if parsed.week is not None else 1
            found = date_from_week(week_year, week, weekday, locale.dow, locale.doy)
        elif parsed.weekday is not None and parsed.year is None:
            found = _current_week_day(today, parsed.weekday, locale.dow)

        if found is not None:
            parsed.year, parsed.month, parsed.day = found.year, found.month, found.day
            return

    # Leading missing fields come from today, the rest start at their minimum
    current = [today.year, today.month, today.day]
    fields = [parsed.year, parsed.month, parsed.day]
    i = 0
    while i < 3 and fields[i] is None:
        fields[i] = current[i]
        i += 1
    parsed.year = fields[0]
    parsed.month = fields[1] if fields[1] is not None else 1
    parsed.day = fields[2] if fields[2] is not None else 1


def _build(
    text: str,
    pattern: str,
    data: LocaleData,
    zone: ZoneArg,
    strict: bool,
    registry: Optional["ZoneRegistry"],
    now: Union[Moment, Instant, None],
    move_ambiguous_forward: Optional[bool],
    move_invalid_forward: Optional[bool],
) -> Moment:
    parsed = _Parsed()
    remaining = text
    consumed = 0
    matched_any = False
    unused_tokens = []

    for match in FORMATTING_TOKENS.finditer(expand_format(pattern, data)):
        token = match.group(0)
        found = _token_regex(token, data, strict).search(remaining)
        piece = found.group(0) if found else ""
        if piece:
            remaining = remaining[found.end():]
            consumed += len(piece)

        entry = PARSE_TOKENS.get(token)
        if entry is not None:
            if piece:
                matched_any = True
                try:
                    entry[2](piece, parsed, data)
                except ValueError as e:
                    raise InvalidDateError(text, pattern, str(e)) from e
            else:
                unused_tokens.append(token)
        elif strict and not piece:
            unused_tokens.append(token)

    if strict and (unused_tokens or consumed != len(text)):
        reason = f"unmatched tokens {unused_tokens}" if unused_tokens else "unparsed input left over"
        raise InvalidDateError(text, pattern, reason)
    if not matched_any:
        raise InvalidDateError(text, pattern, "no date fields found")
    if remaining:
        logger.debug("Ignoring unparsed input %r in %r", remaining, text)

    if parsed.timestamp is not None:
        return Moment.of(int(parsed.timestamp), zone=zone, locale=data, registry=registry)

    reference = Moment.of(now if now is not None else Moment.now(), zone=zone, locale=data, registry=registry)
    if parsed.offset is not None and zone is None:
        reference = reference.with_offset(parsed.offset)
    today = date(reference.year(), reference.month(), reference.date())

    weekday = parsed.weekday
    explicit_date = parsed.month is not None or parsed.day is not None
    try:
        _fill_date(parsed, today, data)
    except ValueError as e:
        raise InvalidDateError(text, pattern, str(e)) from e

    hour = parsed.hour or 0
    if strict and parsed.big_hour and not 0 < hour <= 12:
        raise InvalidDateError(text, pattern, f"hour {hour} needs a 24-hour token")
    if parsed.is_pm is not None:
        if parsed.is_pm and hour < 12:
            hour += 12
        elif not parsed.is_pm and hour == 12:
            hour = 0

    minute = parsed.minute or 0
    second = parsed.second or 0
    millisecond = parsed.millisecond or 0
    next_day = hour == 24 and not (minute or second or millisecond)
    if next_day:
        hour = 0

    try:
        local = datetime(parsed.year, parsed.month, parsed.day, hour, minute, second, millisecond * 1000)
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(text, pattern, str(e)) from e
    if next_day:
        local += timedelta(days=1)

    if weekday is not None and explicit_date and day_of_week(local) != weekday:
        raise InvalidDateError(text, pattern, "weekday does not match the date")

    fields = (local.year, local.month, local.day, local.hour, local.minute, local.second, local.microsecond // 1000)
    if parsed.offset is not None:
        fixed = Moment.from_local(*fields, locale=data, fixed_offset=parsed.offset)
        return fixed.tz(zone, registry) if zone is not None else fixed

    return Moment.from_local(
        *fields,
        zone=zone,
        locale=data,
        registry=registry,
        move_ambiguous_forward=move_ambiguous_forward,
        move_invalid_forward=move_invalid_forward,
    )


def parse(
    text: str,
    pattern: Union[str, Sequence[str]],
    locale: LocaleArg = "en",
    zone: ZoneArg = None,
    strict: bool = False,
    registry: Optional["ZoneRegistry"] = None,
    now: Union[Moment, Instant, None] = None,
    move_ambiguous_forward: Optional[bool] = None,
    move_invalid_forward: Optional[bool] = None,
) -> Moment:
    """Parse `text` as a wall-clock time in `zone` (UTC if omitted).

    Missing leading date fields default to today's (from `now`), the
    rest to their minimum. An offset in the text (``Z``/``ZZ``) fixes the
    instant; the result is then shown in `zone` if one was given. A list
    of patterns is tried in order and the first that fits wins.

    Raises:
        InvalidDateError: if the text does not fit any of the patterns.
    """
    data = get_locale(locale)
    patterns = [pattern] if isinstance(pattern, str) else list(pattern)
    if not patterns:
        raise InvalidDateError(text, "", "no format given")

    error: Optional[InvalidDateError] = None
    for candidate in patterns:
        try:
            return _build(
                text,
                candidate,
                data,
                zone,
                strict,
                registry,
                now,
                move_ambiguous_forward,
                move_invalid_forward,
            )
        except InvalidDateError as e:
            error = e
    raise error
