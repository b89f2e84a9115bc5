"""Calendar locale data: names, formats, ordinals and relative-time rules.

English is the built-in default; Galician is bundled alongside it. More
locales can be added with `define_locale`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple, Union

if TYPE_CHECKING:
    from .moment import Moment

logger = logging.getLogger(__name__)

CalendarSpec = Union[str, Callable[["Moment"], str]]
RelativeSpec = Union[str, Callable[..., str]]

_SHORTENED = re.compile(r"(\[[^\[]*\])|(MMMM|MMM|MM|M|dddd|ddd|dd|d|DDDD|DDD|DD|D|.)")


def _default_meridiem(hours: int, minutes: int, is_lower: bool) -> str:
    if hours > 11:
        return "pm" if is_lower else "PM"
    return "am" if is_lower else "AM"


def _default_is_pm(text: str) -> bool:
    return str(text).lower()[:1] == "p"


def english_ordinal(number: int, token: str = "") -> str:
    last = number % 10
    if (number % 100) // 10 == 1:
        suffix = "th"
    elif last == 1:
        suffix = "st"
    elif last == 2:
        suffix = "nd"
    elif last == 3:
        suffix = "rd"
    else:
        suffix = "th"
    return f"{number}{suffix}"


@dataclass(frozen=True, eq=False)
class LocaleData:
    code: str
    months: Tuple[str, ...]
    months_short: Tuple[str, ...]
    weekdays: Tuple[str, ...]
    weekdays_short: Tuple[str, ...]
    weekdays_min: Tuple[str, ...]
    long_date_formats: Dict[str, str]
    calendar: Dict[str, CalendarSpec]
    relative_time: Dict[str, RelativeSpec]
    ordinal: Callable[[int, str], str] = english_ordinal
    ordinal_parse: str = r"\d{1,2}(?:th|st|nd|rd)"
    meridiem: Callable[[int, int, bool], str] = _default_meridiem
    meridiem_parse: str = r"[ap]\.?m?\.?"
    is_pm: Callable[[str], bool] = _default_is_pm
    dow: int = 0
    doy: int = 6
    _derived: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    def long_date_format(self, key: str) -> Optional[str]:
        """Expansion of ``LT``/``L``/``LL``...; lowercase keys are derived."""
        found = self.long_date_formats.get(key)
        if found is not None:
            return found
        upper = self.long_date_formats.get(key.upper())
        if upper is None or key == key.upper():
            return None
        if key not in self._derived:
            self._derived[key] = _SHORTENED.sub(
                lambda m: m.group(0)[1:] if m.group(2) in ("MMMM", "MM", "DD", "dddd") else m.group(0),
                upper,
            )
        return self._derived[key]

    def calendar_format(self, key: str, moment: "Moment") -> str:
        spec = self.calendar.get(key, self.calendar.get("sameElse", "L"))
        return spec(moment) if callable(spec) else spec

    def relative(self, number: int, without_suffix: bool, key: str, is_future: bool) -> str:
        spec = self.relative_time[key]
        if callable(spec):
            return spec(number, without_suffix, key, is_future)
        return spec.replace("%d", str(number), 1)

    def past_future(self, diff: float, output: str) -> str:
        spec = self.relative_time["future" if diff > 0 else "past"]
        if callable(spec):
            return spec(output)
        return spec.replace("%s", output, 1)


ENGLISH = LocaleData(
    code="en",
    months=(
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    months_short=("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    weekdays=("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
    weekdays_short=("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    weekdays_min=("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"),
    long_date_formats={
        "LTS": "h:mm:ss A",
        "LT": "h:mm A",
        "L": "MM/DD/YYYY",
        "LL": "MMMM D, YYYY",
        "LLL": "MMMM D, YYYY h:mm A",
        "LLLL": "dddd, MMMM D, YYYY h:mm A",
    },
    calendar={
        "sameDay": "[Today at] LT",
        "nextDay": "[Tomorrow at] LT",
        "nextWeek": "dddd [at] LT",
        "lastDay": "[Yesterday at] LT",
        "lastWeek": "[Last] dddd [at] LT",
        "sameElse": "L",
    },
    relative_time={
        "future": "in %s",
        "past": "%s ago",
        "s": "a few seconds",
        "ss": "%d seconds",
        "m": "a minute",
        "mm": "%d minutes",
        "h": "an hour",
        "hh": "%d hours",
        "d": "a day",
        "dd": "%d days",
        "M": "a month",
        "MM": "%d months",
        "y": "a year",
        "yy": "%d years",
    },
)


# Galician: "á"/"ás" agree with the hour ("á unha", "ás dúas")
def _at(moment: "Moment", plural: str, singular: str) -> str:
    return plural if moment.hours() != 1 else singular


def _galician_future(output: str) -> str:
    if output.startswith("un"):
        return "n" + output
    return "en " + output


GALICIAN = LocaleData(
    code="gl",
    months=(
        "xaneiro", "febreiro", "marzo", "abril", "maio", "xuño",
        "xullo", "agosto", "setembro", "outubro", "novembro", "decembro",
    ),
    months_short=(
        "xan.", "feb.", "mar.", "abr.", "mai.", "xuñ.",
        "xul.", "ago.", "set.", "out.", "nov.", "dec.",
    ),
    weekdays=("domingo", "luns", "martes", "mércores", "xoves", "venres", "sábado"),
    weekdays_short=("dom.", "lun.", "mar.", "mér.", "xov.", "ven.", "sáb."),
    weekdays_min=("do", "lu", "ma", "mé", "xo", "ve", "sá"),
    long_date_formats={
        "LT": "H:mm",
        "LTS": "H:mm:ss",
        "L": "DD/MM/YYYY",
        "LL": "D [de] MMMM [de] YYYY",
        "LLL": "D [de] MMMM [de] YYYY H:mm",
        "LLLL": "dddd, D [de] MMMM [de] YYYY H:mm",
    },
    calendar={
        "sameDay": lambda m: f"[hoxe {_at(m, 'ás', 'á')}] LT",
        "nextDay": lambda m: f"[mañá {_at(m, 'ás', 'á')}] LT",
        "nextWeek": lambda m: f"dddd [{_at(m, 'ás', 'a')}] LT",
        "lastDay": lambda m: f"[onte {_at(m, 'á', 'a')}] LT",
        "lastWeek": lambda m: f"[o] dddd [pasado {_at(m, 'ás', 'a')}] LT",
        "sameElse": "L",
    },
    relative_time={
        "future": _galician_future,
        "past": "hai %s",
        "s": "uns segundos",
        "ss": "%d segundos",
        "m": "un minuto",
        "mm": "%d minutos",
        "h": "unha hora",
        "hh": "%d horas",
        "d": "un día",
        "dd": "%d días",
        "M": "un mes",
        "MM": "%d meses",
        "y": "un ano",
        "yy": "%d anos",
    },
    ordinal=lambda number, token="": f"{number}º",
    ordinal_parse=r"\d{1,2}º",
    dow=1,
    doy=4,
)

_LOCALES: Dict[str, LocaleData] = {"en": ENGLISH, "gl": GALICIAN}


def define_locale(code: str, data: LocaleData) -> None:
    _LOCALES[code.lower().replace("_", "-")] = data


def available_locales():
    return sorted(_LOCALES)


def get_locale(code: Union[str, LocaleData, None] = None) -> LocaleData:
    """Locale data for `code`, falling back ``ll_RR`` -> ``ll`` -> ``en``."""
    if isinstance(code, LocaleData):
        return code
    if not code:
        return ENGLISH

    normalized = code.lower().replace("_", "-")
    for candidate in (normalized, normalized.split("-")[0]):
        if candidate in _LOCALES:
            return _LOCALES[candidate]

    logger.warning("No calendar locale %s; using en", code)
    return ENGLISH
