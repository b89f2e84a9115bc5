"""Relative time ("in 5 minutes", "3 days ago") and calendar buckets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Tuple, Union

from .locales import LocaleData, get_locale
from .zone import js_round

if TYPE_CHECKING:
    from .moment import Moment

# Upper bounds for each unit before rounding up to the next one. Shared by
# the whole process; pass your own copy as `thresholds` to keep changes local.
THRESHOLDS: Dict[str, int] = {"ss": 44, "s": 45, "m": 45, "h": 22, "d": 26, "M": 11}

DAY_MS = 864e5


def relative_time_threshold(
    unit: str,
    limit: Optional[int] = None,
    thresholds: Optional[Dict[str, int]] = None,
) -> Union[int, bool]:
    """Read the threshold for `unit`, or set it when `limit` is given."""
    table = THRESHOLDS if thresholds is None else thresholds
    if unit not in table:
        return False
    if limit is None:
        return table[unit]
    table[unit] = limit
    if unit == "s":
        table["ss"] = limit - 1
    return True


def relative_key(milliseconds: float, thresholds: Optional[Dict[str, int]] = None) -> Tuple[str, int]:
    """Pick the relative-time key and count for a duration."""
    limits = THRESHOLDS if thresholds is None else thresholds
    duration = abs(milliseconds)
    days = duration / DAY_MS
    months = days * 4800 / 146097

    seconds = js_round(duration / 1000)
    minutes = js_round(duration / 6e4)
    hours = js_round(duration / 36e5)
    days_rounded = js_round(days)
    months_rounded = js_round(months)
    years = js_round(months / 12)

    if seconds <= limits["ss"]:
        return "s", seconds
    if seconds < limits["s"]:
        return "ss", seconds
    if minutes <= 1:
        return "m", 1
    if minutes < limits["m"]:
        return "mm", minutes
    if hours <= 1:
        return "h", 1
    if hours < limits["h"]:
        return "hh", hours
    if days_rounded <= 1:
        return "d", 1
    if days_rounded < limits["d"]:
        return "dd", days_rounded
    if months_rounded <= 1:
        return "M", 1
    if months_rounded < limits["M"]:
        return "MM", months_rounded
    if years <= 1:
        return "y", 1
    return "yy", years


def humanize(
    milliseconds: float,
    locale: Union[str, LocaleData, None] = "en",
    with_suffix: bool = False,
    thresholds: Optional[Dict[str, int]] = None,
) -> str:
    """Describe a duration; positive durations are in the future."""
    data = get_locale(locale)
    key, number = relative_key(milliseconds, thresholds)
    output = data.relative(number or 1, not with_suffix, key, milliseconds > 0)
    if with_suffix:
        output = data.past_future(milliseconds, output)
    return output


def calendar_key(moment: "Moment", start_of_reference_day: "Moment") -> str:
    """Calendar bucket of `moment` relative to the start of the reference day."""
    zone_delta = (start_of_reference_day.utc_offset() - moment.utc_offset()) * 6e4
    diff = (moment.value_of() - start_of_reference_day.value_of() - zone_delta) / DAY_MS

    if diff < -6:
        return "sameElse"
    if diff < -1:
        return "lastWeek"
    if diff < 0:
        return "lastDay"
    if diff < 1:
        return "sameDay"
    if diff < 2:
        return "nextDay"
    if diff < 7:
        return "nextWeek"
    return "sameElse"
