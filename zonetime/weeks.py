"""Week-of-year arithmetic for locale weeks (``dow``/``doy``) and ISO weeks.

A locale week starts on weekday ``dow`` (0 = Sunday) and week 1 is the
week that contains January ``7 + dow - doy``.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Tuple


def day_of_week(day: date) -> int:
    """Weekday with Sunday as 0."""
    return (day.weekday() + 1) % 7


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def first_week_offset(year: int, dow: int, doy: int) -> int:
    first_week_day = 7 + dow - doy
    first_week_day_local = (7 + day_of_week(date(year, 1, first_week_day)) - dow) % 7
    return -first_week_day_local + first_week_day - 1


def weeks_in_year(year: int, dow: int, doy: int) -> int:
    this_offset = first_week_offset(year, dow, doy)
    next_offset = first_week_offset(year + 1, dow, doy)
    return (days_in_year(year) - this_offset + next_offset) // 7


def week_of_year(day: date, dow: int, doy: int) -> Tuple[int, int]:
    """``(week, week_year)`` of `day` in the locale week system."""
    year = day.year
    offset = first_week_offset(year, dow, doy)
    week = (day.timetuple().tm_yday - offset - 1) // 7 + 1

    if week < 1:
        return week + weeks_in_year(year - 1, dow, doy), year - 1
    if week > weeks_in_year(year, dow, doy):
        return week - weeks_in_year(year, dow, doy), year + 1
    return week, year


def date_from_week(week_year: int, week: int, weekday: int, dow: int, doy: int) -> date:
    """Date of `weekday` (0 = Sunday) in `week` of `week_year`."""
    local_weekday = (7 + weekday - dow) % 7
    offset = first_week_offset(week_year, dow, doy)
    day_of_year = 1 + 7 * (week - 1) + local_weekday + offset
    return date(week_year, 1, 1) + timedelta(days=day_of_year - 1)


def date_from_iso_week(week_year: int, week: int, iso_weekday: int = 1) -> date:
    return date.fromisocalendar(week_year, week, iso_weekday)
