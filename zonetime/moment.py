"""`Moment`: an immutable instant viewed in a zone (or fixed offset) and locale."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from functools import cached_property
from typing import TYPE_CHECKING, Dict, Optional, Union

from .base60 import Number
from .formatter import format_moment
from .locales import ENGLISH, LocaleData, get_locale
from .relative import calendar_key, humanize
from .weeks import day_of_week, week_of_year
from .zone import Instant, Zone, to_millis

if TYPE_CHECKING:
    from .registry import ZoneRegistry

_EPOCH_NAIVE = datetime(1970, 1, 1)

LocaleArg = Union[str, LocaleData, None]
ZoneArg = Union[str, Zone, None]


def _resolve_zone(zone: ZoneArg, registry: Optional["ZoneRegistry"]) -> Optional[Zone]:
    if zone is None or isinstance(zone, Zone):
        return zone
    if registry is None:
        from .registry import default_registry

        registry = default_registry()
    return registry.zone(zone)


def _millis(value: Union["Moment", Instant]) -> Number:
    if isinstance(value, Moment):
        return value.instant
    return to_millis(value)


@dataclass(frozen=True)
class Moment:
    """A UTC instant in epoch milliseconds plus how to display it.

    With neither `zone` nor `fixed_offset` the moment is in UTC.
    `fixed_offset` is in minutes east of UTC, like `utc_offset()`.
    """

    instant: Number
    zone: Optional[Zone] = None
    locale_data: LocaleData = ENGLISH
    fixed_offset: Optional[Number] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def of(
        cls,
        instant: Union["Moment", Instant],
        zone: ZoneArg = None,
        locale: LocaleArg = None,
        registry: Optional["ZoneRegistry"] = None,
    ) -> "Moment":
        return cls(_millis(instant), _resolve_zone(zone, registry), get_locale(locale))

    @classmethod
    def now(
        cls,
        zone: ZoneArg = None,
        locale: LocaleArg = None,
        registry: Optional["ZoneRegistry"] = None,
    ) -> "Moment":
        return cls.of(int(time.time() * 1000), zone, locale, registry)

    @classmethod
    def from_local(
        cls,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        zone: ZoneArg = None,
        locale: LocaleArg = None,
        fixed_offset: Optional[Number] = None,
        registry: Optional["ZoneRegistry"] = None,
        move_ambiguous_forward: Optional[bool] = None,
        move_invalid_forward: Optional[bool] = None,
    ) -> "Moment":
        """Moment for a wall-clock time in `zone` (or at `fixed_offset`, or UTC).

        Skipped and repeated wall times are resolved by `Zone.parse`; the
        flags default to the registry's when one is given.
        """
        local_ms = to_millis(datetime(year, month, day, hour, minute, second, millisecond * 1000))
        data = get_locale(locale)

        if fixed_offset is not None:
            return cls(local_ms - fixed_offset * 60000, None, data, fixed_offset)

        target = _resolve_zone(zone, registry)
        if target is None:
            return cls(local_ms, None, data)

        if move_ambiguous_forward is None:
            move_ambiguous_forward = registry.move_ambiguous_forward if registry else False
        if move_invalid_forward is None:
            move_invalid_forward = registry.move_invalid_forward if registry else True

        offset = target.parse(
            local_ms,
            move_ambiguous_forward=move_ambiguous_forward,
            move_invalid_forward=move_invalid_forward,
        )
        return cls(local_ms + offset * 60000, target, data)

    # ------------------------------------------------------------------
    # Zone, offset and locale
    # ------------------------------------------------------------------
    def utc_offset(self) -> Number:
        """Offset from UTC in minutes east (the negated zone offset)."""
        if self.fixed_offset is not None:
            return self.fixed_offset
        if self.zone is not None:
            return -self.zone.utc_offset(self.instant)
        return 0

    def is_local(self) -> bool:
        return self.zone is not None or self.fixed_offset is not None

    def zone_abbr(self) -> str:
        if self.zone is not None:
            return self.zone.abbr(self.instant)
        if self.fixed_offset is not None:
            return ""
        return "UTC"

    zone_name = zone_abbr

    def is_dst(self) -> bool:
        if self.zone is None:
            return False
        # Same wall-clock day and time in January and June
        local = self._local
        january = Moment.from_local(local.year, 1, local.day, local.hour, local.minute, zone=self.zone)
        june = Moment.from_local(local.year, 6, min(local.day, 30), local.hour, local.minute, zone=self.zone)
        offset = self.utc_offset()
        return offset > january.utc_offset() or offset > june.utc_offset()

    def tz(self, zone: Union[str, Zone], registry: Optional["ZoneRegistry"] = None) -> "Moment":
        """Same instant in another zone; unknown names raise `UnknownZoneError`."""
        return replace(self, zone=_resolve_zone(zone, registry), fixed_offset=None)

    def utc(self) -> "Moment":
        return replace(self, zone=None, fixed_offset=None)

    def with_offset(self, minutes_east: Number) -> "Moment":
        return replace(self, zone=None, fixed_offset=minutes_east)

    def locale(self, code: LocaleArg) -> "Moment":
        return replace(self, locale_data=get_locale(code))

    # ------------------------------------------------------------------
    # Local fields
    # ------------------------------------------------------------------
    @cached_property
    def _local(self) -> datetime:
        return _EPOCH_NAIVE + timedelta(milliseconds=self.instant + self.utc_offset() * 60000)

    def year(self) -> int:
        return self._local.year

    def month(self) -> int:
        """Month of the year, 1-12."""
        return self._local.month

    def date(self) -> int:
        return self._local.day

    def day(self) -> int:
        """Day of the week, 0 (Sunday) to 6."""
        return day_of_week(self._local)

    def weekday(self) -> int:
        """Day of the week counted from the locale's first day."""
        return (self.day() + 7 - self.locale_data.dow) % 7

    def iso_weekday(self) -> int:
        return self._local.isoweekday()

    def hours(self) -> int:
        return self._local.hour

    def minutes(self) -> int:
        return self._local.minute

    def seconds(self) -> int:
        return self._local.second

    def milliseconds(self) -> int:
        return self._local.microsecond // 1000

    def day_of_year(self) -> int:
        return self._local.timetuple().tm_yday

    def quarter(self) -> int:
        return (self.month() - 1) // 3 + 1

    def week(self) -> int:
        data = self.locale_data
        return week_of_year(self._local.date(), data.dow, data.doy)[0]

    def week_year(self) -> int:
        data = self.locale_data
        return week_of_year(self._local.date(), data.dow, data.doy)[1]

    def iso_week(self) -> int:
        return self._local.isocalendar()[1]

    def iso_week_year(self) -> int:
        return self._local.isocalendar()[0]

    def start_of_day(self) -> "Moment":
        local = self._local
        return Moment.from_local(
            local.year,
            local.month,
            local.day,
            zone=self.zone,
            locale=self.locale_data,
            fixed_offset=self.fixed_offset,
        )

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def value_of(self) -> Number:
        if isinstance(self.instant, float) and self.instant.is_integer():
            return int(self.instant)
        return self.instant

    def unix(self) -> int:
        return int(self.value_of() // 1000)

    def to_datetime(self) -> datetime:
        """Aware datetime carrying this moment's current UTC offset."""
        offset = timezone(timedelta(minutes=self.utc_offset()))
        return self._local.replace(tzinfo=offset)

    def to_iso_string(self) -> str:
        return self.utc().format("YYYY-MM-DDTHH:mm:ss.SSS[Z]")

    def format(self, pattern: Optional[str] = None) -> str:
        return format_moment(self, pattern)

    def __str__(self) -> str:
        return self.locale(ENGLISH).format("ddd MMM DD YYYY HH:mm:ss [GMT]ZZ")

    # ------------------------------------------------------------------
    # Relative time
    # ------------------------------------------------------------------
    def from_(self, other: Union["Moment", Instant], without_suffix: bool = False) -> str:
        """Describe this moment relative to `other` ("in 2 hours", "a day ago")."""
        return humanize(self.instant - _millis(other), self.locale_data, not without_suffix)

    def from_now(self, without_suffix: bool = False, now: Union["Moment", Instant, None] = None) -> str:
        if now is None:
            now = time.time() * 1000
        return self.from_(now, without_suffix)

    def to(self, other: Union["Moment", Instant], without_suffix: bool = False) -> str:
        return humanize(_millis(other) - self.instant, self.locale_data, not without_suffix)

    def to_now(self, without_suffix: bool = False, now: Union["Moment", Instant, None] = None) -> str:
        if now is None:
            now = time.time() * 1000
        return self.to(now, without_suffix)

    def calendar(
        self,
        reference: Union["Moment", Instant, None] = None,
        formats: Optional[Dict[str, str]] = None,
    ) -> str:
        """Format relative to the day of `reference` (default: now)."""
        if reference is None:
            reference = time.time() * 1000
        start = replace(self, instant=_millis(reference)).start_of_day()
        key = calendar_key(self, start)

        if formats and key in formats:
            spec = formats[key]
            pattern = spec(self) if callable(spec) else spec
        else:
            pattern = self.locale_data.calendar_format(key, self)
        return self.format(pattern)
