"""Build zones and packed records from pytz's compiled tz database."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

import pytz

from .base60 import Number
from .zone import Zone, pack, to_millis

_PROBE = datetime(2000, 1, 1)


def minutes_west(utcoffset: timedelta) -> Number:
    minutes = -utcoffset.total_seconds() / 60
    return int(minutes) if float(minutes).is_integer() else minutes


def zone_from_pytz(name: str) -> Zone:
    """Return the offset history pytz holds for `name` as a `Zone`."""
    tz = pytz.timezone(name)
    transitions = getattr(tz, "_utc_transition_times", None)
    infos = getattr(tz, "_transition_info", None)

    if not transitions or not infos:
        # Fixed-offset zones (UTC, EST, Etc/GMT+5 ...)
        return Zone(
            name=tz.zone,
            abbrs=(tz.tzname(_PROBE),),
            offsets=(minutes_west(tz.utcoffset(_PROBE)),),
            untils=(math.inf,),
        )

    abbrs: List[str] = []
    offsets: List[Number] = []
    untils: List[Number] = []
    for i, (utcoffset, _dst, tzname) in enumerate(infos):
        abbrs.append(tzname)
        offsets.append(minutes_west(utcoffset))
        # transitions[i] is when period i starts; it ends where i + 1 starts
        untils.append(to_millis(transitions[i + 1]) if i + 1 < len(transitions) else math.inf)

    return Zone(name=tz.zone, abbrs=tuple(abbrs), offsets=tuple(offsets), untils=tuple(untils))


def packed_zones(names: Optional[Iterable[str]] = None) -> List[str]:
    """Packed records for `names` (default: pytz's common zones)."""
    return [pack(zone_from_pytz(name)) for name in (names or pytz.common_timezones)]


def packed_countries() -> List[str]:
    """``CC|zone zone ...`` records from pytz's country table."""
    table: Dict[str, List[str]] = {code: list(zones) for code, zones in pytz.country_timezones.items()}
    return [f"{code}|{' '.join(zones)}" for code, zones in sorted(table.items()) if zones]
