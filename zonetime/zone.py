"""Zones: offset histories decoded from packed records.

A packed record looks like::

    America/New_York|EST EDT EWT EPT|50 40 40 40|01010101...|-1... 11B0 1qL0 ...|21e6

name | distinct abbreviations | distinct offsets | one index character per
period | until deltas (minutes, base 60) | population.

Offsets follow the packed convention: minutes *west* of UTC, so local
time = UTC - offset.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple, Union

from .base60 import Number, pack_base60, unpack_base60, unpack_list
from .errors import ZoneDataError

logger = logging.getLogger(__name__)

Instant = Union[int, float, datetime]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS = timedelta(milliseconds=1)


def js_round(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_millis(instant: Instant) -> Number:
    """Epoch milliseconds for a number or datetime (naive means UTC)."""
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return (instant - EPOCH) // MS
    return instant


@dataclass(frozen=True)
class Zone:
    name: str
    abbrs: Tuple[str, ...]
    offsets: Tuple[Number, ...]
    untils: Tuple[Number, ...]
    population: int = 0

    def __post_init__(self):
        if not (len(self.abbrs) == len(self.offsets) == len(self.untils)):
            raise ZoneDataError(
                f"Zone {self.name}: abbrs, offsets and untils differ in length",
                {"zone": self.name},
            )
        if not self.untils:
            raise ZoneDataError(f"Zone {self.name} has no periods", {"zone": self.name})
        if any(a >= b for a, b in zip(self.untils, self.untils[1:])):
            logger.warning("Zone %s: untils are not strictly ascending", self.name)

    @classmethod
    def from_packed(cls, packed: str) -> "Zone":
        return unpack(packed)

    def index(self, instant: Instant) -> Optional[int]:
        """Index of the period containing `instant`, or None past the end."""
        target = to_millis(instant)
        for i, until in enumerate(self.untils):
            if target < until:
                return i
        return None

    def abbr(self, instant: Instant) -> str:
        i = self.index(instant)
        return self.abbrs[-1 if i is None else i]

    def utc_offset(self, instant: Instant) -> Number:
        """Offset in minutes west of UTC in force at the UTC `instant`."""
        i = self.index(instant)
        return self.offsets[-1 if i is None else i]

    def parse(
        self,
        local_timestamp: Number,
        move_ambiguous_forward: bool = False,
        move_invalid_forward: bool = True,
    ) -> Number:
        """Offset for a wall-clock time given as if it were UTC milliseconds.

        Around a transition the wall time may repeat (ambiguous) or not
        exist (invalid). The flags pick the offset on the later side of
        the transition for either case.
        """
        offsets = self.offsets
        untils = self.untils
        last = len(untils) - 1

        for i in range(last):
            offset = offsets[i]
            offset_next = offsets[i + 1]
            offset_prev = offsets[i - 1 if i else i]

            if offset < offset_next and move_ambiguous_forward:
                offset = offset_next
            elif offset > offset_prev and move_invalid_forward:
                offset = offset_prev

            if local_timestamp < untils[i] - offset * 60000:
                return offsets[i]

        return offsets[last]

    def transitions(self) -> List[Tuple[Number, Number, str]]:
        """``(until, offset, abbr)`` for every period."""
        return list(zip(self.untils, self.offsets, self.abbrs))


@dataclass(frozen=True)
class Country:
    code: str
    zones: Tuple[str, ...]

    @property
    def default_zone(self) -> Optional[str]:
        return self.zones[0] if self.zones else None


def _untils_from_deltas(deltas: List[Number], length: int) -> List[Number]:
    untils: List[Number] = []
    previous: Number = 0
    for i in range(length):
        if i == length - 1:
            untils.append(math.inf)
            break
        delta = deltas[i] if i < len(deltas) else 0
        previous = js_round(previous + delta * 60000)
        untils.append(previous)
    return untils


def _population(text: str) -> int:
    if not text:
        return 0
    try:
        return int(float(text))
    except ValueError:
        return 0


def unpack(packed: str) -> Zone:
    """Decode one packed zone record."""
    data = packed.split("|")
    if len(data) < 4:
        raise ZoneDataError(f"Malformed zone record: {packed[:40]!r}", {"record": packed})

    try:
        offsets = unpack_list(data[2])
        indices = [int(i) for i in unpack_list(data[3], separator="")]
        deltas = unpack_list(data[4]) if len(data) > 4 else []
        abbrs = data[1].split(" ")

        return Zone(
            name=data[0],
            abbrs=tuple(abbrs[i] for i in indices),
            offsets=tuple(offsets[i] for i in indices),
            untils=tuple(_untils_from_deltas(deltas, len(indices))),
            population=_population(data[5]) if len(data) > 5 else 0,
        )
    except IndexError as exc:
        raise ZoneDataError(f"Malformed zone record for {data[0]}: {exc}", {"record": packed}) from exc


def _pack_population(population: int) -> str:
    if not population:
        return ""
    if population < 1000:
        return str(population)
    exponent = len(str(int(population))) - 2
    precision = js_round(population / 10 ** exponent)
    return f"{precision}e{exponent}"


def pack(zone: Zone) -> str:
    """Encode `zone` as a packed record (inverse of `unpack`)."""
    seen: Dict[Tuple[str, Number], int] = {}
    abbrs: List[str] = []
    offsets: List[str] = []
    indices: List[str] = []

    for abbr, offset in zip(zone.abbrs, zone.offsets):
        key = (abbr, offset)
        if key not in seen:
            seen[key] = len(abbrs)
            abbrs.append(abbr)
            offsets.append(pack_base60(js_round(offset * 60) / 60, 1))
        indices.append(pack_base60(seen[key], 0))

    deltas: List[str] = []
    last: Number = 0
    for until in zone.untils[:-1]:
        deltas.append(pack_base60(js_round((until - last) / 1000) / 60, 1))
        last = until

    fields = [zone.name, " ".join(abbrs), " ".join(offsets), "".join(indices), " ".join(deltas)]
    population = _pack_population(zone.population)
    if population:
        fields.append(population)
    return "|".join(fields)
