"""Zone registry: packed records, links, countries and the unpack cache.

Raw packed records are kept as loaded; a record is unpacked the first
time its zone is asked for and the `Zone` is cached from then on (or all
at once with `unpack_all`). Names are matched case-insensitively with
``/`` and ``_`` treated alike.
"""

from __future__ import annotations

import calendar
import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import tzlocal

import settings_store

from .errors import UnknownZoneError, ZoneDataError
from .zone import Country, Instant, Zone, to_millis, unpack

logger = logging.getLogger(__name__)

Records = Union[str, Iterable[str]]


def normalize_name(name: Optional[str]) -> str:
    return (name or "").lower().replace("/", "_")


def _records(data: Records) -> List[str]:
    if isinstance(data, str):
        return [data]
    return list(data)


def host_offset_samples(now: Optional[float] = None, years: int = 5) -> List[Tuple[int, float]]:
    """``(epoch_ms, minutes_west)`` of the host clock in Jan/Jul of recent years."""
    now = time.time() if now is None else now
    this_year = time.gmtime(now).tm_year
    samples = []
    for year in range(this_year - years, this_year + 1):
        for month in (1, 7):
            ts = calendar.timegm((year, month, 1, 12, 0, 0))
            samples.append((ts * 1000, -time.localtime(ts).tm_gmtoff / 60))
    return samples


class ZoneRegistry:
    """Holds the zone database and resolves names to `Zone` objects."""

    def __init__(self, move_ambiguous_forward: bool = False, move_invalid_forward: bool = True):
        self.move_ambiguous_forward = move_ambiguous_forward
        self.move_invalid_forward = move_invalid_forward
        self.data_version: Optional[str] = None

        self._records: Dict[str, str] = {}
        self._cache: Dict[str, Zone] = {}
        self._links: Dict[str, str] = {}
        self._names: Dict[str, str] = {}
        self._countries: Dict[str, Country] = {}
        self._guess: Optional[str] = None
        self._lock = threading.RLock()

    # ----------------------------------------------------------------------
    # Construction
    # ----------------------------------------------------------------------
    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]] = None) -> "ZoneRegistry":
        values = dict(settings_store.DEFAULTS)
        values.update(settings if settings is not None else settings_store.load_settings())

        registry = cls(
            move_ambiguous_forward=bool(values.get("move_ambiguous_forward")),
            move_invalid_forward=bool(values.get("move_invalid_forward")),
        )
        if values.get("zone_data_path"):
            registry.load_file(values["zone_data_path"])
        return registry

    @classmethod
    def from_pytz(cls, names: Optional[Iterable[str]] = None, **kwargs: Any) -> "ZoneRegistry":
        """Registry filled from pytz (all common zones unless `names` given)."""
        from .pytz_source import packed_countries, packed_zones

        registry = cls(**kwargs)
        records = packed_zones(names)
        registry.add_zones(records)

        # Countries only list the zones that were loaded
        loaded = {record.split("|", 1)[0] for record in records}
        countries = {}
        for record in packed_countries():
            code, _, listed = record.partition("|")
            kept = [name for name in listed.split(" ") if name in loaded]
            if kept:
                countries[code] = kept
        registry.add_countries(countries)
        return registry

    def add_zones(self, packed: Records) -> None:
        with self._lock:
            for record in _records(packed):
                name = record.split("|", 1)[0]
                key = normalize_name(name)
                self._records[key] = record
                self._names[key] = name
                self._cache.pop(key, None)

    def add_links(self, aliases: Records) -> None:
        """Add ``Canonical|Alias`` pairs; links resolve in both directions."""
        with self._lock:
            for pair in _records(aliases):
                parts = pair.split("|")
                if len(parts) != 2:
                    raise ZoneDataError(f"Malformed link {pair!r}", {"link": pair})
                first, second = normalize_name(parts[0]), normalize_name(parts[1])
                self._links[first] = second
                self._names[first] = parts[0]
                self._links[second] = first
                self._names[second] = parts[1]

    def add_countries(self, data: Union[Records, Mapping[str, Iterable[str]]]) -> None:
        with self._lock:
            if isinstance(data, Mapping):
                items = [(code, list(zones)) for code, zones in data.items()]
            else:
                items = []
                for record in _records(data):
                    code, _, zones = record.partition("|")
                    items.append((code, zones.split(" ") if zones else []))
            for code, zones in items:
                self._countries[code.upper()] = Country(code.upper(), tuple(zones))

    def load(self, data: Mapping[str, Any]) -> None:
        """Load ``{"version", "zones", "links", "countries"}``."""
        self.add_zones(data.get("zones", []))
        self.add_links(data.get("links", []))
        self.add_countries(data.get("countries", []))
        self.data_version = data.get("version")

    def load_file(self, path: Union[str, Path]) -> None:
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load zone data from {path}: {e}")
            raise ZoneDataError(f"Cannot read zone data from {path}", {"path": str(path)}) from e

        if not isinstance(data, dict):
            raise ZoneDataError(f"Zone data in {path} is not an object", {"path": str(path)})
        self.load(data)

    def unpack_all(self) -> int:
        """Unpack and cache every record now; returns how many are cached."""
        with self._lock:
            for key in self._records:
                self._zone_for_key(key)
            return len(self._cache)

    # ----------------------------------------------------------------------
    # Resolution
    # ----------------------------------------------------------------------
    def _zone_for_key(self, key: str) -> Optional[Zone]:
        zone = self._cache.get(key)
        if zone is not None:
            return zone
        record = self._records.get(key)
        if record is None:
            return None
        zone = unpack(record)
        self._cache[key] = zone
        return zone

    def get_zone(self, name: Optional[str]) -> Optional[Zone]:
        """Resolve `name` (or one link hop from it) to a cached `Zone`."""
        key = normalize_name(name)
        with self._lock:
            zone = self._zone_for_key(key)
            if zone is None and key in self._links:
                zone = self._zone_for_key(self._links[key])
            return zone

    resolve_zone_name = get_zone

    def zone(self, name: str) -> Zone:
        """Like `get_zone` but unknown names raise `UnknownZoneError`."""
        zone = self.get_zone(name)
        if zone is None:
            raise UnknownZoneError(name)
        return zone

    def __contains__(self, name: str) -> bool:
        return self.get_zone(name) is not None

    def offset_for(self, name: str, instant: Instant) -> float:
        """Minutes west of UTC in zone `name` at the UTC `instant`."""
        return self.zone(name).utc_offset(instant)

    def local_offset(self, name: str, local_timestamp: float) -> float:
        """Offset for a wall-clock time in `name`, using this registry's flags."""
        return self.zone(name).parse(
            local_timestamp,
            move_ambiguous_forward=self.move_ambiguous_forward,
            move_invalid_forward=self.move_invalid_forward,
        )

    def names(self) -> List[str]:
        """Display names of every zone and link, sorted."""
        with self._lock:
            keys = set(self._records) | set(self._links)
            return sorted(self._names[key] for key in keys if key in self._names)

    # ----------------------------------------------------------------------
    # Countries
    # ----------------------------------------------------------------------
    def country_codes(self) -> List[str]:
        return sorted(self._countries)

    def zones_for_country(
        self,
        code: str,
        with_offset: bool = False,
        now: Optional[Instant] = None,
    ) -> Optional[List[Any]]:
        country = self._countries.get((code or "").upper())
        if country is None:
            return None
        if not with_offset:
            return list(country.zones)

        instant = to_millis(now) if now is not None else time.time() * 1000
        return [
            {"name": name, "offset": self.zone(name).utc_offset(instant)}
            for name in country.zones
        ]

    def countries_for_zone(self, name: str) -> List[str]:
        zone = self.get_zone(name)
        wanted = {name, zone.name} if zone is not None else {name}
        return sorted(
            code for code, country in self._countries.items()
            if wanted.intersection(country.zones)
        )

    # ----------------------------------------------------------------------
    # Host zone guess
    # ----------------------------------------------------------------------
    def guess(self, ignore_cache: bool = False) -> Optional[str]:
        """Best guess at the host's zone name."""
        if self._guess is None or ignore_cache:
            self._guess = self._rebuild_guess()
        return self._guess

    def _rebuild_guess(self) -> Optional[str]:
        try:
            host_name = tzlocal.get_localzone_name()
        except (LookupError, ValueError, OSError) as e:
            logger.warning("Could not determine host time zone: %s", e)
            host_name = None

        if host_name:
            zone = self.get_zone(host_name)
            if zone is not None:
                return zone.name
            logger.debug("Host zone %s is not loaded; guessing from offsets", host_name)

        return self.guess_from_offsets(host_offset_samples())

    def guess_from_offsets(self, samples: Iterable[Tuple[float, float]]) -> Optional[str]:
        """Most populous zone matching every ``(epoch_ms, minutes_west)`` sample."""
        samples = list(samples)
        best: Optional[Zone] = None
        with self._lock:
            for key in self._records:
                zone = self._zone_for_key(key)
                if all(zone.utc_offset(ms) == offset for ms, offset in samples):
                    if best is None or zone.population > best.population:
                        best = zone

        if best is None:
            logger.warning("No loaded zone matches the host's UTC offsets")
            return None
        return best.name


_default_registry: Optional[ZoneRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> ZoneRegistry:
    """Shared registry built from the settings file, or from pytz if it names no data file."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            registry = ZoneRegistry.from_settings()
            if not registry.names():
                registry = ZoneRegistry.from_pytz(
                    move_ambiguous_forward=registry.move_ambiguous_forward,
                    move_invalid_forward=registry.move_invalid_forward,
                )
            _default_registry = registry
        return _default_registry


def set_default_registry(registry: Optional[ZoneRegistry]) -> None:
    global _default_registry
    with _default_lock:
        _default_registry = registry
