from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from zonetime import Zone, ZoneDataError, pack, unpack


def test_unpack_expands_the_index_string(test_zone_record):
    zone = unpack(test_zone_record)
    assert zone.name == "Test/Zone"
    assert zone.abbrs == ("AAA", "BBB", "AAA", "BBB")
    assert zone.offsets == (60, 120, 60, 120)
    assert zone.untils == (60000, 120000, 180000, math.inf)
    assert zone.population == 1000


def test_offset_boundaries_are_exclusive(test_zone_record):
    zone = unpack(test_zone_record)
    assert zone.utc_offset(59999) == 60
    assert zone.utc_offset(60000) == 120
    assert zone.utc_offset(10 ** 15) == 120
    assert zone.abbr(60000) == "BBB"
    assert zone.index(0) == 0
    assert zone.index(180000) == 3


def test_aware_datetimes_are_accepted(test_zone_record):
    zone = unpack(test_zone_record)
    assert zone.utc_offset(datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)) == 120


DAY = 86400000


def test_parse_picks_the_later_offset_for_skipped_times():
    # Offsets fall 300 -> 240 one day in (clocks go forward an hour)
    zone = Zone("Test/Dst", ("D", "S", "D"), (240, 300, 240), (0, DAY, math.inf))
    skipped = DAY - 270 * 60000
    assert zone.parse(skipped) == 300
    assert zone.parse(skipped, move_invalid_forward=False) == 240


def test_parse_repeated_times():
    # Offsets rise 240 -> 300 one day in (clocks go back an hour)
    zone = Zone("Test/Dst", ("S", "D", "S"), (300, 240, 300), (0, DAY, math.inf))
    repeated = DAY - 270 * 60000
    assert zone.parse(repeated) == 240
    assert zone.parse(repeated, move_ambiguous_forward=True) == 300


def test_mismatched_lengths_are_rejected():
    with pytest.raises(ZoneDataError):
        Zone("Bad/Zone", ("A",), (0, 60), (math.inf,))


def test_malformed_records_are_rejected():
    with pytest.raises(ZoneDataError):
        unpack("Bad/Zone|A")
    with pytest.raises(ZoneDataError):
        unpack("Bad/Zone|A|0|01|1")


def test_pack_is_the_inverse_of_unpack(test_zone_record):
    zone = unpack(test_zone_record)
    assert pack(zone).startswith("Test/Zone|AAA BBB|10 20|0101|1 1 1|")
    assert unpack(pack(zone)) == zone


def test_transitions(test_zone_record):
    zone = unpack(test_zone_record)
    assert zone.transitions()[0] == (60000, 60, "AAA")
