from __future__ import annotations

import json

import pytest

from zonetime import UnknownZoneError, ZoneDataError, ZoneRegistry
from zonetime import registry as registry_module


def test_alias_resolves_to_the_cached_canonical_zone(registry):
    alias = registry.resolve_zone_name("Test/Alias")
    assert alias.name == "Test/Zone"
    assert registry.get_zone("Test/Alias") is alias
    assert registry.get_zone("Test/Zone") is alias


def test_names_are_matched_case_insensitively(registry):
    assert registry.get_zone("TEST_ZONE") is registry.get_zone("test/zone")
    assert "test/alias" in registry


def test_unknown_zone(registry):
    assert registry.get_zone("Nowhere/Land") is None
    with pytest.raises(UnknownZoneError):
        registry.offset_for("Nowhere/Land", 0)
    with pytest.raises(LookupError):
        registry.zone("Nowhere/Land")


def test_offset_for(registry):
    assert registry.offset_for("Test/Zone", 59999) == 60
    assert registry.offset_for("Test/Alias", 60000) == 120
    assert registry.offset_for("Test/Other", 0) == 0


def test_local_offset_uses_registry_flags(registry):
    assert registry.local_offset("Test/Other", 0) == 0


def test_names(registry):
    assert registry.names() == ["Test/Alias", "Test/Other", "Test/Zone"]


def test_countries(registry):
    assert registry.country_codes() == ["TT"]
    assert registry.zones_for_country("tt") == ["Test/Zone", "Test/Other"]
    assert registry.zones_for_country("TT", with_offset=True, now=0) == [
        {"name": "Test/Zone", "offset": 60},
        {"name": "Test/Other", "offset": 0},
    ]
    assert registry.zones_for_country("ZZ") is None
    assert registry.countries_for_zone("Test/Alias") == ["TT"]
    assert registry.countries_for_zone("Nowhere/Land") == []


def test_country_mapping(registry):
    registry.add_countries({"xx": ["Test/Other"]})
    assert registry.zones_for_country("XX") == ["Test/Other"]


def test_malformed_link():
    with pytest.raises(ZoneDataError):
        ZoneRegistry().add_links(["Only/One"])


def test_unpack_all(registry):
    assert registry.unpack_all() == 2


def test_guess_from_offsets_prefers_population(registry, zone_records):
    assert registry.guess_from_offsets([(0, 60)]) == "Test/Zone"
    assert registry.guess_from_offsets([(0, 0)]) == "Test/Other"

    registry.add_zones(zone_records["big"])
    assert registry.guess_from_offsets([(0, 0)]) == "Test/Big"
    assert registry.guess_from_offsets([(0, 999)]) is None


def test_guess_uses_host_zone_name(registry, monkeypatch):
    monkeypatch.setattr(registry_module.tzlocal, "get_localzone_name", lambda: "Test/Alias")
    assert registry.guess() == "Test/Zone"

    monkeypatch.setattr(registry_module.tzlocal, "get_localzone_name", lambda: "Test/Other")
    assert registry.guess() == "Test/Zone"
    assert registry.guess(ignore_cache=True) == "Test/Other"


def test_guess_falls_back_to_offsets(registry, monkeypatch):
    monkeypatch.setattr(registry_module.tzlocal, "get_localzone_name", lambda: "Unknown/Zone")
    monkeypatch.setattr(registry_module, "host_offset_samples", lambda: [(0, 0), (10 ** 12, 0)])
    assert registry.guess() == "Test/Other"


def test_load_file(tmp_path, zone_records):
    data_file = tmp_path / "zones.json"
    data_file.write_text(
        json.dumps(
            {
                "version": "2024a",
                "zones": [zone_records["test"], zone_records["other"]],
                "links": ["Test/Zone|Test/Alias"],
                "countries": ["TT|Test/Zone"],
            }
        ),
        encoding="utf-8",
    )

    registry = ZoneRegistry.from_settings({"zone_data_path": str(data_file), "move_invalid_forward": False})
    assert registry.data_version == "2024a"
    assert registry.move_invalid_forward is False
    assert registry.get_zone("Test/Alias").name == "Test/Zone"
    assert registry.zones_for_country("TT") == ["Test/Zone"]


def test_load_file_errors(tmp_path):
    with pytest.raises(ZoneDataError):
        ZoneRegistry().load_file(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ZoneDataError):
        ZoneRegistry().load_file(bad)
