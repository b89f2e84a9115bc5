from __future__ import annotations

from datetime import datetime

import pytest

from localization import TranslationContext
from zonetime import ZoneRegistry
from zonetime.pytz_source import zone_from_pytz

# Offsets 60/120/60/120 minutes west, switching every minute from the epoch.
TEST_ZONE = "Test/Zone|AAA BBB|10 20|0101|1 1 1|1e3"
OTHER_ZONE = "Test/Other|CCC|0|0||5e3"
BIG_ZONE = "Test/Big|DDD|0|0||1e6"

TRANSLATIONS = {
    "en": {
        "js": {
            "topic": {
                "title": "Topic",
                "count": {"one": "%{count} topic", "other": "%{count} topics"},
                "greeting": "Hello {{name}}",
            },
            "only_en": "English only",
            "number": {
                "format": {
                    "delimiter": ",",
                    "precision": 2,
                    "separator": ".",
                    "strip_insignificant_zeros": False,
                },
                "human": {
                    "storage_units": {
                        "format": "%n %u",
                        "units": {
                            "byte": {"one": "Byte", "other": "Bytes"},
                            "kb": "KB",
                            "mb": "MB",
                            "gb": "GB",
                            "tb": "TB",
                        },
                    }
                },
            },
            "unread_MF": "There {UNREAD, plural, =0 {are no unread} one {is 1 unread} other {are # unread}} topics",
        }
    },
    "gl": {
        "js": {
            "topic": {
                "title": "Tema",
                "count": {"one": "%{count} tema", "other": "%{count} temas"},
            },
            "days": {"one": "%{count} día", "other": "%{count} días"},
            "unread_MF": "{UNREAD, plural, one {Hai # tema sen ler} other {Hai # temas sen ler}}",
        }
    },
}


@pytest.fixture
def translations():
    return TRANSLATIONS


@pytest.fixture
def context():
    return TranslationContext(TRANSLATIONS, locale="gl")


@pytest.fixture
def english_context():
    return TranslationContext(TRANSLATIONS, locale="en")


@pytest.fixture
def registry():
    registry = ZoneRegistry()
    registry.add_zones([TEST_ZONE, OTHER_ZONE])
    registry.add_links(["Test/Zone|Test/Alias"])
    registry.add_countries(["TT|Test/Zone Test/Other"])
    return registry


@pytest.fixture(scope="session")
def new_york():
    return zone_from_pytz("America/New_York")


@pytest.fixture
def march_4th():
    """Thursday 2021-03-04 05:06:07.890 UTC."""
    return datetime(2021, 3, 4, 5, 6, 7, 890000)


@pytest.fixture
def test_zone_record():
    return TEST_ZONE


@pytest.fixture
def zone_records():
    return {"test": TEST_ZONE, "other": OTHER_ZONE, "big": BIG_ZONE}
