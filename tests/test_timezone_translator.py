from __future__ import annotations

from datetime import datetime

import pytz

from zonetime import Moment, TimezoneTranslator


def test_standard_and_daylight_names():
    translator = TimezoneTranslator("en")
    assert translator.get_display_name("America/New_York", datetime(2021, 1, 15, 12)) == "Eastern Standard Time"
    assert translator.get_display_name("America/New_York", datetime(2021, 7, 15, 12)) == "Eastern Daylight Time"


def test_aware_datetimes_are_converted():
    translator = TimezoneTranslator("en")
    summer_utc = datetime(2021, 7, 15, 16, tzinfo=pytz.utc)
    assert translator.get_display_name("America/New_York", summer_utc) == "Eastern Daylight Time"


def test_moments_and_epoch_milliseconds(new_york):
    translator = TimezoneTranslator("en")
    summer = Moment.from_local(2021, 7, 15, 12, zone=new_york)
    assert translator.get_display_name("America/New_York", summer) == "Eastern Daylight Time"
    assert translator.get_display_name("America/New_York", summer.value_of()) == "Eastern Daylight Time"
    assert translator.describe(summer) == "Eastern Daylight Time"
    assert translator.describe(summer.utc()) is None


def test_display_names_for_several_zones():
    names = TimezoneTranslator("en").get_display_names(["America/New_York", "America/Chicago"], datetime(2021, 1, 15))
    assert names == {
        "America/New_York": "Eastern Standard Time",
        "America/Chicago": "Central Standard Time",
    }


def test_other_locales_return_text():
    name = TimezoneTranslator("gl").get_display_name("Europe/Madrid", datetime(2021, 1, 15))
    assert isinstance(name, str) and name
