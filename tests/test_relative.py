from __future__ import annotations

from datetime import datetime

import pytest

from zonetime import Moment, humanize, relative_time_threshold

SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR


@pytest.mark.parametrize(
    "duration, expected",
    [
        (30 * SECOND, "a few seconds"),
        (44 * SECOND, "a few seconds"),
        (45 * SECOND, "a minute"),
        (90 * SECOND, "2 minutes"),
        (44 * MINUTE, "44 minutes"),
        (45 * MINUTE, "an hour"),
        (21 * HOUR, "21 hours"),
        (22 * HOUR, "a day"),
        (25 * DAY, "25 days"),
        (26 * DAY, "a month"),
        (46 * DAY, "2 months"),
        (320 * DAY, "a year"),
        (800 * DAY, "2 years"),
    ],
)
def test_thresholds(duration, expected):
    assert humanize(duration) == expected
    assert humanize(-duration) == expected


def test_suffixes():
    assert humanize(5 * MINUTE, "en", with_suffix=True) == "in 5 minutes"
    assert humanize(-5 * MINUTE, "en", with_suffix=True) == "5 minutes ago"


def test_galician():
    assert humanize(5 * MINUTE, "gl", with_suffix=True) == "en 5 minutos"
    assert humanize(MINUTE, "gl", with_suffix=True) == "nun minuto"
    assert humanize(-MINUTE, "gl", with_suffix=True) == "hai un minuto"


def test_threshold_can_be_changed():
    assert relative_time_threshold("m") == 45
    assert relative_time_threshold("bogus") is False
    try:
        assert relative_time_threshold("m", 60) is True
        assert humanize(50 * MINUTE) == "50 minutes"
    finally:
        relative_time_threshold("m", 45)


def test_moment_from_and_to():
    nine = Moment.of(datetime(2021, 3, 4, 9))
    ten = Moment.of(datetime(2021, 3, 4, 10))
    assert ten.from_(nine) == "in an hour"
    assert nine.from_(ten) == "an hour ago"
    assert nine.from_(ten, without_suffix=True) == "an hour"
    assert nine.to(ten) == "in an hour"
    assert nine.from_now(now=ten) == "an hour ago"
    assert nine.locale("gl").to_now(now=ten) == "nunha hora"


class TestCalendar:
    reference = Moment.of(datetime(2021, 3, 4, 12))

    @pytest.mark.parametrize(
        "when, expected",
        [
            (datetime(2021, 3, 4, 15, 30), "Today at 3:30 PM"),
            (datetime(2021, 3, 5, 9), "Tomorrow at 9:00 AM"),
            (datetime(2021, 3, 3, 9), "Yesterday at 9:00 AM"),
            (datetime(2021, 3, 8, 9), "Monday at 9:00 AM"),
            (datetime(2021, 3, 1, 9), "Last Monday at 9:00 AM"),
            (datetime(2021, 2, 20, 9), "02/20/2021"),
            (datetime(2021, 3, 11, 9), "03/11/2021"),
        ],
    )
    def test_english(self, when, expected):
        assert Moment.of(when).calendar(self.reference) == expected

    def test_galician_article_follows_the_hour(self):
        assert Moment.of(datetime(2021, 3, 4, 15, 30), locale="gl").calendar(self.reference) == "hoxe ás 15:30"
        assert Moment.of(datetime(2021, 3, 4, 1), locale="gl").calendar(self.reference) == "hoxe á 1:00"
        assert Moment.of(datetime(2021, 3, 3, 9), locale="gl").calendar(self.reference) == "onte á 9:00"

    def test_custom_formats(self):
        moment = Moment.of(datetime(2021, 3, 4, 15, 30))
        assert moment.calendar(self.reference, {"sameDay": "[Now-ish] HH:mm"}) == "Now-ish 15:30"

    def test_calendar_uses_the_moment_zone(self, new_york):
        # 02:00 UTC on the 5th is still the 4th in New York
        late = Moment.of(datetime(2021, 3, 5, 2), zone=new_york)
        assert late.calendar(self.reference) == "Today at 9:00 PM"


def test_own_threshold_table_leaves_the_shared_one_alone():
    from zonetime.relative import THRESHOLDS

    mine = dict(THRESHOLDS)
    assert relative_time_threshold("h", 30, thresholds=mine) is True
    assert humanize(25 * HOUR, thresholds=mine) == "25 hours"
    assert humanize(25 * HOUR) == "a day"
    assert relative_time_threshold("h") == 22
