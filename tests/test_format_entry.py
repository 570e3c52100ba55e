"""Tests for csdbchart.format_entry."""

from datetime import datetime, timezone

import pytest

from csdbchart.format_entry import (
    UNKNOWN_DATE,
    format_entries,
    format_entry,
    parse_rating,
    parse_votes,
    release_date,
)
from csdbchart.models import (
    RawAchievement,
    RawEntry,
    RawEvent,
    RawGroup,
    RawRelease,
)
from csdbchart.parse_chart import parse_chart_page


def _make_entry(rating: str = "8.5", votes: str = "42", **release_overrides) -> RawEntry:
    defaults = dict(
        id="72550",
        name="Edge of Disgrace",
        release_day="4",
        release_month="8",
        release_year="2008",
    )
    defaults.update(release_overrides)
    return RawEntry(place="1", rating=rating, votes=votes, release=RawRelease(**defaults))


class TestReleaseDate:
    def test_unpadded_display(self) -> None:
        text, _ = release_date(RawRelease(release_day="4", release_month="8", release_year="2008"))
        assert text == "4/8/2008"

    def test_text_kept_as_given(self) -> None:
        text, _ = release_date(RawRelease(release_day="04", release_month="08", release_year="2008"))
        assert text == "04/08/2008"

    def test_sort_value_is_epoch_ms(self) -> None:
        _, sort_value = release_date(RawRelease(release_day="1", release_month="1", release_year="2000"))
        assert sort_value == 946684800000

    def test_sort_value_uses_given_month(self) -> None:
        _, sort_value = release_date(RawRelease(release_day="4", release_month="8", release_year="2008"))
        expected = int(datetime(2008, 8, 4, tzinfo=timezone.utc).timestamp()) * 1000
        assert sort_value == expected

    def test_sort_values_order_by_date(self) -> None:
        _, earlier = release_date(RawRelease(release_day="31", release_month="12", release_year="1989"))
        _, later = release_date(RawRelease(release_day="1", release_month="1", release_year="1990"))
        assert earlier < later

    @pytest.mark.parametrize(
        "day,month,year",
        [("", "8", "2008"), ("4", "", "2008"), ("4", "8", ""), ("", "", "")],
    )
    def test_missing_part_is_unknown(self, day: str, month: str, year: str) -> None:
        release = RawRelease(release_day=day, release_month=month, release_year=year)
        assert release_date(release) == (UNKNOWN_DATE, 0)

    def test_invalid_calendar_date_is_unknown(self) -> None:
        release = RawRelease(release_day="31", release_month="2", release_year="1990")
        assert release_date(release) == ("Unknown", 0)

    def test_non_numeric_part_is_unknown(self) -> None:
        release = RawRelease(release_day="x", release_month="2", release_year="1990")
        assert release_date(release) == ("Unknown", 0)

    def test_oversized_year_is_unknown(self) -> None:
        release = RawRelease(release_day="1", release_month="1", release_year="99999999999999999999")
        assert release_date(release) == ("Unknown", 0)

    def test_year_past_int_conversion_limit_is_unknown(self) -> None:
        release = RawRelease(release_day="1", release_month="1", release_year="9" * 5000)
        assert release_date(release) == ("Unknown", 0)


class TestNumericFields:
    @pytest.mark.parametrize(
        "text,expected",
        [("8.5", 8.5), ("10", 10.0), ("", 0.0), ("abc", 0.0), ("9.7 ", 9.7), ("7.25x", 7.25)],
    )
    def test_parse_rating(self, text: str, expected: float) -> None:
        assert parse_rating(text) == expected

    def test_overflowing_rating_defaults_to_zero(self) -> None:
        assert parse_rating("1e999") == 0.0

    def test_negative_rating_defaults_to_zero(self) -> None:
        assert parse_rating("-1") == 0.0

    def test_negative_votes_default_to_zero(self) -> None:
        assert parse_votes("-5") == 0

    def test_votes_past_int_conversion_limit_default_to_zero(self) -> None:
        assert parse_votes("9" * 5000) == 0

    @pytest.mark.parametrize(
        "text,expected",
        [("412", 412), ("", 0), ("n/a", 0), ("12.9", 12), (" 7", 7)],
    )
    def test_parse_votes(self, text: str, expected: int) -> None:
        assert parse_votes(text) == expected


class TestFormatEntry:
    def test_basic_fields(self) -> None:
        record = format_entry(_make_entry())
        assert record.id == "72550"
        assert record.name == "Edge of Disgrace"
        assert record.place == "1"
        assert record.release_date == "4/8/2008"
        assert record.rating == 8.5
        assert record.votes == 42
        assert record.csdb_url == "https://csdb.dk/release/?id=72550"

    def test_optionals_absent(self) -> None:
        record = format_entry(_make_entry())
        assert record.screenshot is None
        assert record.achievement is None
        assert record.event is None

    def test_achievement_text(self) -> None:
        entry = _make_entry(achievement=RawAchievement(place="2", compo="C64 Demo"))
        assert format_entry(entry).achievement == "2. place at C64 Demo"

    def test_event_name(self) -> None:
        entry = _make_entry(event=RawEvent(name="X'2008"))
        assert format_entry(entry).event == "X'2008"

    def test_group_not_shown(self) -> None:
        entry = _make_entry(group=RawGroup(id="1416", name="Booze Design"))
        record = format_entry(entry)
        assert "Booze Design" not in (record.name, record.event, record.achievement)

    def test_screenshot(self) -> None:
        entry = _make_entry(screenshot="https://csdb.dk/gfx/1.png")
        assert format_entry(entry).screenshot == "https://csdb.dk/gfx/1.png"

    def test_unparsable_numbers_default_to_zero(self) -> None:
        record = format_entry(_make_entry(rating="", votes="lots"))
        assert record.rating == 0
        assert record.votes == 0

    def test_from_fixture(self, chart_sample_xml: bytes) -> None:
        records = format_entries(parse_chart_page(chart_sample_xml))
        assert len(records) == 3
        first, second, third = records
        assert first.event == "Breakpoint 2008"
        assert first.achievement == "1. place at C64 Demo"
        assert first.rating == 9.7
        assert second.release_date == "Unknown"
        assert second.release_date_sort_value == 0
        assert third.release_date == "31/12/1989"
        assert third.rating == 0
        assert third.votes == 0
