from datetime import datetime

import pytest

from agendador.extraction.dates import clean_junk_dates, parse_dates
from agendador.extraction.models import DateRange, ParsedResult, TaggedSpan


class FakeDateParser:
    def __init__(self, result: DateRange | None):
        self._result = result
        self.texts: list[str] = []

    def parse(self, text: str):
        self.texts.append(text)
        if self._result is None:
            return []
        return [ParsedResult(text=text, start=self._result.start, end=self._result.end)]

    def get_dates(self, parsed):
        if not parsed:
            return None
        return DateRange(start=parsed[0].start, end=parsed[0].end)


def test_single_component_and_time_are_kept():
    dates = [TaggedSpan("on march 3rd", 24, "date"), TaggedSpan("at 2pm", 37, "exactTime")]

    assert clean_junk_dates(dates) == dates


def test_extra_date_components_are_dropped():
    dates = [
        TaggedSpan("on may", 10, "date"),
        TaggedSpan("at 9", 17, "exactTime"),
        TaggedSpan("12th of may", 25, "ordinalDate"),
        TaggedSpan("for an hour", 40, "duration"),
    ]

    assert clean_junk_dates(dates) == [dates[0], dates[1]]


def test_extra_times_are_dropped():
    dates = [
        TaggedSpan("at 9", 5, "exactTime"),
        TaggedSpan("on friday", 10, "date"),
        TaggedSpan("10 - 12", 25, "timeRange"),
    ]

    assert clean_junk_dates(dates) == [dates[0], dates[1]]


def test_cleanup_is_deterministic_with_duplicated_values():
    first = TaggedSpan("at 9", 5, "exactTime")
    second = TaggedSpan("at 9", 5, "exactTime")
    date = TaggedSpan("on friday", 10, "date")

    cleaned = clean_junk_dates([first, date, second])

    assert len(cleaned) == 2
    assert cleaned[0] is first
    assert cleaned[1] is date


_DATE = TaggedSpan("on friday", 10, "date")
_ORDINAL_DATE = TaggedSpan("12th of may", 25, "ordinalDate")
_EXACT_TIME = TaggedSpan("at 9", 5, "exactTime")
_TIME_RANGE = TaggedSpan("10 - 12", 40, "timeRange")


@pytest.mark.parametrize(
    ("dates", "expected"),
    [
        ([_EXACT_TIME, _DATE, _ORDINAL_DATE, _TIME_RANGE], [_EXACT_TIME, _DATE]),
        ([_ORDINAL_DATE, _EXACT_TIME, _DATE, _TIME_RANGE], [_ORDINAL_DATE, _EXACT_TIME]),
        ([_TIME_RANGE, _ORDINAL_DATE, _EXACT_TIME, _DATE], [_TIME_RANGE, _ORDINAL_DATE]),
    ],
)
def test_cleanup_keeps_first_component_and_first_time_in_scan_order(dates, expected):
    cleaned = clean_junk_dates(dates)

    assert cleaned == expected
    assert all(kept is wanted for kept, wanted in zip(cleaned, expected))


def test_parse_dates_joins_fragments_with_spaces():
    expected = DateRange(datetime(2026, 3, 3, 14), datetime(2026, 3, 3, 15))
    parser = FakeDateParser(expected)
    dates = [TaggedSpan("on march 3rd", 24, "date"), TaggedSpan("at 2pm", 37, "exactTime")]

    assert parse_dates(dates, parser) == expected
    assert parser.texts == ["on march 3rd at 2pm"]


def test_parse_dates_returns_none_without_range():
    parser = FakeDateParser(None)

    assert parse_dates([TaggedSpan("on someday", 0, "date")], parser) is None
