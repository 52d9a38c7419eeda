"""Date cleanup and the bridge to the date-range parser."""
from __future__ import annotations

import logging
from typing import List, Sequence

from .models import DateRange, DateRangeParser, TaggedSpan

DATE_COMPONENT_TYPES = frozenset({"date", "ordinalDate", "ordinalDateReverse"})
TIME_TYPES = frozenset({"exactTime", "timeRange"})

_log = logging.getLogger("agendador.extraction.dates")


def clean_junk_dates(dates: Sequence[TaggedSpan]) -> List[TaggedSpan]:
    """Drop redundant date fragments before they reach the parser.

    When more than one date component was tagged only the first survives,
    together with the time fragments. Likewise only the first time survives
    when several were tagged. Order is preserved.
    """

    components = [span for span in dates if span.type in DATE_COMPONENT_TYPES]
    times = [span for span in dates if span.type in TIME_TYPES]

    cleaned = list(dates)
    if len(components) > 1:
        cleaned = [span for span in cleaned if span is components[0] or span in times]
    if len(times) > 1:
        cleaned = [span for span in cleaned if span is times[0] or span.type not in TIME_TYPES]
    return cleaned


def parse_dates(dates: Sequence[TaggedSpan], parser: DateRangeParser) -> DateRange | None:
    """Join the fragments with spaces and let ``parser`` build the range."""

    text = " ".join(span.value for span in dates)
    date_range = parser.get_dates(parser.parse(text))
    if date_range is None:
        _log.debug("Fragmentos de data sem intervalo: %r", text)
    return date_range


__all__ = ["DATE_COMPONENT_TYPES", "TIME_TYPES", "clean_junk_dates", "parse_dates"]
