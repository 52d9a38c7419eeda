"""Projections of tagged spans into the categories used by the heuristics."""
from __future__ import annotations

from typing import Iterable, List

from .models import TaggedSpan

DATE_TYPES = frozenset(
    {"date", "ordinalDate", "ordinalDateReverse", "timeRange", "exactTime", "duration"}
)


def _of_types(spans: Iterable[TaggedSpan], types: Iterable[str]) -> List[TaggedSpan]:
    wanted = frozenset(types)
    return [span for span in spans if span.type in wanted]


def filter_dates(spans: Iterable[TaggedSpan]) -> List[TaggedSpan]:
    """Date and time fragments, in tagger order."""

    return _of_types(spans, DATE_TYPES)


def filter_proper_names(spans: Iterable[TaggedSpan]) -> List[TaggedSpan]:
    return _of_types(spans, ("properName",))


def filter_event_nouns(spans: Iterable[TaggedSpan]) -> List[TaggedSpan]:
    return _of_types(spans, ("eventNoun",))


def filter_intentional_verbs(spans: Iterable[TaggedSpan]) -> List[TaggedSpan]:
    return _of_types(spans, ("intentionalVerb",))


def filter_purposes(spans: Iterable[TaggedSpan]) -> List[TaggedSpan]:
    return _of_types(spans, ("purpose",))


__all__ = [
    "DATE_TYPES",
    "filter_dates",
    "filter_event_nouns",
    "filter_intentional_verbs",
    "filter_proper_names",
    "filter_purposes",
]
