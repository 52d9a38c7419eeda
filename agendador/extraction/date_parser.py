"""Natural-language date ranges built on ``dateutil``.

The parser receives the date and time fragments selected by the extraction
engine ("on march 3rd at 2pm", "the 3rd of may from 10 to 12") and turns them
into a :class:`DateRange`. Times and durations are recognised with regular
expressions; whatever is left is handed to :func:`dateutil.parser.parse` in
fuzzy mode with the reference day as default, so missing components (year,
month) are taken from the reference.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Sequence

from dateutil import parser as dateutil_parser

from .models import DateRange, ParsedResult

_log = logging.getLogger("agendador.extraction.date_parser")

_ORDINAL_UNITS = (
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
)
_ORDINAL_WORDS: dict[str, int] = {
    word: number
    for number, word in enumerate(
        (
            *_ORDINAL_UNITS,
            "tenth",
            "eleventh",
            "twelfth",
            "thirteenth",
            "fourteenth",
            "fifteenth",
            "sixteenth",
            "seventeenth",
            "eighteenth",
            "nineteenth",
            "twentieth",
        ),
        start=1,
    )
}
for _offset, _unit in enumerate(_ORDINAL_UNITS, start=1):
    _ORDINAL_WORDS[f"twenty-{_unit}"] = 20 + _offset
_ORDINAL_WORDS["thirtieth"] = 30
_ORDINAL_WORDS["thirty-first"] = 31

_COMPOUND_ORDINAL_RE = re.compile(rf"\b(twenty|thirty)\s+({'|'.join(_ORDINAL_UNITS)})\b")
_ORDINAL_WORD_RE = re.compile(
    r"\b(" + "|".join(sorted(_ORDINAL_WORDS, key=len, reverse=True)) + r")\b"
)

_MERIDIEM = r"(a\.?m\.?|p\.?m\.?)"
_TIME_RANGE_RE = re.compile(
    r"(?<![\w/:.-])(?:from\s+|between\s+)?"
    rf"(\d{{1,2}})(?::(\d{{2}}))?\s*{_MERIDIEM}?"
    r"\s*(?:-|–|/|\bto\b|\buntil\b|\btill\b)\s*"
    rf"(\d{{1,2}})(?::(\d{{2}}))?\s*{_MERIDIEM}?"
    r"(?![\w/:])"
)
_CLOCK_RE = re.compile(rf"(?<![\w/:.-])(\d{{1,2}}):(\d{{2}})\s*{_MERIDIEM}?(?!\w)")
_MERIDIEM_RE = re.compile(rf"(?<![\w/:.-])(\d{{1,2}})\s*{_MERIDIEM}(?!\w)")
_AT_HOUR_RE = re.compile(
    r"\b(?:at|for)\s+(\d{1,2})"
    r"(?![\w/:]|\.\d|\s*(?:hours?|hrs?|minutes?|mins?|days?|weeks?|people|persons?)\b)"
)
_DURATION_RE = re.compile(r"\bfor\s+(an?|\d{1,3})\s*(hours?|hrs?|minutes?|mins?)\b")
_RELATIVE_DAY_RE = re.compile(r"\b(today|tonight|tomorrow)\b")
_RELATIVE_DAYS = {"today": 0, "tonight": 0, "tomorrow": 1}

_FILLER_WORDS = frozenset(
    {"on", "at", "for", "from", "the", "of", "in", "this", "to", "until", "by", "and", "between"}
)

Clock = tuple[int, int, str | None]


def _ordinal_suffix(number: int) -> str:
    if 10 <= number % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def normalize_date_text(text: str) -> str:
    """Lower-case ``text`` and spell ordinal words as numbers ("third" → "3rd")."""

    normalized = " ".join(text.lower().split())
    normalized = _COMPOUND_ORDINAL_RE.sub(r"\1-\2", normalized)

    def _replace(match: re.Match[str]) -> str:
        number = _ORDINAL_WORDS[match.group(1)]
        return f"{number}{_ordinal_suffix(number)}"

    return _ORDINAL_WORD_RE.sub(_replace, normalized)


def _meridiem(raw: str | None) -> str | None:
    if not raw:
        return None
    return "pm" if raw.startswith("p") else "am"


def _to_24h(clock: Clock) -> tuple[int, int] | None:
    hour, minute, meridiem = clock
    if minute > 59:
        return None
    if meridiem is not None:
        if not 1 <= hour <= 12:
            return None
        if meridiem == "pm" and hour < 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
    elif hour > 23:
        return None
    return hour, minute


def _cut(text: str, match: re.Match[str]) -> str:
    return f"{text[: match.start()]} {text[match.end():]}".strip()


def _extract_duration(text: str) -> tuple[timedelta | None, str]:
    match = _DURATION_RE.search(text)
    if match is None:
        return None, text
    amount_raw, unit = match.groups()
    amount = 1 if amount_raw in ("a", "an") else int(amount_raw)
    if unit.startswith("h"):
        return timedelta(hours=amount), _cut(text, match)
    return timedelta(minutes=amount), _cut(text, match)


def _extract_times(text: str) -> tuple[Clock | None, Clock | None, str]:
    match = _TIME_RANGE_RE.search(text)
    if match is not None:
        start_hour, start_minute, start_meridiem, end_hour, end_minute, end_meridiem = (
            match.groups()
        )
        start: Clock = (int(start_hour), int(start_minute or 0), _meridiem(start_meridiem))
        end: Clock = (int(end_hour), int(end_minute or 0), _meridiem(end_meridiem))
        return start, end, _cut(text, match)

    match = _CLOCK_RE.search(text)
    if match is not None:
        hour, minute, meridiem = match.groups()
        return (int(hour), int(minute), _meridiem(meridiem)), None, _cut(text, match)

    match = _MERIDIEM_RE.search(text)
    if match is not None:
        hour, meridiem = match.groups()
        return (int(hour), 0, _meridiem(meridiem)), None, _cut(text, match)

    match = _AT_HOUR_RE.search(text)
    if match is not None:
        return (int(match.group(1)), 0, None), None, _cut(text, match)

    return None, None, text


def _extract_relative_day(text: str) -> tuple[int | None, str]:
    match = _RELATIVE_DAY_RE.search(text)
    if match is None:
        return None, text
    return _RELATIVE_DAYS[match.group(1)], _cut(text, match)


def _has_date_words(text: str) -> bool:
    return any(word not in _FILLER_WORDS for word in re.findall(r"[a-z0-9]+", text))


def _share_meridiem(start: Clock, end: Clock) -> Clock:
    """Apply the end meridiem to a bare start ("2 to 4pm" starts at 14:00)."""

    hour, minute, meridiem = start
    if meridiem is not None or end[2] is None:
        return start
    end_24h = _to_24h(end)
    candidate = (hour, minute, end[2])
    candidate_24h = _to_24h(candidate)
    if end_24h is not None and candidate_24h is not None and candidate_24h <= end_24h:
        return candidate
    return start


class SmartDateParser:
    """Date-range parser collaborator of the extraction engine."""

    def __init__(
        self,
        *,
        default_duration: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._default_duration = default_duration
        self._clock = clock

    def parse(self, text: str, reference: datetime | None = None) -> list[ParsedResult]:
        """Return at most one :class:`ParsedResult` for ``text``.

        An empty list means the text does not carry enough information to place
        an event on the calendar.
        """

        reference = reference or self._clock()
        base = reference.replace(hour=0, minute=0, second=0, microsecond=0)
        normalized = normalize_date_text(text)

        duration, remainder = _extract_duration(normalized)
        start_clock, end_clock, remainder = _extract_times(remainder)
        day_offset, remainder = _extract_relative_day(remainder)
        if day_offset is not None:
            base += timedelta(days=day_offset)

        if _has_date_words(remainder):
            try:
                day = dateutil_parser.parse(remainder, default=base, fuzzy=True)
            except (ValueError, OverflowError) as exc:
                _log.debug("Texto de data não reconhecido %r: %s", text, exc)
                return []
        elif start_clock is not None or day_offset is not None:
            day = base
        else:
            _log.debug("Nenhuma data em %r", text)
            return []

        if start_clock is None:
            has_time = (day.hour, day.minute) != (0, 0)
            end = day + duration if duration is not None else None
            return [ParsedResult(text=normalized, start=day, end=end, has_time=has_time)]

        if end_clock is not None:
            start_clock = _share_meridiem(start_clock, end_clock)
        start_24h = _to_24h(start_clock)
        if start_24h is None:
            _log.debug("Horário inválido em %r", text)
            return []
        start = day.replace(hour=start_24h[0], minute=start_24h[1], second=0, microsecond=0)

        end: datetime | None = None
        if end_clock is not None:
            end_24h = _to_24h(end_clock)
            if end_24h is None:
                _log.debug("Horário final inválido em %r", text)
                return []
            end = day.replace(hour=end_24h[0], minute=end_24h[1], second=0, microsecond=0)
            if end <= start:
                if end_clock[2] is None and end + timedelta(hours=12) > start:
                    end += timedelta(hours=12)
                else:
                    end += timedelta(days=1)
        elif duration is not None:
            end = start + duration

        return [ParsedResult(text=normalized, start=start, end=end, has_time=True)]

    def get_dates(self, parsed: Sequence[ParsedResult]) -> DateRange | None:
        """Collapse the first parsed mention into a :class:`DateRange`.

        Timed mentions without an end last the default duration; untimed ones
        span the whole day.
        """

        if not parsed:
            return None
        first = parsed[0]
        if first.end is not None:
            end = first.end
        elif first.has_time:
            end = first.start + self._default_duration
        else:
            end = first.start + timedelta(days=1)
        return DateRange(start=first.start, end=end)


__all__ = ["SmartDateParser", "normalize_date_text"]
