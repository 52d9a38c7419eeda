"""Dataclasses and shared models for the sentence-to-event extraction engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, Sequence


@dataclass(frozen=True, slots=True)
class TaggedToken:
    """Token of the lower-cased sentence with its part-of-speech tag."""

    text: str
    pos: str
    index: int
    ent_type: str = ""

    @property
    def end(self) -> int:
        return self.index + len(self.text)


@dataclass(frozen=True, slots=True)
class TaggedSpan:
    """Substring of a sentence recognised by one of the entity grammars.

    ``index`` is the character offset of ``value`` inside the lower-cased
    sentence and ``type`` the name of the grammar rule (or part-of-speech tag,
    for title attributes) that produced it.
    """

    value: str
    index: int
    type: str

    @property
    def end(self) -> int:
        return self.index + len(self.value)

    def as_dict(self) -> dict[str, Any]:
        return {"value": self.value, "index": self.index, "type": self.type}


@dataclass(frozen=True, slots=True)
class DateRange:
    """Normalized start/end pair produced by the date-range parser."""

    start: datetime
    end: datetime


@dataclass(slots=True)
class Sentence:
    """Unit of input of the engine.

    The caller owns the instance; the engine only reads ``value`` and fills the
    semantic fields once they are known so identity collaborators can compare
    re-typed sentences.
    """

    value: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    event_noun: str | None = None
    title: str | None = None
    person: str | None = None
    processed: bool = False

    def inject_semantic_fields(
        self, start_date: datetime, end_date: datetime, event_noun: str
    ) -> None:
        """Store the fields that identify the event independently of syntax."""

        self.start_date = start_date
        self.end_date = end_date
        self.event_noun = event_noun


@dataclass(slots=True)
class Event:
    """Calendar event persisted by an identity collaborator."""

    id: str
    sentence: str
    title: str
    start: datetime
    end: datetime
    person: str | None = None
    processed: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sentence": self.sentence,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "person": self.person,
            "processed": self.processed,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Successful outcome of :meth:`EventExtractionEngine.process`."""

    selection: tuple[TaggedSpan, ...]
    event: Event

    def as_dict(self) -> dict[str, Any]:
        return {
            "selection": [span.as_dict() for span in self.selection],
            "event": self.event.as_dict(),
        }


@dataclass(frozen=True, slots=True)
class ParsedResult:
    """Single date/time mention understood by the date-range parser."""

    text: str
    start: datetime
    end: datetime | None = None
    has_time: bool = False


class EventController(Protocol):
    """Identity collaborator deciding whether a sentence maps to a known event."""

    def syntactic_check(self, sentence: Sentence) -> Event | None:
        """Return the event bound to the exact sentence text, if any."""

    def semantic_check(self, sentence: Sentence) -> Event | None:
        """Return the event matching the sentence semantic fields, if any."""

    def create_new_event(self, sentence: Sentence) -> Event:
        """Persist and return a new event for the sentence."""


class DateRangeParser(Protocol):
    """Natural-language date parser used to turn date fragments into ranges."""

    def parse(self, text: str) -> Sequence[ParsedResult]:
        """Return the date mentions understood in ``text``."""

    def get_dates(self, parsed: Sequence[ParsedResult]) -> DateRange | None:
        """Collapse parsed mentions into a range, or ``None`` when insufficient."""


__all__ = [
    "DateRange",
    "DateRangeParser",
    "Event",
    "EventController",
    "ExtractionResult",
    "ParsedResult",
    "Sentence",
    "TaggedSpan",
    "TaggedToken",
]
