"""Distance heuristics linking the date anchor to a noun and a person.

Every decision here is "closest wins": candidates are scanned in tagger order,
the distance is the absolute difference of character offsets and the first
candidate wins ties. The date anchor is the reference point for the event
noun, and the resolved event noun is the reference point for the person name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

from .models import TaggedSpan, TaggedToken

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class EventNounMatch:
    """Resolved event noun.

    ``span`` is the evidence highlighted in the sentence; ``noun`` is the text
    used to build the title. They differ only when the noun was derived from
    an intentional verb phrase ("schedule a call" gives "schedule call").
    """

    span: TaggedSpan
    noun: str
    from_verb: bool = False


@dataclass(frozen=True, slots=True)
class PersonMention:
    """Person associated with the event."""

    value: str
    index: int
    rendered: str
    adposition: str | None = None

    @property
    def words(self) -> tuple[str, ...]:
        return tuple(self.value.split())

    def as_span(self) -> TaggedSpan:
        return TaggedSpan(value=self.value, index=self.index, type="properName")


def closest(candidates: Iterable[T], anchor: int, offset: Callable[[T], int]) -> T | None:
    """Return the candidate nearest to ``anchor``; the first one wins ties."""

    selected: T | None = None
    best_distance: int | None = None
    for candidate in candidates:
        distance = abs(offset(candidate) - anchor)
        if best_distance is None or distance < best_distance:
            best_distance = distance
            selected = candidate
    return selected


def find_date_anchor(dates: Sequence[TaggedSpan]) -> int:
    """Offset of the primary date fragment; ``dates`` must not be empty."""

    if not dates:
        raise ValueError("At least one date fragment is required")
    return dates[0].index


def find_event_noun(event_nouns: Sequence[TaggedSpan], anchor: int) -> EventNounMatch | None:
    """Pick the event noun nearest to the date anchor."""

    selected = closest(event_nouns, anchor, lambda span: span.index)
    if selected is None:
        return None
    return EventNounMatch(span=selected, noun=selected.value)


def find_intentional_verb(
    verbs: Sequence[TaggedSpan],
    tokens: Sequence[TaggedToken],
    anchor: int,
) -> EventNounMatch | None:
    """Derive an event noun from the verb phrase nearest to the date anchor.

    The noun is ``"<verb> <last word of the phrase>"``: "want to schedule a
    call" produces "schedule call".
    """

    selected = closest(verbs, anchor, lambda span: span.index)
    if selected is None:
        return None
    phrase_tokens = [
        token for token in tokens if token.index >= selected.index and token.end <= selected.end
    ]
    verb = next((token.text for token in phrase_tokens if token.pos == "VERB"), None)
    words = selected.value.split()
    if verb is None:
        verb = words[0]
    noun = f"{verb} {words[-1]}"
    return EventNounMatch(
        span=TaggedSpan(value=selected.value, index=selected.index, type="eventNoun"),
        noun=noun,
        from_verb=True,
    )


def _split_adposition(
    candidate: TaggedSpan, tokens: Sequence[TaggedToken]
) -> tuple[str | None, str, int]:
    covered = [
        token for token in tokens if token.index >= candidate.index and token.end <= candidate.end
    ]
    if len(covered) > 1 and covered[0].pos == "ADP":
        adposition = covered[0]
        name_index = covered[1].index
        return adposition.text, candidate.value[name_index - candidate.index :], name_index
    return None, candidate.value, candidate.index


def _typed_offsets(text: str) -> list[int]:
    """Map each offset of ``text.lower()`` to the offset in ``text``.

    Lower-casing may change the length of a character ("İ" becomes "i̇"),
    so the tagger offsets cannot index the typed text directly.
    """

    offsets: list[int] = []
    for position, char in enumerate(text):
        offsets.extend(position for _ in char.lower())
    offsets.append(len(text))
    return offsets


def find_proper_name(
    text: str,
    proper_names: Sequence[TaggedSpan],
    tokens: Sequence[TaggedToken],
    event_noun: EventNounMatch,
) -> PersonMention | None:
    """Pick the person name nearest to the event noun.

    ``text`` is the sentence as typed. Names whose first letter is lower-case
    there are rejected so that "amber" the colour is not taken for "Amber".
    The rendered value keeps the leading adposition ("for Amber") or falls
    back to "with <Name>".
    """

    offsets = _typed_offsets(text)
    candidates: list[tuple[TaggedSpan, str | None, str, int]] = []
    for candidate in proper_names:
        adposition, name, name_index = _split_adposition(candidate, tokens)
        if name_index + len(name) >= len(offsets):
            continue
        first_char = text[offsets[name_index] : offsets[name_index] + 1]
        if not first_char or first_char.islower():
            continue
        candidates.append((candidate, adposition, name, name_index))

    selected = closest(candidates, event_noun.span.index, lambda item: item[0].index)
    if selected is None:
        return None
    _, adposition, name, name_index = selected
    surface = text[offsets[name_index] : offsets[name_index + len(name)]]
    capitalized = surface[:1].upper() + surface[1:]
    rendered = f"{adposition or 'with'} {capitalized}"
    return PersonMention(
        value=name,
        index=name_index,
        rendered=rendered,
        adposition=adposition,
    )


__all__ = [
    "EventNounMatch",
    "PersonMention",
    "closest",
    "find_date_anchor",
    "find_event_noun",
    "find_intentional_verb",
    "find_proper_name",
]
