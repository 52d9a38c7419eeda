"""Adjacency walk growing a compound title around the event noun."""
from __future__ import annotations

from typing import Sequence

from .linking import EventNounMatch, PersonMention
from .models import TaggedSpan, TaggedToken

_ATTRIBUTE_POS = frozenset({"NOUN", "ADJ", "ADP", "PRON"})
# A title cannot end on a dangling preposition or pronoun.
_DANGLING_POS = frozenset({"ADP", "PRON"})


def _noun_token_bounds(
    tokens: Sequence[TaggedToken], span: TaggedSpan
) -> tuple[int, int] | None:
    positions = [
        position
        for position, token in enumerate(tokens)
        if token.index >= span.index and token.end <= span.end
    ]
    if not positions:
        return None
    return positions[0], positions[-1]


def find_adjacent_attributes(
    tokens: Sequence[TaggedToken],
    event_noun: EventNounMatch,
    person: PersonMention | None,
    anchor: int,
    *,
    backward: bool = False,
) -> tuple[TaggedSpan, ...]:
    """Collect the words next to the event noun that belong to its title.

    The walk moves one token at a time away from the noun while the tag is
    ``NOUN``, ``ADJ``, ``ADP`` or ``PRON``. The whole direction is discarded
    when it reaches a word of the person name or a word sitting on the date
    anchor. Words are returned in walk order, nearest first.
    """

    bounds = _noun_token_bounds(tokens, event_noun.span)
    if bounds is None:
        return ()
    first, last = bounds
    step = -1 if backward else 1
    position = first - 1 if backward else last + 1
    person_words = set(person.words) if person is not None else set()

    collected: list[TaggedSpan] = []
    while 0 <= position < len(tokens) and tokens[position].pos in _ATTRIBUTE_POS:
        token = tokens[position]
        if token.text in person_words:
            return ()
        if token.index == anchor:
            return ()
        collected.append(TaggedSpan(value=token.text, index=token.index, type=token.pos))
        position += step

    while collected and collected[-1].type in _DANGLING_POS:
        collected.pop()
    return tuple(collected)


def build_event_title(
    backward: Sequence[TaggedSpan],
    event_noun: EventNounMatch,
    forward: Sequence[TaggedSpan],
    person: PersonMention | None,
) -> str:
    """Assemble "<backward words> <noun> <forward words> <person>"."""

    words = [span.value for span in reversed(backward)]
    words.append(event_noun.noun)
    words.extend(span.value for span in forward)
    if person is not None:
        words.append(person.rendered)
    return " ".join(words)


__all__ = ["build_event_title", "find_adjacent_attributes"]
