from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest
import spacy
from spacy.tokens import Doc

from agendador.extraction import EventExtractionEngine, SmartDateParser
from agendador.extraction.grammar import NOUN_PATTERNS_FILE, PROPER_NAME_PATTERNS_FILE
from agendador.infrastructure import InMemoryEventController

# Saturday
REFERENCE = datetime(2026, 1, 10, 9, 0)

EVENT_NOUNS = ["meeting", "call", "lunch", "dinner", "conference call"]
PROPER_NAMES = ["john", "amber", "sarah"]


def _board_meeting(day: str, punctuation: str = "") -> list[tuple[str, str, str]]:
    tokens = [
        ("board", "NOUN", "O"),
        ("meeting", "NOUN", "O"),
        ("with", "ADP", "O"),
        ("john", "PROPN", "O"),
        ("on", "ADP", "O"),
        ("march", "PROPN", "B-DATE"),
        (day, "NOUN", "I-DATE"),
        ("at", "ADP", "O"),
        ("2pm", "NUM", "B-TIME"),
    ]
    if punctuation:
        tokens.append((punctuation, "PUNCT", "O"))
    return tokens


ANNOTATIONS: dict[str, list[tuple[str, str, str]]] = {
    "board meeting with john on march 3rd at 2pm": _board_meeting("3rd"),
    "board meeting with john on march 3rd at 2pm!": _board_meeting("3rd", "!"),
    "board meeting with john on march 4th at 2pm": _board_meeting("4th"),
    "lunch with amber on friday": [
        ("lunch", "NOUN", "O"),
        ("with", "ADP", "O"),
        ("amber", "NOUN", "O"),
        ("on", "ADP", "O"),
        ("friday", "PROPN", "B-DATE"),
    ],
    "we need to book a room on monday at 10am": [
        ("we", "PRON", "O"),
        ("need", "VERB", "O"),
        ("to", "PART", "O"),
        ("book", "VERB", "O"),
        ("a", "DET", "O"),
        ("room", "NOUN", "O"),
        ("on", "ADP", "O"),
        ("monday", "PROPN", "B-DATE"),
        ("at", "ADP", "O"),
        ("10am", "NUM", "B-TIME"),
    ],
    "see you on monday": [
        ("see", "VERB", "O"),
        ("you", "PRON", "O"),
        ("on", "ADP", "O"),
        ("monday", "PROPN", "B-DATE"),
    ],
    "team meeting with john": [
        ("team", "NOUN", "O"),
        ("meeting", "NOUN", "O"),
        ("with", "ADP", "O"),
        ("john", "PROPN", "O"),
    ],
    "dinner on the third of may from 7 to 9pm": [
        ("dinner", "NOUN", "O"),
        ("on", "ADP", "O"),
        ("the", "DET", "O"),
        ("third", "ADJ", "B-ORDINAL"),
        ("of", "ADP", "O"),
        ("may", "PROPN", "O"),
        ("from", "ADP", "O"),
        ("7", "NUM", "B-CARDINAL"),
        ("to", "ADP", "O"),
        ("9pm", "NUM", "B-TIME"),
    ],
    "call for sarah tomorrow at 9": [
        ("call", "NOUN", "O"),
        ("for", "ADP", "O"),
        ("sarah", "PROPN", "O"),
        ("tomorrow", "NOUN", "B-DATE"),
        ("at", "ADP", "O"),
        ("9", "NUM", "B-CARDINAL"),
    ],
    "quarterly budget review meeting on friday": [
        ("quarterly", "ADJ", "O"),
        ("budget", "NOUN", "O"),
        ("review", "NOUN", "O"),
        ("meeting", "NOUN", "O"),
        ("on", "ADP", "O"),
        ("friday", "PROPN", "B-DATE"),
    ],
    "lunch with john smith on friday": [
        ("lunch", "NOUN", "O"),
        ("with", "ADP", "O"),
        ("john", "PROPN", "B-PERSON"),
        ("smith", "PROPN", "I-PERSON"),
        ("on", "ADP", "O"),
        ("friday", "PROPN", "B-DATE"),
    ],
    "the annual meeting on friday": [
        ("the", "DET", "O"),
        ("annual", "ADJ", "B-EVENT"),
        ("meeting", "NOUN", "I-EVENT"),
        ("on", "ADP", "O"),
        ("friday", "PROPN", "B-DATE"),
    ],
    "lunch on someday": [
        ("lunch", "NOUN", "O"),
        ("on", "ADP", "O"),
        ("someday", "NOUN", "B-DATE"),
    ],
}


class AnnotatedPipeline:
    """Stands in for a spaCy pipeline, building docs from known annotations.

    Sentences without annotations are split on whitespace and tagged ``X``.
    """

    pipe_names = ("annotations",)

    def __init__(self, annotations: dict[str, list[tuple[str, str, str]]] | None = None) -> None:
        self.vocab = spacy.blank("en").vocab
        self._annotations = ANNOTATIONS if annotations is None else annotations
        self.calls: list[str] = []

    def __call__(self, text: str) -> Doc:
        self.calls.append(text)
        tokens = self._annotations.get(text)
        if tokens is None:
            tokens = [(word, "X", "O") for word in text.split()]

        words: list[str] = []
        spaces: list[bool] = []
        cursor = 0
        for word, _, _ in tokens:
            start = text.index(word, cursor)
            end = start + len(word)
            words.append(word)
            spaces.append(text[end : end + 1] == " ")
            cursor = end
        return Doc(
            self.vocab,
            words=words,
            spaces=spaces,
            pos=[tag for _, tag, _ in tokens],
            ents=[ent for _, _, ent in tokens],
        )


@pytest.fixture
def pipeline() -> AnnotatedPipeline:
    return AnnotatedPipeline()


@pytest.fixture
def pattern_dir(tmp_path: Path) -> Path:
    (tmp_path / NOUN_PATTERNS_FILE).write_text(json.dumps(EVENT_NOUNS), encoding="utf-8")
    (tmp_path / PROPER_NAME_PATTERNS_FILE).write_text(
        json.dumps(PROPER_NAMES), encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def date_parser() -> SmartDateParser:
    return SmartDateParser(clock=lambda: REFERENCE)


@pytest.fixture
def make_engine(
    pipeline: AnnotatedPipeline, pattern_dir: Path, date_parser: SmartDateParser
) -> Callable[..., EventExtractionEngine]:
    def _make(controller=None, *, initialise: bool = True) -> EventExtractionEngine:
        engine = EventExtractionEngine(
            event_controller=controller if controller is not None else InMemoryEventController(),
            date_parser=date_parser,
            pipeline_factory=lambda: pipeline,
        )
        engine.inject_path(pattern_dir)
        if initialise:
            engine.init()
        return engine

    return _make
