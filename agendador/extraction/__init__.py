"""Sentence-to-event extraction components."""
from .models import (
    DateRange,
    DateRangeParser,
    Event,
    EventController,
    ExtractionResult,
    ParsedResult,
    Sentence,
    TaggedSpan,
    TaggedToken,
)
from .grammar import (
    ConfigurationError,
    EntityGrammar,
    EntityRule,
    build_main_grammar,
    build_proper_name_grammar,
    load_grammars,
)
from .tagger import GrammarTagger, TaggedDocument, load_pipeline, read_doc
from .date_parser import SmartDateParser
from .engine import DEFAULT_SPACY_MODEL, EventExtractionEngine

__all__ = [
    "ConfigurationError",
    "DEFAULT_SPACY_MODEL",
    "DateRange",
    "DateRangeParser",
    "EntityGrammar",
    "EntityRule",
    "Event",
    "EventController",
    "EventExtractionEngine",
    "ExtractionResult",
    "GrammarTagger",
    "ParsedResult",
    "Sentence",
    "SmartDateParser",
    "TaggedDocument",
    "TaggedSpan",
    "TaggedToken",
    "build_main_grammar",
    "build_proper_name_grammar",
    "load_grammars",
    "load_pipeline",
    "read_doc",
]
