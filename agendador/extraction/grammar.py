"""Entity grammar describing calendar intents over spaCy annotations.

Rules are written in a compact slot notation. A pattern is a whitespace
separated sequence of slots; a slot is either a bare token or an alternation
``[a|b|c]``. An empty alternative (``[|DATE]``) makes the slot optional.
Alternatives spelled as an upper-case Universal POS tag or entity label match
the token annotation, every other alternative matches the lower-cased token
text. Each pattern is expanded into plain spaCy :class:`~spacy.matcher.Matcher`
token patterns, one per combination of annotation kinds, so that
``[DATE|may|march]`` matches either a ``DATE`` entity or the literal words.
"""
from __future__ import annotations

import itertools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from spacy.matcher import Matcher
from spacy.vocab import Vocab

POS_SYMBOLS = frozenset(
    {
        "ADJ",
        "ADP",
        "ADV",
        "AUX",
        "CCONJ",
        "DET",
        "INTJ",
        "NOUN",
        "NUM",
        "PART",
        "PRON",
        "PROPN",
        "PUNCT",
        "SCONJ",
        "SYM",
        "VERB",
        "X",
    }
)
ENTITY_SYMBOLS = frozenset(
    {"DATE", "TIME", "CARDINAL", "ORDINAL", "DURATION", "QUANTITY"}
)

NOUN_PATTERNS_FILE = ".noun_patterns.txt"
PROPER_NAME_PATTERNS_FILE = ".proper_name_patterns.txt"


class ConfigurationError(RuntimeError):
    """Raised when the grammar or its pipeline cannot be built."""


@dataclass(frozen=True, slots=True)
class Slot:
    """One position of a pattern."""

    alternatives: tuple[str, ...]
    optional: bool = False


@dataclass(frozen=True, slots=True)
class EntityRule:
    """Named set of patterns producing spans of the same type."""

    name: str
    patterns: tuple[str, ...]


# "may" and "march" are not always recognised as dates ("may I ...",
# "march on the Alps"), so they are accepted literally.
DATE_RULES: tuple[EntityRule, ...] = (
    EntityRule("date", ("[|DATE] [|may] [|march]", "on DATE")),
    # 12th of Jan 2023, second of may
    EntityRule("ordinalDate", ("[ORDINAL] [|ADP] [DATE|may|march] [|DATE]",)),
    # July the third
    EntityRule("ordinalDateReverse", ("[|DATE] [DATE|may|march] [|DET] [ORDINAL]",)),
)

TIME_RULES: tuple[EntityRule, ...] = (
    EntityRule(
        "timeRange",
        (
            "[|ADP] [TIME|CARDINAL|NUM] [|am|pm] [|ADP] [TIME|CARDINAL|NUM] [|am|pm]",
            "[TIME|CARDINAL] [-|/] [TIME|CARDINAL]",
        ),
    ),
    EntityRule("exactTime", ("[at|for] [CARDINAL|TIME]",)),
)

INTENT_RULES: tuple[EntityRule, ...] = (
    EntityRule("intentionalVerb", ("[|AUX] [VERB] [|ADP] [|DET] [NOUN]",)),
    # Not consumed by the extraction flow yet.
    EntityRule(
        "purpose",
        (
            "[|PART] [VERB] [|VERB] [|ADJ] [NOUN] [|NOUN|ADJ] [|CCONJ] [|NOUN|ADJ] [|NOUN|ADJ]",
        ),
    ),
)


def _is_symbol(option: str) -> bool:
    return option in POS_SYMBOLS or option in ENTITY_SYMBOLS


def parse_pattern(pattern: str) -> tuple[Slot, ...]:
    """Split a pattern string into its slots."""

    slots: List[Slot] = []
    for raw in pattern.split():
        if raw.startswith("[") and raw.endswith("]"):
            options = raw[1:-1].split("|")
        else:
            options = [raw]
        alternatives = tuple(
            option if _is_symbol(option) else option.lower()
            for option in options
            if option
        )
        if not alternatives:
            raise ValueError(f"Empty slot {raw!r} in pattern {pattern!r}")
        slots.append(Slot(alternatives=alternatives, optional=len(alternatives) < len(options)))
    if not slots:
        raise ValueError("Pattern must contain at least one slot")
    return tuple(slots)


def _slot_variants(slot: Slot) -> List[Dict[str, object] | None]:
    entities = [option for option in slot.alternatives if option in ENTITY_SYMBOLS]
    tags = [option for option in slot.alternatives if option in POS_SYMBOLS]
    literals = [option for option in slot.alternatives if not _is_symbol(option)]

    variants: List[Dict[str, object] | None] = []
    if entities:
        variants.append({"ENT_TYPE": {"IN": entities}})
    if tags:
        variants.append({"POS": {"IN": tags}})
    if literals:
        variants.append({"LOWER": {"IN": literals}})
    if slot.optional:
        variants.append(None)
    return variants


def compile_pattern(pattern: str) -> List[List[Dict[str, object]]]:
    """Expand a slot pattern into spaCy token patterns.

    Optional slots are expanded by omission instead of ``"OP": "?"`` so that a
    pattern made only of optional slots never matches an empty sequence.
    """

    slots = parse_pattern(pattern)
    compiled: List[List[Dict[str, object]]] = []
    for combination in itertools.product(*(_slot_variants(slot) for slot in slots)):
        tokens = [dict(token) for token in combination if token is not None]
        if tokens and tokens not in compiled:
            compiled.append(tokens)
    return compiled


def literal_pattern(text: str) -> str:
    """Return the pattern matching ``text`` word by word."""

    words = [word for word in text.lower().split() if word]
    return " ".join(f"[{word}]" for word in words)


@dataclass(frozen=True, slots=True)
class EntityGrammar:
    """Ordered collection of rules compiled into a single matcher."""

    rules: tuple[EntityRule, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)

    def compile(self, vocab: Vocab) -> Matcher:
        """Build a spaCy matcher for ``vocab`` with every rule of the grammar."""

        matcher = Matcher(vocab, validate=True)
        for rule in self.rules:
            patterns: List[List[Dict[str, object]]] = []
            for pattern in rule.patterns:
                for compiled in compile_pattern(pattern):
                    if compiled not in patterns:
                        patterns.append(compiled)
            if patterns:
                matcher.add(rule.name, patterns)
        return matcher


def build_main_grammar(event_nouns: Iterable[str]) -> EntityGrammar:
    """Grammar for dates, times, verbs and event nouns."""

    noun_patterns = tuple(
        pattern for pattern in (literal_pattern(noun) for noun in event_nouns) if pattern
    )
    return EntityGrammar(
        rules=(
            *DATE_RULES,
            *TIME_RULES,
            *INTENT_RULES,
            EntityRule("eventNoun", noun_patterns),
        )
    )


def build_proper_name_grammar(proper_names: Iterable[str]) -> EntityGrammar:
    """Grammar recognising known first names, optionally after a preposition."""

    patterns = tuple(
        f"[|ADP] {pattern}"
        for pattern in (literal_pattern(name) for name in proper_names)
        if pattern
    )
    return EntityGrammar(rules=(EntityRule("properName", patterns),))


def load_lexicon(path: Path) -> tuple[str, ...]:
    """Load a JSON array of literal strings from ``path``."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read pattern file {str(path)!r}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in pattern file {str(path)!r}") from exc
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise ConfigurationError(
            f"Pattern file {str(path)!r} must contain a JSON array of strings"
        )
    return tuple(item.strip().lower() for item in payload if item.strip())


def load_grammars(path: Path | str) -> tuple[EntityGrammar, EntityGrammar]:
    """Read both lexicons under ``path`` and return the main and name grammars."""

    directory = Path(path)
    if not directory.is_dir():
        raise ConfigurationError(f"Pattern directory {str(directory)!r} does not exist")
    event_nouns = load_lexicon(directory / NOUN_PATTERNS_FILE)
    proper_names = load_lexicon(directory / PROPER_NAME_PATTERNS_FILE)
    return build_main_grammar(event_nouns), build_proper_name_grammar(proper_names)


__all__ = [
    "ConfigurationError",
    "DATE_RULES",
    "ENTITY_SYMBOLS",
    "EntityGrammar",
    "EntityRule",
    "INTENT_RULES",
    "NOUN_PATTERNS_FILE",
    "POS_SYMBOLS",
    "PROPER_NAME_PATTERNS_FILE",
    "Slot",
    "TIME_RULES",
    "build_main_grammar",
    "build_proper_name_grammar",
    "compile_pattern",
    "literal_pattern",
    "load_grammars",
    "load_lexicon",
    "parse_pattern",
]
