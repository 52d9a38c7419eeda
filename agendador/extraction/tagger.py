"""spaCy integration: tokenization, POS tags and grammar matching."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List

import spacy
from spacy.tokens import Span
from spacy.util import filter_spans

from .grammar import ENTITY_SYMBOLS, ConfigurationError, EntityGrammar
from .models import TaggedSpan, TaggedToken

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from spacy.language import Language
    from spacy.tokens import Doc
    from spacy.vocab import Vocab

PipelineFactory = Callable[[], "Language"]

_log = logging.getLogger("agendador.extraction.tagger")


@dataclass(frozen=True, slots=True)
class TaggedDocument:
    """Tokens of a sentence plus the spans recognised by one grammar."""

    text: str
    tokens: tuple[TaggedToken, ...]
    spans: tuple[TaggedSpan, ...]

    @property
    def pos(self) -> tuple[str, ...]:
        return tuple(token.pos for token in self.tokens)


def load_pipeline(model_name: str) -> "Language":
    """Load the spaCy pipeline providing POS tags and named entities."""

    try:
        nlp = spacy.load(model_name)
    except OSError as exc:
        raise ConfigurationError(
            f"spaCy model {model_name!r} is not installed; "
            f"run `python -m spacy download {model_name}`"
        ) from exc
    _log.info("Pipeline spaCy %s carregado (%s)", model_name, ", ".join(nlp.pipe_names))
    return nlp


def read_doc(nlp: "Language", text: str) -> "Doc":
    """Run ``nlp`` over ``text`` and merge date and number entities into one token.

    Only the entity kinds the grammar matches as a single slot are merged.
    People, organisations and events keep their words apart so the lexicon
    rules still see "john" inside "john smith".
    """

    doc = nlp(text)
    with doc.retokenize() as retokenizer:
        for ent in doc.ents:
            if ent.label_ not in ENTITY_SYMBOLS:
                continue
            attrs = {"tag": ent.root.tag, "dep": ent.root.dep, "ent_type": ent.label}
            retokenizer.merge(ent, attrs=attrs)
    return doc


def _serialize_tokens(doc: "Doc") -> tuple[TaggedToken, ...]:
    return tuple(
        TaggedToken(text=token.text, pos=token.pos_, index=token.idx, ent_type=token.ent_type_)
        for token in doc
        if not token.is_space
    )


class GrammarTagger:
    """Tags documents against a single :class:`EntityGrammar`.

    Overlapping matches resolve to the longest span, the earliest one winning
    ties. Spans are reported in sentence order.
    """

    def __init__(self, vocab: "Vocab", grammar: EntityGrammar) -> None:
        self._matcher = grammar.compile(vocab)

    def tag_doc(self, doc: "Doc") -> TaggedDocument:
        """Return the tokens of ``doc`` and the spans matched by the grammar."""

        candidates: List[Span] = [
            Span(doc, start, end, label=match_id)
            for match_id, start, end in self._matcher(doc)
        ]
        spans = sorted(filter_spans(candidates), key=lambda span: span.start)
        return TaggedDocument(
            text=doc.text,
            tokens=_serialize_tokens(doc),
            spans=tuple(
                TaggedSpan(value=span.text, index=span.start_char, type=span.label_)
                for span in spans
            ),
        )


__all__ = [
    "GrammarTagger",
    "PipelineFactory",
    "TaggedDocument",
    "load_pipeline",
    "read_doc",
]
