"""Sentence-to-event extraction engine."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, List

from .attributes import build_event_title, find_adjacent_attributes
from .date_parser import SmartDateParser
from .dates import clean_junk_dates, parse_dates
from .filters import (
    filter_dates,
    filter_event_nouns,
    filter_intentional_verbs,
    filter_proper_names,
)
from .grammar import ConfigurationError, load_grammars
from .linking import (
    find_date_anchor,
    find_event_noun,
    find_intentional_verb,
    find_proper_name,
)
from .models import (
    DateRangeParser,
    EventController,
    ExtractionResult,
    Sentence,
    TaggedSpan,
)
from .tagger import GrammarTagger, PipelineFactory, load_pipeline, read_doc

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from spacy.language import Language

DEFAULT_SPACY_MODEL = "en_core_web_sm"

_log = logging.getLogger("agendador.extraction")


class EventExtractionEngine:
    """Turns free-text sentences into calendar events.

    Lifecycle: construct, :meth:`inject_path`, :meth:`init`, then call
    :meth:`process` any number of times. Reloading with :meth:`init` must not
    run concurrently with :meth:`process`.
    """

    def __init__(
        self,
        *,
        event_controller: EventController,
        date_parser: DateRangeParser | None = None,
        pipeline_factory: PipelineFactory | None = None,
        model_name: str | None = None,
    ) -> None:
        self._event_controller = event_controller
        self._date_parser = date_parser or SmartDateParser()
        self._model_name = model_name or DEFAULT_SPACY_MODEL
        self._pipeline_factory = pipeline_factory or (lambda: load_pipeline(self._model_name))
        self._path: Path | None = None
        self._nlp: "Language | None" = None
        self._main_tagger: GrammarTagger | None = None
        self._name_tagger: GrammarTagger | None = None

    @property
    def ready(self) -> bool:
        return self._nlp is not None

    def inject_path(self, path: Path | str) -> None:
        """Record the directory holding the pattern files."""

        self._path = Path(path)

    def init(self) -> None:
        """Load the lexicons, build both grammars and compile their taggers.

        Raises :class:`ConfigurationError` when the path was never injected,
        a pattern file is missing or malformed, or the pipeline cannot be
        loaded. A failed call leaves the previous state untouched.
        """

        if self._path is None:
            raise ConfigurationError("Pattern path must be injected before init()")
        main_grammar, name_grammar = load_grammars(self._path)
        nlp = self._pipeline_factory()
        main_tagger = GrammarTagger(nlp.vocab, main_grammar)
        name_tagger = GrammarTagger(nlp.vocab, name_grammar)

        self._nlp = nlp
        self._main_tagger = main_tagger
        self._name_tagger = name_tagger
        _log.info(
            "Gramáticas carregadas de %s (%d regras principais, %d padrões de nomes)",
            self._path,
            len(main_grammar.rules),
            len(name_grammar.rules[0].patterns),
        )

    def process(self, sentence: Sentence) -> ExtractionResult | None:
        """Extract the event described by ``sentence``.

        Returns ``None`` when the engine is not ready, the sentence carries no
        usable date or event noun, or the matched event was already handled.
        """

        if self._nlp is None or self._main_tagger is None or self._name_tagger is None:
            _log.warning("Engine não inicializada; sentença ignorada")
            return None

        event = self._event_controller.syntactic_check(sentence)
        if event is not None and event.processed:
            _log.debug("Sentença já processada: %r", sentence.value)
            return None

        text = sentence.value.lower()
        doc = read_doc(self._nlp, text)
        tagged = self._main_tagger.tag_doc(doc)
        names = self._name_tagger.tag_doc(doc)

        dates = filter_dates(tagged.spans)
        if not dates:
            _log.debug("Nenhuma data em %r", sentence.value)
            return None
        anchor = find_date_anchor(dates)

        event_noun = find_event_noun(filter_event_nouns(tagged.spans), anchor)
        if event_noun is None:
            event_noun = find_intentional_verb(
                filter_intentional_verbs(tagged.spans), tagged.tokens, anchor
            )
        if event_noun is None:
            _log.debug("Nenhum substantivo de evento em %r", sentence.value)
            return None

        person = find_proper_name(
            sentence.value, filter_proper_names(names.spans), tagged.tokens, event_noun
        )
        backward = find_adjacent_attributes(
            tagged.tokens, event_noun, person, anchor, backward=True
        )
        forward = find_adjacent_attributes(tagged.tokens, event_noun, person, anchor)

        cleaned = clean_junk_dates(dates)
        date_range = parse_dates(cleaned, self._date_parser)
        if date_range is None:
            return None

        spans: List[TaggedSpan] = [*cleaned, event_noun.span]
        if person is not None:
            spans.append(person.as_span())
        spans.extend(backward)
        spans.extend(forward)
        selection = tuple(sorted(spans, key=lambda span: span.index))

        if event is None:
            sentence.inject_semantic_fields(date_range.start, date_range.end, event_noun.noun)
            sentence.title = build_event_title(backward, event_noun, forward, person)
            sentence.person = person.rendered if person is not None else None
            event = self._event_controller.semantic_check(sentence)
            if event is not None and event.processed:
                _log.debug("Evento equivalente já processado: %s", event.id)
                return None
            if event is None:
                event = self._event_controller.create_new_event(sentence)
                _log.info("Evento criado %s: %s", event.id, event.title)

        return ExtractionResult(selection=selection, event=event)

    def inspect(self, text: str) -> list[dict[str, Any]]:
        """Tag every line of ``text`` with both grammars for troubleshooting."""

        if self._nlp is None or self._main_tagger is None or self._name_tagger is None:
            raise ConfigurationError("Engine must be initialised before inspect()")

        report: list[dict[str, Any]] = []
        for line in text.splitlines():
            if not line.strip():
                continue
            doc = read_doc(self._nlp, line.lower())
            tagged = self._main_tagger.tag_doc(doc)
            names = self._name_tagger.tag_doc(doc)
            report.append(
                {
                    "text": line,
                    "tokens": [token.text for token in tagged.tokens],
                    "pos": list(tagged.pos),
                    "entities": [span.as_dict() for span in tagged.spans],
                    "proper_names": [span.as_dict() for span in names.spans],
                }
            )
        return report


__all__ = ["DEFAULT_SPACY_MODEL", "EventExtractionEngine"]
