import pytest

from agendador.extraction.grammar import (
    ConfigurationError,
    build_main_grammar,
    build_proper_name_grammar,
)
from agendador.extraction.models import TaggedSpan, TaggedToken
from agendador.extraction.tagger import GrammarTagger, load_pipeline, read_doc

_SENTENCE = "board meeting with john on march 3rd at 2pm"


def test_read_doc_merges_date_entities(pipeline):
    doc = read_doc(pipeline, _SENTENCE)

    assert [token.text for token in doc] == [
        "board",
        "meeting",
        "with",
        "john",
        "on",
        "march 3rd",
        "at",
        "2pm",
    ]
    assert doc[5].ent_type_ == "DATE"


def test_read_doc_keeps_person_entities_split(pipeline):
    doc = read_doc(pipeline, "lunch with john smith on friday")

    assert [token.text for token in doc] == ["lunch", "with", "john", "smith", "on", "friday"]
    assert doc[2].ent_type_ == "PERSON"


def test_name_tagger_finds_first_name_inside_person_entity(pipeline):
    names = GrammarTagger(pipeline.vocab, build_proper_name_grammar(["john"]))

    tagged = names.tag_doc(read_doc(pipeline, "lunch with john smith on friday"))

    assert tagged.spans == (TaggedSpan(value="with john", index=6, type="properName"),)


def test_tagger_keeps_longest_span_and_sentence_order(pipeline):
    tagger = GrammarTagger(pipeline.vocab, build_main_grammar(["meeting", "board meeting"]))

    tagged = tagger.tag_doc(read_doc(pipeline, _SENTENCE))

    assert tagged.spans == (
        TaggedSpan(value="board meeting", index=0, type="eventNoun"),
        TaggedSpan(value="on march 3rd", index=24, type="date"),
        TaggedSpan(value="at 2pm", index=37, type="exactTime"),
    )


def test_tagger_reports_tokens_with_offsets(pipeline):
    tagger = GrammarTagger(pipeline.vocab, build_main_grammar(["meeting"]))

    tagged = tagger.tag_doc(read_doc(pipeline, _SENTENCE))

    assert tagged.text == _SENTENCE
    assert tagged.tokens[1] == TaggedToken(text="meeting", pos="NOUN", index=6)
    merged = tagged.tokens[5]
    assert (merged.text, merged.index, merged.ent_type) == ("march 3rd", 27, "DATE")
    assert tagged.pos[:5] == ("NOUN", "NOUN", "ADP", "PROPN", "ADP")


def test_name_tagger_is_independent_from_main_grammar(pipeline):
    doc = read_doc(pipeline, _SENTENCE)
    names = GrammarTagger(pipeline.vocab, build_proper_name_grammar(["john"]))
    main = GrammarTagger(pipeline.vocab, build_main_grammar(["meeting"]))

    assert names.tag_doc(doc).spans == (
        TaggedSpan(value="with john", index=14, type="properName"),
    )
    assert all(span.type != "properName" for span in main.tag_doc(doc).spans)


def test_load_pipeline_reports_missing_model():
    with pytest.raises(ConfigurationError):
        load_pipeline("agendador_missing_model")
