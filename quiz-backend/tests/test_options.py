import random

import pytest

from generation.options import (
    GENERIC_FILLER_TEMPLATES,
    OptionSet,
    fill_template,
    format_option,
    format_question,
    template_options,
)


def test_format_question_strips_lead_in_and_adds_question_mark():
    assert format_question("according to the document, what is xylem") == "What is xylem?"


def test_format_question_rewrites_which_of_the_following():
    assert format_question("Which of the following is the largest planet?") == "What is the largest planet?"


def test_format_question_statement_gets_period():
    assert format_question("Xylem carries water") == "Xylem carries water."


@pytest.mark.parametrize("text", [
    "based on the text, which statement about the Moon is correct",
    "In this document, according to the text, what do mitochondria produce",
    "\"according to the passage,\" which of the following is the largest planet",
])
def test_format_question_is_idempotent(text):
    once = format_question(text)
    assert format_question(once) == once


def test_format_question_strips_stacked_lead_ins():
    text = "In this document, according to the text, what do mitochondria produce"
    assert format_question(text) == "What do mitochondria produce?"


def test_format_question_strips_leading_quote():
    assert format_question("\"xylem\" carries water upward") == "Xylem carries water upward."


def test_format_option_trims_punctuation_and_capitalizes():
    assert format_option("  the capital of France.  ") == "The capital of France"


def test_format_option_shortens_long_text_to_detail_clause():
    text = ("The planet is very large and quite bright in the sky, "
            "and it was discovered in 1846 by Johann Galle using careful predictions")
    option = format_option(text)
    assert len(option) <= 50
    assert len(option.split()) <= 10
    assert "1846" in option


@pytest.mark.parametrize("text", [
    "Mitochondria are organelles that produce most of the chemical energy needed to power the cell",
    "In this document, according to the text, mitochondria produce ATP",
    "The document says that in this text, chlorophyll absorbs red light",
])
def test_format_option_is_idempotent(text):
    once = format_option(text)
    assert format_option(once) == once


def test_format_option_strips_stacked_lead_ins():
    text = "In this document, according to the text, mitochondria produce ATP"
    assert format_option(text) == "Mitochondria produce ATP"


@pytest.mark.parametrize("template", GENERIC_FILLER_TEMPLATES)
def test_filler_template_survives_formatting_whole(template):
    filled = fill_template(template, "the Great Red Spot")
    assert filled.startswith("Great Red Spot ")
    assert filled.endswith(template.split("}")[-1])
    assert format_option(filled) == filled


def test_fill_template_agrees_with_plural_subject():
    assert fill_template("{subject} {be} a common misconception", "Meteorites") == "Meteorites are a common misconception"
    assert fill_template("{subject} {has} the opposite effect", "Comets") == "Comets have the opposite effect"


def test_fill_template_shrinks_long_subject_to_head_noun():
    filled = fill_template("{subject} {be} confused with a related idea", "extremely bright rings of Saturn")
    assert filled == "Bright rings are confused with a related idea"
    assert len(filled) <= 50


def test_template_options_never_truncated():
    for option in template_options("photosynthesis"):
        assert len(option) <= 50
        assert len(option.split()) <= 10
        assert format_option(option) == option


def test_option_set_add_rejects_duplicates():
    options = OptionSet(subject="storage")
    assert options.add("caching")
    assert not options.add("Caching.")
    assert options.options == ["Caching"]


def test_option_set_dedupe_replaces_later_duplicate():
    options = OptionSet(["Caching", "caching", "Indexing"], subject="the system").normalize().dedupe()
    assert options.options[0] == "Caching"
    assert len(set(options.keys)) == 3
    assert options.options[1] == "System is a common misconception"


def test_option_set_dedupe_replaces_shared_phrase():
    options = OptionSet(
        ["Orbits the Sun every 88 days", "Circles the Sun every 88 days"], subject="Mercury"
    ).normalize().dedupe()
    assert options.options[0] == "Orbits the Sun every 88 days"
    assert "88 days" not in options.options[1]


def test_pad_to_count_adds_unique_fillers():
    options = OptionSet(["Caching"], subject="the system").pad_to_count(4)
    assert len(options) == 4
    assert len(set(options.keys)) == 4


def test_pad_to_count_trims_extra_options():
    options = OptionSet(["One option", "Two option", "Three option"]).pad_to_count(2)
    assert options.options == ["One option", "Two option"]


def test_shuffle_keeps_options_and_index_of_finds_them():
    options = OptionSet(["Caching", "Indexing", "Compaction", "Sharding"])
    options.shuffle(random.Random(7))
    assert sorted(options.options) == ["Caching", "Compaction", "Indexing", "Sharding"]
    assert options.options[options.index_of("compaction")] == "Compaction"
    assert options.index_of("replication") is None


def test_replace_repeats_swaps_later_copy():
    options = OptionSet(["Caching", "Indexing", "caching"], subject="storage")
    assert options.replace_repeats(protected=[0])
    assert options.options[:2] == ["Caching", "Indexing"]
    assert options.options[2] == "Storage is a common misconception"


def test_replace_repeats_refuses_to_replace_an_answer():
    options = OptionSet(["Caching", "Indexing", "caching"], subject="storage")
    assert not options.replace_repeats(protected=[2])
    assert options.options == ["Caching", "Indexing", "caching"]
