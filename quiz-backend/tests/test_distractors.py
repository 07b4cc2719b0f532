import random
import re

import pytest

from generation.distractors import (
    FABRICATION_TEMPLATES,
    distractor_count,
    generic_fillers,
    insert_negation,
    invert_cause_effect,
    make_false_statement,
    perturb_number_value,
    perturb_numbers,
    pick_distractors,
    replace_with_antonym,
    reverse_qualifier,
    swap_around_copula,
    synthesize,
)
from generation.options import fill_template, format_option
from parsing.patterns import normalize_key
from parsing.text_metrics import similarity


@pytest.mark.parametrize("token", ["5", "42", "350", "1,200", "3.75", "1846"])
def test_perturbed_number_differs(token):
    rng = random.Random(0)
    for _ in range(20):
        assert perturb_number_value(token, rng) != token


def test_perturbed_number_keeps_precision():
    result = perturb_number_value("3.75", random.Random(3))
    assert re.fullmatch(r"-?\d+\.\d{2}", result)


def test_perturbed_year_stays_close():
    rng = random.Random(5)
    for _ in range(20):
        assert abs(int(perturb_number_value("1846", rng)) - 1846) <= 30


def test_perturb_numbers_without_number_returns_none(rng):
    assert perturb_numbers("Xylem carries water upward", rng) is None


def test_numeric_fact_yields_distractor_with_different_number(rng):
    correct = "The process takes 5 minutes."
    distractors = synthesize(correct, [], rng, count=3)
    assert len(distractors) == 3
    numbers = [n for d in distractors for n in re.findall(r"\d+", d)]
    assert any(n != "5" for n in numbers)
    assert all(normalize_key(d) != normalize_key(correct) for d in distractors)


def test_synthesize_meets_count_and_stays_dissimilar(rng):
    correct = "Jupiter is the largest planet in the Solar System"
    pool = [
        "Mercury orbits the Sun every 88 days.",
        "Neptune was discovered in 1846 by Johann Galle.",
        "Saturn is famous for its bright rings of ice.",
    ]
    distractors = synthesize(correct, pool, rng, count=3)
    assert len(distractors) == 3
    assert len({normalize_key(d) for d in distractors}) == 3
    for d in distractors:
        assert similarity(d, correct) < 0.7


def test_synthesize_pads_when_nothing_else_works(rng):
    distractors = synthesize("Xylem", [], rng, count=4, subject="xylem")
    assert len(distractors) == 4
    assert len({normalize_key(d) for d in distractors}) == 4


@pytest.mark.parametrize("template", FABRICATION_TEMPLATES)
def test_fabrication_is_a_whole_statement(template):
    filled = fill_template(template, "Great Red Spot")
    assert filled.startswith("Great Red Spot ")
    assert filled.endswith(template.split("}")[-1])
    assert format_option(filled) == filled


def test_generic_fillers_fit_and_stay_unique():
    fillers = generic_fillers("Great Red Spot", "A storm on Jupiter", [], 5)
    assert len(fillers) == 5
    assert len({normalize_key(f) for f in fillers}) == 5
    for filler in fillers:
        assert filler.startswith("Great Red Spot ")
        assert format_option(filler) == filler


def test_reverse_qualifier_flips_word():
    assert reverse_qualifier("Plants always need light") == "Plants never need light"


def test_cause_effect_is_inverted():
    result = invert_cause_effect("The ground is wet because it rained")
    assert result == "It rained because the ground is wet"


def test_insert_negation_and_back():
    negated = insert_negation("Oxygen is required for respiration")
    assert negated == "Oxygen is not required for respiration"
    assert insert_negation(negated) == "Oxygen is required for respiration"
    assert insert_negation("Birds can fly") == "Birds cannot fly"


def test_replace_with_antonym():
    assert replace_with_antonym("The reaction is stable at room temperature") == \
        "The reaction is unstable at room temperature"
    assert replace_with_antonym("The data is readable by machines") == "The data is unreadable by machines"


def test_swap_around_copula():
    assert swap_around_copula("Paris is the capital of France") == "The capital of France is Paris"


def test_false_statement_always_changes_text():
    rng = random.Random(11)
    for statement in [
        "Mercury orbits the Sun every 88 days.",
        "Xylem carries water from the roots.",
        "Photosynthesis converts light energy into chemical energy.",
    ]:
        false = make_false_statement(statement, rng)
        assert normalize_key(false) != normalize_key(statement)
        assert false.endswith(".")


def test_false_statement_fallback_wrapper():
    result = make_false_statement("Plants grow toward sunlight.", random.Random(2))
    assert result == "It is not the case that Plants grow toward sunlight."


def test_distractor_count_by_difficulty():
    assert distractor_count("easy") == 3
    assert distractor_count("medium") == 3
    assert distractor_count("hard") == 4


def test_hard_keeps_most_plausible_distractors():
    correct = "Light takes 8 minutes to reach Earth"
    candidates = [
        "Sound takes 8 minutes to reach Earth",
        "Unrelated claim about volcanoes",
        "Light takes 20 minutes to reach Mars",
        "Something else entirely different",
    ]
    picked = pick_distractors(correct, candidates, "hard")
    assert len(picked) == 3
    assert "Something else entirely different" not in picked or "Unrelated claim about volcanoes" not in picked
    assert picked[0] == "Sound takes 8 minutes to reach Earth"
    assert pick_distractors(correct, candidates, "easy") == candidates[:3]
