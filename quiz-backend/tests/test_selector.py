from generation.schemas import QuestionCandidate
from generation.selector import family_quotas, select_questions


def _candidate(source, n, qtype="single"):
    options = [f"Option {word} for question {n}" for word in ("alpha", "bravo", "charlie", "delta")]
    answer = [0, 2] if qtype == "multiple" else 1
    if source == "true_false":
        options = ["True", "False"]
        answer = 0
    return QuestionCandidate(
        prompt=f"Which statement about topic number {n} from {source} is correct?",
        options=options,
        answer=answer,
        type=qtype,
        source=source,
    )


def _pool():
    pool = []
    n = 0
    for source, count, qtype in [
        ("exam", 10, "single"),
        ("msq", 4, "multiple"),
        ("factual", 4, "single"),
        ("definition", 2, "single"),
        ("true_false", 5, "single"),
    ]:
        for _ in range(count):
            n += 1
            pool.append(_candidate(source, n, qtype))
    return pool


def test_family_quotas():
    assert family_quotas(5) == {"exam": 2, "msq": 1, "factual": 1, "true_false": 1}
    assert family_quotas(10) == {"exam": 5, "msq": 2, "factual": 2, "true_false": 1}
    assert family_quotas(15) == {"exam": 7, "msq": 3, "factual": 3, "true_false": 2}


def test_budget_per_difficulty():
    pool = _pool()
    assert len(select_questions(pool, "easy")) == 5
    assert len(select_questions(pool, "medium")) == 10
    assert len(select_questions(pool, "hard")) == 15


def test_ids_are_contiguous_and_questions_unique():
    questions = select_questions(_pool(), "hard")
    assert [q.id for q in questions] == list(range(1, 16))
    assert len({q.question for q in questions}) == 15


def test_selection_is_type_diverse():
    questions = select_questions(_pool(), "medium")
    assert sum(1 for q in questions if q.type == "multiple") == 2
    assert sum(1 for q in questions if q.options == ["True", "False"]) == 1


def test_backfill_when_family_is_short():
    pool = [_candidate("exam", n) for n in range(8)]
    questions = select_questions(pool, "medium")
    assert len(questions) == 8


def test_multiple_select_ranked_first():
    questions = select_questions(_pool(), "easy")
    assert questions[0].type == "multiple"
    assert questions[0].answer == [0, 2]


def test_invalid_candidates_never_selected():
    broken = QuestionCandidate(prompt="Why?", options=["a", "b"], answer=0, source="exam")
    assert select_questions([broken], "easy") == []


def test_duplicate_prompts_collapse():
    questions = select_questions([_candidate("exam", 1), _candidate("exam", 1)], "easy")
    assert len(questions) == 1
