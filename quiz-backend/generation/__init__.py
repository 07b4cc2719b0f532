"""
Quiz Generation Pipeline
quiz-backend/generation/

Steps:
1. Segmenter            — cleaned text → chunks          (parsing/segmenter.py)
2. Fact Extractor       — chunks → deduplicated facts    (parsing/fact_extractor.py)
3. Question Generators  — factual, definition, comparison, exam-style, multi-select, true/false
4. Distractors          — plausible wrong options per question
5. Validator            — option/answer invariants, repair or discard
6. Selector             — difficulty budget, type diversity, final ids
"""
