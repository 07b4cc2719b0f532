"""
Fact extraction: Chunks → deduplicated candidate factual statements.

Passes (all feed one case-insensitive dedup set, in this order):
1. Definition   — "<Subject> is/are/refers to/means/represents <definition>"
2. Assertion    — 30–300 chars, indicator verb, not hedged, has a concrete cue
3. Comparison   — comparison cue ("compared to", "versus", ...), 30–300 chars
4. Relaxed      — only when < 10 facts: 40–300 chars with a proper noun

Afterwards a fact that is a literal substring of a longer fact (length ratio > 1.3)
is dropped in favour of the longer one.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List
import logging

from parsing.patterns import (
    DEFINITION,
    DEFINITION_QUESTION,
    has_comparison_cue,
    has_domain_noun,
    has_indicator_verb,
    has_number,
    has_proper_noun,
    is_hedged,
    is_question,
    normalize_key,
    split_sentences,
)
from parsing.segmenter import Chunk

log = logging.getLogger(__name__)

SENTENCE_MIN_CHARS = 30
SENTENCE_MAX_CHARS = 300
RELAXED_MIN_CHARS = 40
RELAXED_TRIGGER = 10
SUPERSET_LENGTH_RATIO = 1.3


@dataclass(frozen=True)
class Fact:
    """A short statement believed to carry verifiable content."""
    text: str
    kind: str            # "definition" | "assertion" | "comparison" | "relaxed"
    chunk_index: int


class FactExtractor:
    """
    Deterministic fact extraction over chunk sentences.

    Each pass is a static predicate so generators can reuse the same checks.
    """

    @staticmethod
    def is_definition(sentence: str) -> bool:
        return DEFINITION.match(sentence) is not None

    @staticmethod
    def is_assertion(sentence: str) -> bool:
        """
        General assertion: right length, indicator verb, not hedged,
        not a rhetorical question (definition-style questions are allowed),
        and carrying a capitalised term, a number or a domain noun.
        """
        s = sentence.strip()
        if not (SENTENCE_MIN_CHARS <= len(s) <= SENTENCE_MAX_CHARS):
            return False
        if is_question(s) and DEFINITION_QUESTION.match(s) is None:
            return False
        if is_hedged(s) or not has_indicator_verb(s):
            return False
        return has_proper_noun(s) or has_number(s) or has_domain_noun(s)

    @staticmethod
    def is_comparison(sentence: str) -> bool:
        s = sentence.strip()
        return SENTENCE_MIN_CHARS <= len(s) <= SENTENCE_MAX_CHARS and has_comparison_cue(s)

    @staticmethod
    def is_relaxed(sentence: str) -> bool:
        s = sentence.strip()
        return RELAXED_MIN_CHARS <= len(s) <= SENTENCE_MAX_CHARS and has_proper_noun(s)

    @staticmethod
    def _run_pass(chunks: Iterable[Chunk], kind: str, predicate, seen: Dict[str, Fact]) -> int:
        added = 0
        for chunk in chunks:
            for sentence in split_sentences(chunk.text):
                key = normalize_key(sentence)
                if not key or key in seen:
                    continue
                if predicate(sentence):
                    seen[key] = Fact(text=sentence.strip(), kind=kind, chunk_index=chunk.index)
                    added += 1
        return added

    @staticmethod
    def extract(chunks: List[Chunk]) -> List[Fact]:
        """
        Run every pass and return facts in discovery order.

        Args:
            chunks: Output of segment_text()

        Returns:
            Deduplicated facts with contained near-duplicates removed
        """
        seen: Dict[str, Fact] = {}
        counts = {
            "definition": FactExtractor._run_pass(chunks, "definition", FactExtractor.is_definition, seen),
            "assertion": FactExtractor._run_pass(chunks, "assertion", FactExtractor.is_assertion, seen),
            "comparison": FactExtractor._run_pass(chunks, "comparison", FactExtractor.is_comparison, seen),
        }
        if len(seen) < RELAXED_TRIGGER:
            counts["relaxed"] = FactExtractor._run_pass(chunks, "relaxed", FactExtractor.is_relaxed, seen)

        facts = remove_contained_facts(list(seen.values()))
        log.debug("fact passes=%s kept=%d", counts, len(facts))
        return facts


def remove_contained_facts(facts: List[Fact]) -> List[Fact]:
    """Drop a fact whose text is contained in a fact more than 1.3x its length."""
    keys = [normalize_key(f.text) for f in facts]
    kept = []
    for i, fact in enumerate(facts):
        contained = any(
            j != i
            and len(keys[j]) > len(keys[i]) * SUPERSET_LENGTH_RATIO
            and keys[i] in keys[j]
            for j in range(len(facts))
        )
        if not contained:
            kept.append(fact)
    return kept


# Convenience function for direct use
def extract_facts(chunks: List[Chunk]) -> List[Fact]:
    return FactExtractor.extract(chunks)
