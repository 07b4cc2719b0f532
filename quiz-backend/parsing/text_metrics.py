"""
Lexical similarity helpers.

similarity() is a word-overlap ratio weighted by length ratio. It is a coarse
heuristic; callers compare it against the thresholds in generation.config.
"""

from typing import List, Set
import re

STOPWORDS = set("""
a an the and or but if while of to in on for from with at by as is are was were be been being
this that these those it its into over under about after before during between through up down out
do does did doing have has had having not no nor so too very can will just than then there here
which who whom what when where why how all any each both some such own same other
""".split())


def tokenize(text: str) -> List[str]:
    return re.findall(r"[a-z0-9][a-z0-9'\-]*", (text or "").lower())


def word_set(text: str) -> Set[str]:
    return set(tokenize(text))


def similarity(a: str, b: str) -> float:
    """Jaccard word overlap scaled by how close the two texts are in length (0..1)."""
    wa, wb = word_set(a), word_set(b)
    if not wa or not wb:
        return 0.0
    overlap = len(wa & wb) / len(wa | wb)
    la, lb = len(tokenize(a)), len(tokenize(b))
    length_ratio = min(la, lb) / max(la, lb)
    return overlap * (0.7 + 0.3 * length_ratio)


def key_phrases(text: str) -> Set[str]:
    """Content words: no stopwords, longer than 3 characters."""
    return {w for w in tokenize(text) if w not in STOPWORDS and len(w) > 3}


def key_phrase_overlap(reference: str, other: str) -> float:
    """Fraction of the reference's key phrases that also appear in other."""
    ref = key_phrases(reference)
    if not ref:
        return 0.0
    return len(ref & key_phrases(other)) / len(ref)


def shares_phrase(a: str, b: str, n: int = 3) -> bool:
    """True if a and b share a run of n consecutive words."""
    ta, tb = tokenize(a), tokenize(b)
    if len(ta) < n or len(tb) < n:
        return False
    grams = {tuple(ta[i:i + n]) for i in range(len(ta) - n + 1)}
    return any(tuple(tb[i:i + n]) in grams for i in range(len(tb) - n + 1))
