"""
Rule-based sentence patterns shared by fact extraction, question generation and distractors.

Each ExtractionRule captures a sentence into subject / predicate / object.
Stages compose these rules instead of re-deriving string scanning logic.
NO AI/LLM usage - all rules are deterministic regexes.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import re


SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
TERMINAL_PUNCT = re.compile(r"[.!?]+$")
NUMBER_PATTERN = re.compile(r"\d+(?:[.,]\d+)*")
WORD_PATTERN = re.compile(r"[A-Za-z][A-Za-z'\-]*")

PRONOUNS = {
    "it", "its", "this", "that", "these", "those", "they", "them", "he", "she",
    "we", "you", "i", "there", "here", "which", "who", "what", "one", "such",
}

ARTICLES = ("the ", "a ", "an ")

HEDGE_WORDS = {"might", "maybe", "probably", "perhaps", "possibly", "could be", "may be"}

INDICATOR_VERBS = {
    "is", "are", "was", "were", "has", "have", "had", "can", "will", "must",
    "provides", "contains", "uses", "requires", "allows", "enables", "produces",
    "includes", "consists", "creates", "supports", "generates", "causes", "occurs",
    "helps", "makes", "takes", "leads", "results", "depends", "involves",
}

DOMAIN_NOUNS = {
    "process", "system", "method", "function", "structure", "theory", "principle",
    "model", "technique", "mechanism", "approach", "concept", "algorithm",
    "component", "protocol", "framework", "organism", "reaction", "element",
    "network", "layer", "device", "cell", "energy", "data",
}

COMPARISON_CUES = (
    "compared to", "compared with", "differs from", "differ from", "versus", "vs.",
    "in contrast to", "whereas", "unlike", "more than", "less than",
)

LIST_CUES = (
    "include", "includes", "including", "such as", "following", "several",
    "consists of", "consist of", "comprises", "comprise", "various", "types of", "kinds of",
)

MONTHS = (
    "january", "february", "march", "april", "may", "june", "july", "august",
    "september", "october", "november", "december",
)

_DEFINITION_VERBS = r"is defined as|are defined as|refers to|refer to|represents|represent|means|mean|is|are"

_SVC_VERBS = (
    r"is|are|was|were|has|have|had|can|will|provides|provide|contains|contain|uses|use|"
    r"requires|require|allows|allow|enables|enable|produces|produce|includes|include|"
    r"consists of|creates|create|supports|support|generates|generate|becomes|become|"
    r"takes|take|makes|make|helps|help|occurs|causes|cause|leads to|lead to|"
    r"results in|result in|depends on|depend on"
)


@dataclass(frozen=True)
class RuleMatch:
    """Result of applying one rule to one sentence."""
    rule: str
    subject: str
    predicate: str
    object: str
    sentence: str


@dataclass(frozen=True)
class ExtractionRule:
    """A named regex with a subject / predicate / object capture contract."""
    name: str
    pattern: re.Pattern
    accept: Optional[Callable[[str, str, str], bool]] = None

    def match(self, sentence: str) -> Optional[RuleMatch]:
        text = strip_terminal(sentence)
        m = self.pattern.search(text)
        if not m:
            return None
        subject = (m.group("subject") or "").strip(" ,;:")
        predicate = (m.group("predicate") or "").strip()
        obj = (m.group("object") or "").strip(" ,;:")
        if self.accept and not self.accept(subject, predicate, obj):
            return None
        return RuleMatch(self.name, subject, predicate, obj, sentence.strip())


def _accept_definition(subject: str, predicate: str, obj: str) -> bool:
    name = strip_article(subject)
    if len(name) < 3 or len(obj) < 20:
        return False
    if len(name.split()) > 6:
        return False
    return not is_pronoun(name)


def _accept_svc(subject: str, predicate: str, obj: str) -> bool:
    name = strip_article(subject)
    return len(name) >= 3 and len(obj) >= 3 and not is_pronoun(name) and len(name.split()) <= 8


def _accept_list(subject: str, predicate: str, obj: str) -> bool:
    return "," in obj and len(split_list_items(obj)) >= 2


DEFINITION = ExtractionRule(
    "definition",
    re.compile(
        rf"^(?P<subject>[A-Za-z0-9][\w\s\-'()]{{1,60}}?)\s+(?P<predicate>{_DEFINITION_VERBS})\s+(?P<object>.+)$"
    ),
    _accept_definition,
)

DEFINITION_QUESTION = ExtractionRule(
    "definition_question",
    re.compile(r"^(?P<predicate>what|who)\s+(?:is|are)\s+(?P<subject>[^?]{3,80})(?P<object>)$", re.I),
)

COMPARISON = ExtractionRule(
    "comparison",
    re.compile(
        r"^(?P<subject>.*?)\b(?P<predicate>compared to|compared with|differs? from|versus|vs\.|"
        r"in contrast to|whereas|unlike|more than|less than)\s+(?P<object>.+)$",
        re.I,
    ),
)

LIST_ENUMERATION = ExtractionRule(
    "list_enumeration",
    re.compile(
        r"^(?P<subject>.*?)\b(?P<predicate>includes?|including|such as|consists? of|comprises?|"
        r"the following|several|various|types of|kinds of)\b:?\s*(?P<object>.+)$",
        re.I,
    ),
    _accept_list,
)

SUBJECT_VERB_COMPLEMENT = ExtractionRule(
    "subject_verb_complement",
    re.compile(rf"^(?P<subject>.{{3,80}}?)\s+(?P<predicate>{_SVC_VERBS})\s+(?P<object>.+)$"),
    _accept_svc,
)

CAUSE_EFFECT = ExtractionRule(
    "cause_effect",
    re.compile(
        r"^(?P<subject>.+?),?\s+(?P<predicate>because|since|due to|as a result of)\s+(?P<object>.+)$",
        re.I,
    ),
)

COPULA = ExtractionRule(
    "copula",
    re.compile(r"^(?P<subject>.+?)\s+(?P<predicate>is|are|was|were)\s+(?P<object>.+)$"),
)


# ─── Text helpers ─────────────────────────────────────────────────────────────

def split_sentences(text: str) -> List[str]:
    """Split on sentence-ending punctuation followed by whitespace."""
    if not text or not text.strip():
        return []
    flat = re.sub(r"\s+", " ", text).strip()
    return [s.strip() for s in SENTENCE_SPLIT.split(flat) if s.strip()]


def strip_terminal(text: str) -> str:
    return TERMINAL_PUNCT.sub("", (text or "").strip()).strip()


def strip_article(text: str) -> str:
    s = (text or "").strip()
    low = s.lower()
    for art in ARTICLES:
        if low.startswith(art):
            return s[len(art):].strip()
    return s


SINGULAR_S_WORDS = {
    "mars", "news", "series", "species", "physics", "mathematics", "economics",
    "genetics", "lens", "gas", "texas", "athens", "paris", "venus", "status",
}

IRREGULAR_PLURALS = {"people", "children", "data", "media", "criteria", "phenomena", "mice", "men", "women", "teeth"}

PREPOSITIONS = {"of", "in", "on", "for", "with", "from", "at", "by", "to", "into", "during"}


def head_noun_phrase(text: str) -> str:
    """Drop a trailing prepositional phrase: 'rings of Saturn' -> 'rings'."""
    words = strip_article(text).split()
    for i, word in enumerate(words[1:], start=1):
        if word.lower() in PREPOSITIONS:
            return " ".join(words[:i])
    return " ".join(words)


def is_plural(phrase: str) -> bool:
    """Heuristic number agreement for a noun phrase."""
    low = f" {(phrase or '').lower()} "
    if " and " in low:
        return True
    words = head_noun_phrase(phrase).lower().split()
    if not words:
        return False
    head = words[-1].strip(",.;:'\"")
    if head in IRREGULAR_PLURALS:
        return True
    if head in SINGULAR_S_WORDS or len(head) <= 3:
        return False
    return head.endswith("s") and not head.endswith(("ss", "us", "is", "ics"))


def verb_forms(phrase: str) -> dict:
    """Auxiliary verbs agreeing with phrase, for str.format templates."""
    if is_plural(phrase):
        return {"be": "are", "was": "were", "has": "have", "does": "do"}
    return {"be": "is", "was": "was", "has": "has", "does": "does"}


def is_pronoun(text: str) -> bool:
    words = (text or "").strip().lower().split()
    return not words or words[0] in PRONOUNS


def is_question(sentence: str) -> bool:
    return (sentence or "").rstrip().endswith("?")


def is_hedged(sentence: str) -> bool:
    low = f" {(sentence or '').lower()} "
    return any(f" {w} " in low for w in HEDGE_WORDS)


def has_number(text: str) -> bool:
    return bool(NUMBER_PATTERN.search(text or ""))


def has_proper_noun(text: str) -> bool:
    """True if a capitalised word appears anywhere except the first position."""
    words = WORD_PATTERN.findall(text or "")
    return any(w[0].isupper() and w.lower() not in PRONOUNS for w in words[1:])


def has_indicator_verb(text: str) -> bool:
    words = set(re.findall(r"[a-z]+", (text or "").lower()))
    return bool(words & INDICATOR_VERBS)


def has_domain_noun(text: str) -> bool:
    low = (text or "").lower()
    return any(re.search(rf"\b{noun}(?:s|es)?\b", low) for noun in DOMAIN_NOUNS)


def has_comparison_cue(text: str) -> bool:
    low = (text or "").lower()
    return any(cue in low for cue in COMPARISON_CUES)


def has_list_cue(text: str) -> bool:
    low = (text or "").lower()
    return "," in low and any(re.search(rf"\b{re.escape(cue)}\b", low) for cue in LIST_CUES)


def split_list_items(tail: str) -> List[str]:
    """'a, b, and c' → ['a', 'b', 'c']; drops empty or overly long items."""
    parts = re.split(r",\s*(?:and\s+|or\s+)?|\s+(?:and|or)\s+", strip_terminal(tail))
    items = []
    for part in parts:
        item = part.strip(" .;:")
        if len(item) < 3 or len(item.split()) > 5:
            continue
        items.append(item)
    return items


def lower_first(text: str) -> str:
    """Lower-case a leading article or pronoun so the phrase can sit mid-sentence."""
    s = (text or "").strip()
    if not s:
        return s
    first = s.split()[0].lower()
    if first in ("the", "a", "an") or first in PRONOUNS:
        return s[0].lower() + s[1:]
    return s


def normalize_key(text: str) -> str:
    """Lowercase, whitespace-collapsed, terminal punctuation removed; used as a dedup key."""
    return re.sub(r"\s+", " ", strip_terminal(text).lower()).strip()
