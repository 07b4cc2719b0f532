"""
Question / option text formatting and the OptionSet abstraction.

Formatting is idempotent: running format_question / format_option on already
formatted text returns it unchanged. Every generator builds its options through
OptionSet so uniqueness and padding rules live in one place.
"""

from typing import List, Optional, Sequence
import random
import re

from generation.config import OPTION_MAX_CHARS, OPTION_MAX_WORDS
from parsing.patterns import (
    has_number,
    has_proper_noun,
    head_noun_phrase,
    normalize_key,
    strip_article,
    verb_forms,
)
from parsing.text_metrics import shares_phrase

LEAD_IN_PATTERNS = [
    re.compile(
        r"^(?:according to|based on|as (?:stated|mentioned|described|explained) in)\s+"
        r"(?:the|this)\s+(?:document|text|passage|material|article|reading|notes)\s*[,:]?\s*",
        re.I,
    ),
    re.compile(r"^in\s+(?:this|the)\s+(?:document|text|passage|material|article)\s*[,:]?\s*", re.I),
    re.compile(r"^the\s+(?:document|text|passage)\s+(?:states|says|explains|mentions)\s+that\s+", re.I),
]

LEADING_QUOTES = "\"'“”‘’«»`"
CLOSING_QUOTES = "\"”»"

WHICH_OF_THE_FOLLOWING = re.compile(r"^which\s+of\s+the\s+following\s+(is|are)\s+(.+)$", re.I)

INTERROGATIVE_STARTS = (
    "what", "which", "who", "whom", "whose", "how", "why", "when", "where",
    "is", "are", "does", "do", "did", "can", "could", "should", "will", "was", "were",
)

TRAILING_FILLERS = {"and", "or", "of", "the", "a", "an", "to", "in", "for", "with", "by", "as", "that", "which", "about"}

CLAUSE_SPLIT = re.compile(r"[,;:]\s+|\s+(?:which|because|while|whereas|although)\s+", re.I)

# {subject} leads so every template stays a full statement; {be}/{has} agree with it.
# Fixed text is kept short enough that a four-word subject still fits one option.
GENERIC_FILLER_TEMPLATES = [
    "{subject} {be} a common misconception",
    "{subject} {has} no bearing on this claim",
    "{subject} {be} unsupported by the material",
    "{subject} {has} the opposite effect",
    "{subject} {be} confused with a related idea",
    "{subject} {be} overstated in this role",
]

ATTRIBUTIONS = [
    "Research shows that",
    "Experts say that",
    "Studies show that",
    "Many claim that",
    "Sources state that",
]


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def _strip_quotes(text: str) -> str:
    """Drop an opening quote mark and, for double quotes, its closing partner."""
    if not text or text[0] not in LEADING_QUOTES:
        return text
    opener, body = text[0], text[1:]
    if opener in "\"“«":
        close = next((i for i, c in enumerate(body) if c in CLOSING_QUOTES), None)
        if close is not None:
            body = body[:close] + body[close + 1:]
    return body.strip()


def _strip_lead_ins(text: str) -> str:
    """Remove quotes and stacked lead-ins ("In this document, according to the text, ...") until none remain."""
    previous = None
    while text != previous:
        previous = text
        text = _strip_quotes(text)
        for pattern in LEAD_IN_PATTERNS:
            text = pattern.sub("", text).strip()
    return text


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def format_question(text: str) -> str:
    """
    Normalize a question prompt.

    - strips filler lead-ins ("According to the document, ...")
    - rewords "Which of the following is X?" into "What is X?"
    - capitalizes the first letter and ensures terminal punctuation
    """
    s = _strip_lead_ins(_collapse(text))
    m = WHICH_OF_THE_FOLLOWING.match(s)
    if m:
        s = f"What {m.group(1).lower()} {m.group(2)}"
    s = _capitalize(s.strip())
    if not s:
        return s
    if s[-1] not in ".?!":
        first = s.split()[0].lower()
        s += "?" if first in INTERROGATIVE_STARTS else "."
    return s


def _needs_shortening(text: str) -> bool:
    return len(text) > OPTION_MAX_CHARS or len(text.split()) > OPTION_MAX_WORDS


def _shorten(text: str) -> str:
    """Cut a long option down to a concise phrase, preferring the detail-bearing clause."""
    clauses = [c.strip() for c in CLAUSE_SPLIT.split(text) if c and len(c.strip().split()) >= 3]
    chosen = next((c for c in clauses if has_number(c) or has_proper_noun(c)), None)
    if chosen is None:
        chosen = clauses[0] if clauses else text
    words = chosen.split()[:OPTION_MAX_WORDS]
    while len(" ".join(words)) > OPTION_MAX_CHARS and len(words) > 3:
        words.pop()
    while len(words) > 1 and words[-1].lower().strip(",;:") in TRAILING_FILLERS:
        words.pop()
    short = " ".join(words).rstrip(",;:")
    return short[:OPTION_MAX_CHARS].rstrip()


def format_option(text: str) -> str:
    """Normalize an answer option: no lead-in, concise, capitalized, no trailing period."""
    s = _strip_lead_ins(_collapse(text))
    s = s.rstrip(" .;:,")
    if _needs_shortening(s):
        s = _strip_lead_ins(_shorten(s)).rstrip(" .;:,")
    return _capitalize(s)


def short_subject(subject: str, max_words: int = 4) -> str:
    words = strip_article(subject or "").split()
    return " ".join(words[:max_words]) or "this topic"


def fill_template(template: str, subject: str) -> Optional[str]:
    """
    Fill a {subject} template so the result fits as one option without shortening.

    The subject drops any trailing prepositional phrase, then leading modifiers
    one at a time ("bright rings of Saturn" -> "bright rings" -> "rings") until
    the statement fits; None if even the bare head noun does not.
    """
    words = head_noun_phrase(short_subject(subject)).split() or ["this", "topic"]
    for start in range(len(words)):
        phrase = " ".join(words[start:])
        text = _capitalize(template.format(subject=phrase, **verb_forms(phrase)))
        if not _needs_shortening(text):
            return text
    return None


def template_options(
    subject: str, templates: List[str] = GENERIC_FILLER_TEMPLATES, attributed: bool = True
) -> List[str]:
    """Every template that fits for subject, then the attribution-prefixed forms that still fit."""
    plain = [t for t in (fill_template(template, subject) for template in templates) if t]
    if not attributed:
        return plain
    prefixed = [
        fill_template(f"{attribution} {template}", subject)
        for attribution in ATTRIBUTIONS
        for template in templates
    ]
    return plain + [t for t in prefixed if t]


class OptionSet:
    """
    Ordered answer options with a single normalize / dedupe / pad contract.

    Put correct answers first: dedupe keeps the earliest of two colliding
    options and replaces the later one.
    """

    def __init__(self, options: Optional[List[str]] = None, subject: str = ""):
        self.options: List[str] = [o for o in (options or []) if o and o.strip()]
        self.subject = short_subject(subject)
        self._replacements = 0

    def __len__(self) -> int:
        return len(self.options)

    @property
    def keys(self) -> List[str]:
        return [normalize_key(o) for o in self.options]

    def add(self, option: str) -> bool:
        """Append a formatted option if it does not collide with an existing one."""
        formatted = format_option(option)
        if not formatted or self._collides(formatted, self.options):
            return False
        self.options.append(formatted)
        return True

    def normalize(self) -> "OptionSet":
        self.options = [format_option(o) for o in self.options]
        return self

    def _collides(self, option: str, earlier: List[str]) -> bool:
        key = normalize_key(option)
        return any(key == normalize_key(e) or shares_phrase(option, e, 3) for e in earlier)

    def _alternative(self, taken: List[str]) -> str:
        """A templated option unique against taken; rotates attribution qualifiers if needed."""
        taken_keys = {normalize_key(t) for t in taken}
        plain = template_options(self.subject, attributed=False)
        start = self._replacements % max(len(plain), 1)
        self._replacements += 1
        ordered = plain[start:] + plain[:start]
        for option in ordered:
            if normalize_key(option) not in taken_keys and not self._collides(option, taken):
                return option
        for option in ordered + template_options(self.subject)[len(plain):]:
            if normalize_key(option) not in taken_keys:
                return option
        n = len(taken) + 1
        while normalize_key(f"Not stated in the material ({n})") in taken_keys:
            n += 1
        return format_option(f"Not stated in the material ({n})")

    def dedupe(self) -> "OptionSet":
        """Replace later options that repeat or share a 3-word phrase with an earlier one."""
        kept: List[str] = []
        for option in self.options:
            if self._collides(option, kept):
                kept.append(self._alternative(kept))
            else:
                kept.append(option)
        self.options = kept
        return self

    def replace_repeats(self, protected: Sequence[int] = ()) -> bool:
        """
        Swap exact repeats of an earlier option for templated alternatives.

        Returns False, leaving the options untouched, when a protected index
        (a correct answer) is itself a repeat.
        """
        kept: List[str] = []
        for i, option in enumerate(self.options):
            if normalize_key(option) in {normalize_key(k) for k in kept}:
                if i in protected:
                    return False
                kept.append(self._alternative(kept))
            else:
                kept.append(option)
        self.options = kept
        return True

    def pad_to_count(self, n: int) -> "OptionSet":
        """Trim or pad with templated alternatives so exactly n options remain."""
        self.options = self.options[:n]
        while len(self.options) < n:
            self.options.append(self._alternative(self.options))
        return self

    def shuffle(self, rng: random.Random) -> "OptionSet":
        rng.shuffle(self.options)
        return self

    def index_of(self, text: str) -> Optional[int]:
        key = normalize_key(format_option(text))
        for i, k in enumerate(self.keys):
            if k == key:
                return i
        return None
