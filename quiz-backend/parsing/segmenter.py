"""
Text segmenter: cleaned document text → ordered Chunks.

Strategy (first one that yields enough usable spans wins):
1. Section headers: repeated short ALL-CAPS lines. ≥3 headers → split on them, keep spans > 100 chars.
2. Paragraphs: blank-line breaks, keep spans > 30 chars, need ≥5.
3. Capital-led lines: split before lines starting with a capital letter, need ≥5.
4. Sentence groups: accumulate sentences into spans of ~500 chars.

Spans over 1000 chars are cut again at a sentence boundary (after offset 200, at most 800)
so downstream stages stay bounded by input length.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import logging
import re

from parsing.patterns import split_sentences

log = logging.getLogger(__name__)

HEADER_MAX_WORDS = 8
MIN_HEADERS = 3
MIN_SECTION_SPANS = 3
MIN_PARAGRAPH_SPANS = 5
SECTION_MIN_CHARS = 100
PARAGRAPH_MIN_CHARS = 30
SENTENCE_GROUP_CHARS = 500
MAX_SPAN_CHARS = 1000
SPLIT_SEARCH_FROM = 200
SPLIT_MAX_CHARS = 800

SENTENCE_BOUNDARY = re.compile(r"[.!?](?=\s)")


@dataclass(frozen=True)
class Chunk:
    """A contiguous span of cleaned text; only a search surface for later stages."""
    text: str
    index: int


def _is_section_header(line: str) -> bool:
    """Short ALL-CAPS line without a sentence ending, e.g. 'CELL STRUCTURE' or '2. METHODS'."""
    s = line.strip()
    if not s or s.endswith((".", "?", "!", ",")):
        return False
    if len(s.split()) > HEADER_MAX_WORDS:
        return False
    letters = [c for c in s if c.isalpha()]
    if len(letters) < 3:
        return False
    return all(c.isupper() for c in letters)


def _split_on_headers(text: str) -> List[str]:
    lines = text.splitlines()
    headers = [ln for ln in lines if _is_section_header(ln)]
    if len(headers) < MIN_HEADERS:
        return []
    spans: List[str] = []
    current: List[str] = []
    for line in lines:
        if _is_section_header(line):
            spans.append("\n".join(current))
            current = []
            continue
        current.append(line)
    spans.append("\n".join(current))
    kept = [s.strip() for s in spans if len(s.strip()) > SECTION_MIN_CHARS]
    return kept if len(kept) >= MIN_SECTION_SPANS else []


def _split_on_paragraphs(text: str) -> List[str]:
    spans = [s.strip() for s in re.split(r"\n\s*\n", text) if len(s.strip()) > PARAGRAPH_MIN_CHARS]
    return spans if len(spans) >= MIN_PARAGRAPH_SPANS else []


def _split_on_capital_lines(text: str) -> List[str]:
    spans = [s.strip() for s in re.split(r"\n(?=[A-Z])", text) if len(s.strip()) > PARAGRAPH_MIN_CHARS]
    return spans if len(spans) >= MIN_PARAGRAPH_SPANS else []


def _group_sentences(text: str) -> List[str]:
    spans: List[str] = []
    current = ""
    for sentence in split_sentences(text):
        if current and len(current) + len(sentence) + 1 > SENTENCE_GROUP_CHARS:
            spans.append(current)
            current = sentence
        else:
            current = f"{current} {sentence}".strip()
    if current:
        spans.append(current)
    return spans


STRATEGIES: List[Tuple[str, Callable[[str], List[str]]]] = [
    ("section_headers", _split_on_headers),
    ("paragraphs", _split_on_paragraphs),
    ("capital_lines", _split_on_capital_lines),
    ("sentence_groups", _group_sentences),
]


def _bound_span(span: str) -> List[str]:
    """Cut spans longer than MAX_SPAN_CHARS at the first sentence end after SPLIT_SEARCH_FROM."""
    pieces: List[str] = []
    rest = re.sub(r"\s+", " ", span).strip()
    while len(rest) > MAX_SPAN_CHARS:
        m = SENTENCE_BOUNDARY.search(rest, SPLIT_SEARCH_FROM, SPLIT_MAX_CHARS)
        if m:
            cut = m.end()
        else:
            space = rest.rfind(" ", SPLIT_SEARCH_FROM, SPLIT_MAX_CHARS)
            cut = space if space > 0 else SPLIT_MAX_CHARS
        pieces.append(rest[:cut].strip())
        rest = rest[cut:].strip()
    if rest:
        pieces.append(rest)
    return pieces


def segment_text(text: str) -> List[Chunk]:
    """
    Split cleaned text into Chunks using the first strategy that yields enough spans.

    Returns an empty list for empty input. The caller decides whether the
    result is enough structure to continue (see generation.pipeline).
    """
    if not text or not text.strip():
        return []
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")

    spans: Optional[List[str]] = None
    for name, strategy in STRATEGIES:
        spans = strategy(normalized)
        if spans:
            log.debug("segmenter strategy=%s spans=%d", name, len(spans))
            break

    bounded = [piece for span in (spans or []) for piece in _bound_span(span)]
    return [Chunk(text=piece, index=i) for i, piece in enumerate(bounded)]
