import re
import unicodedata
from typing import List, Sequence, Tuple

from nltk.tokenize import wordpunct_tokenize
from nltk.tokenize.punkt import PunktSentenceTokenizer

# Untrained Punkt with default parameters: no corpus download required.
_SENTENCE_TOKENIZER = PunktSentenceTokenizer()

PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")
NON_SPACE_RE = re.compile(r"\S+")

_QUOTE_MAP = str.maketrans({
    "‘": "'", "’": "'", "“": '"', "”": '"',
    "–": "-", "—": "-",
})


def word_tokens(text: str) -> List[str]:
    """Word-like tokens (letters/digits), punctuation dropped."""
    return [t for t in wordpunct_tokenize(text) if any(ch.isalnum() for ch in t)]


def paragraph_spans(text: str) -> List[Tuple[int, int]]:
    spans = []
    start = 0
    for m in PARAGRAPH_BREAK_RE.finditer(text):
        if text[start:m.start()].strip():
            spans.append((start, m.start()))
        start = m.end()
    if text[start:].strip():
        spans.append((start, len(text)))
    return spans


def split_paragraphs(text: str) -> List[str]:
    return [text[s:e].strip() for s, e in paragraph_spans(text)]


def sentence_spans(text: str) -> List[Tuple[int, int]]:
    """
    Sentence character spans. Paragraph breaks always end a sentence,
    even when the paragraph has no terminal punctuation.
    """
    spans = []
    for p_start, p_end in paragraph_spans(text):
        for s, e in _SENTENCE_TOKENIZER.span_tokenize(text[p_start:p_end]):
            spans.append((p_start + s, p_start + e))
    return spans


def split_into_sentences(text: str) -> List[str]:
    """
    Splits text into sentences using NLTK Punkt.
    """
    return [text[s:e] for s, e in sentence_spans(text)]


def segment_spans(content: str, is_code: bool) -> List[str]:
    """
    Cut content into contiguous pieces (sentences for prose, lines for code).
    Each piece keeps its trailing whitespace, so ''.join(pieces) == content.
    """
    if is_code:
        starts = []
        offset = 0
        for line in content.splitlines(keepends=True):
            if line.strip():
                starts.append(offset)
            offset += len(line)
    else:
        starts = [s for s, _ in sentence_spans(content)]

    if not starts:
        return [content]
    starts[0] = 0
    bounds = starts + [len(content)]
    return [content[bounds[i]:bounds[i + 1]] for i in range(len(starts))]


def _normalize_token(token: str) -> str:
    return unicodedata.normalize("NFKC", token).translate(_QUOTE_MAP).casefold()


def anchor_spans(content: str, pieces: Sequence[str]) -> List[Tuple[int, int]]:
    """
    Map externally produced pieces back onto content by sequential word matching.

    Returns one (start, end) span per piece. Spans tile the content: the first
    starts at 0, each ends where the next begins, the last ends at len(content).
    Raises ValueError when the pieces do not cover the content in order.
    """
    tokens = [(m.start(), _normalize_token(m.group())) for m in NON_SPACE_RE.finditer(content)]
    starts = []
    cursor = 0
    for piece in pieces:
        words = [_normalize_token(w) for w in piece.split()]
        if not words:
            raise ValueError("Segment has no text.")
        window = tokens[cursor:cursor + len(words)]
        if len(window) != len(words) or [t for _, t in window] != words:
            raise ValueError(f"Segment does not match content at word {cursor}: {piece[:40]!r}")
        starts.append(window[0][0])
        cursor += len(words)
    if cursor != len(tokens):
        raise ValueError(f"Segments cover {cursor} of {len(tokens)} words.")
    if not starts:
        raise ValueError("No segments returned.")
    starts[0] = 0
    bounds = starts + [len(content)]
    return [(bounds[i], bounds[i + 1]) for i in range(len(starts))]
