"""
Structural signal: regularity of layout rather than of vocabulary.

Prose and source code are measured differently; the caller decides which
through ``is_code``. Like the statistical signal, each measure becomes a 0-1
machine-likeness and a fixed weight table folds them into a 0-100 score.
"""
import re
from collections import Counter
from typing import Dict, List

import numpy as np

from zana.models.schemas import SubSignal
from zana.services.statistical_analyzer import NEUTRAL_SCORE, ramp
from zana.utils.text_processing import sentence_spans, split_paragraphs, word_tokens

MIN_PROSE_WORDS = 20
MIN_CODE_LINES = 3

TRANSITIONS = (
    "additionally", "moreover", "furthermore", "however", "therefore", "consequently",
    "thus", "hence", "overall", "ultimately", "notably", "importantly", "similarly",
    "nevertheless", "nonetheless", "meanwhile", "subsequently", "accordingly",
    "in conclusion", "in summary", "in addition", "as a result", "on the other hand",
    "for example", "for instance", "in other words", "it is important to note",
)
TRANSITION_RE = re.compile(r"\b(" + "|".join(re.escape(t) for t in TRANSITIONS) + r")\b", re.IGNORECASE)
PUNCT_RE = re.compile(r"[,;:!?()\"'—–-]")

PROSE_WEIGHTS = {
    "paragraph_uniformity": 0.25,
    "sentence_uniformity": 0.30,
    "transition_rate": 0.25,
    "punctuation_regularity": 0.20,
}

IDENT_RE = re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*\b")
SNAKE_RE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)+$")
CAMEL_RE = re.compile(r"^[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+$")
COMMENT_RE = re.compile(r"^\s*(#|//|/\*|\*|--|<!--)")
MARKER_RE = re.compile(r"\b(TODO|FIXME|XXX|HACK)\b")
COMMA_TIGHT_RE = re.compile(r",[^\s\n)\]}'\"]")

CODE_WEIGHTS = {
    "indentation": 0.20,
    "naming": 0.20,
    "comment_density": 0.15,
    "no_markers": 0.10,
    "spacing": 0.15,
    "line_length_uniformity": 0.20,
}


def coefficient_of_variation(values: List[float]) -> float:
    arr = np.array(values, dtype=float)
    if arr.size < 2 or arr.mean() == 0:
        return float("nan")
    return float(arr.std() / arr.mean())


def _likeness(value: float, human: float, machine: float) -> float:
    if np.isnan(value):
        return 0.5
    return ramp(value, human, machine)


def _fold(measures: Dict[str, float], likeness: Dict[str, float], weights: Dict[str, float], mode: str) -> SubSignal:
    score = 100.0 * sum(weights[k] * likeness[k] for k in weights)
    return SubSignal(
        score=round(min(100.0, max(0.0, score)), 2),
        metadata={
            "mode": mode,
            "measures": {k: (None if np.isnan(v) else round(v, 4)) for k, v in measures.items()},
            "likeness": {k: round(v, 4) for k, v in likeness.items()},
        },
    )


def _analyze_prose(content: str) -> SubSignal:
    words = word_tokens(content)
    if len(words) < MIN_PROSE_WORDS:
        return SubSignal(score=NEUTRAL_SCORE, metadata={"mode": "prose", "reason": "insufficient_text"})

    paragraphs = split_paragraphs(content)
    sentences = [content[s:e] for s, e in sentence_spans(content)]

    paragraph_cv = coefficient_of_variation([len(word_tokens(p)) for p in paragraphs])
    sentence_cv = coefficient_of_variation([len(word_tokens(s)) for s in sentences])
    transition_rate = len(TRANSITION_RE.findall(content)) / max(1, len(sentences))
    punct_cv = coefficient_of_variation([len(PUNCT_RE.findall(s)) for s in sentences])

    measures = {
        "paragraph_uniformity": paragraph_cv,
        "sentence_uniformity": sentence_cv,
        "transition_rate": transition_rate,
        "punctuation_regularity": punct_cv,
    }
    likeness = {
        "paragraph_uniformity": _likeness(paragraph_cv, 0.60, 0.15),
        "sentence_uniformity": _likeness(sentence_cv, 0.60, 0.20),
        "transition_rate": _likeness(transition_rate, 0.05, 0.35),
        "punctuation_regularity": _likeness(punct_cv, 0.90, 0.30),
    }
    return _fold(measures, likeness, PROSE_WEIGHTS, "prose")


def _indent_consistency(lines: List[str]) -> float:
    indents = [line[:len(line) - len(line.lstrip(" \t"))] for line in lines]
    indents = [i for i in indents if i]
    if not indents:
        return float("nan")
    uses_tabs = any("\t" in i for i in indents)
    uses_spaces = any(" " in i for i in indents)
    widths = [len(i.expandtabs(4)) for i in indents]
    unit = min(widths)
    consistency = sum(1 for w in widths if w % unit == 0) / len(widths)
    if uses_tabs and uses_spaces:
        consistency *= 0.5
    return consistency


def _naming_dominance(content: str) -> float:
    styles = Counter()
    for ident in set(IDENT_RE.findall(content)):
        if SNAKE_RE.match(ident):
            styles["snake"] += 1
        elif CAMEL_RE.match(ident):
            styles["camel"] += 1
    total = sum(styles.values())
    if total < 3:
        return float("nan")
    return max(styles.values()) / total


def _analyze_code(content: str) -> SubSignal:
    lines = [line for line in content.splitlines() if line.strip()]
    if len(lines) < MIN_CODE_LINES:
        return SubSignal(score=NEUTRAL_SCORE, metadata={"mode": "code", "reason": "insufficient_text"})

    comment_density = sum(1 for line in lines if COMMENT_RE.match(line)) / len(lines)
    has_markers = 1.0 if MARKER_RE.search(content) else 0.0
    irregular = sum(1 for line in lines if line != line.rstrip() or COMMA_TIGHT_RE.search(line))
    spacing_irregularity = irregular / len(lines)
    line_cv = coefficient_of_variation([len(line.strip()) for line in lines])
    indentation = _indent_consistency(lines)
    naming = _naming_dominance(content)

    measures = {
        "indentation": indentation,
        "naming": naming,
        "comment_density": comment_density,
        "no_markers": 1.0 - has_markers,
        "spacing": spacing_irregularity,
        "line_length_uniformity": line_cv,
    }
    likeness = {
        "indentation": _likeness(indentation, 0.85, 1.0),
        "naming": _likeness(naming, 0.70, 1.0),
        # tutorial-style code sits around one comment line in five
        "comment_density": max(0.0, 1.0 - abs(comment_density - 0.2) / 0.2),
        "no_markers": 1.0 - has_markers,
        "spacing": _likeness(spacing_irregularity, 0.10, 0.0),
        "line_length_uniformity": _likeness(line_cv, 0.70, 0.30),
    }
    return _fold(measures, likeness, CODE_WEIGHTS, "code")


def analyze_structural(content: str, is_code: bool) -> SubSignal:
    if is_code:
        return _analyze_code(content)
    return _analyze_prose(content.strip())
