"""
Statistical signal: machine-likelihood from surface statistics of the text.

Pure and deterministic. Every measure is mapped onto a 0-1 "machine-likeness"
with a clipped linear ramp between a typical human value and a typical
machine value, then combined with a fixed weight table and scaled to 0-100.
"""
import zlib
from typing import Dict, List

import numpy as np

from zana.models.schemas import SubSignal
from zana.utils.text_processing import sentence_spans, word_tokens

NEUTRAL_SCORE = 50.0
MIN_TOKENS = 8
TTR_WINDOW = 50

# (human value, machine value) per measure
RAMPS = {
    "entropy": (0.95, 0.80),
    "burstiness": (0.60, 0.20),
    "trigram_repeat": (0.00, 0.25),
    "type_token_ratio": (0.75, 0.55),
    "compressibility": (0.55, 0.35),
}

WEIGHTS = {
    "entropy": 0.20,
    "burstiness": 0.30,
    "trigram_repeat": 0.20,
    "type_token_ratio": 0.15,
    "compressibility": 0.15,
}


def ramp(value: float, human: float, machine: float) -> float:
    """0 at the human reference, 1 at the machine reference, clipped."""
    t = (value - human) / (machine - human)
    return float(min(1.0, max(0.0, t)))


def normalized_entropy(tokens: List[str]) -> float:
    """Shannon entropy of the token distribution over its maximum, log2(len(tokens))."""
    if len(tokens) < 2:
        return 0.0
    _, counts = np.unique(np.array(tokens), return_counts=True)
    p = counts / counts.sum()
    h = float(-(p * np.log2(p)).sum())
    return h / float(np.log2(len(tokens)))


def burstiness(sentence_lengths: List[int]) -> float:
    """Coefficient of variation of sentence lengths (std / mean)."""
    lengths = np.array([n for n in sentence_lengths if n > 0], dtype=float)
    if lengths.size < 2 or lengths.mean() == 0:
        return float("nan")
    return float(lengths.std() / lengths.mean())


def trigram_repeat_rate(tokens: List[str]) -> float:
    if len(tokens) < 3:
        return 0.0
    trigrams = [" ".join(tokens[i:i + 3]) for i in range(len(tokens) - 2)]
    return 1.0 - len(set(trigrams)) / len(trigrams)


def type_token_ratio(tokens: List[str], window: int = TTR_WINDOW) -> float:
    """Mean segmental TTR, so long texts are not penalised for their length."""
    if len(tokens) < window:
        return len(set(tokens)) / len(tokens) if tokens else 0.0
    ratios = [len(set(tokens[i:i + window])) / window
              for i in range(0, len(tokens) - window + 1, window)]
    return float(np.mean(ratios))


def compressibility_ratio(text: str) -> float:
    b = text.encode("utf-8", errors="replace")
    if not b:
        return 1.0
    return len(zlib.compress(b, 9)) / len(b)


def _neutral(reason: str, tokens: int) -> SubSignal:
    return SubSignal(score=NEUTRAL_SCORE, metadata={"reason": reason, "tokens": tokens})


def analyze_statistical(content: str) -> SubSignal:
    stripped = content.strip()
    tokens = [t.lower() for t in word_tokens(stripped)]
    if len(tokens) < MIN_TOKENS or not any(ch.isspace() for ch in stripped):
        return _neutral("insufficient_text", len(tokens))

    lengths = [len(word_tokens(stripped[s:e])) for s, e in sentence_spans(stripped)]
    measures: Dict[str, float] = {
        "entropy": normalized_entropy(tokens),
        "burstiness": burstiness(lengths),
        "trigram_repeat": trigram_repeat_rate(tokens),
        "type_token_ratio": type_token_ratio(tokens),
        "compressibility": compressibility_ratio(stripped),
    }

    likeness = {}
    for name, value in measures.items():
        if np.isnan(value):
            likeness[name] = 0.5  # single sentence: burstiness undefined
        else:
            likeness[name] = ramp(value, *RAMPS[name])

    score = 100.0 * sum(WEIGHTS[name] * likeness[name] for name in WEIGHTS)
    return SubSignal(
        score=round(min(100.0, max(0.0, score)), 2),
        metadata={
            "tokens": len(tokens),
            "sentences": len(lengths),
            "measures": {k: (None if np.isnan(v) else round(v, 4)) for k, v in measures.items()},
            "likeness": {k: round(v, 4) for k, v in likeness.items()},
        },
    )
