"""
Fold the three sub-scores into one overall score and a confidence radius.

    final_score = round(w_stat * stat + w_struct * struct + w_sem * semantic)
    confidence  = clamp(round(3 + 0.36 * pstdev(stat, struct, semantic)), 3, 20)

Agreeing signals give a tight radius; disagreement widens it. The radius never
reaches zero, since three heuristics cannot justify certainty.
"""
import math
from dataclasses import dataclass
from statistics import pstdev
from typing import Optional

from zana.config import SignalWeights

DEFAULT_WEIGHTS = SignalWeights()

CONFIDENCE_BASE = 3.0
CONFIDENCE_SPREAD_FACTOR = 0.36
CONFIDENCE_MIN = 3
CONFIDENCE_MAX = 20


@dataclass(frozen=True)
class CombinedScore:
    final_score: int
    confidence: int


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _clamp_score(x: float) -> float:
    return max(0.0, min(100.0, float(x)))


def combine(stat_score: float, struct_score: float, semantic_score: float,
            weights: Optional[SignalWeights] = None) -> CombinedScore:
    w = weights or DEFAULT_WEIGHTS
    scores = (_clamp_score(stat_score), _clamp_score(struct_score), _clamp_score(semantic_score))

    weighted = w.statistical * scores[0] + w.structural * scores[1] + w.semantic * scores[2]
    final_score = max(0, min(100, _round_half_up(weighted)))

    radius = _round_half_up(CONFIDENCE_BASE + CONFIDENCE_SPREAD_FACTOR * pstdev(scores))
    confidence = max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, radius))
    return CombinedScore(final_score=final_score, confidence=confidence)
