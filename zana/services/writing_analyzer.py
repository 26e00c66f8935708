import re

import textstat
from spellchecker import SpellChecker

from zana.models.schemas import WritingMetrics
from zana.utils.text_processing import split_into_sentences

WORD_RE = re.compile(r"\b[^\W\d_]+\b")


class WritingAnalyzer:
    """Descriptive readability statistics. Never feeds the detection score."""

    def __init__(self):
        self.spell = SpellChecker()

    def analyze(self, text: str, is_code: bool = False) -> WritingMetrics:
        words = WORD_RE.findall(text.lower())
        line_count = len([ln for ln in text.splitlines() if ln.strip()])

        if is_code or not text.strip():
            # Readability and spelling are meaningless for identifiers.
            return WritingMetrics(word_count=len(words), line_count=line_count)

        # Flesch Reading Ease
        # 90-100: Very Easy, 0-30: Very Confusing
        score = textstat.flesch_reading_ease(text)
        misspelled = self.spell.unknown(words)

        return WritingMetrics(
            readability_score=round(score, 2),
            readability_label=self._get_readability_label(score),
            word_count=len(words),
            sentence_count=len(split_into_sentences(text)),
            line_count=line_count,
            spelling_errors=len(misspelled),
        )

    def _get_readability_label(self, score):
        if score > 90: return "Very Easy"
        if score > 80: return "Easy"
        if score > 70: return "Fairly Easy"
        if score > 60: return "Standard"
        if score > 50: return "Fairly Difficult"
        if score > 30: return "Difficult"
        return "Very Confusing"
