import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from zana.config import SignalWeights
from zana.errors import RemoteAnalysisFailure, ValidationError
from zana.models.schemas import (
    AnalysisRequest, AnalysisResult, HighlightedSegment, SemanticReport, SubSignal, WritingMetrics,
)
from zana.services.combiner import combine
from zana.services.semantic_analyzer import SemanticAnalyzer
from zana.services.statistical_analyzer import analyze_statistical
from zana.services.structural_analyzer import analyze_structural
from zana.services.writing_analyzer import WritingAnalyzer
from zana.utils.text_processing import anchor_spans

logger = logging.getLogger(__name__)


async def _cancel_all(tasks: List[asyncio.Future]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


class AnalysisEngine:
    """
    Runs the three signals for one request and folds them into an AnalysisResult.

    Fan-out / fan-in:
    1. Statistical and structural analyzers (worker threads)
    2. Semantic analyzer (remote, bounded by ``timeout``)
    3. Join; any failure aborts the whole request, nothing partial is returned
    4. Combine, anchor highlights, attach writing metrics
    """

    def __init__(
        self,
        semantic: SemanticAnalyzer,
        weights: Optional[SignalWeights] = None,
        timeout: float = 30.0,
        statistical: Callable[[str], SubSignal] = analyze_statistical,
        structural: Callable[[str, bool], SubSignal] = analyze_structural,
        writing: Optional[WritingAnalyzer] = None,
    ):
        self.semantic = semantic
        self.weights = weights or SignalWeights()
        self.timeout = timeout
        self.statistical = statistical
        self.structural = structural
        self.writing = writing or WritingAnalyzer()

    async def _run_semantic(self, request: AnalysisRequest) -> SemanticReport:
        try:
            return await asyncio.wait_for(
                self.semantic.analyze(request.content, request.is_code), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise RemoteAnalysisFailure(f"Semantic analyzer timed out after {self.timeout:g}s.") from e
        except RemoteAnalysisFailure:
            raise
        except Exception as e:
            raise RemoteAnalysisFailure(f"Semantic analyzer failed: {e}") from e

    def _anchor_highlights(self, content: str, report: SemanticReport) -> List[HighlightedSegment]:
        segments = [s for s in report.segments if s.text.strip()]
        try:
            spans = anchor_spans(content, [s.text for s in segments])
        except ValueError as e:
            raise RemoteAnalysisFailure(f"Semantic segments do not cover the content: {e}") from e
        return [HighlightedSegment(text=content[a:b], score=seg.score) for (a, b), seg in zip(spans, segments)]

    async def _writing_metrics(self, request: AnalysisRequest) -> WritingMetrics:
        # Metrics never affect the score; empty metrics on failure.
        try:
            return await asyncio.to_thread(self.writing.analyze, request.content, request.is_code)
        except Exception as e:
            logger.warning("Writing metrics unavailable: %s", e)
            return WritingMetrics()

    async def run_analysis(self, content: str, is_code: bool) -> AnalysisResult:
        if not content or not content.strip():
            raise ValidationError("Content is empty.")

        request = AnalysisRequest(content=content, is_code=is_code)
        logger.info("Analysis started (%s, %d chars)", request.content_type.value, len(content))

        tasks = [
            asyncio.ensure_future(asyncio.to_thread(self.statistical, request.content)),
            asyncio.ensure_future(asyncio.to_thread(self.structural, request.content, request.is_code)),
            asyncio.ensure_future(self._run_semantic(request)),
        ]
        try:
            stat, struct, report = await asyncio.gather(*tasks)
        except RemoteAnalysisFailure as e:
            logger.warning("Analysis aborted, local signals discarded: %s", e.message)
            await _cancel_all(tasks)
            raise
        except BaseException:
            await _cancel_all(tasks)
            raise

        highlights = self._anchor_highlights(request.content, report)
        combined = combine(stat.score, struct.score, report.score, self.weights)
        metrics = await self._writing_metrics(request)

        result = AnalysisResult(
            id=uuid.uuid4().hex,
            timestamp=datetime.now(timezone.utc).isoformat(),
            overall_score=combined.final_score,
            confidence_range=combined.confidence,
            statistical_score=stat.score,
            structural_score=struct.score,
            semantic_score=report.score,
            explanation=report.explanation,
            highlights=highlights,
            ai_words=report.ai_words,
            is_code=request.is_code,
            quality_issues=report.quality_issues,
            grade=report.grade,
            metrics=metrics,
            signals={"statistical": stat.metadata, "structural": struct.metadata},
        )
        logger.info(
            "Analysis %s complete: overall=%d ±%d (stat=%.1f struct=%.1f semantic=%.1f)",
            result.id, result.overall_score, result.confidence_range,
            stat.score, struct.score, report.score,
        )
        return result

    def run_analysis_sync(self, content: str, is_code: bool) -> AnalysisResult:
        return asyncio.run(self.run_analysis(content, is_code))
