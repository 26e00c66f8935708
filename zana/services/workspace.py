import logging
from typing import Optional

from zana.errors import ValidationError
from zana.models.schemas import AnalysisResult
from zana.services.correction import CorrectionPipeline
from zana.services.engine import AnalysisEngine
from zana.services.quota import QuotaGate

logger = logging.getLogger(__name__)


async def run_gated_analysis(gate: QuotaGate, engine: AnalysisEngine, content: str, is_code: bool) -> AnalysisResult:
    """
    Validate, take a quota slot, analyze. A rejected or failed request
    consumes no quota.
    """
    if not content or not content.strip():
        raise ValidationError("Content is empty.")
    gate.reserve()
    try:
        return await engine.run_analysis(content, is_code)
    except BaseException:
        gate.release()
        raise


class Workspace:
    """
    One editing surface: a content buffer, the last successful result, and a
    guard so that only one remote operation is in flight at a time.
    """

    def __init__(self, engine: AnalysisEngine, corrector: CorrectionPipeline, gate: QuotaGate,
                 content: str = "", is_code: bool = False):
        self.engine = engine
        self.corrector = corrector
        self.gate = gate
        self.content = content
        self.is_code = is_code
        self.last_result: Optional[AnalysisResult] = None
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def analyze(self) -> Optional[AnalysisResult]:
        """Returns None when an operation is already pending."""
        if self._busy:
            logger.debug("Analysis requested while busy, ignored")
            return None
        self._busy = True
        try:
            result = await run_gated_analysis(self.gate, self.engine, self.content, self.is_code)
        finally:
            self._busy = False
        self.last_result = result
        return result

    async def fix(self) -> Optional[str]:
        """Rewrite the buffer using the issues of the last result, if any."""
        if self._busy:
            logger.debug("Fix requested while busy, ignored")
            return None
        issues = self.last_result.quality_issues if self.last_result is not None else None
        self._busy = True
        try:
            revised = await self.corrector.fix(self.content, self.is_code, issues)
        finally:
            self._busy = False
        self.content = revised
        return revised
