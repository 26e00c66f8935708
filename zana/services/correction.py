import asyncio
import logging
from typing import List, Optional

from zana.errors import RemoteFixFailure, ValidationError
from zana.models.schemas import QualityIssue
from zana.services.semantic_analyzer import SemanticAnalyzer

logger = logging.getLogger(__name__)


def _match_line_endings(original: str, revised: str) -> str:
    if "\r\n" in original and "\r\n" not in revised:
        return revised.replace("\n", "\r\n")
    if "\r\n" not in original and "\r\n" in revised:
        return revised.replace("\r\n", "\n")
    return revised


class CorrectionPipeline:
    """
    Auto-fix: one remote rewrite per call. The caller swaps its buffer only
    when this returns; on any failure the original content is left alone.
    """

    def __init__(self, semantic: SemanticAnalyzer, timeout: float = 60.0):
        self.semantic = semantic
        self.timeout = timeout

    async def fix(self, content: str, is_code: bool, quality_issues: Optional[List[QualityIssue]] = None) -> str:
        if not content or not content.strip():
            raise ValidationError("Content is empty.")
        if quality_issues is not None and not quality_issues:
            logger.info("No quality issues to address, content returned unchanged")
            return content

        try:
            revised = await asyncio.wait_for(self.semantic.fix_content(content, is_code), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise RemoteFixFailure(f"Correction timed out after {self.timeout:g}s.") from e
        except RemoteFixFailure as e:
            logger.warning("Correction failed: %s", e.message)
            raise
        except Exception as e:
            logger.warning("Correction failed: %s", e)
            raise RemoteFixFailure(f"Correction failed: {e}") from e

        if not isinstance(revised, str) or not revised.strip():
            raise RemoteFixFailure("Correction returned no content.")
        return _match_line_endings(content, revised)

    def fix_sync(self, content: str, is_code: bool, quality_issues: Optional[List[QualityIssue]] = None) -> str:
        return asyncio.run(self.fix(content, is_code, quality_issues))
