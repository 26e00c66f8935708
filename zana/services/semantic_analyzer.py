import json
import logging
import re
from typing import List, Optional, Protocol

import groq
from groq import AsyncGroq
from pydantic import ValidationError as SchemaError

from zana.config import DEFAULT_GROQ_MODEL
from zana.errors import RemoteAnalysisFailure, RemoteFixFailure
from zana.models.schemas import SemanticReport
from zana.utils.text_processing import segment_spans

logger = logging.getLogger(__name__)

# LLMs like to wrap code in markdown fences even when told not to.
CODE_FENCE_RE = re.compile(r"^\s*```[\w+-]*\n(.*?)\n?```\s*$", re.DOTALL)


class SemanticAnalyzer(Protocol):
    """Remote judge. Implementations raise RemoteAnalysisFailure / RemoteFixFailure."""

    async def analyze(self, content: str, is_code: bool) -> SemanticReport:
        ...

    async def fix_content(self, content: str, is_code: bool) -> str:
        ...


ANALYZE_PROMPT = """
You are a forensic reviewer deciding whether {kind} was written by a human or generated by an AI model.

The content has been split into numbered segments. Return ONLY a JSON object with:
- "score": number 0-100, probability the content is machine-generated
- "explanation": two or three sentences on *why*
- "segments": one entry per numbered segment, in the same order, as {{"text": <segment copied verbatim>, "score": number 0-1}}
- "aiWords": list of words or phrases typical of AI writing found in the content
- "qualityIssues": list of {{"original", "suggestion", "reason", "type"}} where type is one of
  grammar, spelling, style, bug, efficiency, citation, plagiarism
- "grade": {{"primaryGrade": e.g. "A-" or "8/10", "breakdown": [{{"label", "score" 0-10}}], "summary"}}
{rubric}
Segments:
{segments}
"""

PROSE_RUBRIC = "Grade the writing on clarity, argument, evidence and mechanics."
CODE_RUBRIC = "Grade the code on correctness, readability, efficiency and maintainability. Report bugs as qualityIssues of type bug."

FIX_PROMPTS = {
    "prose": """
    Act as a professional editor.
    1. Fix ALL grammar, spelling, and punctuation errors.
    2. Improve sentence flow and clarity.
    3. Maintain the original meaning.
    Return ONLY the corrected text.
    """,
    "code": """
    Act as a senior engineer reviewing this code.
    1. Fix bugs and obvious inefficiencies.
    2. Keep the language, public names and behaviour intact.
    Return ONLY the corrected code, without markdown fences or commentary.
    """,
}


def build_analyze_prompt(content: str, is_code: bool) -> str:
    pieces = [p for p in segment_spans(content, is_code) if p.strip()]
    numbered = "\n".join(f"[{i + 1}] {p.strip()}" for i, p in enumerate(pieces))
    return ANALYZE_PROMPT.format(
        kind="this source code" if is_code else "this text",
        rubric=CODE_RUBRIC if is_code else PROSE_RUBRIC,
        segments=numbered,
    )


def parse_report(raw: Optional[str]) -> SemanticReport:
    """Validate the wire payload; anything missing or malformed is a hard failure."""
    if not raw or not raw.strip():
        raise RemoteAnalysisFailure("Semantic analyzer returned an empty response.")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RemoteAnalysisFailure(f"Semantic analyzer returned invalid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise RemoteAnalysisFailure("Semantic analyzer response is not a JSON object.")
    try:
        return SemanticReport.model_validate(payload)
    except SchemaError as e:
        raise RemoteAnalysisFailure(f"Semantic analyzer response is malformed: {e.error_count()} invalid field(s).") from e


def strip_code_fences(text: str) -> str:
    m = CODE_FENCE_RE.match(text)
    return m.group(1) if m else text


class GroqSemanticAnalyzer:
    def __init__(self, api_key: Optional[str], model: str = DEFAULT_GROQ_MODEL, timeout: float = 30.0):
        self.model = model
        self.client = None
        if api_key:
            # No client-side retries; timeouts surface as failures.
            self.client = AsyncGroq(api_key=api_key, timeout=timeout, max_retries=0)
            logger.info("Groq semantic analyzer initialised (%s)", model)
        else:
            logger.warning("GROQ_API_KEY not found. Semantic analysis will fail until it is set.")

    async def _complete(self, messages: List[dict], json_mode: bool, temperature: float) -> Optional[str]:
        kwargs = {"model": self.model, "messages": messages, "temperature": temperature}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        completion = await self.client.chat.completions.create(**kwargs)
        return completion.choices[0].message.content

    async def analyze(self, content: str, is_code: bool) -> SemanticReport:
        if self.client is None:
            raise RemoteAnalysisFailure("Semantic analyzer is not configured (missing GROQ_API_KEY).")
        prompt = build_analyze_prompt(content, is_code)
        try:
            raw = await self._complete([{"role": "user", "content": prompt}], json_mode=True, temperature=0)
        except groq.RateLimitError as e:
            raise RemoteAnalysisFailure("Semantic analyzer rate limit reached.") from e
        except groq.APIError as e:
            raise RemoteAnalysisFailure(f"Semantic analyzer request failed: {e}") from e
        return parse_report(raw)

    async def fix_content(self, content: str, is_code: bool) -> str:
        if self.client is None:
            raise RemoteFixFailure("Correction is not configured (missing GROQ_API_KEY).")
        messages = [
            {"role": "system", "content": FIX_PROMPTS["code" if is_code else "prose"]},
            {"role": "user", "content": f"{'Code' if is_code else 'Text'}:\n{content}"},
        ]
        try:
            revised = await self._complete(messages, json_mode=False, temperature=0.3)
        except groq.APIError as e:
            raise RemoteFixFailure(f"Correction request failed: {e}") from e
        if not revised or not revised.strip():
            raise RemoteFixFailure("Correction returned an empty response.")
        return strip_code_fences(revised) if is_code else revised.strip()
