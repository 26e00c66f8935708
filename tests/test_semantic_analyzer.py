"""
Tests for the semantic analyzer wire contract and the Groq-backed client.

The Groq call itself is mocked at GroqSemanticAnalyzer._complete.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, patch

import groq
import httpx
import pytest

from samples import grade_payload, issue_payload, report_payload
from zana.errors import RemoteAnalysisFailure, RemoteFixFailure
from zana.services.semantic_analyzer import (
    GroqSemanticAnalyzer,
    build_analyze_prompt,
    parse_report,
    strip_code_fences,
)


def test_parse_report_accepts_camel_case_payload():
    report = parse_report(json.dumps(report_payload()))
    assert report.score == 72
    assert report.ai_words == ["delve"]
    assert report.quality_issues[0].type == "grammar"
    assert report.grade.primary_grade == "B+"
    assert [item.label for item in report.grade.breakdown] == ["Clarity", "Mechanics"]


@pytest.mark.parametrize("raw_score,expected", [(150, 100.0), (-5, 0.0), (55.5, 55.5)])
def test_score_is_clamped(raw_score, expected):
    assert parse_report(json.dumps(report_payload(score=raw_score))).score == expected


def test_segment_and_grade_scores_are_clamped():
    payload = report_payload(
        segments=[{"text": "Hello.", "score": 1.7}, {"text": "World.", "score": -0.2}],
        grade={**grade_payload(), "breakdown": [{"label": "Clarity", "score": 14}]},
    )
    report = parse_report(json.dumps(payload))
    assert [s.score for s in report.segments] == [1.0, 0.0]
    assert report.grade.breakdown[0].score == 10.0


def test_issue_type_is_normalized():
    report = parse_report(json.dumps(report_payload(qualityIssues=[issue_payload("Spelling ")])))
    assert report.quality_issues[0].type == "spelling"


@pytest.mark.parametrize("raw", [
    None,
    "",
    "   ",
    "not json",
    "[1, 2, 3]",
    '{"score": 50, "explanation": "partial"',
])
def test_unusable_responses_fail(raw):
    with pytest.raises(RemoteAnalysisFailure):
        parse_report(raw)


@pytest.mark.parametrize("field", ["score", "explanation", "segments", "aiWords", "qualityIssues", "grade"])
def test_missing_field_is_a_hard_error(field):
    payload = report_payload()
    del payload[field]
    with pytest.raises(RemoteAnalysisFailure, match="malformed"):
        parse_report(json.dumps(payload))


def test_unknown_issue_type_is_a_hard_error():
    with pytest.raises(RemoteAnalysisFailure):
        parse_report(json.dumps(report_payload(qualityIssues=[issue_payload("vibes")])))


def test_prompt_numbers_segments():
    prompt = build_analyze_prompt("First sentence. Second sentence.", is_code=False)
    assert "[1] First sentence." in prompt
    assert "[2] Second sentence." in prompt
    code_prompt = build_analyze_prompt("x = 1\ny = 2\n", is_code=True)
    assert "[2] y = 2" in code_prompt
    assert "source code" in code_prompt


def test_strip_code_fences():
    assert strip_code_fences("```python\nx = 1\n```") == "x = 1"
    assert strip_code_fences("x = 1") == "x = 1"


def test_missing_api_key_fails_without_network():
    analyzer = GroqSemanticAnalyzer(api_key=None)
    with pytest.raises(RemoteAnalysisFailure, match="GROQ_API_KEY"):
        asyncio.run(analyzer.analyze("Some text.", False))
    with pytest.raises(RemoteFixFailure, match="GROQ_API_KEY"):
        asyncio.run(analyzer.fix_content("Some text.", False))


def test_analyze_parses_completion():
    analyzer = GroqSemanticAnalyzer(api_key="test-key")
    with patch.object(analyzer, "_complete", AsyncMock(return_value=json.dumps(report_payload()))) as complete:
        report = asyncio.run(analyzer.analyze("Hello world.", False))
    assert report.score == 72
    assert complete.await_args.kwargs["json_mode"] is True


def test_api_errors_become_remote_failures():
    analyzer = GroqSemanticAnalyzer(api_key="test-key")
    error = groq.APIConnectionError(request=httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions"))
    with patch.object(analyzer, "_complete", AsyncMock(side_effect=error)):
        with pytest.raises(RemoteAnalysisFailure):
            asyncio.run(analyzer.analyze("Hello world.", False))
        with pytest.raises(RemoteFixFailure):
            asyncio.run(analyzer.fix_content("Hello world.", False))


def test_fix_content_strips_fences_for_code():
    analyzer = GroqSemanticAnalyzer(api_key="test-key")
    with patch.object(analyzer, "_complete", AsyncMock(return_value="```python\nx = 2\n```")):
        assert asyncio.run(analyzer.fix_content("x = 1", True)) == "x = 2"


def test_fix_content_rejects_empty_reply():
    analyzer = GroqSemanticAnalyzer(api_key="test-key")
    with patch.object(analyzer, "_complete", AsyncMock(return_value="  ")):
        with pytest.raises(RemoteFixFailure, match="empty"):
            asyncio.run(analyzer.fix_content("Some text.", False))
