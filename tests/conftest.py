"""
Pytest fixtures for Zana tests. The remote judge is replaced by a deterministic
fake; sessions live in memory; reports go to a temporary directory.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from zana.errors import RemoteAnalysisFailure, RemoteFixFailure
from zana.models.schemas import PlanType, SemanticReport, Session, UserRole
from zana.services.correction import CorrectionPipeline
from zana.services.engine import AnalysisEngine
from zana.services.quota import QuotaGate
from zana.services.writing_analyzer import WritingAnalyzer
from zana.store import MemorySessionStore, ResultStore
from zana.utils.text_processing import segment_spans

from samples import grade_payload, issue_payload


class FakeSemanticAnalyzer:
    """
    Deterministic stand-in for the remote judge.

    Segments echo the local segmentation (stripped, like an LLM would return
    them). Switches: fail / fix_fail raise typed failures, delay sleeps
    before answering, segments overrides the returned segment list.
    """

    def __init__(self, score: float = 70.0, segment_score: float = 0.8):
        self.score = score
        self.segment_score = segment_score
        self.fail = False
        self.fix_fail = False
        self.delay = 0.0
        self.segments: Optional[List[dict]] = None
        self.issues: List[dict] = [issue_payload()]
        self.fix_result: Optional[str] = None
        self.analyze_calls = 0
        self.fix_calls = 0

    async def analyze(self, content: str, is_code: bool) -> SemanticReport:
        self.analyze_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RemoteAnalysisFailure("simulated network error")
        segments = self.segments
        if segments is None:
            segments = [{"text": p.strip(), "score": self.segment_score}
                        for p in segment_spans(content, is_code) if p.strip()]
        return SemanticReport.model_validate({
            "score": self.score,
            "explanation": "Uniform rhythm and stock transitions.",
            "segments": segments,
            "aiWords": ["seamless", "robust"],
            "qualityIssues": self.issues,
            "grade": grade_payload(),
        })

    async def fix_content(self, content: str, is_code: bool) -> str:
        self.fix_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fix_fail:
            raise RemoteFixFailure("simulated network error")
        if self.fix_result is not None:
            return self.fix_result
        return content.replace("teh", "the")


@pytest.fixture(scope="session")
def writing_analyzer():
    return WritingAnalyzer()


@pytest.fixture
def fake_semantic():
    return FakeSemanticAnalyzer()


@pytest.fixture
def engine(fake_semantic, writing_analyzer):
    return AnalysisEngine(fake_semantic, timeout=5.0, writing=writing_analyzer)


@pytest.fixture
def corrector(fake_semantic):
    return CorrectionPipeline(fake_semantic, timeout=5.0)


def make_session(role: UserRole = UserRole.STUDENT, plan: PlanType = PlanType.FREE, used: int = 0) -> Session:
    return Session(role=role, plan=plan, email="user@example.com", id="u-1", analyses_used=used)


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def guest_store():
    return MemorySessionStore(make_session(UserRole.GUEST))


@pytest.fixture
def guest_gate(guest_store):
    return QuotaGate(guest_store)


@pytest.fixture
def api_store():
    return MemorySessionStore()


@pytest.fixture
def client(engine, corrector, api_store, tmp_path, monkeypatch):
    """FastAPI TestClient wired to the fake judge, an in-memory session store and a temp reports dir."""
    from fastapi.testclient import TestClient

    from zana import dependencies
    from zana.config import get_settings
    from zana.main import app

    monkeypatch.setenv("ZANA_REPORTS_DIR", str(tmp_path / "reports"))
    get_settings.cache_clear()

    results = ResultStore()
    app.dependency_overrides[dependencies.get_engine] = lambda: engine
    app.dependency_overrides[dependencies.get_corrector] = lambda: corrector
    app.dependency_overrides[dependencies.get_session_store] = lambda: api_store
    app.dependency_overrides[dependencies.get_results] = lambda: results
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        get_settings.cache_clear()
