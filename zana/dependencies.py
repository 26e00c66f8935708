from functools import lru_cache

from fastapi import Depends

from zana.config import get_settings
from zana.services.correction import CorrectionPipeline
from zana.services.engine import AnalysisEngine
from zana.services.quota import QuotaGate
from zana.services.semantic_analyzer import GroqSemanticAnalyzer, SemanticAnalyzer
from zana.store import JsonSessionStore, ResultStore, SessionStore, results_store


@lru_cache(maxsize=1)
def get_semantic_analyzer() -> SemanticAnalyzer:
    settings = get_settings()
    return GroqSemanticAnalyzer(settings.groq_api_key, settings.groq_model, timeout=settings.semantic_timeout)


@lru_cache(maxsize=1)
def get_engine() -> AnalysisEngine:
    settings = get_settings()
    return AnalysisEngine(get_semantic_analyzer(), weights=settings.weights, timeout=settings.semantic_timeout)


@lru_cache(maxsize=1)
def get_corrector() -> CorrectionPipeline:
    return CorrectionPipeline(get_semantic_analyzer(), timeout=get_settings().fix_timeout)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return JsonSessionStore(get_settings().session_path)


def get_gate(store: SessionStore = Depends(get_session_store)) -> QuotaGate:
    return QuotaGate(store)


def get_results() -> ResultStore:
    return results_store
