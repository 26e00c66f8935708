import os
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"


@dataclass(frozen=True)
class SignalWeights:
    statistical: float = 0.20
    structural: float = 0.20
    semantic: float = 0.60

    def __post_init__(self):
        for name in ("statistical", "structural", "semantic"):
            if getattr(self, name) < 0:
                raise ValueError(f"Signal weight '{name}' must be non-negative.")
        total = self.statistical + self.structural + self.semantic
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Signal weights must sum to 1, got {total:.4f}.")


@dataclass(frozen=True)
class Settings:
    groq_api_key: Optional[str]
    groq_model: str
    semantic_timeout: float
    fix_timeout: float
    session_path: str
    reports_dir: str
    weights: SignalWeights
    log_level: str


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'.")


def load_weights() -> SignalWeights:
    """
    Read the combiner weight table from the environment.
    Unset variables fall back to the defaults (0.20 / 0.20 / 0.60).
    """
    defaults = SignalWeights()
    return SignalWeights(
        statistical=_float_env("ZANA_WEIGHT_STATISTICAL", defaults.statistical),
        structural=_float_env("ZANA_WEIGHT_STRUCTURAL", defaults.structural),
        semantic=_float_env("ZANA_WEIGHT_SEMANTIC", defaults.semantic),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        groq_api_key=os.getenv("GROQ_API_KEY") or None,
        groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
        semantic_timeout=_float_env("ZANA_SEMANTIC_TIMEOUT", 30.0),
        fix_timeout=_float_env("ZANA_FIX_TIMEOUT", 60.0),
        session_path=os.getenv("ZANA_SESSION_PATH", os.path.join(".zana", "session.json")),
        reports_dir=os.getenv("ZANA_REPORTS_DIR", "reports"),
        weights=load_weights(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
