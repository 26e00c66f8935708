from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


class ContentType(str, Enum):
    PROSE = "PROSE"
    CODE = "CODE"


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    GUEST = "GUEST"


class PlanType(str, Enum):
    FREE = "FREE"
    PRO = "PRO"


IssueType = Literal["grammar", "spelling", "style", "bug", "efficiency", "citation", "plagiarism"]


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    is_code: bool = False

    @property
    def content_type(self) -> ContentType:
        return ContentType.CODE if self.is_code else ContentType.PROSE


class SubSignal(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0, le=100)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class HighlightedSegment(BaseModel):
    text: str
    score: float  # 0-1 likelihood

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return _clamp(v, 0.0, 1.0)


class QualityIssue(BaseModel):
    original: str
    suggestion: str
    reason: str
    type: IssueType

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class GradeItem(BaseModel):
    label: str
    score: float  # 0-10

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return _clamp(v, 0.0, 10.0)


class GradeReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary_grade: str = Field(alias="primaryGrade")
    breakdown: List[GradeItem]
    summary: str


class SemanticReport(BaseModel):
    """Validated response of the remote semantic judge (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    score: float
    explanation: str
    segments: List[HighlightedSegment]
    ai_words: List[str] = Field(alias="aiWords")
    quality_issues: List[QualityIssue] = Field(alias="qualityIssues")
    grade: GradeReport

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return _clamp(v, 0.0, 100.0)


class WritingMetrics(BaseModel):
    readability_score: Optional[float] = None
    readability_label: str = "N/A"
    word_count: int = 0
    sentence_count: int = 0
    line_count: int = 0
    spelling_errors: int = 0


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str
    overall_score: int
    confidence_range: int
    statistical_score: float
    structural_score: float
    semantic_score: float
    explanation: str
    highlights: List[HighlightedSegment]
    ai_words: List[str]
    is_code: bool
    quality_issues: List[QualityIssue]
    grade: GradeReport
    metrics: WritingMetrics = Field(default_factory=WritingMetrics)
    signals: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class Session(BaseModel):
    role: UserRole
    plan: PlanType = PlanType.FREE
    email: str
    id: str
    display_name: Optional[str] = None
    organization: Optional[str] = None
    auth_source: Literal["email", "google"] = "email"
    avatar_url: Optional[str] = None
    analyses_used: int = Field(default=0, ge=0)


# --- API payloads ---

class AnalyzeRequest(BaseModel):
    content: str
    is_code: bool = False


class AnalyzeResponse(BaseModel):
    result: AnalysisResult
    remaining: Optional[int] = None  # None = unlimited


class FixRequest(BaseModel):
    content: str
    is_code: bool = False
    quality_issues: Optional[List[QualityIssue]] = None


class FixResponse(BaseModel):
    content: str


class UpgradeRequest(BaseModel):
    plan: PlanType = PlanType.PRO


class QuotaStatus(BaseModel):
    state: str
    used: int
    limit: Optional[int] = None
    remaining: Optional[int] = None
