"""
Pydantic schemas for interview reports.

Field names are snake_case in Python and camelCase on the wire, matching the
report viewer's contract.
"""
from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

PassBand = Literal["pass-likely", "border", "below"]
CoverageMethod = Literal["keyword", "embedding"]


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        protected_namespaces = ()


class StarComponents(BaseModel):
    """Which STAR components were detected in an answer."""
    S: bool = False
    T: bool = False
    A: bool = False
    R: bool = False


class RoundCard(CamelModel):
    """One question/answer round with its derived delivery and structure metrics."""
    round: int = Field(..., ge=1, description="1-based round index")
    type: str = Field(default="", description="Question type/intent")
    interviewer: str = Field(default="", description="Interviewer tag")
    question: str = Field(default="")
    answer: str = Field(default="")
    answer_wpm: int = Field(default=0, ge=0, description="Words per minute of the answer")
    filler_per_min: float = Field(default=0.0, ge=0)
    star: StarComponents = Field(default_factory=StarComponents)
    star_score: int = Field(default=0, ge=0, le=100)
    score: Optional[float] = Field(None, ge=0, le=100, description="Externally supplied score, if any")
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)


class CoverageResult(CamelModel):
    """Rubric coverage of the aggregate answer text."""
    coverage_pct: int = Field(default=0, ge=0, le=100)
    matched: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    suggested_phrases: List[str] = Field(default_factory=list)
    method: CoverageMethod = "keyword"


class SkillScore(CamelModel):
    key: str
    label: str = ""
    score: float = Field(default=0.0, ge=0, le=5)


class SpeechSummary(CamelModel):
    """Session-level delivery metrics."""
    talk_listen_ratio: float = 0.0
    avg_wpm: int = 0
    wpm_std: float = 0.0
    filler_per_min: float = 0.0
    longest_pause_sec: float = 0.0
    hedging_pct: float = 0.0


class ReportBasic(CamelModel):
    name: str = ""
    job_role: str = ""
    interviewed_at: Optional[datetime] = None
    interviewers: List[str] = Field(default_factory=list)
    rounds: int = 0


class ReportSummary(CamelModel):
    total_score: int = Field(default=0, ge=0, le=100)
    pass_band: PassBand = "below"
    one_liner: str = ""


class RadarPoint(CamelModel):
    key: str
    label: str = ""
    score: float = 0.0


class TrendPoint(CamelModel):
    round: int
    score: int


class KeywordCount(CamelModel):
    word: str
    count: int


class ReportViz(CamelModel):
    radar: List[RadarPoint] = Field(default_factory=list)
    trend: List[TrendPoint] = Field(default_factory=list)
    keywords: List[KeywordCount] = Field(default_factory=list)


class ReportExtra(CamelModel):
    model_answer_diff: str = ""
    risks: List[str] = Field(default_factory=list)
    learning: List[str] = Field(default_factory=list)
    coverage: Optional[CoverageResult] = None
    speech: Optional[SpeechSummary] = None


class ReportDocument(CamelModel):
    """The complete report for one session."""
    id: Optional[int] = None
    session_id: int
    basic: ReportBasic = Field(default_factory=ReportBasic)
    summary: ReportSummary = Field(default_factory=ReportSummary)
    rounds: List[RoundCard] = Field(default_factory=list)
    skills: List[SkillScore] = Field(default_factory=list)
    viz: ReportViz = Field(default_factory=ReportViz)
    extra: ReportExtra = Field(default_factory=ReportExtra)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportListItem(CamelModel):
    """Card shown in the report list; report fields are empty until a report is built."""
    id: int
    username: str = ""
    job_role: str = ""
    interviewed_at: Optional[datetime] = None
    score: Optional[int] = None
    pass_band: Optional[PassBand] = None
    summary: str = ""
    roles: List[str] = Field(default_factory=list)
    rounds: Optional[int] = None


class ReportListResponse(CamelModel):
    items: List[ReportListItem] = Field(default_factory=list)
    next_cursor: Optional[int] = None


class BuildReportResponse(CamelModel):
    ok: bool = True
    report_id: Optional[int] = None
    session_id: int


class ModelAnswerResponse(BaseModel):
    answer: str = ""
