"""
Report synthesizer.

Turns one interview session into a complete report document and keeps at
most one stored report per session:

    session + events -> rounds -> per-round metrics/STAR
                     -> coverage, skills, keywords -> summary -> upsert

Only a missing session is surfaced to the caller. Every analytics-internal
failure (provider errors, malformed events, empty data) is absorbed with a
documented default so a report always renders once the session exists.
"""
import logging
import threading
import weakref
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import SessionNotFoundError
from app.core.flags import AnalyticsFlags, resolve_flags
from app.core.rounding import round_int
from app.db.models.interview_session import InterviewSession
from app.db.models.message import Message
from app.db.models.report import Report
from app.llm.provider import Embedder, TextGenerator
from app.llm.router import get_providers
from app.schemas.report import (
    CoverageResult,
    KeywordCount,
    RadarPoint,
    ReportBasic,
    ReportDocument,
    ReportExtra,
    ReportListItem,
    ReportListResponse,
    ReportSummary,
    ReportViz,
    RoundCard,
    SkillScore,
    TrendPoint,
)
from app.schemas.rubric import RubricDefinition
from app.services.coverage_engine import evaluate_coverage
from app.services.keyword_profiler import keyword_counts
from app.services.narrative_service import (
    FALLBACK_MODEL_ANSWER_DIFF,
    FALLBACK_ONE_LINER,
    generate_model_answer,
    generate_summary,
)
from app.services.round_segmenter import Round, has_structured_rounds, segment_rounds
from app.services.rubric_service import load_rubric
from app.services.skill_aggregator import aggregate_skills
from app.services.speech_metrics import filler_per_minute, session_speech, words_per_minute
from app.services.star_scorer import star_feedback, star_score

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_NAME = "지원자"
KEYWORD_TOP_N = 12
TREND_MIN, TREND_MAX = 40, 95
LEARNING_ITEMS = 3

PASS_LIKELY_MIN = 80
BORDER_MIN = 65

# One in-process lock per session id so concurrent rebuilds run one at a time
_build_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
_build_locks_guard = threading.Lock()


def _lock_for(session_id: int) -> threading.Lock:
    with _build_locks_guard:
        lock = _build_locks.get(session_id)
        if lock is None:
            lock = threading.Lock()
            _build_locks[session_id] = lock
        return lock


# ============================================
# Scoring helpers
# ============================================

def total_score_from_skills(skills: Sequence[SkillScore]) -> int:
    """Overall score 0-100: mean of the 0-5 skill scores times 20."""
    if not skills:
        return 0
    mean = sum(skill.score for skill in skills) / len(skills)
    return max(0, min(100, round_int(mean * 20)))


def pass_band(total_score: int) -> str:
    if total_score >= PASS_LIKELY_MIN:
        return "pass-likely"
    if total_score >= BORDER_MIN:
        return "border"
    return "below"


def is_stale(report: Optional[ReportDocument]) -> bool:
    """A stored report must be rebuilt when missing, round-less or scored exactly 0."""
    if report is None:
        return True
    if not report.rounds:
        return True
    return report.summary.total_score == 0


def build_round_cards(rounds: Sequence[Round]) -> List[RoundCard]:
    cards = []
    for record in rounds:
        components, score = star_score(record.answer_text)
        pros, cons = star_feedback(components) if record.answer_text.strip() else ([], [])
        cards.append(RoundCard(
            round=record.index,
            type=record.type,
            interviewer=record.interviewer_tag,
            question=record.question_text,
            answer=record.answer_text,
            answer_wpm=words_per_minute(record.answer_text, record.answer_duration_sec),
            filler_per_min=filler_per_minute(record.answer_text, record.answer_duration_sec),
            star=components,
            star_score=score,
            score=record.score,
            pros=pros,
            cons=cons,
        ))
    return cards


# ============================================
# Synthesis
# ============================================

def synthesize_report(
    session: InterviewSession,
    rounds: Sequence[Round],
    flags: AnalyticsFlags,
    generator: TextGenerator,
    embedder: Embedder,
    rubric: Optional[RubricDefinition] = None,
) -> ReportDocument:
    """
    Assemble the report document for a session without touching storage.

    Args:
        session: Session row (only its descriptive fields are read)
        rounds: Segmented rounds
        flags: Resolved analytics flags
        generator: Text generator for the summary
        embedder: Embedder for semantic coverage
        rubric: Rubric override (loaded by job role when None)
    """
    cards = build_round_cards(rounds)
    answers = [card.answer for card in cards]
    all_text = "\n".join(answers)

    rubric = rubric or load_rubric(session.job_role)
    coverage = evaluate_coverage(
        all_text,
        rubric,
        use_embeddings=flags.use_embeddings,
        embedder=embedder,
        model=flags.embedding_model,
        threshold=flags.similarity_threshold,
    )
    speech = session_speech(rounds)
    skills = aggregate_skills([card.star_score for card in cards], answers)
    keywords = keyword_counts(all_text, KEYWORD_TOP_N)

    total = total_score_from_skills(skills)
    band = pass_band(total)
    one_liner = generate_summary(total, coverage, answers, flags, generator)

    return ReportDocument(
        session_id=session.id,
        basic=ReportBasic(
            name=session.user_name or session.user_id or DEFAULT_CANDIDATE_NAME,
            job_role=session.job_role or "",
            interviewed_at=session.ended_at or session.created_at or session.started_at,
            interviewers=_interviewers(session.interviewers),
            rounds=len(cards),
        ),
        summary=ReportSummary(
            total_score=total,
            pass_band=band,
            one_liner=one_liner or FALLBACK_ONE_LINER,
        ),
        rounds=cards,
        skills=skills,
        viz=ReportViz(
            radar=[RadarPoint(key=s.key, label=s.label, score=s.score) for s in skills],
            trend=[
                TrendPoint(round=card.round, score=max(TREND_MIN, min(TREND_MAX, card.star_score)))
                for card in cards
            ],
            keywords=[KeywordCount(**kw) for kw in keywords],
        ),
        extra=ReportExtra(
            model_answer_diff=FALLBACK_MODEL_ANSWER_DIFF,
            risks=_risks(coverage),
            learning=list(coverage.suggested_phrases[:LEARNING_ITEMS]),
            coverage=coverage,
            speech=speech,
        ),
    )


def _interviewers(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    if isinstance(value, str) and value:
        return [value]
    return []


def _risks(coverage: CoverageResult) -> List[str]:
    if coverage.missing:
        return [f"누락된 루브릭: {', '.join(coverage.missing)}"]
    return ["답변 일부 모호"]


# ============================================
# Storage
# ============================================

def get_session(db: Session, session_id: int) -> InterviewSession:
    session = db.query(InterviewSession).filter(InterviewSession.id == session_id).first()
    if not session:
        raise SessionNotFoundError(session_id)
    return session


def load_events(db: Session, session_id: int) -> List[Dict[str, Any]]:
    messages = (
        db.query(Message)
        .filter(Message.session_id == session_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
    return [message.as_event() for message in messages]


def _document_columns(document: ReportDocument) -> Dict[str, Any]:
    data = document.model_dump(by_alias=True, mode="json")
    return {
        "total_score": document.summary.total_score,
        "pass_band": document.summary.pass_band,
        "basic": data["basic"],
        "summary": data["summary"],
        "rounds": data["rounds"],
        "skills": data["skills"],
        "viz": data["viz"],
        "extra": data["extra"],
    }


def report_from_row(row: Optional[Report]) -> Optional[ReportDocument]:
    """Convert a stored row to a document, filling defaults for missing sections."""
    if row is None:
        return None
    return ReportDocument.model_validate({
        "id": row.id,
        "sessionId": row.session_id,
        "basic": row.basic or {},
        "summary": row.summary or {},
        "rounds": row.rounds if isinstance(row.rounds, list) else [],
        "skills": row.skills if isinstance(row.skills, list) else [],
        "viz": row.viz or {},
        "extra": row.extra or {},
        "createdAt": row.created_at,
        "updatedAt": row.updated_at,
    })


def upsert_report(db: Session, document: ReportDocument) -> ReportDocument:
    """
    Insert or wholly replace the report for document.session_id.

    A concurrent insert for the same session surfaces as a unique-constraint
    violation; it is retried once as a replace (last writer wins).
    """
    values = _document_columns(document)
    row = db.query(Report).filter(Report.session_id == document.session_id).first()
    if row is None:
        row = Report(session_id=document.session_id, **values)
        db.add(row)
    else:
        for column, value in values.items():
            setattr(row, column, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent report insert for session_id={document.session_id}, replacing")
        row = db.query(Report).filter(Report.session_id == document.session_id).one()
        for column, value in values.items():
            setattr(row, column, value)
        db.commit()

    db.refresh(row)
    return report_from_row(row)


def get_stored_report(db: Session, session_id: int) -> Optional[ReportDocument]:
    row = db.query(Report).filter(Report.session_id == session_id).first()
    try:
        return report_from_row(row)
    except ValidationError as e:
        logger.warning(f"Stored report for session_id={session_id} is malformed: {e}")
        return None


# ============================================
# Public operations
# ============================================

def _resolve(
    flags_input: Optional[Mapping[str, Any]],
    generator: Optional[TextGenerator],
    embedder: Optional[Embedder],
) -> Tuple[AnalyticsFlags, TextGenerator, Embedder]:
    flags = resolve_flags(flags_input)
    if generator is None or embedder is None:
        default_generator, default_embedder = get_providers(flags)
        generator = generator or default_generator
        embedder = embedder or default_embedder
    return flags, generator, embedder


def build_report(
    db: Session,
    session_id: int,
    flags_input: Optional[Mapping[str, Any]] = None,
    generator: Optional[TextGenerator] = None,
    embedder: Optional[Embedder] = None,
) -> ReportDocument:
    """
    Build and persist a fresh report for a session.

    Raises:
        SessionNotFoundError: the session does not exist (nothing is written)
    """
    session = get_session(db, session_id)
    flags, generator, embedder = _resolve(flags_input, generator, embedder)

    with _lock_for(session_id):
        events = [] if has_structured_rounds(session.rounds) else load_events(db, session_id)
        rounds = segment_rounds(events=events, structured_rounds=session.rounds)
        document = synthesize_report(session, rounds, flags, generator, embedder)
        saved = upsert_report(db, document)

    logger.info(
        f"Report built: session_id={session_id}, rounds={len(saved.rounds)}, "
        f"total_score={saved.summary.total_score}, band={saved.summary.pass_band}, "
        f"coverage_method={saved.extra.coverage.method if saved.extra.coverage else 'n/a'}"
    )
    return saved


def get_report(
    db: Session,
    session_id: int,
    flags_input: Optional[Mapping[str, Any]] = None,
    generator: Optional[TextGenerator] = None,
    embedder: Optional[Embedder] = None,
) -> ReportDocument:
    """Serve the stored report, rebuilding it first when it is stale."""
    report = get_stored_report(db, session_id)
    if is_stale(report):
        logger.info(f"Report for session_id={session_id} is stale, rebuilding")
        return build_report(db, session_id, flags_input, generator=generator, embedder=embedder)
    return report


def model_answer_for_round(
    round_lite: Mapping[str, Any],
    flags_input: Optional[Mapping[str, Any]] = None,
    generator: Optional[TextGenerator] = None,
) -> str:
    """Best-effort model answer for one round; "" when augmentation is unavailable."""
    flags, generator, _ = _resolve(flags_input, generator, None)
    return generate_model_answer(round_lite, flags, generator)


def delete_report(db: Session, session_id: int) -> bool:
    """Delete a session together with its report and messages."""
    session = db.query(InterviewSession).filter(InterviewSession.id == session_id).first()
    deleted_reports = db.query(Report).filter(Report.session_id == session_id).delete(synchronize_session=False)
    db.query(Message).filter(Message.session_id == session_id).delete(synchronize_session=False)
    if session is not None:
        db.delete(session)
    db.commit()
    logger.info(f"Deleted session_id={session_id} (report={bool(deleted_reports)})")
    return session is not None or bool(deleted_reports)


def list_reports(
    db: Session,
    limit: int = 20,
    q: Optional[str] = None,
    cursor: Optional[int] = None,
) -> ReportListResponse:
    """
    Newest sessions first, each joined with its stored report summary.

    Args:
        limit: Page size (1-100)
        q: Case-insensitive substring filter on candidate name or job role
        cursor: Only sessions with an id below this value
    """
    limit = max(1, min(100, limit))
    query = db.query(InterviewSession)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            InterviewSession.user_name.ilike(pattern),
            InterviewSession.job_role.ilike(pattern),
        ))
    if cursor is not None:
        query = query.filter(InterviewSession.id < cursor)
    sessions = query.order_by(InterviewSession.id.desc()).limit(limit + 1).all()

    next_cursor = None
    if len(sessions) > limit:
        sessions = sessions[:limit]
        next_cursor = sessions[-1].id

    rows = db.query(Report).filter(Report.session_id.in_([s.id for s in sessions])).all() if sessions else []
    reports = {row.session_id: row for row in rows}

    items = []
    for session in sessions:
        row = reports.get(session.id)
        summary = (row.summary or {}) if row else {}
        basic = (row.basic or {}) if row else {}
        items.append(ReportListItem(
            id=session.id,
            username=(session.user_name or basic.get("name") or "").strip(),
            job_role=(session.job_role or basic.get("jobRole") or "").strip(),
            interviewed_at=session.ended_at or session.started_at or session.created_at,
            score=summary.get("totalScore") if row else None,
            pass_band=summary.get("passBand") if row else None,
            summary=summary.get("oneLiner") or "",
            roles=basic.get("interviewers") or [],
            rounds=basic.get("rounds") if row else None,
        ))
    return ReportListResponse(items=items, next_cursor=next_cursor)
