"""
Report endpoints.

Thin HTTP layer over the report service: list, fetch (rebuilding stale
reports), explicit rebuild, per-round model answers and deletion.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session

from app.core.exceptions import SessionNotFoundError
from app.core.flags import as_bool
from app.db.session import get_db
from app.schemas.report import (
    BuildReportResponse,
    ModelAnswerResponse,
    ReportDocument,
    ReportListResponse,
)
from app.services import report_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=ReportListResponse)
def list_reports(
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    q: Optional[str] = Query(None, description="Filter by candidate name or job role"),
    cursor: Optional[int] = Query(None, description="Session id to continue after"),
    db: Session = Depends(get_db),
):
    """List sessions newest first with their report summary."""
    try:
        return report_service.list_reports(db, limit=limit, q=q, cursor=cursor)
    except Exception as e:
        logger.error(f"Failed to list reports: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list reports"
        )


@router.get("/{session_id}", response_model=ReportDocument)
def get_report(
    session_id: int,
    ai: Optional[str] = Query(None, description="Override generative summary (1/0)"),
    emb: Optional[str] = Query(None, description="Override embedding coverage (1/0)"),
    db: Session = Depends(get_db),
):
    """
    Get the report for a session.
    
    Missing, empty or zero-scored reports are rebuilt transparently.
    """
    flags = {"openai": as_bool(ai), "embeddings": as_bool(emb)}
    try:
        return report_service.get_report(db, session_id, flags)
    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to get report for session_id={session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get report"
        )


@router.post("/{session_id}/build", response_model=BuildReportResponse)
def build_report(session_id: int, db: Session = Depends(get_db)):
    """Build (or rebuild) and store the report for a session."""
    try:
        saved = report_service.build_report(db, session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to build report for session_id={session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="BUILD_FAILED"
        )
    return BuildReportResponse(ok=True, report_id=saved.id, session_id=session_id)


@router.post("/{session_id}/rounds/{idx}/model-answer", response_model=ModelAnswerResponse)
def model_answer(session_id: int, idx: int, db: Session = Depends(get_db)):
    """Generate a model answer for one round (1-based index)."""
    if idx < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid round index")
    try:
        report = report_service.get_report(db, session_id, {"openai": False})
    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to load report for model answer, session_id={session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get report"
        )

    if idx > len(report.rounds):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid round")

    card = report.rounds[idx - 1]
    round_lite = {"question": card.question, "type": card.type, "interviewer": card.interviewer}
    try:
        answer = report_service.model_answer_for_round(round_lite, {"openai": True})
    except Exception as e:
        logger.error(f"Failed to generate model answer for session_id={session_id}, round={idx}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate model answer"
        )
    return ModelAnswerResponse(answer=answer)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(session_id: int, db: Session = Depends(get_db)):
    """Delete a session with its report and messages."""
    report_service.delete_report(db, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
