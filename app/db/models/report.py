"""
Report model: one synthesized evaluation document per interview session.
"""
from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from app.db.base import Base


class Report(Base):
    """
    Stored report document.
    
    session_id is unique; a rebuild replaces every document column at once.
    total_score and pass_band are mirrored out of `summary` for listing.
    """
    __tablename__ = "interview_reports"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer,
        ForeignKey("interview_sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    total_score = Column(Float, nullable=False, default=0, index=True)
    pass_band = Column(String(16), nullable=False, default="below")

    basic = Column(JSON, nullable=False, default=dict)
    summary = Column(JSON, nullable=False, default=dict)
    rounds = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    viz = Column(JSON, nullable=False, default=dict)
    extra = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Report(id={self.id}, session_id={self.session_id}, total_score={self.total_score})>"
