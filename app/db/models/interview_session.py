from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from app.db.base import Base


class InterviewSession(Base):
    """
    Interview session owned by the transcript collaborator.
    
    `rounds` holds optional pre-structured question/answer objects; when it is
    empty the report is segmented from the session's messages instead.
    """
    __tablename__ = "interview_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True)
    user_name = Column(String, nullable=True, index=True)
    job_role = Column(String, nullable=True, index=True)
    interviewers = Column(JSON, nullable=True)  # e.g. ["A", "B", "C"]
    rounds = Column(JSON, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<InterviewSession(id={self.id}, job_role={self.job_role})>"
