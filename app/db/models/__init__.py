"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from app.db.models.interview_session import InterviewSession
from app.db.models.message import Message
from app.db.models.report import Report

__all__ = [
    "InterviewSession",
    "Message",
    "Report",
]
