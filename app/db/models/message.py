"""
Message model for raw conversation events.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from app.db.base import Base

EVENT_COLUMNS = ("role", "sender", "speaker", "interviewer", "round", "turn", "type", "text")


class Message(Base):
    """
    One conversational event of a session.
    
    Producers disagree on the event shape, so the original payload is kept in
    `raw` and the commonly used fields are mirrored into columns.
    """
    __tablename__ = "interview_messages"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer,
        ForeignKey("interview_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(String, nullable=True)
    sender = Column(String, nullable=True)
    speaker = Column(String, nullable=True)
    interviewer = Column(String, nullable=True)  # 'A' | 'B' | 'C' for interviewer turns
    round = Column(Integer, nullable=True)
    turn = Column(Integer, nullable=True)
    type = Column(String, nullable=True)
    text = Column(Text, nullable=True)
    raw = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (
        Index("idx_message_session_created", "session_id", "created_at"),
    )

    def as_event(self) -> dict:
        """Merge the raw payload with the non-null mirrored columns."""
        event = dict(self.raw) if isinstance(self.raw, dict) else {}
        if self.raw is not None and not isinstance(self.raw, dict):
            event.setdefault("payload", self.raw)
        for column in EVENT_COLUMNS:
            value = getattr(self, column)
            if value is not None:
                event[column] = value
        if self.created_at is not None:
            event.setdefault("createdAt", self.created_at)
        return event
