"""Interview round ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from prep_tracker.core.clock import utcnow
from prep_tracker.db.base import Base, JSONDocument


class InterviewRound(Base):
    __tablename__ = "interview_rounds"
    __table_args__ = (
        UniqueConstraint("application_id", "round_number", name="uq_interview_rounds_application_round"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    application_id = Column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )
    round_number = Column(Integer, nullable=False)
    # Open string: known round types get dedicated labels, anything else round-trips unchanged.
    round_type = Column(Text, nullable=False)
    scheduled_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=False, default="")
    questions_asked = Column(JSONDocument, nullable=False, default=list)
    feedback = Column(JSONDocument, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
