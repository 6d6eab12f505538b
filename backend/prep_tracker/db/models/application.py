"""Application ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from prep_tracker.core.clock import utcnow
from prep_tracker.db.base import Base


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (Index("ix_applications_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    company = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    role_type = Column(String(length=50), nullable=True)
    status = Column(String(length=50), nullable=False, server_default="applied")
    interview_date = Column(Date, nullable=True)
    current_round = Column(Text, nullable=True)
    notes = Column(Text, nullable=False, default="")
    # Bumped on every committed sprint reconciliation; compare-and-swap token.
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    rounds = relationship(
        "InterviewRound",
        order_by="InterviewRound.round_number",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
