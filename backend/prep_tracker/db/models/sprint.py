"""Sprint ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID

from prep_tracker.core.clock import utcnow
from prep_tracker.db.base import Base, JSONDocument


class Sprint(Base):
    __tablename__ = "sprints"
    __table_args__ = (
        Index("ix_sprints_user_id", "user_id"),
        Index("ix_sprints_application_id", "application_id"),
        Index("ix_sprints_status", "status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    application_id = Column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )
    interview_date = Column(Date, nullable=False)
    role_type = Column(String(length=50), nullable=False)
    total_days = Column(Integer, nullable=False)
    daily_plans = Column(JSONDocument, nullable=False, default=list)
    status = Column(String(length=20), nullable=False, server_default="active")
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
