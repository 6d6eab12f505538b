"""Question bank ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID

from prep_tracker.core.clock import utcnow
from prep_tracker.db.base import Base

QUESTION_CATEGORIES = ("DSA", "SystemDesign", "Behavioral", "SQL", "Other")
QUESTION_DIFFICULTIES = ("Easy", "Medium", "Hard")


def _one_of(column: str, values) -> str:
    return f"{column} IN ({', '.join(repr(value) for value in values)})"


class Question(Base):
    """A question in the shared bank, optionally tied to the application it came up in."""

    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_created_by_user_id", "created_by_user_id"),
        Index("ix_questions_application_id", "application_id"),
        Index("ix_questions_category", "category"),
        CheckConstraint(_one_of("category", QUESTION_CATEGORIES), name="ck_questions_category"),
        CheckConstraint(
            f"difficulty IS NULL OR {_one_of('difficulty', QUESTION_DIFFICULTIES)}",
            name="ck_questions_difficulty",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    created_by_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # The question outlives the application; deleting it only drops the link.
    application_id = Column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="SET NULL"),
        nullable=True,
    )
    question_text = Column(Text, nullable=False)
    category = Column(String(length=20), nullable=False)
    difficulty = Column(String(length=10), nullable=True)
    asked_in_round = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
