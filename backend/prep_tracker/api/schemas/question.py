"""Schemas for the shared question bank."""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

QuestionCategory = Literal["DSA", "SystemDesign", "Behavioral", "SQL", "Other"]
QuestionDifficulty = Literal["Easy", "Medium", "Hard"]


class QuestionCreateRequest(BaseModel):
    user_id: UUID
    question_text: str = Field(..., min_length=1)
    category: QuestionCategory
    difficulty: Optional[QuestionDifficulty] = None
    asked_in_round: Optional[str] = None
    application_id: Optional[UUID] = None


class QuestionPayload(BaseModel):
    id: UUID
    question_text: str
    category: QuestionCategory
    difficulty: Optional[QuestionDifficulty]
    asked_in_round: Optional[str]
    application_id: Optional[UUID]
    # Company of the linked application, when there still is one.
    company: Optional[str]
    created_by_user_id: UUID
    created_at: datetime
