"""Schemas for applications and interview rounds."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from prep_tracker.api.schemas.sprint import ReconciliationResponse, RoleType

ApplicationStatus = Literal["applied", "shortlisted", "interview", "offer", "rejected"]


class RoundFeedback(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    struggled_topics: List[str] = Field(default_factory=list)
    notes: str = ""


class InterviewRoundCreateRequest(BaseModel):
    user_id: UUID
    round_number: Optional[int] = Field(default=None, ge=1)
    round_type: str = Field(..., min_length=1)
    scheduled_date: Optional[str] = None
    notes: str = ""
    questions_asked: List[str] = Field(default_factory=list)


class RoundFeedbackRequest(BaseModel):
    user_id: UUID
    feedback: RoundFeedback


class InterviewRoundPayload(BaseModel):
    id: UUID
    round_number: int
    round_type: str
    round_label: str
    known_round_type: bool
    scheduled_date: Optional[date]
    notes: str
    questions_asked: List[str]
    feedback: Optional[RoundFeedback]


class ApplicationCreateRequest(BaseModel):
    user_id: UUID
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    role_type: Optional[RoleType] = None
    status: ApplicationStatus = "applied"
    interview_date: Optional[str] = None
    notes: str = ""
    create_sprint: bool = True
    confirm_past_date: bool = False


class ApplicationStatusRequest(BaseModel):
    user_id: UUID
    status: ApplicationStatus
    confirm_regeneration: bool = False
    confirm_past_date: bool = False


class ApplicationPayload(BaseModel):
    id: UUID
    company: str
    role: str
    role_type: Optional[str]
    status: ApplicationStatus
    interview_date: Optional[date]
    current_round: Optional[str]
    notes: str
    created_at: datetime
    rounds: List[InterviewRoundPayload]


class ApplicationResponse(BaseModel):
    application: ApplicationPayload
    reconciliation: Optional[ReconciliationResponse] = None
    request_id: str
