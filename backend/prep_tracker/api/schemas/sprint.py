"""Sprint snapshots shared by the core services and the HTTP layer."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

RoleType = Literal[
    "SDE",
    "SDET",
    "ML",
    "DevOps",
    "Frontend",
    "Backend",
    "FullStack",
    "Data",
    "PM",
    "MobileEngineer",
]
SprintStatus = Literal["active", "completed", "expired"]
FocusArea = Literal["DSA", "SystemDesign", "Behavioral", "Review", "Mock"]


class TaskItem(BaseModel):
    id: str
    description: str
    category: str = "General"
    completed: bool = False


class PlanBlock(BaseModel):
    id: str
    type: str
    duration: str
    tasks: List[TaskItem] = Field(default_factory=list)
    completed: bool = False


class DailyPlan(BaseModel):
    day: int = Field(..., ge=1)
    # Kept as a string: stored plans may carry dates that no longer parse.
    date: str
    focus: str
    blocks: List[PlanBlock] = Field(default_factory=list)
    completed: bool = False


class SprintSnapshot(BaseModel):
    id: UUID
    application_id: UUID
    interview_date: date
    role_type: str
    total_days: int
    daily_plans: List[DailyPlan] = Field(default_factory=list)
    status: SprintStatus = "active"
    created_at: datetime
    version: int = 0


class SprintSummary(BaseModel):
    id: UUID
    application_id: UUID
    company: Optional[str] = None
    role: Optional[str] = None
    interview_date: date
    role_type: str
    total_days: int
    status: SprintStatus
    created_at: datetime
    days_completed: int
    tasks_total: int
    tasks_completed: int


class SprintGenerateRequest(BaseModel):
    user_id: UUID
    interview_date: Optional[str] = Field(
        default=None, description="ISO-8601 date or date-time; defaults to the application's interview date."
    )
    role_type: Optional[RoleType] = None
    confirm_past_date: bool = False


class ReconciliationResponse(BaseModel):
    status: Literal["created", "replaced", "unchanged", "expired", "confirmation_required", "partial"]
    application_id: UUID
    sprint: Optional[SprintSnapshot] = None
    expired_sprint_ids: List[UUID] = Field(default_factory=list)
    failed_writes: List[str] = Field(default_factory=list)
    anomaly_detected: bool = False
    proposal_id: Optional[UUID] = None
    message: Optional[str] = None
    request_id: str


class RegenerationDecisionRequest(BaseModel):
    user_id: UUID
    decision: Literal["accept", "decline"]
