"""Schemas for the plan-for-date endpoint."""
from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from prep_tracker.api.schemas.sprint import DailyPlan


class PlanForSprint(BaseModel):
    sprint_id: UUID
    application_id: UUID
    company: Optional[str] = None
    role: Optional[str] = None
    plan: Optional[DailyPlan] = None
    day_index: Optional[int] = None
    guidance: Optional[str] = None
    not_found_reason: Optional[Literal["empty_sprint", "invalid_dates"]] = None
    struggled_task_ids: List[str] = Field(default_factory=list)


class PlanForDateResponse(BaseModel):
    user_id: UUID
    target_date: date
    sprints: List[PlanForSprint]
    request_id: str
