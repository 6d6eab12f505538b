"""Schemas for operational job endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class JobRunRequest(BaseModel):
    job: Literal["duplicate_sweep"] = "duplicate_sweep"
    user_id: Optional[UUID] = None


class JobRunResponse(BaseModel):
    job: str
    applications_checked: int
    sprints_expired: int
    failed_writes: List[str] = []
    request_id: str


class DataResetRequest(BaseModel):
    user_id: UUID
    confirm: Literal["RESET"]


class DataResetResponse(BaseModel):
    user_id: UUID
    applications_deleted: int
    sprints_deleted: int
    request_id: str
