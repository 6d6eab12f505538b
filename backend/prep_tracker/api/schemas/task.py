"""Schemas for sprint task completion."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel

from prep_tracker.api.schemas.progress import UserProgressSnapshot
from prep_tracker.api.schemas.sprint import SprintStatus


class TaskCompletionRequest(BaseModel):
    user_id: UUID
    day_index: int
    block_index: int
    task_index: int
    completed: bool = True


class TaskCompletionResponse(BaseModel):
    sprint_id: UUID
    day_index: int
    block_index: int
    task_index: int
    completed: bool
    changed: bool
    sprint_status: SprintStatus
    progress: UserProgressSnapshot
    request_id: str
