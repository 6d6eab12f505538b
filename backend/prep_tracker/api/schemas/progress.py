"""Schemas for user progress."""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel


class UserProgressSnapshot(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[date] = None
    total_tasks_completed: int = 0
    version: Optional[int] = None


class UserProgressResponse(UserProgressSnapshot):
    request_id: str
