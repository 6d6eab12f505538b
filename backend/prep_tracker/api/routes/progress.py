"""User progress route."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.progress import UserProgressResponse
from prep_tracker.db.deps import get_db
from prep_tracker.db.repositories import ProgressRepository
from prep_tracker.observability.tracing import trace

router = APIRouter()


@router.get("/progress", response_model=UserProgressResponse, tags=["progress"])
def get_progress(
    http_request: Request,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> UserProgressResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("progress.get", metadata={"route": "/progress"}, user_id=str(user_id), request_id=request_id):
        progress = ProgressRepository(db).get(user_id)
    return UserProgressResponse(**progress.model_dump(), request_id=request_id or "")
