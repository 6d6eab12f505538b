"""Question bank routes."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.question import QuestionCategory, QuestionCreateRequest, QuestionPayload
from prep_tracker.db.deps import get_db
from prep_tracker.observability.metrics import log_metric
from prep_tracker.observability.tracing import trace
from prep_tracker.services.question_bank import add_question, list_questions

router = APIRouter()


@router.get("/questions", response_model=List[QuestionPayload], tags=["questions"])
def list_questions_route(
    http_request: Request,
    application_id: Optional[UUID] = Query(default=None),
    category: Optional[QuestionCategory] = Query(default=None),
    db: Session = Depends(get_db),
) -> List[QuestionPayload]:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "question.list",
        metadata={"route": "/questions", "category": category},
        request_id=request_id,
    ):
        questions = list_questions(db, application_id=application_id, category=category)
    log_metric("question.list.count", len(questions), metadata={"category": category})
    return questions


@router.post(
    "/questions",
    response_model=QuestionPayload,
    status_code=status.HTTP_201_CREATED,
    tags=["questions"],
)
def create_question(
    payload: QuestionCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> QuestionPayload:
    """Add a question to the bank, optionally linked to one of the author's applications."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "question.create",
        metadata={"route": "/questions", "category": payload.category},
        user_id=str(payload.user_id),
        request_id=request_id,
    ):
        question = add_question(db, payload)
    log_metric("question.create.success", 1, metadata={"category": question.category})
    return question
