"""Shared question bank: questions anyone added, optionally linked to an application."""
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from prep_tracker.api.schemas.question import QuestionCreateRequest, QuestionPayload
from prep_tracker.core.errors import ApplicationNotFoundError
from prep_tracker.db.models.application import Application
from prep_tracker.db.models.question import Question
from prep_tracker.db.repositories import UserRepository

logger = logging.getLogger(__name__)


def add_question(db: Session, request: QuestionCreateRequest) -> QuestionPayload:
    """Store a question; a linked application must belong to the author."""
    company = None
    if request.application_id is not None:
        application = db.get(Application, request.application_id)
        if application is None or application.user_id != request.user_id:
            raise ApplicationNotFoundError()
        company = application.company

    try:
        UserRepository(db).ensure(request.user_id)
        question = Question(
            created_by_user_id=request.user_id,
            application_id=request.application_id,
            question_text=request.question_text,
            category=request.category,
            difficulty=request.difficulty,
            asked_in_round=request.asked_in_round,
        )
        db.add(question)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(question)
    logger.info("Added %s question %s for user %s", question.category, question.id, request.user_id)
    return serialize_question(question, company)


def list_questions(
    db: Session,
    application_id: Optional[UUID] = None,
    category: Optional[str] = None,
) -> List[QuestionPayload]:
    """Bank contents, newest first, narrowed by application and category when given."""
    query = db.query(Question, Application.company).outerjoin(
        Application, Question.application_id == Application.id
    )
    if application_id is not None:
        query = query.filter(Question.application_id == application_id)
    if category:
        query = query.filter(Question.category == category)
    rows = query.order_by(Question.created_at.desc()).all()
    return [serialize_question(question, company) for question, company in rows]


def serialize_question(question: Question, company: Optional[str] = None) -> QuestionPayload:
    return QuestionPayload(
        id=question.id,
        question_text=question.question_text,
        category=question.category,
        difficulty=question.difficulty,
        asked_in_round=question.asked_in_round,
        application_id=question.application_id,
        company=company,
        created_by_user_id=question.created_by_user_id,
        created_at=question.created_at,
    )
