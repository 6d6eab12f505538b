"""Application intake, status changes, interview rounds and data reset."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.application import (
    ApplicationCreateRequest,
    ApplicationPayload,
    InterviewRoundCreateRequest,
    InterviewRoundPayload,
    RoundFeedback,
)
from prep_tracker.core.clock import today as clock_today
from prep_tracker.core.errors import (
    ApplicationNotFoundError,
    ConflictError,
    DuplicateRoundError,
    InvalidStatusError,
    NotFoundError,
    PastInterviewDateError,
)
from prep_tracker.core.locks import application_locks
from prep_tracker.db.models.agent_action_log import AgentActionLog
from prep_tracker.db.models.application import Application
from prep_tracker.db.models.interview_round import InterviewRound
from prep_tracker.db.models.question import Question
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.db.models.user_progress import UserProgress
from prep_tracker.db.repositories import SprintRepository, UserRepository
from prep_tracker.services.date_resolution import resolve_optional_date
from prep_tracker.services.interview_rounds import format_round_label, is_known_round_type
from prep_tracker.services.sprint_service import (
    ReconciliationResult,
    application_lock_key,
    build_candidate,
    expire_active_sprints,
    reconcile_application_sprint,
)

logger = logging.getLogger(__name__)

APPLICATION_STATUSES = ("applied", "shortlisted", "interview", "offer", "rejected")


def create_application(
    db: Session,
    payload: ApplicationCreateRequest,
    *,
    request_id: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[Application, Optional[ReconciliationResult]]:
    """Store a new application and, when it has a date and role, its first sprint."""
    interview_date = resolve_optional_date(payload.interview_date)
    start = today or clock_today()
    wants_sprint = bool(payload.create_sprint and interview_date and payload.role_type)
    if wants_sprint and interview_date <= start and not payload.confirm_past_date:
        raise PastInterviewDateError(interview_date)

    try:
        UserRepository(db).ensure(payload.user_id)
        application = Application(
            user_id=payload.user_id,
            company=payload.company.strip(),
            role=payload.role.strip(),
            role_type=payload.role_type,
            status=payload.status,
            interview_date=interview_date,
            notes=payload.notes,
            version=0,
        )
        db.add(application)
        db.flush()
        db.add(
            AgentActionLog(
                user_id=payload.user_id,
                action_type="application_created",
                action_payload={
                    "application_id": str(application.id),
                    "status": payload.status,
                    "request_id": request_id,
                },
                reason="Application intake",
                undo_available=False,
            )
        )
        db.commit()
        db.refresh(application)
    except Exception:
        db.rollback()
        raise

    reconciliation = None
    if wants_sprint:
        candidate = build_candidate(application, confirm_past_date=payload.confirm_past_date, today=start)
        reconciliation = reconcile_application_sprint(db, application, candidate, request_id=request_id)
    return application, reconciliation


def get_application(db: Session, application_id: UUID, user_id: UUID) -> Application:
    application = db.get(Application, application_id)
    if not application or application.user_id != user_id:
        raise ApplicationNotFoundError()
    return application


def list_applications(db: Session, user_id: UUID) -> List[Application]:
    return (
        db.query(Application)
        .filter(Application.user_id == user_id)
        .order_by(Application.created_at.desc())
        .all()
    )


def delete_application(db: Session, application_id: UUID, user_id: UUID) -> int:
    """Delete an application together with its rounds and sprints."""
    application = get_application(db, application_id, user_id)
    with application_locks.hold(application_lock_key(application_id)):
        try:
            removed = SprintRepository(db).delete_for_application(application_id)
            db.query(InterviewRound).filter(InterviewRound.application_id == application_id).delete(
                synchronize_session=False
            )
            # Questions stay in the bank without their application.
            db.query(Question).filter(Question.application_id == application_id).update(
                {Question.application_id: None}, synchronize_session=False
            )
            db.expire(application, ["rounds"])
            db.delete(application)
            db.commit()
        except Exception:
            db.rollback()
            raise
    logger.info("Deleted application %s with %s sprints", application_id, removed)
    return removed


class StatusTransition:
    """Two-phase status change: ``propose`` stages it, ``commit`` persists and runs side effects.

    A failure in ``commit`` restores the previous status before re-raising, so
    callers never see a status that disagrees with the sprints it implies.
    """

    def __init__(self, db: Session, application: Application):
        self.db = db
        self.application = application
        self.previous_status: Optional[str] = None
        self.new_status: Optional[str] = None
        self.committed = False

    def propose(self, new_status: str) -> "StatusTransition":
        if new_status not in APPLICATION_STATUSES:
            raise InvalidStatusError(f"Unknown application status '{new_status}'")
        self.previous_status = self.application.status
        self.new_status = new_status
        self.application.status = new_status
        self.db.add(self.application)
        self.db.flush()
        return self

    def commit(
        self,
        *,
        confirm_regeneration: bool = False,
        confirm_past_date: bool = False,
        request_id: Optional[str] = None,
    ) -> Optional[ReconciliationResult]:
        if self.new_status is None or self.committed:
            raise ConflictError("Status change is not pending")

        candidate = None
        if (
            self.new_status == "interview"
            and self.application.interview_date
            and self.application.role_type
        ):
            # Validate before persisting so a rejected candidate leaves the status untouched.
            candidate = build_candidate(self.application, confirm_past_date=confirm_past_date)

        self.db.add(
            AgentActionLog(
                user_id=self.application.user_id,
                action_type="application_status_changed",
                action_payload={
                    "application_id": str(self.application.id),
                    "from": self.previous_status,
                    "to": self.new_status,
                    "request_id": request_id,
                },
                reason="Application status updated",
                undo_available=True,
            )
        )
        self.db.commit()
        self.committed = True

        try:
            if self.new_status == "rejected":
                result = expire_active_sprints(self.db, self.application)
                logger.info(
                    "Rejected application %s; expired %s sprints",
                    self.application.id,
                    len(result.expired_sprint_ids),
                )
                return result
            if candidate is not None:
                return reconcile_application_sprint(
                    self.db,
                    self.application,
                    candidate,
                    confirmed=confirm_regeneration,
                    request_id=request_id,
                )
            return None
        except Exception:
            self._restore()
            raise

    def rollback(self) -> None:
        if self.committed:
            self._restore()
        else:
            self.db.rollback()

    def _restore(self) -> None:
        try:
            self.application.status = self.previous_status
            self.db.add(self.application)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.committed = False


def change_application_status(
    db: Session,
    application_id: UUID,
    *,
    user_id: UUID,
    status: str,
    confirm_regeneration: bool = False,
    confirm_past_date: bool = False,
    request_id: Optional[str] = None,
) -> Tuple[Application, Optional[ReconciliationResult]]:
    application = get_application(db, application_id, user_id)
    with application_locks.hold(application_lock_key(application_id)):
        transition = StatusTransition(db, application).propose(status)
        try:
            result = transition.commit(
                confirm_regeneration=confirm_regeneration,
                confirm_past_date=confirm_past_date,
                request_id=request_id,
            )
        except Exception:
            if not transition.committed:
                db.rollback()
            raise
    db.refresh(application)
    return application, result


def add_round(
    db: Session,
    application_id: UUID,
    payload: InterviewRoundCreateRequest,
) -> InterviewRound:
    application = get_application(db, application_id, payload.user_id)
    numbers = [round_.round_number for round_ in application.rounds]
    round_number = payload.round_number or (max(numbers) + 1 if numbers else 1)
    if round_number in numbers:
        raise DuplicateRoundError(round_number)

    interview_round = InterviewRound(
        application_id=application.id,
        round_number=round_number,
        round_type=payload.round_type.strip(),
        scheduled_date=resolve_optional_date(payload.scheduled_date),
        notes=payload.notes,
        questions_asked=list(payload.questions_asked),
    )
    try:
        db.add(interview_round)
        application.current_round = interview_round.round_type
        db.add(application)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateRoundError(round_number) from exc
    except Exception:
        db.rollback()
        raise
    db.refresh(interview_round)
    return interview_round


def set_round_feedback(
    db: Session,
    application_id: UUID,
    round_number: int,
    *,
    user_id: UUID,
    feedback: RoundFeedback,
) -> InterviewRound:
    application = get_application(db, application_id, user_id)
    interview_round = next(
        (round_ for round_ in application.rounds if round_.round_number == round_number),
        None,
    )
    if interview_round is None:
        raise NotFoundError("Interview round not found")
    try:
        interview_round.feedback = feedback.model_dump()
        db.add(interview_round)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(interview_round)
    return interview_round


def struggled_topics_for(application: Application) -> List[str]:
    topics: List[str] = []
    for round_ in application.rounds:
        feedback = round_.feedback or {}
        topics.extend(feedback.get("struggled_topics") or [])
    return topics


def reset_user_data(db: Session, user_id: UUID) -> Tuple[int, int]:
    """Hard-delete everything a user has tracked. Returns (applications, sprints) removed."""
    UserRepository(db).require(user_id)
    application_ids = [
        row[0] for row in db.query(Application.id).filter(Application.user_id == user_id).all()
    ]
    try:
        sprints_deleted = (
            db.query(Sprint).filter(Sprint.user_id == user_id).delete(synchronize_session=False)
        )
        db.query(Question).filter(Question.created_by_user_id == user_id).delete(
            synchronize_session=False
        )
        if application_ids:
            db.query(InterviewRound).filter(
                InterviewRound.application_id.in_(application_ids)
            ).delete(synchronize_session=False)
        applications_deleted = (
            db.query(Application)
            .filter(Application.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.query(UserProgress).filter(UserProgress.user_id == user_id).delete(synchronize_session=False)
        db.query(AgentActionLog).filter(AgentActionLog.user_id == user_id).delete(
            synchronize_session=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.expire_all()
    logger.warning(
        "Reset data for user %s: applications=%s sprints=%s",
        user_id,
        applications_deleted,
        sprints_deleted,
    )
    return applications_deleted, sprints_deleted


def serialize_round(round_: InterviewRound) -> InterviewRoundPayload:
    return InterviewRoundPayload(
        id=round_.id,
        round_number=round_.round_number,
        round_type=round_.round_type,
        round_label=format_round_label(round_.round_type),
        known_round_type=is_known_round_type(round_.round_type),
        scheduled_date=round_.scheduled_date,
        notes=round_.notes or "",
        questions_asked=list(round_.questions_asked or []),
        feedback=RoundFeedback.model_validate(round_.feedback) if round_.feedback else None,
    )


def serialize_application(application: Application) -> ApplicationPayload:
    return ApplicationPayload(
        id=application.id,
        company=application.company,
        role=application.role,
        role_type=application.role_type,
        status=application.status,
        interview_date=application.interview_date,
        current_round=application.current_round,
        notes=application.notes or "",
        created_at=application.created_at,
        rounds=[serialize_round(round_) for round_ in application.rounds],
    )
