"""Persist sprint reconciliation decisions for an application."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.sprint import ReconciliationResponse, SprintSnapshot, SprintSummary
from prep_tracker.core.clock import as_utc, today as clock_today, utcnow
from prep_tracker.core.config import settings
from prep_tracker.core.errors import (
    ApplicationNotFoundError,
    ConflictError,
    MissingSprintDetailsError,
    PastInterviewDateError,
    ProposalNotFoundError,
    ProposalResolvedError,
    ReconciliationError,
    SprintConflictError,
    SprintNotFoundError,
    UnknownRoleTypeError,
)
from prep_tracker.core.locks import application_locks
from prep_tracker.db.models.agent_action_log import AgentActionLog
from prep_tracker.db.models.application import Application
from prep_tracker.db.repositories import ApplicationRepository, SprintRepository
from prep_tracker.observability.tracing import traced
from prep_tracker.services.prep_templates import ROLE_TYPES
from prep_tracker.services.progress_tracker import count_tasks
from prep_tracker.services.sprint_generator import generate_sprint
from prep_tracker.services.sprint_reconciler import (
    ReconciliationPlan,
    apply_replacement,
    reconcile_sprint,
    select_canonical,
)

logger = logging.getLogger(__name__)

PROPOSAL_ACTION = "sprint_regeneration_proposed"
STATUS_BY_OUTCOME = {
    "create": "created",
    "replace": "replaced",
    "unchanged": "unchanged",
    "confirmation_required": "confirmation_required",
}


@dataclass
class ReconciliationResult:
    status: str
    application_id: UUID
    sprint: Optional[SprintSnapshot] = None
    expired_sprint_ids: List[UUID] = field(default_factory=list)
    failed_writes: List[str] = field(default_factory=list)
    anomaly_detected: bool = False
    proposal_id: Optional[UUID] = None
    message: Optional[str] = None


def application_lock_key(application_id: UUID) -> str:
    return f"application:{application_id}"


def build_candidate(
    application: Application,
    *,
    interview_date: Optional[date] = None,
    role_type: Optional[str] = None,
    confirm_past_date: bool = False,
    today: Optional[date] = None,
) -> SprintSnapshot:
    """Generate a sprint for an application, falling back to its stored details."""
    interview = interview_date or application.interview_date
    role = role_type or application.role_type
    if interview is None or not role:
        raise MissingSprintDetailsError()
    if role not in ROLE_TYPES:
        raise UnknownRoleTypeError(role)

    start = today or clock_today()
    if interview <= start and not confirm_past_date:
        raise PastInterviewDateError(interview)

    return generate_sprint(
        application.id,
        interview,
        role,
        today=start,
        max_days=settings.sprint_max_days,
    )


class _DecisionOutdated(Exception):
    """The application or canonical sprint moved after the reconciliation plan was made."""


@traced("sprint.reconcile")
def reconcile_application_sprint(
    db: Session,
    application: Application,
    candidate: SprintSnapshot,
    *,
    confirmed: bool = False,
    request_id: Optional[str] = None,
    sprints: Optional[SprintRepository] = None,
    applications: Optional[ApplicationRepository] = None,
) -> ReconciliationResult:
    """Reconcile ``candidate`` against the application's sprints and persist the outcome.

    The application version is read before the sprints are listed and the
    create or replace write compares against it, so a decision made on a
    stale listing never lands; the plan is rebuilt up to ``cas_max_retries``
    times. Each write (canonical sprint first, then every duplicate expiry)
    commits on its own. When some writes fail the result carries
    ``status="partial"`` and the failed writes; when every attempted write
    fails ``ReconciliationError`` is raised. Re-running with the same
    candidate converges.
    """
    sprints = sprints or SprintRepository(db)
    applications = applications or ApplicationRepository(db)

    with application_locks.hold(application_lock_key(application.id)):
        for attempt in range(settings.cas_max_retries + 1):
            application_version = applications.current_version(application.id)
            if application_version is None:
                raise ApplicationNotFoundError()
            existing = sprints.list_for_application(application.id)
            plan = reconcile_sprint(application.id, existing, candidate, confirmed=confirmed)
            logger.info(
                "Reconciling sprint for application %s: outcome=%s expire=%s",
                application.id,
                plan.outcome,
                len(plan.expire_ids),
            )
            try:
                return _execute_plan(
                    db,
                    application,
                    plan,
                    application_version=application_version,
                    existing_versions={sprint.id: sprint.version for sprint in existing},
                    request_id=request_id,
                    sprints=sprints,
                    applications=applications,
                )
            except _DecisionOutdated:
                db.rollback()
                logger.warning(
                    "Application %s changed during reconciliation (attempt %s); re-planning",
                    application.id,
                    attempt + 1,
                )
    raise SprintConflictError(
        "The application's sprints kept changing while this sprint was saved. Please retry."
    )


def _application_overrides(candidate: SprintSnapshot) -> Dict[str, object]:
    return {"interview_date": candidate.interview_date, "role_type": candidate.role_type}


def _refresh_application(db: Session, application: Application) -> None:
    if application in db:
        db.expire(application, ["interview_date", "role_type", "version"])


def _execute_plan(
    db: Session,
    application: Application,
    plan: ReconciliationPlan,
    *,
    application_version: int,
    existing_versions: Dict[UUID, int],
    request_id: Optional[str],
    sprints: SprintRepository,
    applications: ApplicationRepository,
) -> ReconciliationResult:
    attempted = 0
    failed: List[str] = []
    result = ReconciliationResult(
        status=STATUS_BY_OUTCOME[plan.outcome],
        application_id=application.id,
        anomaly_detected=plan.anomaly_detected,
        message=plan.message,
    )

    if plan.anomaly_detected:
        db.add(
            AgentActionLog(
                user_id=application.user_id,
                action_type="sprint_duplicates_detected",
                action_payload={
                    "application_id": str(application.id),
                    "kept_sprint_id": str(plan.canonical.id) if plan.canonical else None,
                    "expired_sprint_ids": [str(sprint_id) for sprint_id in plan.expire_ids],
                    "request_id": request_id,
                },
                reason="More than one active sprint found for an application",
                undo_available=False,
            )
        )

    if plan.outcome == "create":
        attempted += 1
        created: List[SprintSnapshot] = []

        def _create() -> bool:
            created.append(sprints.insert(application.user_id, plan.candidate))
            if not applications.bump_version(
                application.id, application_version, **_application_overrides(plan.candidate)
            ):
                raise _DecisionOutdated()
            return True

        if _attempt(db, f"create:{plan.candidate.id}", _create):
            result.sprint = created[-1]
            _refresh_application(db, application)
        else:
            failed.append(f"create:{plan.candidate.id}")

    elif plan.outcome == "replace":
        attempted += 1
        replacement = apply_replacement(plan.canonical, plan.candidate)

        def _replace() -> bool:
            if not (
                sprints.replace_content(replacement, plan.canonical.version)
                and applications.bump_version(
                    application.id, application_version, **_application_overrides(plan.candidate)
                )
            ):
                raise _DecisionOutdated()
            return True

        if _attempt(db, f"replace:{replacement.id}", _replace):
            result.sprint = replacement.model_copy(update={"version": plan.canonical.version + 1})
            _refresh_application(db, application)
        else:
            failed.append(f"replace:{replacement.id}")

    elif plan.outcome == "confirmation_required":
        attempted += 1
        proposal = _build_proposal(application, plan, request_id)
        result.sprint = plan.canonical

        def _propose() -> bool:
            db.add(proposal)
            db.flush()
            return True

        if _attempt(db, "proposal", _propose):
            result.proposal_id = proposal.id
        else:
            failed.append("proposal")

    else:
        result.sprint = plan.canonical

    for sprint_id in plan.expire_ids:
        attempted += 1
        version = existing_versions.get(sprint_id, 0)
        if _attempt(db, f"expire:{sprint_id}", lambda sid=sprint_id, v=version: sprints.expire(sid, v)):
            result.expired_sprint_ids.append(sprint_id)
        else:
            failed.append(f"expire:{sprint_id}")

    if attempted and len(failed) == attempted:
        logger.error("All %s reconciliation writes failed for application %s", attempted, application.id)
        raise ReconciliationError(
            "Couldn't save the sprint changes. Nothing was written; please retry."
        )

    if failed:
        logger.warning(
            "Partial reconciliation for application %s: failed=%s", application.id, failed
        )
        result.status = "partial"
        result.failed_writes = failed
        result.message = (
            "Some sprint changes could not be saved. Retry to finish cleaning up this application."
        )
    return result


def _attempt(db: Session, label: str, write: Callable[[], bool]) -> bool:
    """Run one write and commit it; a failed write is rolled back and reported."""
    try:
        if not write():
            raise SprintConflictError()
        db.commit()
        return True
    except (SQLAlchemyError, ConflictError) as exc:
        db.rollback()
        logger.warning("Reconciliation write %s failed: %s", label, exc)
        return False


def _bump(applications: ApplicationRepository, application_id: UUID, **values) -> bool:
    expected = applications.current_version(application_id)
    return expected is not None and applications.bump_version(application_id, expected, **values)


def _build_proposal(
    application: Application, plan: ReconciliationPlan, request_id: Optional[str]
) -> AgentActionLog:
    expires_at = utcnow() + timedelta(minutes=settings.confirmation_ttl_minutes)
    return AgentActionLog(
        user_id=application.user_id,
        action_type=PROPOSAL_ACTION,
        action_payload={
            "application_id": str(application.id),
            "canonical_sprint_id": str(plan.canonical.id),
            "canonical_version": plan.canonical.version,
            "candidate": plan.candidate.model_dump(mode="json"),
            "expires_at": expires_at.isoformat(),
            "request_id": request_id,
        },
        reason="Regenerating the active sprint needs confirmation",
        undo_available=False,
    )


@traced("sprint.regeneration.resolve")
def resolve_regeneration(
    db: Session,
    proposal_id: UUID,
    *,
    user_id: UUID,
    decision: str,
    request_id: Optional[str] = None,
    now: Optional[datetime] = None,
    sprints: Optional[SprintRepository] = None,
    applications: Optional[ApplicationRepository] = None,
) -> ReconciliationResult:
    """Accept or decline a pending regeneration proposal."""
    sprints = sprints or SprintRepository(db)
    applications = applications or ApplicationRepository(db)

    proposal = db.get(AgentActionLog, proposal_id)
    if not proposal or proposal.action_type != PROPOSAL_ACTION or proposal.user_id != user_id:
        raise ProposalNotFoundError()

    payload = dict(proposal.action_payload or {})
    if payload.get("resolution"):
        raise ProposalResolvedError(f"This regeneration was already {payload['resolution']}.")

    application_id = UUID(payload["application_id"])
    canonical_id = UUID(payload["canonical_sprint_id"])
    current_time = as_utc(now or utcnow())
    if current_time > as_utc(datetime.fromisoformat(payload["expires_at"])):
        _mark_resolution(db, proposal, payload, "expired")
        raise ProposalResolvedError("This regeneration request expired. Generate the sprint again.")

    with application_locks.hold(application_lock_key(application_id)):
        application = applications.get(application_id)
        canonical = sprints.get(canonical_id)

        if decision == "decline":
            _log_decision(db, proposal, payload, "declined", request_id)
            return ReconciliationResult(
                status="unchanged",
                application_id=application_id,
                sprint=canonical,
                message="Regeneration declined. Your current sprint was kept.",
            )

        if (
            application is None
            or canonical is None
            or canonical.status != "active"
            or canonical.version != payload["canonical_version"]
        ):
            raise SprintConflictError(
                "The sprint changed after this regeneration was proposed. Generate it again."
            )

        candidate = SprintSnapshot.model_validate(payload["candidate"])
        replacement = apply_replacement(canonical, candidate)
        try:
            if not (
                sprints.replace_content(replacement, canonical.version)
                and _bump(applications, application_id, **_application_overrides(candidate))
            ):
                raise SprintConflictError()
            _log_decision(db, proposal, payload, "accepted", request_id, commit=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        _refresh_application(db, application)

        others = [
            sprint
            for sprint in sprints.list_for_application(application_id)
            if sprint.status == "active" and sprint.id != canonical_id
        ]
        result = ReconciliationResult(
            status="replaced",
            application_id=application_id,
            sprint=replacement.model_copy(update={"version": canonical.version + 1}),
            message=(
                "Sprint regenerated for the new interview details. Progress recorded in the "
                "previous plan was discarded."
            ),
        )
        for sprint in others:
            if _attempt(db, f"expire:{sprint.id}", lambda s=sprint: sprints.expire(s.id, s.version)):
                result.expired_sprint_ids.append(sprint.id)
            else:
                result.failed_writes.append(f"expire:{sprint.id}")
        if result.failed_writes:
            result.status = "partial"
        return result


def _mark_resolution(db: Session, proposal: AgentActionLog, payload: dict, resolution: str) -> None:
    try:
        proposal.action_payload = {**payload, "resolution": resolution}
        db.add(proposal)
        db.commit()
    except Exception:
        db.rollback()
        raise


def _log_decision(
    db: Session,
    proposal: AgentActionLog,
    payload: dict,
    resolution: str,
    request_id: Optional[str],
    *,
    commit: bool = True,
) -> None:
    proposal.action_payload = {**payload, "resolution": resolution}
    db.add(proposal)
    db.add(
        AgentActionLog(
            user_id=proposal.user_id,
            action_type="sprint_regeneration_confirmed" if resolution == "accepted" else "sprint_regeneration_declined",
            action_payload={
                "proposal_id": str(proposal.id),
                "application_id": payload.get("application_id"),
                "canonical_sprint_id": payload.get("canonical_sprint_id"),
                "request_id": request_id,
            },
            reason=f"Regeneration {resolution}",
            undo_available=False,
        )
    )
    if commit:
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise


def _expire_each(
    db: Session,
    application_id: UUID,
    targets: List[SprintSnapshot],
    sprints: SprintRepository,
    *,
    reason: str,
) -> ReconciliationResult:
    """Expire ``targets`` one commit at a time and report what did not stick."""
    result = ReconciliationResult(status="unchanged", application_id=application_id)
    for sprint in targets:
        if _attempt(db, f"expire:{sprint.id}", lambda s=sprint: sprints.expire(s.id, s.version)):
            result.expired_sprint_ids.append(sprint.id)
        else:
            result.failed_writes.append(f"expire:{sprint.id}")

    if targets and len(result.failed_writes) == len(targets):
        logger.error("Could not expire any of %s sprints for application %s", len(targets), application_id)
        raise ReconciliationError("Couldn't expire the application's sprints. Nothing was written; please retry.")
    if result.failed_writes:
        logger.warning(
            "Partial expiry (%s) for application %s: failed=%s", reason, application_id, result.failed_writes
        )
        result.status = "partial"
        result.message = "Some sprints could not be expired. Retry to finish cleaning up this application."
    elif result.expired_sprint_ids:
        result.status = "expired"
    return result


def expire_active_sprints(
    db: Session,
    application: Application,
    *,
    sprints: Optional[SprintRepository] = None,
) -> ReconciliationResult:
    """Expire every active sprint of an application (used when it is rejected)."""
    sprints = sprints or SprintRepository(db)
    with application_locks.hold(application_lock_key(application.id)):
        targets = [
            sprint for sprint in sprints.list_for_application(application.id) if sprint.status == "active"
        ]
        return _expire_each(db, application.id, targets, sprints, reason="rejected")


def expire_duplicate_actives(
    db: Session,
    application_id: UUID,
    *,
    sprints: Optional[SprintRepository] = None,
) -> ReconciliationResult:
    """Keep only the canonical active sprint of an application."""
    sprints = sprints or SprintRepository(db)
    with application_locks.hold(application_lock_key(application_id)):
        existing = sprints.list_for_application(application_id)
        canonical, anomaly = select_canonical(existing)
        targets = []
        if anomaly:
            targets = [
                sprint for sprint in existing if sprint.status == "active" and sprint.id != canonical.id
            ]
        return _expire_each(db, application_id, targets, sprints, reason="duplicates")


def get_sprint(db: Session, sprint_id: UUID, user_id: UUID) -> SprintSnapshot:
    sprints = SprintRepository(db)
    if sprints.owner_of(sprint_id) != user_id:
        raise SprintNotFoundError()
    return sprints.get(sprint_id)


def list_sprints(db: Session, user_id: UUID, status: Optional[str] = None) -> List[SprintSummary]:
    snapshots = SprintRepository(db).list_for_user(user_id, status=status)
    applications = {
        app.id: app for app in ApplicationRepository(db).list_for_user(user_id)
    }
    summaries: List[SprintSummary] = []
    for sprint in snapshots:
        application = applications.get(sprint.application_id)
        total, done = count_tasks(sprint)
        summaries.append(
            SprintSummary(
                id=sprint.id,
                application_id=sprint.application_id,
                company=application.company if application else None,
                role=application.role if application else None,
                interview_date=sprint.interview_date,
                role_type=sprint.role_type,
                total_days=sprint.total_days,
                status=sprint.status,
                created_at=sprint.created_at,
                days_completed=sum(1 for plan in sprint.daily_plans if plan.completed),
                tasks_total=total,
                tasks_completed=done,
            )
        )
    return summaries


def reconciliation_response(result: ReconciliationResult, request_id: Optional[str]) -> ReconciliationResponse:
    return ReconciliationResponse(
        status=result.status,
        application_id=result.application_id,
        sprint=result.sprint,
        expired_sprint_ids=list(result.expired_sprint_ids),
        failed_writes=list(result.failed_writes),
        anomaly_detected=result.anomaly_detected,
        proposal_id=result.proposal_id,
        message=result.message,
        request_id=request_id or "",
    )
