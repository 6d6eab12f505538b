"""Decide how a freshly generated sprint fits against an application's existing sprints."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, Tuple
from uuid import UUID

from prep_tracker.api.schemas.sprint import SprintSnapshot
from prep_tracker.core.clock import as_utc

logger = logging.getLogger(__name__)

Outcome = Literal["create", "replace", "unchanged", "confirmation_required"]

REPLACE_MESSAGE = (
    "Sprint regenerated for the new interview details. Progress recorded in the previous "
    "plan was discarded."
)
CONFIRM_MESSAGE = (
    "An active sprint already exists for this application. Regenerating it will discard "
    "the progress recorded in its plan. Confirm to continue."
)


@dataclass
class ReconciliationPlan:
    outcome: Outcome
    candidate: SprintSnapshot
    canonical: Optional[SprintSnapshot] = None
    expire_ids: List[UUID] = field(default_factory=list)
    anomaly_detected: bool = False
    message: Optional[str] = None


def plan_signature(sprint: SprintSnapshot) -> Tuple:
    """Structure of a sprint, ignoring ids, completion flags and timestamps."""
    days = tuple(
        (
            plan.day,
            plan.date,
            plan.focus,
            tuple(
                (block.type, tuple(task.description for task in block.tasks))
                for block in plan.blocks
            ),
        )
        for plan in sprint.daily_plans
    )
    return (sprint.interview_date, sprint.role_type, sprint.total_days, days)


def _recency_key(sprint: SprintSnapshot) -> Tuple:
    return (as_utc(sprint.created_at), str(sprint.id))


def select_canonical(existing: Sequence[SprintSnapshot]) -> Tuple[Optional[SprintSnapshot], bool]:
    """Return the sprint to keep and whether several actives were found."""
    if not existing:
        return None, False
    actives = [sprint for sprint in existing if sprint.status == "active"]
    if actives:
        return max(actives, key=_recency_key), len(actives) > 1
    return max(existing, key=_recency_key), False


def reconcile_sprint(
    application_id: UUID,
    existing: Sequence[SprintSnapshot],
    candidate: SprintSnapshot,
    *,
    confirmed: bool = False,
) -> ReconciliationPlan:
    """Compute the writes needed so the application ends with one current sprint.

    Pure: the caller persists the result. Still-active sprints other than the
    canonical one are always queued for expiry.
    """
    own = [sprint for sprint in existing if sprint.application_id == application_id]
    canonical, anomaly = select_canonical(own)
    if anomaly:
        logger.warning(
            "Application %s has %s active sprints; keeping %s",
            application_id,
            sum(1 for sprint in own if sprint.status == "active"),
            canonical.id if canonical else None,
        )

    expire_ids = [
        sprint.id
        for sprint in own
        if sprint.status == "active" and (canonical is None or sprint.id != canonical.id)
    ]

    if canonical is None:
        return ReconciliationPlan(outcome="create", candidate=candidate)

    if canonical.status != "active":
        return ReconciliationPlan(
            outcome="create",
            candidate=candidate,
            canonical=canonical,
            expire_ids=expire_ids,
            anomaly_detected=anomaly,
        )

    if plan_signature(canonical) == plan_signature(candidate):
        return ReconciliationPlan(
            outcome="unchanged",
            candidate=candidate,
            canonical=canonical,
            expire_ids=expire_ids,
            anomaly_detected=anomaly,
        )

    if not confirmed:
        return ReconciliationPlan(
            outcome="confirmation_required",
            candidate=candidate,
            canonical=canonical,
            expire_ids=expire_ids,
            anomaly_detected=anomaly,
            message=CONFIRM_MESSAGE,
        )

    return ReconciliationPlan(
        outcome="replace",
        candidate=candidate,
        canonical=canonical,
        expire_ids=expire_ids,
        anomaly_detected=anomaly,
        message=REPLACE_MESSAGE,
    )


def apply_replacement(canonical: SprintSnapshot, candidate: SprintSnapshot) -> SprintSnapshot:
    """Canonical sprint rewritten with the candidate's content, keeping its id and version."""
    return canonical.model_copy(
        update={
            "interview_date": candidate.interview_date,
            "role_type": candidate.role_type,
            "total_days": candidate.total_days,
            "daily_plans": [plan.model_copy(deep=True) for plan in candidate.daily_plans],
            "status": "active",
            "created_at": candidate.created_at,
        }
    )
