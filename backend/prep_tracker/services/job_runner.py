"""Batch job runners for sprint maintenance."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from prep_tracker.core.errors import ReconciliationError
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.observability.tracing import traced
from prep_tracker.services.sprint_service import expire_duplicate_actives

logger = logging.getLogger(__name__)


@dataclass
class JobRunResult:
    applications_checked: int
    sprints_expired: int
    failed_writes: List[str] = field(default_factory=list)


def _applications_with_duplicate_actives(db: Session, user_id: Optional[UUID] = None) -> List[UUID]:
    query = db.query(Sprint.application_id).filter(Sprint.status == "active")
    if user_id is not None:
        query = query.filter(Sprint.user_id == user_id)
    rows = query.group_by(Sprint.application_id).having(func.count(Sprint.id) > 1).all()
    return [row[0] for row in rows]


@traced("jobs.duplicate_sweep")
def run_duplicate_sweep(db: Session, *, user_id: Optional[UUID] = None) -> JobRunResult:
    """Expire all but the canonical active sprint for every affected application.

    One application failing does not stop the sweep; its failed writes are
    reported in the result and the next run picks it up again.
    """
    application_ids = _applications_with_duplicate_actives(db, user_id)
    expired = 0
    failed: List[str] = []
    for application_id in application_ids:
        try:
            outcome = expire_duplicate_actives(db, application_id)
        except ReconciliationError:
            failed.append(f"application:{application_id}")
            continue
        expired += len(outcome.expired_sprint_ids)
        failed.extend(outcome.failed_writes)
    if application_ids:
        logger.warning(
            "Duplicate sweep repaired %s applications (%s sprints expired, %s failed writes)",
            len(application_ids),
            expired,
            len(failed),
        )
    if failed:
        logger.error("Duplicate sweep left writes unfinished: %s", failed)
    return JobRunResult(
        applications_checked=len(application_ids),
        sprints_expired=expired,
        failed_writes=failed,
    )
