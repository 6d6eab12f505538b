"""Apply task completion changes to a sprint and the user's progress row."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.progress import UserProgressSnapshot
from prep_tracker.api.schemas.sprint import SprintSnapshot
from prep_tracker.core.clock import today as clock_today
from prep_tracker.core.config import settings
from prep_tracker.core.errors import SprintConflictError, SprintNotFoundError
from prep_tracker.core.locks import progress_locks
from prep_tracker.db.models.agent_action_log import AgentActionLog
from prep_tracker.db.repositories import ProgressRepository, SprintRepository
from prep_tracker.observability.tracing import traced
from prep_tracker.services.progress_tracker import (
    record_progress_event,
    record_uncompletion,
    set_task_completion,
)
from prep_tracker.services.sprint_reconciler import plan_signature

logger = logging.getLogger(__name__)


@dataclass
class TaskCompletionResult:
    sprint: SprintSnapshot
    changed: bool
    completed: bool
    progress: UserProgressSnapshot


@traced("sprint.task.complete")
def complete_task(
    db: Session,
    sprint_id: UUID,
    *,
    user_id: UUID,
    day_index: int,
    block_index: int,
    task_index: int,
    completed: bool = True,
    event_date: Optional[date] = None,
    request_id: Optional[str] = None,
    sprints: Optional[SprintRepository] = None,
    progress: Optional[ProgressRepository] = None,
) -> TaskCompletionResult:
    """Set one task's completion flag and update streaks in a single transaction.

    Conflicting concurrent writes are retried by re-reading the sprint and
    re-applying this one flag. If the sprint was regenerated in the meantime
    the change no longer targets the same task and ``SprintConflictError`` is
    raised instead.
    """
    sprints = sprints or SprintRepository(db)
    progress = progress or ProgressRepository(db)
    if sprints.owner_of(sprint_id) != user_id:
        raise SprintNotFoundError()

    when = event_date or clock_today()
    baseline = None
    with progress_locks.hold(f"progress:{user_id}"):
        for attempt in range(settings.cas_max_retries + 1):
            current = sprints.get(sprint_id)
            if current is None:
                raise SprintNotFoundError()
            signature = plan_signature(current)
            if baseline is None:
                baseline = signature
            elif signature != baseline:
                raise SprintConflictError()

            change = set_task_completion(current, day_index, block_index, task_index, completed)
            before = progress.get(user_id)
            if not change.changed:
                return TaskCompletionResult(
                    sprint=current, changed=False, completed=completed, progress=before
                )

            after = record_progress_event(before, when) if completed else record_uncompletion(before)
            after = after.model_copy(
                update={"version": 0 if before.version is None else before.version + 1}
            )
            try:
                saved = sprints.save_progress(change.sprint, current.version) and progress.save(
                    user_id, after, before.version
                )
                if saved:
                    db.add(
                        AgentActionLog(
                            user_id=user_id,
                            action_type="task_completed" if completed else "task_uncompleted",
                            action_payload={
                                "sprint_id": str(sprint_id),
                                "day_index": day_index,
                                "block_index": block_index,
                                "task_index": task_index,
                                "request_id": request_id,
                            },
                            reason="Sprint task completion toggled",
                            undo_available=True,
                        )
                    )
                    db.commit()
                    return TaskCompletionResult(
                        sprint=change.sprint.model_copy(update={"version": current.version + 1}),
                        changed=True,
                        completed=completed,
                        progress=after,
                    )
                db.rollback()
            except IntegrityError:
                db.rollback()
            except Exception:
                db.rollback()
                raise
            logger.warning(
                "Concurrent update on sprint %s, retrying task change (attempt %s)",
                sprint_id,
                attempt + 1,
            )

    raise SprintConflictError()
