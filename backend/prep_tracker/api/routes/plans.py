"""Plan-for-date route: today's (or a requested day's) plan for every active sprint."""
from __future__ import annotations

from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.plan import PlanForDateResponse, PlanForSprint
from prep_tracker.core.clock import today
from prep_tracker.core.errors import NoActiveSprintsError, SprintNotFoundError
from prep_tracker.db.deps import get_db
from prep_tracker.db.repositories import ApplicationRepository, SprintRepository
from prep_tracker.observability.metrics import log_metric
from prep_tracker.observability.tracing import trace
from prep_tracker.services.application_service import struggled_topics_for
from prep_tracker.services.date_resolution import resolve_date
from prep_tracker.services.plan_selector import PlanNotFound, select_plans_for_date
from prep_tracker.services.struggled_topics import struggled_task_ids

router = APIRouter()

APPLICATION_SPRINT_MISSING = "I couldn't find an active sprint for that application."


@router.get("/plans", response_model=PlanForDateResponse, tags=["plans"])
def get_plans_for_date(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the sprints"),
    date_value: Optional[str] = Query(
        default=None, alias="date", description="ISO-8601 date or date-time; defaults to today"
    ),
    application_id: Optional[UUID] = Query(default=None),
    db: Session = Depends(get_db),
) -> PlanForDateResponse:
    """Return one plan per active sprint, with guidance when the exact day isn't planned."""
    request_id = getattr(http_request.state, "request_id", None)
    target = resolve_date(date_value) if date_value else today()
    metadata = {
        "route": "/plans",
        "target_date": target.isoformat(),
        "application_id": str(application_id) if application_id else None,
    }

    with trace("plans.for_date", metadata=metadata, user_id=str(user_id), request_id=request_id):
        sprints = SprintRepository(db).list_for_user(user_id, status="active")
        if not sprints:
            raise NoActiveSprintsError()
        if application_id is not None:
            sprints = [sprint for sprint in sprints if sprint.application_id == application_id]
            if not sprints:
                raise SprintNotFoundError(APPLICATION_SPRINT_MISSING)

        applications = {
            application.id: application
            for application in ApplicationRepository(db).list_for_user(user_id)
        }
        topics_by_application: Dict[UUID, List[str]] = {
            app_id: struggled_topics_for(application) for app_id, application in applications.items()
        }

        entries: List[PlanForSprint] = []
        for sprint, selection in select_plans_for_date(sprints, target):
            application = applications.get(sprint.application_id)
            entry = PlanForSprint(
                sprint_id=sprint.id,
                application_id=sprint.application_id,
                company=application.company if application else None,
                role=application.role if application else None,
            )
            if isinstance(selection, PlanNotFound):
                entry.not_found_reason = selection.reason
                entry.guidance = selection.message
            else:
                entry.plan = selection.plan
                entry.day_index = selection.day_index
                entry.guidance = selection.guidance
                entry.struggled_task_ids = struggled_task_ids(
                    selection.plan, topics_by_application.get(sprint.application_id, [])
                )
            entries.append(entry)

    log_metric(
        "plans.for_date.fallbacks",
        sum(1 for entry in entries if entry.guidance),
        metadata={"user_id": str(user_id)},
    )
    return PlanForDateResponse(
        user_id=user_id,
        target_date=target,
        sprints=entries,
        request_id=request_id or "",
    )
