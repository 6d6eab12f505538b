"""Sprint generation, regeneration decisions, listing and task completion."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.sprint import (
    ReconciliationResponse,
    RegenerationDecisionRequest,
    SprintGenerateRequest,
    SprintSnapshot,
    SprintSummary,
)
from prep_tracker.api.schemas.task import TaskCompletionRequest, TaskCompletionResponse
from prep_tracker.db.deps import get_db
from prep_tracker.observability.metrics import log_metric, timed_operation
from prep_tracker.observability.tracing import trace
from prep_tracker.services.application_service import get_application
from prep_tracker.services.date_resolution import resolve_optional_date
from prep_tracker.services.sprint_service import (
    build_candidate,
    get_sprint,
    list_sprints,
    reconcile_application_sprint,
    reconciliation_response,
    resolve_regeneration,
)
from prep_tracker.services.task_completion import complete_task

router = APIRouter()

HTTP_STATUS_BY_RESULT = {
    "created": status.HTTP_201_CREATED,
    "replaced": status.HTTP_200_OK,
    "unchanged": status.HTTP_200_OK,
    "expired": status.HTTP_200_OK,
    "confirmation_required": status.HTTP_202_ACCEPTED,
    "partial": status.HTTP_207_MULTI_STATUS,
}


@router.post(
    "/applications/{application_id}/sprint",
    response_model=ReconciliationResponse,
    tags=["sprints"],
)
def generate_application_sprint(
    application_id: UUID,
    payload: SprintGenerateRequest,
    http_request: Request,
    response: Response,
    confirm: bool = Query(False, description="Regenerate an existing active sprint without asking"),
    db: Session = Depends(get_db),
) -> ReconciliationResponse:
    """Generate a sprint for the application and reconcile it with existing ones."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": f"/applications/{application_id}/sprint",
        "application_id": str(application_id),
        "user_id": str(payload.user_id),
        "confirm": confirm,
        "request_id": request_id,
    }

    with trace(
        "sprint.generate",
        metadata=metadata,
        user_id=str(payload.user_id),
        request_id=request_id,
    ), timed_operation("sprint.generate", {"user_id": str(payload.user_id)}) as outcome:
        application = get_application(db, application_id, payload.user_id)
        candidate = build_candidate(
            application,
            interview_date=resolve_optional_date(payload.interview_date),
            role_type=payload.role_type,
            confirm_past_date=payload.confirm_past_date,
        )
        result = reconcile_application_sprint(
            db,
            application,
            candidate,
            confirmed=confirm,
            request_id=request_id,
        )
        outcome["status"] = result.status

    if result.anomaly_detected:
        log_metric("sprint.duplicates_detected", 1, metadata={"application_id": str(application_id)})
    response.status_code = HTTP_STATUS_BY_RESULT[result.status]
    return reconciliation_response(result, request_id)


@router.post(
    "/sprint-regenerations/{proposal_id}",
    response_model=ReconciliationResponse,
    tags=["sprints"],
)
def decide_regeneration(
    proposal_id: UUID,
    payload: RegenerationDecisionRequest,
    http_request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> ReconciliationResponse:
    """Accept or decline a pending sprint regeneration."""
    request_id = getattr(http_request.state, "request_id", None)
    with timed_operation("sprint.regeneration", {"decision": payload.decision}):
        result = resolve_regeneration(
            db,
            proposal_id,
            user_id=payload.user_id,
            decision=payload.decision,
            request_id=request_id,
        )
    response.status_code = HTTP_STATUS_BY_RESULT[result.status]
    return reconciliation_response(result, request_id)


@router.get("/sprints", response_model=List[SprintSummary], tags=["sprints"])
def list_user_sprints(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the sprints"),
    status_filter: Optional[str] = Query(
        default=None, alias="status", pattern="^(active|completed|expired)$"
    ),
    db: Session = Depends(get_db),
) -> List[SprintSummary]:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "sprint.list",
        metadata={"route": "/sprints", "status": status_filter},
        user_id=str(user_id),
        request_id=request_id,
    ):
        summaries = list_sprints(db, user_id, status=status_filter)
    log_metric("sprint.list.count", len(summaries), metadata={"user_id": str(user_id)})
    return summaries


@router.get("/sprints/{sprint_id}", response_model=SprintSnapshot, tags=["sprints"])
def get_user_sprint(
    sprint_id: UUID,
    http_request: Request,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> SprintSnapshot:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "sprint.get",
        metadata={"route": f"/sprints/{sprint_id}"},
        user_id=str(user_id),
        request_id=request_id,
    ):
        return get_sprint(db, sprint_id, user_id)


@router.patch(
    "/sprints/{sprint_id}/tasks",
    response_model=TaskCompletionResponse,
    tags=["sprints"],
)
def update_sprint_task(
    sprint_id: UUID,
    payload: TaskCompletionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskCompletionResponse:
    """Mark one sprint task complete or incomplete."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": f"/sprints/{sprint_id}/tasks",
        "sprint_id": str(sprint_id),
        "day_index": payload.day_index,
        "block_index": payload.block_index,
        "task_index": payload.task_index,
        "completed": payload.completed,
    }
    with timed_operation("sprint.task.complete", {"sprint_id": str(sprint_id)}) as outcome:
        result = complete_task(
            db,
            sprint_id,
            user_id=payload.user_id,
            day_index=payload.day_index,
            block_index=payload.block_index,
            task_index=payload.task_index,
            completed=payload.completed,
            request_id=request_id,
        )
        outcome["changed"] = result.changed
    log_metric("sprint.task.changed", 1 if result.changed else 0, metadata=metadata)

    return TaskCompletionResponse(
        sprint_id=sprint_id,
        day_index=payload.day_index,
        block_index=payload.block_index,
        task_index=payload.task_index,
        completed=payload.completed,
        changed=result.changed,
        sprint_status=result.sprint.status,
        progress=result.progress,
        request_id=request_id or "",
    )
