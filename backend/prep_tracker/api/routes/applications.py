"""Application intake, status and interview round routes."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from prep_tracker.api.routes.sprints import HTTP_STATUS_BY_RESULT
from prep_tracker.api.schemas.application import (
    ApplicationCreateRequest,
    ApplicationPayload,
    ApplicationResponse,
    ApplicationStatusRequest,
    InterviewRoundCreateRequest,
    InterviewRoundPayload,
    RoundFeedbackRequest,
)
from prep_tracker.db.deps import get_db
from prep_tracker.observability.metrics import log_metric, timed_operation
from prep_tracker.observability.tracing import trace
from prep_tracker.services.application_service import (
    add_round,
    change_application_status,
    create_application,
    delete_application,
    get_application,
    list_applications,
    serialize_application,
    serialize_round,
    set_round_feedback,
)
from prep_tracker.services.sprint_service import reconciliation_response

router = APIRouter()


@router.post(
    "/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["applications"],
)
def create_application_route(
    payload: ApplicationCreateRequest,
    http_request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> ApplicationResponse:
    """Track a new application; builds its first sprint when a date and role are given."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": "/applications",
        "user_id": str(payload.user_id),
        "status": payload.status,
        "create_sprint": payload.create_sprint,
        "request_id": request_id,
    }
    with trace(
        "application.create",
        metadata=metadata,
        user_id=str(payload.user_id),
        request_id=request_id,
    ), timed_operation("application.create", {"user_id": str(payload.user_id)}):
        application, reconciliation = create_application(db, payload, request_id=request_id)

    if reconciliation and reconciliation.status == "partial":
        response.status_code = status.HTTP_207_MULTI_STATUS
    return ApplicationResponse(
        application=serialize_application(application),
        reconciliation=reconciliation_response(reconciliation, request_id) if reconciliation else None,
        request_id=request_id or "",
    )


@router.get("/applications", response_model=List[ApplicationPayload], tags=["applications"])
def list_applications_route(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the applications"),
    db: Session = Depends(get_db),
) -> List[ApplicationPayload]:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "application.list",
        metadata={"route": "/applications"},
        user_id=str(user_id),
        request_id=request_id,
    ):
        applications = list_applications(db, user_id)
    log_metric("application.list.count", len(applications), metadata={"user_id": str(user_id)})
    return [serialize_application(application) for application in applications]


@router.get(
    "/applications/{application_id}",
    response_model=ApplicationPayload,
    tags=["applications"],
)
def get_application_route(
    application_id: UUID,
    http_request: Request,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> ApplicationPayload:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "application.get",
        metadata={"route": f"/applications/{application_id}"},
        user_id=str(user_id),
        request_id=request_id,
    ):
        application = get_application(db, application_id, user_id)
    return serialize_application(application)


@router.delete("/applications/{application_id}", tags=["applications"])
def delete_application_route(
    application_id: UUID,
    http_request: Request,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> dict:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "application.delete",
        metadata={"route": f"/applications/{application_id}"},
        user_id=str(user_id),
        request_id=request_id,
    ):
        sprints_deleted = delete_application(db, application_id, user_id)
    log_metric("application.delete.success", 1, metadata={"sprints_deleted": sprints_deleted})
    return {
        "application_id": str(application_id),
        "sprints_deleted": sprints_deleted,
        "request_id": request_id or "",
    }


@router.patch(
    "/applications/{application_id}/status",
    response_model=ApplicationResponse,
    tags=["applications"],
)
def update_application_status(
    application_id: UUID,
    payload: ApplicationStatusRequest,
    http_request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> ApplicationResponse:
    """Move an application through the pipeline; interview and rejected have sprint side effects."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "application.status",
        metadata={"route": f"/applications/{application_id}/status", "status": payload.status},
        user_id=str(payload.user_id),
        request_id=request_id,
    ), timed_operation("application.status", {"status": payload.status}):
        application, reconciliation = change_application_status(
            db,
            application_id,
            user_id=payload.user_id,
            status=payload.status,
            confirm_regeneration=payload.confirm_regeneration,
            confirm_past_date=payload.confirm_past_date,
            request_id=request_id,
        )

    if reconciliation:
        response.status_code = HTTP_STATUS_BY_RESULT[reconciliation.status]
    return ApplicationResponse(
        application=serialize_application(application),
        reconciliation=reconciliation_response(reconciliation, request_id) if reconciliation else None,
        request_id=request_id or "",
    )


@router.post(
    "/applications/{application_id}/rounds",
    response_model=InterviewRoundPayload,
    status_code=status.HTTP_201_CREATED,
    tags=["rounds"],
)
def create_round(
    application_id: UUID,
    payload: InterviewRoundCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> InterviewRoundPayload:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "round.create",
        metadata={"route": f"/applications/{application_id}/rounds", "round_type": payload.round_type},
        user_id=str(payload.user_id),
        request_id=request_id,
    ):
        interview_round = add_round(db, application_id, payload)
    log_metric("round.create.success", 1, metadata={"round_type": interview_round.round_type})
    return serialize_round(interview_round)


@router.get(
    "/applications/{application_id}/rounds",
    response_model=List[InterviewRoundPayload],
    tags=["rounds"],
)
def list_rounds(
    application_id: UUID,
    http_request: Request,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> List[InterviewRoundPayload]:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "round.list",
        metadata={"route": f"/applications/{application_id}/rounds"},
        user_id=str(user_id),
        request_id=request_id,
    ):
        application = get_application(db, application_id, user_id)
    return [serialize_round(round_) for round_ in application.rounds]


@router.put(
    "/applications/{application_id}/rounds/{round_number}/feedback",
    response_model=InterviewRoundPayload,
    tags=["rounds"],
)
def update_round_feedback(
    application_id: UUID,
    round_number: int,
    payload: RoundFeedbackRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> InterviewRoundPayload:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "round.feedback",
        metadata={"route": f"/applications/{application_id}/rounds/{round_number}/feedback"},
        user_id=str(payload.user_id),
        request_id=request_id,
    ):
        interview_round = set_round_feedback(
            db,
            application_id,
            round_number,
            user_id=payload.user_id,
            feedback=payload.feedback,
        )
    log_metric(
        "round.feedback.struggled_topics",
        len(payload.feedback.struggled_topics),
        metadata={"application_id": str(application_id)},
    )
    return serialize_round(interview_round)
