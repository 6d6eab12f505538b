"""Operational endpoints for scheduler jobs and data maintenance."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.jobs import (
    DataResetRequest,
    DataResetResponse,
    JobRunRequest,
    JobRunResponse,
)
from prep_tracker.core.config import settings
from prep_tracker.db.deps import get_db
from prep_tracker.observability.metrics import log_metric
from prep_tracker.observability.tracing import trace
from prep_tracker.services.application_service import reset_user_data
from prep_tracker.services.job_runner import run_duplicate_sweep

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", metadata={"request_id": request_id}, request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "schedule": {
                "timezone": settings.scheduler_timezone,
                "duplicate_sweep_time": f"{settings.sweep_job_hour:02d}:{settings.sweep_job_minute:02d}",
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/run-now", response_model=JobRunResponse, tags=["jobs"])
def run_job_now(
    request: Request,
    payload: JobRunRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> JobRunResponse:
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Run-now only allowed in debug mode")

    request_id = getattr(request.state, "request_id", None)
    metadata = {"job": payload.job, "request_id": request_id}
    start = perf_counter()
    with trace("jobs.run_now", metadata=metadata, request_id=request_id):
        result = run_duplicate_sweep(db, user_id=payload.user_id)

    latency_ms = (perf_counter() - start) * 1000
    if result.failed_writes:
        response.status_code = status.HTTP_207_MULTI_STATUS
        log_metric("jobs.run_now.failed_writes", len(result.failed_writes), metadata={"job": payload.job})
    else:
        log_metric("jobs.run_now.success", 1, metadata={"job": payload.job})
    log_metric("jobs.run_now.latency_ms", latency_ms, metadata={"job": payload.job})

    return JobRunResponse(
        job=payload.job,
        applications_checked=result.applications_checked,
        sprints_expired=result.sprints_expired,
        failed_writes=list(result.failed_writes),
        request_id=request_id or "",
    )


@router.post("/data/reset", response_model=DataResetResponse, tags=["data"])
def reset_data(
    request: Request,
    payload: DataResetRequest,
    db: Session = Depends(get_db),
) -> DataResetResponse:
    """Hard-delete every application, sprint and progress record for the user."""
    request_id = getattr(request.state, "request_id", None)
    with trace("data.reset", metadata={"route": "/data/reset"}, user_id=str(payload.user_id), request_id=request_id):
        applications_deleted, sprints_deleted = reset_user_data(db, payload.user_id)
    log_metric("data.reset.success", 1, metadata={"user_id": str(payload.user_id)})
    return DataResetResponse(
        user_id=payload.user_id,
        applications_deleted=applications_deleted,
        sprints_deleted=sprints_deleted,
        request_id=request_id or "",
    )
