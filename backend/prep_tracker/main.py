"""Main FastAPI application for the interview prep tracker."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from prep_tracker.api.routes.applications import router as applications_router
from prep_tracker.api.routes.jobs import router as jobs_router
from prep_tracker.api.routes.plans import router as plans_router
from prep_tracker.api.routes.prep_templates import router as prep_templates_router
from prep_tracker.api.routes.progress import router as progress_router
from prep_tracker.api.routes.questions import router as questions_router
from prep_tracker.api.routes.sprints import router as sprints_router
from prep_tracker.core.config import settings
from prep_tracker.core.errors import PrepTrackerError
from prep_tracker.core.logging import configure_logging
from prep_tracker.core.middleware import RequestIDMiddleware
from prep_tracker.db.session import init_db
from prep_tracker.observability.client import init_opik
from prep_tracker.observability.tracing import trace

configure_logging(log_level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(applications_router)
app.include_router(sprints_router)
app.include_router(plans_router)
app.include_router(progress_router)
app.include_router(prep_templates_router)
app.include_router(questions_router)
app.include_router(jobs_router)


@app.exception_handler(PrepTrackerError)
async def handle_tracker_error(request: Request, exc: PrepTrackerError) -> JSONResponse:
    """Translate named service errors into ``{"detail", "code"}`` responses."""
    level = logging.WARNING if exc.status_code >= 500 else logging.INFO
    logger.log(level, "%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.on_event("startup")
async def startup() -> None:
    """Create tables for local setups and initialize observability backends."""
    if settings.auto_create_tables:
        init_db()
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
