"""APScheduler worker running the nightly duplicate-sprint sweep."""
from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from prep_tracker.core.config import settings
from prep_tracker.core.logging import configure_logging
from prep_tracker.db.session import SessionLocal
from prep_tracker.services.job_runner import JobRunResult, run_duplicate_sweep

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "duplicate_sprint_sweep"


def register_jobs(scheduler: BackgroundScheduler) -> None:
    trigger = CronTrigger(
        hour=settings.sweep_job_hour,
        minute=settings.sweep_job_minute,
        timezone=settings.scheduler_timezone,
    )
    scheduler.add_job(
        run_duplicate_sweep_job,
        trigger=trigger,
        id=SWEEP_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    logger.info(
        "Registered duplicate sprint sweep (daily at %02d:%02d %s)",
        settings.sweep_job_hour,
        settings.sweep_job_minute,
        settings.scheduler_timezone,
    )


def run_duplicate_sweep_job(session_factory: Callable[[], Session] = SessionLocal) -> Optional[JobRunResult]:
    """One sweep in its own session. Failures are logged so the worker keeps running."""
    session = session_factory()
    try:
        result = run_duplicate_sweep(session)
    except Exception:
        logger.exception("Duplicate sweep job failed")
        return None
    finally:
        session.close()
    logger.info(
        "Duplicate sweep complete: applications=%s, expired=%s, failed=%s",
        result.applications_checked,
        result.sprints_expired,
        len(result.failed_writes),
    )
    return result


def main() -> None:
    configure_logging(log_level=settings.log_level)
    if not settings.scheduler_enabled:
        logger.warning("Scheduler disabled via config; worker exiting")
        return

    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)
    register_jobs(scheduler)
    stop_event = threading.Event()

    def request_stop(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        stop_event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, request_stop)

    scheduler.start()
    logger.info("Scheduler worker started")
    if settings.jobs_run_on_startup:
        run_duplicate_sweep_job()

    stop_event.wait()
    scheduler.shutdown(wait=True)


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
