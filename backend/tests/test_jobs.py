from __future__ import annotations

from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.exc import OperationalError

from conftest import seed_application, seed_sprint
from prep_tracker.core.config import settings
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.db.repositories import SprintRepository
from prep_tracker.services.job_runner import run_duplicate_sweep
from prep_tracker.worker.scheduler_main import SWEEP_JOB_ID, register_jobs, run_duplicate_sweep_job


def _seed_duplicates(session_factory, user_id=None, copies=3):
    user_id, application_id = seed_application(session_factory, user_id=user_id)
    ids = [
        seed_sprint(
            session_factory,
            user_id=user_id,
            application_id=application_id,
            created_at=datetime(2025, 3, day, tzinfo=timezone.utc),
        )
        for day in range(1, copies + 1)
    ]
    return user_id, application_id, ids


def test_sweep_expires_all_but_newest(session_factory) -> None:
    user_id, application_id, ids = _seed_duplicates(session_factory)
    seed_sprint(session_factory, user_id=user_id, application_id=seed_application(session_factory, user_id=user_id)[1])

    with session_factory() as db:
        result = run_duplicate_sweep(db)

    assert result.applications_checked == 1
    assert result.sprints_expired == 2
    with session_factory() as db:
        active = [
            row.id
            for row in db.query(Sprint).filter(Sprint.application_id == application_id, Sprint.status == "active")
        ]
    assert active == [ids[-1]]


def test_sweep_reports_applications_it_could_not_repair(session_factory, monkeypatch) -> None:
    _, stuck_application, _ = _seed_duplicates(session_factory, copies=2)
    _seed_duplicates(session_factory, copies=2)
    original = SprintRepository.expire

    def expire(self, sprint_id, expected_version):
        if self.db.get(Sprint, sprint_id).application_id == stuck_application:
            raise OperationalError("UPDATE sprints", {}, Exception("database is locked"))
        return original(self, sprint_id, expected_version)

    monkeypatch.setattr(SprintRepository, "expire", expire)

    with session_factory() as db:
        result = run_duplicate_sweep(db)

    assert result.applications_checked == 2
    assert result.sprints_expired == 1
    assert result.failed_writes == [f"application:{stuck_application}"]


def test_sweep_can_be_scoped_to_a_user(session_factory) -> None:
    first_user, _, _ = _seed_duplicates(session_factory)
    _seed_duplicates(session_factory)

    with session_factory() as db:
        result = run_duplicate_sweep(db, user_id=first_user)

    assert result.applications_checked == 1
    assert result.sprints_expired == 2


def test_jobs_config(client) -> None:
    test_client, _ = client

    body = test_client.get("/jobs").json()

    assert body["schedule"]["duplicate_sweep_time"] == f"{settings.sweep_job_hour:02d}:{settings.sweep_job_minute:02d}"
    assert "scheduler_enabled" in body


def test_run_now_requires_debug(client, monkeypatch) -> None:
    test_client, _ = client
    monkeypatch.setattr(settings, "debug", False)

    response = test_client.post("/jobs/run-now", json={"job": "duplicate_sweep"})

    assert response.status_code == 403


def test_run_now_sweeps_in_debug(client, monkeypatch) -> None:
    test_client, session_factory = client
    monkeypatch.setattr(settings, "debug", True)
    _seed_duplicates(session_factory, copies=2)

    response = test_client.post("/jobs/run-now", json={"job": "duplicate_sweep"})

    assert response.status_code == 200
    assert response.json()["applications_checked"] == 1
    assert response.json()["sprints_expired"] == 1


def test_register_jobs_schedules_daily_sweep(monkeypatch) -> None:
    monkeypatch.setattr(settings, "sweep_job_hour", 4)
    monkeypatch.setattr(settings, "sweep_job_minute", 30)
    scheduler = BackgroundScheduler(timezone="UTC")

    register_jobs(scheduler)

    job = scheduler.get_job(SWEEP_JOB_ID)
    assert job is not None
    fields = {field.name: str(field) for field in job.trigger.fields}
    assert fields["hour"] == "4"
    assert fields["minute"] == "30"


def test_sweep_job_uses_its_own_session(session_factory) -> None:
    _seed_duplicates(session_factory, copies=2)

    result = run_duplicate_sweep_job(session_factory)

    assert result.applications_checked == 1
    assert result.sprints_expired == 1


def test_sweep_job_swallows_failures() -> None:
    session = BrokenSession()

    assert run_duplicate_sweep_job(lambda: session) is None
    assert session.closed is True


class BrokenSession:
    closed = False

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    def close(self):
        self.closed = True
