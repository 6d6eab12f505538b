from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prep_tracker.core.config import settings
from prep_tracker.db.base import Base
from prep_tracker.db import models  # noqa: F401  ensure models are loaded
from prep_tracker.db.deps import get_db
from prep_tracker.db.models.application import Application
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.db.models.user import User
from prep_tracker.main import app
from prep_tracker.observability.client import reset_opik_client
from prep_tracker.services.sprint_generator import generate_sprint

TODAY = date.today()


def _enable_foreign_keys(engine) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture(autouse=True)
def _no_startup_side_effects(monkeypatch):
    monkeypatch.setattr(settings, "auto_create_tables", False)
    monkeypatch.setattr(settings, "opik_enabled", False)
    reset_opik_client()
    yield
    reset_opik_client()


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    _enable_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture()
def file_session_factory(tmp_path):
    """File-backed SQLite so several threads get their own connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'tracker.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        future=True,
    )
    _enable_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, session_factory
    app.dependency_overrides.clear()


def seed_application(
    session_factory,
    *,
    user_id: Optional[UUID] = None,
    role_type: Optional[str] = "SDE",
    interview_date: Optional[date] = None,
    status: str = "interview",
) -> tuple[UUID, UUID]:
    session = session_factory()
    try:
        user_id = user_id or uuid4()
        if session.get(User, user_id) is None:
            session.add(User(id=user_id))
            # No relationship orders the inserts, so the user row goes first.
            session.flush()
        application = Application(
            user_id=user_id,
            company="Acme",
            role="Software Engineer",
            role_type=role_type,
            status=status,
            interview_date=interview_date or TODAY + timedelta(days=10),
            notes="",
            version=0,
        )
        session.add(application)
        session.commit()
        return user_id, application.id
    finally:
        session.close()


def seed_sprint(
    session_factory,
    *,
    user_id: UUID,
    application_id: UUID,
    interview_date: Optional[date] = None,
    role_type: str = "SDE",
    status: str = "active",
    created_at: Optional[datetime] = None,
    today: date = TODAY,
    daily_plans: Optional[Iterable[dict]] = None,
) -> UUID:
    snapshot = generate_sprint(
        application_id,
        interview_date or today + timedelta(days=10),
        role_type,
        today=today,
    )
    session = session_factory()
    try:
        sprint = Sprint(
            id=snapshot.id,
            user_id=user_id,
            application_id=application_id,
            interview_date=snapshot.interview_date,
            role_type=snapshot.role_type,
            total_days=snapshot.total_days,
            daily_plans=(
                list(daily_plans)
                if daily_plans is not None
                else [plan.model_dump(mode="json") for plan in snapshot.daily_plans]
            ),
            status=status,
            version=0,
            created_at=created_at or datetime(2025, 3, 1, tzinfo=timezone.utc),
        )
        session.add(sprint)
        session.commit()
        return sprint.id
    finally:
        session.close()
