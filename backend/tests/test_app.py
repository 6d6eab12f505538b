from __future__ import annotations

from fastapi.testclient import TestClient

from prep_tracker.core.context import bound_request_id, get_request_id, normalize_request_id
from prep_tracker.core.logging import build_logging_config
from prep_tracker.db.base import Base
from prep_tracker.main import app


def test_health_endpoint_returns_ok() -> None:
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-Id"]


def test_request_id_is_echoed() -> None:
    client = TestClient(app)

    response = client.get("/health", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"


def test_all_tables_registered() -> None:
    assert set(Base.metadata.tables) == {
        "users",
        "applications",
        "interview_rounds",
        "questions",
        "sprints",
        "user_progress",
        "agent_actions_log",
    }


def test_malformed_request_id_is_replaced() -> None:
    client = TestClient(app)

    response = client.get("/health", headers={"X-Request-Id": "bad id with spaces"})

    assert response.headers["X-Request-Id"] != "bad id with spaces"
    assert len(response.headers["X-Request-Id"]) == 36


def test_request_id_binding_is_scoped() -> None:
    assert get_request_id() is None
    with bound_request_id("req-9"):
        assert get_request_id() == "req-9"
    assert get_request_id() is None
    assert normalize_request_id("x" * 200) != "x" * 200


def test_logging_config_quiets_libraries() -> None:
    config = build_logging_config("info")

    assert config["loggers"]["prep_tracker"]["level"] == "INFO"
    assert config["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
    assert build_logging_config("debug")["loggers"]["apscheduler"]["level"] == "DEBUG"
