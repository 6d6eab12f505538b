from __future__ import annotations

import logging

import pytest

from prep_tracker.observability import client as client_module
from prep_tracker.observability import metrics, tracing
from prep_tracker.core.config import settings


class DummyTrace:
    def __init__(self, name, metadata):
        self.name = name
        self.metadata = metadata
        self.ended = False
        self.updates = []

    def update(self, **kwargs):
        self.updates.append(kwargs)

    def end(self):
        self.ended = True


class DummyClient:
    def __init__(self):
        self.traces = []

    def trace(self, name, metadata=None):
        trace = DummyTrace(name, metadata)
        self.traces.append(trace)
        return trace


@pytest.fixture()
def fresh_client_state():
    client_module.reset_opik_client()
    yield
    client_module.reset_opik_client()


def test_init_opik_disabled(fresh_client_state) -> None:
    assert client_module.init_opik() is None
    assert client_module.get_opik_client() is None


def test_init_opik_without_key_logs_warning(fresh_client_state, monkeypatch, caplog) -> None:
    monkeypatch.setattr(settings, "opik_enabled", True)
    monkeypatch.setattr(settings, "opik_api_key", None)

    with caplog.at_level(logging.WARNING):
        assert client_module.init_opik() is None

    assert "OPIK_API_KEY is missing" in caplog.text


def test_trace_is_noop_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("noop") as opik_trace:
        assert opik_trace is None


def test_trace_records_metadata_and_errors(monkeypatch) -> None:
    dummy = DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy)

    with pytest.raises(ValueError):
        with tracing.trace("sprint.test", metadata={"route": "/x"}, user_id="u-1", request_id="req-1"):
            raise ValueError("boom")

    [recorded] = dummy.traces
    assert recorded.metadata == {"route": "/x", "user_id": "u-1", "request_id": "req-1"}
    [update] = recorded.updates
    assert update["error_info"] == {"message": "boom", "type": "ValueError"}
    assert update["metadata"]["route"] == "/x"
    assert update["metadata"]["duration_ms"] >= 0
    assert recorded.ended is True


def test_successful_trace_records_duration(monkeypatch) -> None:
    dummy = DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy)

    with tracing.trace("sprint.ok", metadata={"route": "/ok"}) as opik_trace:
        assert opik_trace is dummy.traces[0]

    [update] = dummy.traces[0].updates
    assert "error_info" not in update
    assert update["metadata"]["duration_ms"] >= 0
    assert dummy.traces[0].ended is True


def test_disabled_client_is_cached_until_reset(fresh_client_state, monkeypatch) -> None:
    built = []
    monkeypatch.setattr(client_module, "_build_client", lambda: built.append(1))

    client_module.get_opik_client()
    client_module.get_opik_client()
    client_module.reset_opik_client()
    client_module.get_opik_client()

    assert len(built) == 2


def test_traced_forwards_identifiers(monkeypatch) -> None:
    dummy = DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy)

    @tracing.traced("service.op")
    def operation(value, *, user_id=None, request_id=None):
        return value * 2

    assert operation(21, user_id="u-2", request_id="req-2") == 42
    assert operation.__name__ == "operation"
    [recorded] = dummy.traces
    assert recorded.name == "service.op"
    assert recorded.metadata == {"operation": "operation", "user_id": "u-2", "request_id": "req-2"}


def test_log_metric_records_value(monkeypatch) -> None:
    dummy = DummyClient()
    monkeypatch.setattr(metrics, "get_opik_client", lambda: dummy)

    metrics.log_metric("sprint.count", 3, metadata={"user_id": "u-1"})

    [recorded] = dummy.traces
    assert recorded.name == "metric:sprint.count"
    assert recorded.metadata == {"value": 3, "user_id": "u-1"}


def test_timed_operation_success(monkeypatch) -> None:
    dummy = DummyClient()
    monkeypatch.setattr(metrics, "get_opik_client", lambda: dummy)

    with metrics.timed_operation("sprint.generate", {"user_id": "u-1"}) as outcome:
        outcome["status"] = "created"

    names = [trace.name for trace in dummy.traces]
    assert names == ["metric:sprint.generate.success", "metric:sprint.generate.latency_ms"]
    assert dummy.traces[0].metadata["status"] == "created"
    assert dummy.traces[1].metadata["value"] >= 0


def test_timed_operation_failure(monkeypatch) -> None:
    dummy = DummyClient()
    monkeypatch.setattr(metrics, "get_opik_client", lambda: dummy)

    with pytest.raises(RuntimeError):
        with metrics.timed_operation("sprint.generate"):
            raise RuntimeError("db down")

    [recorded] = dummy.traces
    assert recorded.name == "metric:sprint.generate.failure"
    assert recorded.metadata["error"] == "RuntimeError"
