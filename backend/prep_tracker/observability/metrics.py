"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from prep_tracker.observability.client import get_opik_client

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as an Opik trace when tracing is on."""
    client = get_opik_client()
    if not client:
        return

    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)

    try:
        client.trace(name=f"metric:{name}", metadata=payload)
    except Exception as exc:  # pragma: no cover - metrics never break a request
        logger.debug("Unable to record metric %s: %s", name, exc)


@contextmanager
def timed_operation(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
    """Emit ``<name>.success``/``<name>.failure`` and ``<name>.latency_ms`` around a block.

    The yielded dict is merged into the metric metadata, so callers can attach
    outcome details (status, counts) discovered inside the block.
    """
    extra: Dict[str, Any] = {}
    start = perf_counter()
    try:
        yield extra
    except Exception as exc:
        log_metric(f"{name}.failure", 1, metadata={**(metadata or {}), **extra, "error": type(exc).__name__})
        raise
    latency_ms = (perf_counter() - start) * 1000
    merged = {**(metadata or {}), **extra}
    log_metric(f"{name}.success", 1, metadata=merged)
    log_metric(f"{name}.latency_ms", latency_ms, metadata=merged)
