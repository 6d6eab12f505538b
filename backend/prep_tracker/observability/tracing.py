"""Opik tracing for routes and core operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import wraps
from time import perf_counter
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional, TypeVar

from prep_tracker.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _trace_metadata(
    metadata: Optional[Dict[str, Any]], user_id: Optional[str], request_id: Optional[str]
) -> Dict[str, Any]:
    merged = dict(metadata or {})
    if user_id:
        merged.setdefault("user_id", str(user_id))
    if request_id:
        merged.setdefault("request_id", request_id)
    return merged


def _close(opik_trace: "Trace", name: str, metadata: Dict[str, Any], started: float, error: Optional[BaseException]) -> None:
    try:
        update: Dict[str, Any] = {
            "metadata": {**metadata, "duration_ms": round((perf_counter() - started) * 1000, 2)}
        }
        if error is not None:
            update["error_info"] = {"message": str(error), "type": type(error).__name__}
        opik_trace.update(**update)
        opik_trace.end()
    except Exception:  # pragma: no cover - tracing never breaks a request
        logger.debug("Failed to close Opik trace %s cleanly", name, exc_info=True)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace around a block of work.

    Yields None when tracing is off. The trace is closed with its duration and,
    when the block raises, the error details; the exception is re-raised.
    """
    client = get_opik_client()
    trace_metadata = _trace_metadata(metadata, user_id, request_id)
    opik_trace: Optional["Trace"] = None
    if client:
        try:
            opik_trace = client.trace(name=name, metadata=trace_metadata or None)
        except Exception as exc:  # pragma: no cover - tracing never breaks a request
            logger.debug("Unable to start Opik trace %s: %s", name, exc)

    started = perf_counter()
    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            _close(opik_trace, name, trace_metadata, started, exc)
        raise
    if opik_trace:
        _close(opik_trace, name, trace_metadata, started, None)


def traced(name: str) -> Callable[[F], F]:
    """Wrap a service function in ``trace(name)``; ``request_id``/``user_id`` kwargs are forwarded."""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            user_id = kwargs.get("user_id")
            with trace(
                name,
                metadata={"operation": func.__name__},
                user_id=str(user_id) if user_id else None,
                request_id=kwargs.get("request_id"),
            ):
                return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
