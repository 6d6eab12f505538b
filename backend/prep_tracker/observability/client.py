"""Opik client bootstrap shared by tracing and metrics."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from prep_tracker.core.config import settings

logger = logging.getLogger(__name__)


class _ClientHolder:
    """Resolve the client at most once per process; ``reset`` re-arms resolution."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._client: Optional[Opik] = None
        self._resolved = False

    def get(self) -> Optional[Opik]:
        if self._resolved:
            return self._client
        with self._lock:
            if not self._resolved:
                self._client = _build_client()
                self._resolved = True
        return self._client

    def reset(self) -> None:
        with self._lock:
            self._client = None
            self._resolved = False


def _build_client() -> Optional[Opik]:
    if not settings.opik_enabled:
        logger.debug("Opik disabled; traces and metrics are no-ops.")
        return None

    if not settings.opik_api_key:
        logger.warning("OPIK_ENABLED is true but OPIK_API_KEY is missing; skipping Opik init.")
        return None

    try:
        client = Opik(
            project_name=settings.opik_project,
            workspace=settings.opik_workspace,
            api_key=settings.opik_api_key,
        )
    except Exception as exc:  # pragma: no cover - network/credential failures
        logger.warning("Failed to initialize Opik, tracing will be disabled: %s", exc)
        return None

    logger.info("Opik enabled (project=%s).", settings.opik_project)
    return client


_holder = _ClientHolder()


def init_opik() -> Optional[Opik]:
    """Resolve the client eagerly (called on API startup)."""
    return _holder.get()


def get_opik_client() -> Optional[Opik]:
    return _holder.get()


def reset_opik_client() -> None:
    """Forget the cached client so the next call re-reads settings."""
    _holder.reset()
