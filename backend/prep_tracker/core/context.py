"""Request-scoped identifiers carried through logs, traces and audit rows."""
from __future__ import annotations

import re
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional
from uuid import uuid4

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)

# Client-supplied ids end up in logs and audit payloads; keep them short and printable.
_ACCEPTED_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def get_request_id() -> str | None:
    return request_id_ctx_var.get()


def normalize_request_id(candidate: Optional[str]) -> str:
    """Reuse an incoming id when it is well formed, otherwise mint a new one."""
    value = (candidate or "").strip()
    if _ACCEPTED_REQUEST_ID.match(value):
        return value
    return str(uuid4())


@contextmanager
def bound_request_id(request_id: str) -> Iterator[str]:
    token = request_id_ctx_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_ctx_var.reset(token)
