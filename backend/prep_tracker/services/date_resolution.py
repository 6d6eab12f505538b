"""Turn user-supplied date strings into calendar dates."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from prep_tracker.core.errors import InvalidDateError


class DateResolver(Protocol):
    def resolve(self, raw: str) -> Optional[date]:
        """Return the calendar date for ``raw`` or None when it can't be read."""


class IsoDateResolver:
    """Accepts ISO-8601 dates and date-times; the date part wins for date-times."""

    def resolve(self, raw: str) -> Optional[date]:
        text = (raw or "").strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None


default_resolver: DateResolver = IsoDateResolver()


def resolve_date(raw: str, resolver: Optional[DateResolver] = None) -> date:
    resolved = (resolver or default_resolver).resolve(raw)
    if resolved is None:
        raise InvalidDateError(raw)
    return resolved


def resolve_optional_date(raw: Optional[str], resolver: Optional[DateResolver] = None) -> Optional[date]:
    if raw is None or not raw.strip():
        return None
    return resolve_date(raw, resolver)
