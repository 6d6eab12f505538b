"""Build day-by-day preparation sprints for an upcoming interview."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from math import ceil
from typing import Callable, List, Optional, Tuple
from uuid import UUID, uuid4

from prep_tracker.api.schemas.sprint import DailyPlan, PlanBlock, SprintSnapshot, TaskItem
from prep_tracker.core.clock import today as clock_today
from prep_tracker.core.errors import UnknownRoleTypeError
from prep_tracker.services.prep_templates import (
    FOCUS_TASK_TEMPLATES,
    ROLE_TYPES,
    STUDY_TRACKS,
    practice_questions,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DAYS = 30
BLOCK_DURATION = "60-90 min"
QUICK_BLOCK_DURATION = "15 min"

IdFactory = Callable[[str], str]


def _default_id_factory(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def sprint_length(interview_date: date, today: date, max_days: int = DEFAULT_MAX_DAYS) -> int:
    """Days until the interview, at least one and never more than ``max_days``."""
    return min(max_days, max(1, (interview_date - today).days))


def focus_sequence(role_type: str, total_days: int) -> List[Tuple[str, List[str]]]:
    """Return the (focus, topics) for each day of a sprint.

    The role's study track fills the body of the sprint. Long sprints cycle the
    track again after a Review day. The final two days are always Review and
    Mock; shorter sprints keep only what fits.
    """
    if role_type not in STUDY_TRACKS:
        raise UnknownRoleTypeError(role_type)

    if total_days == 1:
        return [("Review", [])]
    if total_days == 2:
        return [("Review", []), ("Mock", [])]

    track = STUDY_TRACKS[role_type]
    body: List[Tuple[str, List[str]]] = []
    position = 0
    while len(body) < total_days - 2:
        if position == len(track):
            body.append(("Review", []))
            position = 0
            continue
        focus, topics = track[position]
        body.append((focus, list(topics)))
        position += 1
    return body + [("Review", []), ("Mock", [])]


def build_day_tasks(focus: str, topics: List[str]) -> List[str]:
    templates = FOCUS_TASK_TEMPLATES[focus]
    first_topic = topics[0] if topics else "core topics"
    joined = ", ".join(topics) if topics else "core topics"
    return [template.format(first_topic=first_topic, topics=joined) for template in templates]


def _build_blocks(
    role_type: str,
    focus: str,
    topics: List[str],
    offset: int,
    id_factory: IdFactory,
) -> List[PlanBlock]:
    descriptions = build_day_tasks(focus, topics)
    category = topics[0] if topics else "General"
    midpoint = ceil(len(descriptions) / 2)

    def _tasks(items: List[str], task_category: str) -> List[TaskItem]:
        return [
            TaskItem(id=id_factory("task"), description=text, category=task_category)
            for text in items
        ]

    blocks = [
        PlanBlock(
            id=id_factory("block"),
            type="morning",
            duration=BLOCK_DURATION,
            tasks=_tasks(descriptions[:midpoint], category),
        ),
        PlanBlock(
            id=id_factory("block"),
            type="evening",
            duration=BLOCK_DURATION,
            tasks=_tasks(descriptions[midpoint:], category),
        ),
    ]

    questions = practice_questions(role_type, focus)
    if questions:
        question = questions[offset % len(questions)]
        blocks.append(
            PlanBlock(
                id=id_factory("block"),
                type="quick",
                duration=QUICK_BLOCK_DURATION,
                tasks=_tasks([f"Practice question: {question}"], category),
            )
        )
    return blocks


def generate_sprint(
    application_id: UUID,
    interview_date: date,
    role_type: str,
    *,
    today: Optional[date] = None,
    max_days: int = DEFAULT_MAX_DAYS,
    id_factory: Optional[IdFactory] = None,
    sprint_id: Optional[UUID] = None,
    created_at: Optional[datetime] = None,
) -> SprintSnapshot:
    """Generate a fresh, active sprint for an application.

    Output content depends only on ``interview_date``, ``role_type`` and
    ``today``. Identifiers come from ``id_factory`` and carry no meaning.
    """
    if role_type not in ROLE_TYPES:
        raise UnknownRoleTypeError(role_type)

    start = today or clock_today()
    make_id = id_factory or _default_id_factory
    total_days = sprint_length(interview_date, start, max_days)

    plans: List[DailyPlan] = []
    for offset, (focus, topics) in enumerate(focus_sequence(role_type, total_days)):
        plans.append(
            DailyPlan(
                day=offset + 1,
                date=(start + timedelta(days=offset)).isoformat(),
                focus=focus,
                blocks=_build_blocks(role_type, focus, topics, offset, make_id),
            )
        )

    if interview_date <= start:
        logger.info(
            "Generated single-day sprint for past or same-day interview (application=%s, date=%s)",
            application_id,
            interview_date.isoformat(),
        )

    return SprintSnapshot(
        id=sprint_id or uuid4(),
        application_id=application_id,
        interview_date=interview_date,
        role_type=role_type,
        total_days=total_days,
        daily_plans=plans,
        status="active",
        created_at=created_at or datetime.now(timezone.utc),
    )
