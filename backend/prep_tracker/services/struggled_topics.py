"""Flag sprint tasks that touch topics the user struggled with in earlier rounds."""
from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from prep_tracker.api.schemas.sprint import DailyPlan, TaskItem


def normalize_topics(topics: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for topic in topics:
        needle = (topic or "").strip().lower()
        if needle and needle not in seen:
            seen.append(needle)
    return seen


def task_matches_topic(task: TaskItem, needle: str) -> bool:
    """Short needles ("dp", "sql") must match whole tokens; longer ones match anywhere."""
    description = task.description.lower()
    category = (task.category or "").lower()
    if category == needle:
        return True
    if len(needle) <= 3:
        pattern = re.compile(rf"(^|[^a-z0-9]){re.escape(needle)}($|[^a-z0-9])")
        return bool(pattern.search(description) or pattern.search(category))
    return needle in description or needle in category


def struggled_task_ids(plan: DailyPlan, topics: Sequence[str]) -> List[str]:
    needles = normalize_topics(topics)
    if not needles:
        return []
    return [
        task.id
        for block in plan.blocks
        for task in block.tasks
        if any(task_matches_topic(task, needle) for needle in needles)
    ]
