"""Pure task-completion and streak arithmetic over sprint snapshots."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

from prep_tracker.api.schemas.progress import UserProgressSnapshot
from prep_tracker.api.schemas.sprint import DailyPlan, SprintSnapshot
from prep_tracker.core.errors import TaskNotFoundError


@dataclass
class TaskChange:
    sprint: SprintSnapshot
    changed: bool
    completed: bool


def _derive_completion(plans: List[DailyPlan]) -> None:
    for plan in plans:
        for block in plan.blocks:
            block.completed = bool(block.tasks) and all(task.completed for task in block.tasks)
        plan.completed = bool(plan.blocks) and all(block.completed for block in plan.blocks)


def set_task_completion(
    sprint: SprintSnapshot,
    day_index: int,
    block_index: int,
    task_index: int,
    completed: bool = True,
) -> TaskChange:
    """Return a copy of ``sprint`` with one task flag set.

    Indices are 0-based. Out-of-range indices raise ``TaskNotFoundError`` and
    the input snapshot is never mutated.
    """
    if min(day_index, block_index, task_index) < 0:
        raise TaskNotFoundError(day_index, block_index, task_index)
    plans = sprint.daily_plans
    if day_index >= len(plans):
        raise TaskNotFoundError(day_index, block_index, task_index)
    blocks = plans[day_index].blocks
    if block_index >= len(blocks):
        raise TaskNotFoundError(day_index, block_index, task_index)
    tasks = blocks[block_index].tasks
    if task_index >= len(tasks):
        raise TaskNotFoundError(day_index, block_index, task_index)

    if tasks[task_index].completed == completed:
        return TaskChange(sprint=sprint, changed=False, completed=completed)

    updated = sprint.model_copy(deep=True)
    updated.daily_plans[day_index].blocks[block_index].tasks[task_index].completed = completed
    _derive_completion(updated.daily_plans)
    # Completed is sticky: un-completing a task later does not reopen the sprint.
    if updated.daily_plans and all(plan.completed for plan in updated.daily_plans):
        updated.status = "completed"
    return TaskChange(sprint=updated, changed=True, completed=completed)


def record_progress_event(progress: UserProgressSnapshot, event_date: date) -> UserProgressSnapshot:
    """Apply one task completion to the streak counters."""
    last = progress.last_active_date
    current = progress.current_streak
    longest = progress.longest_streak

    if last is None:
        current = 1
    elif event_date == last + timedelta(days=1):
        current = current + 1
    elif event_date > last + timedelta(days=1):
        current = 1
    # Same day or earlier: the day was already counted.

    return progress.model_copy(
        update={
            "current_streak": current,
            "longest_streak": max(longest, current),
            "last_active_date": max(last, event_date) if last else event_date,
            "total_tasks_completed": progress.total_tasks_completed + 1,
        }
    )


def record_uncompletion(progress: UserProgressSnapshot) -> UserProgressSnapshot:
    return progress.model_copy(
        update={"total_tasks_completed": max(0, progress.total_tasks_completed - 1)}
    )


def count_tasks(sprint: SprintSnapshot) -> tuple[int, int]:
    total = 0
    done = 0
    for plan in sprint.daily_plans:
        for block in plan.blocks:
            for task in block.tasks:
                total += 1
                if task.completed:
                    done += 1
    return total, done
