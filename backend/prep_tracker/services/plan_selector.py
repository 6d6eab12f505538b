"""Pick the daily plan to show for a sprint and a target date."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Literal, Optional, Sequence, Tuple, Union

from prep_tracker.api.schemas.sprint import DailyPlan, SprintSnapshot
from prep_tracker.services.date_resolution import default_resolver

EMPTY_SPRINT_MESSAGE = "No daily plans are available for this sprint yet."
INVALID_DATES_MESSAGE = "All days in this sprint have invalid dates and couldn't be shown."


@dataclass
class PlanSelection:
    plan: DailyPlan
    day_index: int
    guidance: Optional[str] = None


@dataclass
class PlanNotFound:
    reason: Literal["empty_sprint", "invalid_dates"]
    message: str


SelectionResult = Union[PlanSelection, PlanNotFound]


def parse_plan_date(raw: str) -> Optional[date]:
    """Calendar day of a stored plan date, or None when it doesn't parse."""
    if not isinstance(raw, str):
        return None
    return default_resolver.resolve(raw)


def format_display_date(value: date) -> str:
    return f"{value:%a, %b} {value.day}, {value.year}"


def select_plan_for_date(sprint: SprintSnapshot, target_date: date) -> SelectionResult:
    """Resolve one sprint's plan for ``target_date``.

    Exact match first, then the next upcoming day, then the last day. Plans
    whose date does not parse are skipped; the selection never raises.
    """
    plans = sprint.daily_plans
    if not plans:
        return PlanNotFound(reason="empty_sprint", message=EMPTY_SPRINT_MESSAGE)

    dated: List[Tuple[date, int]] = []
    for index, plan in enumerate(plans):
        parsed = parse_plan_date(plan.date)
        if parsed is not None:
            dated.append((parsed, index))

    if not dated:
        return PlanNotFound(reason="invalid_dates", message=INVALID_DATES_MESSAGE)

    for plan_date, index in dated:
        if plan_date == target_date:
            return PlanSelection(plan=plans[index], day_index=index)

    requested = format_display_date(target_date)
    upcoming = sorted((item for item in dated if item[0] > target_date), key=lambda item: item[0])
    if upcoming:
        plan_date, index = upcoming[0]
        return PlanSelection(
            plan=plans[index],
            day_index=index,
            guidance=(
                f"No plan found for {requested} in this sprint. "
                f"Showing the next available day in this sprint: {format_display_date(plan_date)}."
            ),
        )

    plan_date, index = max(dated, key=lambda item: item[0])
    return PlanSelection(
        plan=plans[index],
        day_index=index,
        guidance=(
            f"No plan found for {requested} in this sprint. "
            f"This is the last planned prep day in this sprint ({format_display_date(plan_date)})."
        ),
    )


def select_plans_for_date(
    sprints: Sequence[SprintSnapshot], target_date: date
) -> List[Tuple[SprintSnapshot, SelectionResult]]:
    return [(sprint, select_plan_for_date(sprint, target_date)) for sprint in sprints]
