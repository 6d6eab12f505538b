from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import uuid4

from prep_tracker.api.schemas.sprint import DailyPlan, SprintSnapshot
from prep_tracker.services.plan_selector import (
    EMPTY_SPRINT_MESSAGE,
    INVALID_DATES_MESSAGE,
    PlanNotFound,
    PlanSelection,
    format_display_date,
    parse_plan_date,
    select_plan_for_date,
    select_plans_for_date,
)


def _sprint(dates):
    plans = [
        DailyPlan(day=index + 1, date=value, focus="DSA", blocks=[])
        for index, value in enumerate(dates)
    ]
    return SprintSnapshot(
        id=uuid4(),
        application_id=uuid4(),
        interview_date=date(2025, 3, 20),
        role_type="SDE",
        total_days=len(plans),
        daily_plans=plans,
        created_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
    )


SPRINT = _sprint(["2025-03-10", "2025-03-11", "2025-03-12"])


def test_exact_match_has_no_guidance() -> None:
    result = select_plan_for_date(SPRINT, date(2025, 3, 11))

    assert isinstance(result, PlanSelection)
    assert result.day_index == 1
    assert result.plan.date == "2025-03-11"
    assert result.guidance is None


def test_before_start_shows_next_available_day() -> None:
    result = select_plan_for_date(SPRINT, date(2025, 3, 8))

    assert isinstance(result, PlanSelection)
    assert result.day_index == 0
    assert result.guidance == (
        "No plan found for Sat, Mar 8, 2025 in this sprint. "
        "Showing the next available day in this sprint: Mon, Mar 10, 2025."
    )


def test_gap_inside_sprint_moves_forward() -> None:
    sprint = _sprint(["2025-03-10", "2025-03-13"])

    result = select_plan_for_date(sprint, date(2025, 3, 11))

    assert result.day_index == 1
    assert "Thu, Mar 13, 2025" in result.guidance


def test_after_end_shows_last_day() -> None:
    result = select_plan_for_date(SPRINT, date(2025, 4, 1))

    assert isinstance(result, PlanSelection)
    assert result.day_index == 2
    assert result.guidance == (
        "No plan found for Tue, Apr 1, 2025 in this sprint. "
        "This is the last planned prep day in this sprint (Wed, Mar 12, 2025)."
    )


def test_empty_sprint_is_not_found() -> None:
    result = select_plan_for_date(_sprint([]), date(2025, 3, 10))

    assert isinstance(result, PlanNotFound)
    assert result.reason == "empty_sprint"
    assert result.message == EMPTY_SPRINT_MESSAGE


def test_all_invalid_dates_are_reported_not_raised() -> None:
    result = select_plan_for_date(_sprint(["soon", "", "2025-13-45"]), date(2025, 3, 10))

    assert isinstance(result, PlanNotFound)
    assert result.reason == "invalid_dates"
    assert result.message == INVALID_DATES_MESSAGE


def test_invalid_dates_are_skipped_when_others_parse() -> None:
    sprint = _sprint(["garbage", "2025-03-11"])

    result = select_plan_for_date(sprint, date(2025, 3, 10))

    assert result.day_index == 1


def test_datetime_strings_match_on_calendar_day() -> None:
    sprint = _sprint(["2025-03-10T09:30:00", "2025-03-11T00:00:00"])

    result = select_plan_for_date(sprint, date(2025, 3, 10))

    assert result.day_index == 0
    assert result.guidance is None


def test_utc_suffixed_datetimes_are_read() -> None:
    sprint = _sprint(["2025-03-10T09:30:00Z", "2025-03-11T09:30:00.000Z"])

    assert parse_plan_date("2025-03-11T09:30:00Z") == date(2025, 3, 11)
    result = select_plan_for_date(sprint, date(2025, 3, 11))

    assert result.day_index == 1
    assert result.guidance is None


def test_each_sprint_is_resolved_independently() -> None:
    broken = _sprint(["nope"])

    results = select_plans_for_date([SPRINT, broken], date(2025, 3, 12))

    assert isinstance(results[0][1], PlanSelection)
    assert results[0][1].day_index == 2
    assert isinstance(results[1][1], PlanNotFound)


def test_display_date_format() -> None:
    assert format_display_date(date(2025, 3, 10)) == "Mon, Mar 10, 2025"
    assert format_display_date(date(2025, 12, 1)) == "Mon, Dec 1, 2025"
