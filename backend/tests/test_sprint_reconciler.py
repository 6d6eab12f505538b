from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from uuid import UUID, uuid4

from prep_tracker.services.sprint_generator import generate_sprint
from prep_tracker.services.sprint_reconciler import (
    CONFIRM_MESSAGE,
    apply_replacement,
    plan_signature,
    reconcile_sprint,
    select_canonical,
)

START = date(2025, 3, 10)
APPLICATION_ID = uuid4()


def _sprint(days_out=10, role_type="SDE", *, status="active", created_at=None, sprint_id=None):
    sprint = generate_sprint(
        APPLICATION_ID,
        START + timedelta(days=days_out),
        role_type,
        today=START,
        sprint_id=sprint_id,
        created_at=created_at or datetime(2025, 3, 1, tzinfo=timezone.utc),
    )
    return sprint.model_copy(update={"status": status})


def test_no_existing_sprint_creates() -> None:
    candidate = _sprint()

    plan = reconcile_sprint(APPLICATION_ID, [], candidate)

    assert plan.outcome == "create"
    assert plan.canonical is None
    assert plan.expire_ids == []


def test_identical_active_sprint_is_unchanged() -> None:
    existing = _sprint()
    candidate = _sprint()

    plan = reconcile_sprint(APPLICATION_ID, [existing], candidate)

    assert plan.outcome == "unchanged"
    assert plan.canonical.id == existing.id
    assert plan_signature(existing) == plan_signature(candidate)


def test_completion_flags_do_not_change_signature() -> None:
    existing = _sprint()
    existing.daily_plans[0].blocks[0].tasks[0].completed = True

    plan = reconcile_sprint(APPLICATION_ID, [existing], _sprint())

    assert plan.outcome == "unchanged"


def test_differing_active_sprint_requires_confirmation() -> None:
    existing = _sprint(days_out=10)
    candidate = _sprint(days_out=14)

    plan = reconcile_sprint(APPLICATION_ID, [existing], candidate)

    assert plan.outcome == "confirmation_required"
    assert plan.message == CONFIRM_MESSAGE
    assert plan.canonical.id == existing.id


def test_confirmed_regeneration_replaces() -> None:
    existing = _sprint(days_out=10)
    candidate = _sprint(days_out=14, role_type="Data")

    plan = reconcile_sprint(APPLICATION_ID, [existing], candidate, confirmed=True)

    assert plan.outcome == "replace"
    assert plan.canonical.id == existing.id


def test_only_inactive_sprints_creates_new() -> None:
    expired = _sprint(status="expired")
    completed = _sprint(status="completed", created_at=datetime(2025, 2, 1, tzinfo=timezone.utc))

    plan = reconcile_sprint(APPLICATION_ID, [expired, completed], _sprint())

    assert plan.outcome == "create"
    assert plan.expire_ids == []


def test_duplicate_actives_keep_most_recent_and_expire_rest() -> None:
    oldest = _sprint(created_at=datetime(2025, 3, 1, tzinfo=timezone.utc))
    middle = _sprint(created_at=datetime(2025, 3, 2, tzinfo=timezone.utc))
    newest = _sprint(created_at=datetime(2025, 3, 3, tzinfo=timezone.utc))

    plan = reconcile_sprint(APPLICATION_ID, [oldest, newest, middle], _sprint())

    assert plan.anomaly_detected is True
    assert plan.canonical.id == newest.id
    assert set(plan.expire_ids) == {oldest.id, middle.id}
    assert plan.outcome == "unchanged"


def test_canonical_tie_break_uses_id() -> None:
    stamp = datetime(2025, 3, 1, tzinfo=timezone.utc)
    low = _sprint(created_at=stamp, sprint_id=UUID("00000000-0000-0000-0000-000000000001"))
    high = _sprint(created_at=stamp, sprint_id=UUID("ffffffff-0000-0000-0000-000000000001"))

    canonical, anomaly = select_canonical([high, low])

    assert canonical.id == high.id
    assert anomaly is True


def test_naive_and_aware_timestamps_compare() -> None:
    naive = _sprint(created_at=datetime(2025, 3, 5))
    aware = _sprint(created_at=datetime(2025, 3, 4, tzinfo=timezone.utc))

    canonical, _ = select_canonical([aware, naive])

    assert canonical.id == naive.id


def test_other_applications_are_ignored() -> None:
    foreign = generate_sprint(uuid4(), START + timedelta(days=10), "SDE", today=START)

    plan = reconcile_sprint(APPLICATION_ID, [foreign], _sprint())

    assert plan.outcome == "create"
    assert plan.expire_ids == []


def test_apply_replacement_keeps_identity() -> None:
    canonical = _sprint(days_out=10).model_copy(update={"version": 4})
    candidate = _sprint(days_out=14, role_type="ML")

    replaced = apply_replacement(canonical, candidate)

    assert replaced.id == canonical.id
    assert replaced.version == 4
    assert replaced.role_type == "ML"
    assert replaced.total_days == 14
    assert plan_signature(replaced) == plan_signature(candidate)
