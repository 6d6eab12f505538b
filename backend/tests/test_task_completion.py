from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from conftest import TODAY, seed_application, seed_sprint
from prep_tracker.core.errors import SprintConflictError
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.db.models.user_progress import UserProgress
from prep_tracker.db.repositories import SprintRepository
from prep_tracker.services.sprint_generator import generate_sprint
from prep_tracker.services.sprint_reconciler import apply_replacement
from prep_tracker.services.task_completion import complete_task


def _patch(client, sprint_id, user_id, day=0, block=0, task=0, completed=True):
    return client.patch(
        f"/sprints/{sprint_id}/tasks",
        json={
            "user_id": str(user_id),
            "day_index": day,
            "block_index": block,
            "task_index": task,
            "completed": completed,
        },
    )


def _seed(session_factory, **kwargs):
    user_id, app_id = seed_application(session_factory)
    sprint_id = seed_sprint(session_factory, user_id=user_id, application_id=app_id, **kwargs)
    return user_id, sprint_id


def test_completing_a_task_updates_sprint_and_progress(client) -> None:
    test_client, session_factory = client
    user_id, sprint_id = _seed(session_factory)

    response = _patch(test_client, sprint_id, user_id)

    assert response.status_code == 200
    body = response.json()
    assert body["changed"] is True
    assert body["sprint_status"] == "active"
    assert body["progress"]["current_streak"] == 1
    assert body["progress"]["total_tasks_completed"] == 1
    assert body["progress"]["last_active_date"] == TODAY.isoformat()

    sprint = test_client.get(f"/sprints/{sprint_id}", params={"user_id": str(user_id)}).json()
    assert sprint["daily_plans"][0]["blocks"][0]["tasks"][0]["completed"] is True
    assert sprint["version"] == 1


def test_repeating_a_completion_is_idempotent(client) -> None:
    test_client, session_factory = client
    user_id, sprint_id = _seed(session_factory)

    _patch(test_client, sprint_id, user_id)
    again = _patch(test_client, sprint_id, user_id)

    assert again.status_code == 200
    assert again.json()["changed"] is False
    assert again.json()["progress"]["total_tasks_completed"] == 1


def test_uncompleting_decrements_total_only(client) -> None:
    test_client, session_factory = client
    user_id, sprint_id = _seed(session_factory)
    _patch(test_client, sprint_id, user_id)

    response = _patch(test_client, sprint_id, user_id, completed=False)

    progress = response.json()["progress"]
    assert progress["total_tasks_completed"] == 0
    assert progress["current_streak"] == 1
    assert test_client.get("/progress", params={"user_id": str(user_id)}).json()["total_tasks_completed"] == 0


@pytest.mark.parametrize("indices", [(99, 0, 0), (0, 7, 0), (0, 0, 42), (-1, 0, 0)])
def test_out_of_range_task_leaves_sprint_untouched(client, indices) -> None:
    test_client, session_factory = client
    user_id, sprint_id = _seed(session_factory)
    with session_factory() as db:
        before = db.get(Sprint, sprint_id).daily_plans

    response = _patch(test_client, sprint_id, user_id, *indices)

    assert response.status_code == 404
    assert response.json()["code"] == "task_not_found"
    with session_factory() as db:
        stored = db.get(Sprint, sprint_id)
        assert stored.daily_plans == before
        assert stored.version == 0
        assert db.query(UserProgress).count() == 0


def test_other_users_cannot_touch_sprint(client) -> None:
    test_client, session_factory = client
    _, sprint_id = _seed(session_factory)
    stranger, _ = seed_application(session_factory)

    response = _patch(test_client, sprint_id, stranger)

    assert response.status_code == 404
    assert response.json()["code"] == "sprint_not_found"


def test_finishing_every_task_completes_sprint(client) -> None:
    test_client, session_factory = client
    user_id, sprint_id = _seed(session_factory, interview_date=TODAY)
    sprint = test_client.get(f"/sprints/{sprint_id}", params={"user_id": str(user_id)}).json()
    targets = [
        (block_index, task_index)
        for block_index, block in enumerate(sprint["daily_plans"][0]["blocks"])
        for task_index, _ in enumerate(block["tasks"])
    ]

    responses = [_patch(test_client, sprint_id, user_id, 0, block, task) for block, task in targets]

    assert responses[-1].json()["sprint_status"] == "completed"
    assert responses[-1].json()["progress"]["total_tasks_completed"] == len(targets)
    reopened = _patch(test_client, sprint_id, user_id, 0, 0, 0, completed=False)
    assert reopened.json()["sprint_status"] == "completed"


def test_conflicting_write_is_retried(session_factory) -> None:
    user_id, sprint_id = _seed(session_factory)

    class OnceStale(SprintRepository):
        calls = 0

        def save_progress(self, snapshot, expected_version):
            self.calls += 1
            if self.calls == 1:
                return False
            return super().save_progress(snapshot, expected_version)

    with session_factory() as db:
        repo = OnceStale(db)
        result = complete_task(
            db, sprint_id, user_id=user_id, day_index=0, block_index=1, task_index=0, sprints=repo
        )

    assert result.changed is True
    assert repo.calls == 2
    with session_factory() as db:
        assert db.get(UserProgress, user_id).total_tasks_completed == 1


def test_regenerated_sprint_aborts_retry(file_session_factory) -> None:
    user_id, sprint_id = _seed(file_session_factory)

    class RegeneratedMeanwhile(SprintRepository):
        intruded = False

        def save_progress(self, snapshot, expected_version):
            if not self.intruded:
                self.intruded = True
                with file_session_factory() as other:
                    repo = SprintRepository(other)
                    current = repo.get(snapshot.id)
                    regenerated = generate_sprint(
                        current.application_id,
                        current.interview_date + timedelta(days=3),
                        "Data",
                        today=TODAY,
                    )
                    assert repo.replace_content(apply_replacement(current, regenerated), current.version)
                    other.commit()
                return False
            return super().save_progress(snapshot, expected_version)

    with file_session_factory() as db:
        with pytest.raises(SprintConflictError):
            complete_task(
                db,
                sprint_id,
                user_id=user_id,
                day_index=0,
                block_index=0,
                task_index=0,
                sprints=RegeneratedMeanwhile(db),
            )

    with file_session_factory() as db:
        stored = db.get(Sprint, sprint_id)
        assert stored.role_type == "Data"
        assert not any(
            task["completed"]
            for plan in stored.daily_plans
            for block in plan["blocks"]
            for task in block["tasks"]
        )


def test_concurrent_completions_keep_every_update(file_session_factory) -> None:
    user_id, sprint_id = _seed(file_session_factory)
    with file_session_factory() as db:
        snapshot = SprintRepository(db).get(sprint_id)
    targets = [
        (day_index, block_index, task_index)
        for day_index, plan in enumerate(snapshot.daily_plans[:2])
        for block_index, block in enumerate(plan.blocks)
        for task_index, _ in enumerate(block.tasks)
    ]
    errors = []

    def worker(target):
        day_index, block_index, task_index = target
        db = file_session_factory()
        try:
            complete_task(
                db,
                sprint_id,
                user_id=user_id,
                day_index=day_index,
                block_index=block_index,
                task_index=task_index,
            )
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=worker, args=(target,)) for target in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    with file_session_factory() as db:
        stored = SprintRepository(db).get(sprint_id)
        progress = db.get(UserProgress, user_id)
    for day_index, block_index, task_index in targets:
        assert stored.daily_plans[day_index].blocks[block_index].tasks[task_index].completed is True
    assert stored.version == len(targets)
    assert progress.total_tasks_completed == len(targets)
    assert progress.current_streak == 1
