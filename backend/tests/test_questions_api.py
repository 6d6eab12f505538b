from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from conftest import seed_application
from prep_tracker.db.models.question import Question


def _add(test_client, user_id, **overrides):
    payload = {
        "user_id": str(user_id),
        "question_text": "Design a URL shortener",
        "category": "SystemDesign",
    }
    payload.update(overrides)
    return test_client.post("/questions", json=payload)


def _seed_question(session_factory, user_id, application_id=None, category="DSA", day=1):
    with session_factory() as db:
        question = Question(
            created_by_user_id=user_id,
            application_id=application_id,
            question_text=f"Question from day {day}",
            category=category,
            created_at=datetime(2025, 3, day, tzinfo=timezone.utc),
        )
        db.add(question)
        db.commit()
        return question.id


def test_add_question_linked_to_application(client) -> None:
    test_client, session_factory = client
    user_id, application_id = seed_application(session_factory)

    response = _add(
        test_client,
        user_id,
        application_id=str(application_id),
        difficulty="Hard",
        asked_in_round="Onsite 2",
    )

    assert response.status_code == 201
    body = response.json()
    assert body["company"] == "Acme"
    assert body["difficulty"] == "Hard"
    assert body["asked_in_round"] == "Onsite 2"
    assert body["created_by_user_id"] == str(user_id)


def test_add_question_for_first_time_user(client) -> None:
    test_client, _ = client

    response = _add(test_client, uuid4(), category="Behavioral")

    assert response.status_code == 201
    assert response.json()["application_id"] is None
    assert response.json()["company"] is None


def test_question_needs_text_and_known_category(client) -> None:
    test_client, _ = client
    user_id = uuid4()

    assert _add(test_client, user_id, question_text="").status_code == 422
    assert _add(test_client, user_id, category="Trivia").status_code == 422
    assert _add(test_client, user_id, difficulty="Impossible").status_code == 422


def test_cannot_link_someone_elses_application(client) -> None:
    test_client, session_factory = client
    _, application_id = seed_application(session_factory)

    response = _add(test_client, uuid4(), application_id=str(application_id))

    assert response.status_code == 404
    assert response.json()["code"] == "application_not_found"
    with session_factory() as db:
        assert db.query(Question).count() == 0


def test_list_is_newest_first_and_filterable(client) -> None:
    test_client, session_factory = client
    user_id, application_id = seed_application(session_factory)
    other_user, _ = seed_application(session_factory)
    oldest = _seed_question(session_factory, user_id, application_id, category="DSA", day=1)
    newest = _seed_question(session_factory, other_user, category="DSA", day=3)
    linked_sql = _seed_question(session_factory, user_id, application_id, category="SQL", day=2)

    everything = test_client.get("/questions").json()
    by_application = test_client.get("/questions", params={"application_id": str(application_id)}).json()
    dsa_only = test_client.get("/questions", params={"category": "DSA"}).json()

    assert [row["id"] for row in everything] == [str(newest), str(linked_sql), str(oldest)]
    assert [row["id"] for row in by_application] == [str(linked_sql), str(oldest)]
    assert {row["company"] for row in by_application} == {"Acme"}
    assert [row["id"] for row in dsa_only] == [str(newest), str(oldest)]


def test_unknown_category_filter_is_rejected(client) -> None:
    test_client, _ = client

    assert test_client.get("/questions", params={"category": "Trivia"}).status_code == 422


def test_deleting_application_keeps_its_questions(client) -> None:
    test_client, session_factory = client
    user_id, application_id = seed_application(session_factory)
    question_id = _seed_question(session_factory, user_id, application_id)

    response = test_client.delete(f"/applications/{application_id}", params={"user_id": str(user_id)})

    assert response.status_code == 200
    rows = test_client.get("/questions").json()
    assert [row["id"] for row in rows] == [str(question_id)]
    assert rows[0]["application_id"] is None
    assert rows[0]["company"] is None


def test_data_reset_removes_the_users_questions(client) -> None:
    test_client, session_factory = client
    user_id, application_id = seed_application(session_factory)
    other_user, _ = seed_application(session_factory)
    _seed_question(session_factory, user_id, application_id)
    kept = _seed_question(session_factory, other_user, day=2)

    response = test_client.post("/data/reset", json={"user_id": str(user_id), "confirm": "RESET"})

    assert response.status_code == 200
    assert [row["id"] for row in test_client.get("/questions").json()] == [str(kept)]
