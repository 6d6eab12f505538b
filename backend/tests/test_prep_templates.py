from __future__ import annotations

import pytest

from prep_tracker.services.prep_templates import (
    FOCUS_AREAS,
    PREP_TEMPLATES,
    PRIORITY_TIERS,
    ROLE_TYPES,
    STUDY_TRACKS,
    available_rounds,
    get_round_prep_content,
    practice_questions,
    topics_by_priority,
)


@pytest.mark.parametrize("role_type", ROLE_TYPES)
def test_every_role_has_technical_and_hr_rounds(role_type) -> None:
    rounds = {entry["value"] for entry in available_rounds(role_type)}

    assert "TechnicalRound1" in rounds
    assert "HR" in rounds
    assert STUDY_TRACKS[role_type]
    assert all(focus in FOCUS_AREAS for focus, _ in STUDY_TRACKS[role_type])


def test_templates_cover_every_role() -> None:
    assert set(PREP_TEMPLATES) == set(ROLE_TYPES)


def test_topics_sorted_by_priority() -> None:
    topics = topics_by_priority("SDE", "TechnicalRound1")
    ranks = [PRIORITY_TIERS.index(topic["priority"]) for topic in topics]

    assert ranks == sorted(ranks)
    assert topics_by_priority("SDE", "Unknown") == []


def test_practice_questions_follow_focus() -> None:
    hr_questions = get_round_prep_content("SDE", "HR")["common_questions"]

    assert practice_questions("SDE", "Behavioral") == hr_questions
    assert practice_questions("SDE", "SystemDesign") == get_round_prep_content("SDE", "SystemDesign")["common_questions"]
    review = practice_questions("SDE", "Review")
    assert set(hr_questions) <= set(review)


def test_role_template_route(client) -> None:
    test_client, _ = client

    response = test_client.get("/prep-templates/SDE")

    assert response.status_code == 200
    body = response.json()
    assert body["display_name"] == "Software Development Engineer"
    assert {entry["value"] for entry in body["available_rounds"]} >= {"TechnicalRound1", "HR"}
    assert body["study_track"][0] == {"focus": "DSA", "topics": ["Arrays", "Strings"]}


def test_round_template_route(client) -> None:
    test_client, _ = client

    response = test_client.get("/prep-templates/SDE", params={"round_type": "TechnicalRound1"})

    assert response.status_code == 200
    assert response.json()["round"] == "TechnicalRound1"
    assert response.json()["key_topics"][0]["priority"] == "high"


def test_unknown_role_or_round(client) -> None:
    test_client, _ = client

    unknown_role = test_client.get("/prep-templates/Astronaut")
    unknown_round = test_client.get("/prep-templates/PM", params={"round_type": "Whiteboard"})

    assert unknown_role.status_code == 422
    assert unknown_role.json()["code"] == "unknown_role_type"
    assert unknown_round.status_code == 404
