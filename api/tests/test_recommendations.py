from datetime import date

from sqlmodel import select

from coach_api.models import RecommendedAction
from conftest import auth_headers


def _action(user, week, text, completed=False):
    return RecommendedAction(user_id=user.id, week_start=week, category="Grammar", action_text=text, completed=completed)


def test_list_returns_open_actions_newest_week_first(client, session, alice, bob):
    session.add_all([
        _action(alice, date(2025, 1, 6), "old week"),
        _action(alice, date(2025, 1, 13), "new week"),
        _action(alice, date(2025, 1, 13), "done", completed=True),
        _action(alice, date(2024, 12, 30), "older week"),
        _action(alice, date(2024, 12, 23), "oldest week"),
        _action(bob, date(2025, 1, 20), "bob's"),
    ])
    session.commit()

    data = client.get("/api/recommendations", headers=auth_headers(alice)).json()

    assert [a["action_text"] for a in data["actions"]] == ["new week", "old week", "older week"]


def test_complete_marks_own_action(client, session, alice):
    action = _action(alice, date(2025, 1, 6), "Shadow a news clip")
    session.add(action)
    session.commit()

    response = client.post("/api/recommendations/complete", json={"id": action.id}, headers=auth_headers(alice))

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["action"]["completed"] is True
    assert data["action"]["id"] == action.id


def test_complete_someone_elses_action_is_not_found(client, session, alice, bob):
    action = _action(bob, date(2025, 1, 6), "bob's")
    session.add(action)
    session.commit()

    response = client.post("/api/recommendations/complete", json={"id": action.id}, headers=auth_headers(alice))

    assert response.status_code == 404
    session.refresh(action)
    assert action.completed is False


def test_complete_requires_id(client, alice):
    response = client.post("/api/recommendations/complete", json={}, headers=auth_headers(alice))
    assert response.status_code == 400


def test_clear_deletes_only_callers_actions(client, session, alice, bob):
    session.add_all([
        _action(alice, date(2025, 1, 6), "a"),
        _action(alice, date(2025, 1, 6), "b"),
        _action(bob, date(2025, 1, 6), "c"),
    ])
    session.commit()

    data = client.delete("/api/recommendations/clear", headers=auth_headers(alice)).json()

    assert data["success"] is True
    assert data["deleted_count"] == 2
    remaining = session.exec(select(RecommendedAction)).all()
    assert [a.action_text for a in remaining] == ["c"]


def test_clear_with_nothing_to_delete(client, alice):
    data = client.delete("/api/recommendations/clear", headers=auth_headers(alice)).json()
    assert data["success"] is True
    assert data["deleted_count"] == 0


def test_generate_creates_at_most_three_truncated_actions(client, session, gateway, alice):
    gateway.queue({
        "actions": [
            {"category": "Grammar", "action": "Ask yourself 5 'Why...' questions out loud"},
            {"category": "Pronunciation", "action": "x" * 150},
            {"category": "Fluency"},
            {"category": "Vocabulary", "action": "Name 10 objects around you"},
            {"category": "Fluency", "action": "Describe yesterday for 2 min"},
        ]
    })

    response = client.post(
        "/api/recommendations",
        json={"insightText": "Work on past tense.", "weekStart": "2025-01-13"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 200
    rows = session.exec(select(RecommendedAction)).all()
    assert len(rows) == 3
    assert {r.category for r in rows} == {"Grammar", "Pronunciation", "Vocabulary"}
    assert max(len(r.action_text) for r in rows) == 100
    assert gateway.calls[0]["json_mode"] is True


def test_generate_is_idempotent_per_week(client, session, gateway, alice):
    session.add(_action(alice, date(2025, 1, 13), "already there"))
    session.commit()

    data = client.post(
        "/api/recommendations",
        json={"insightText": "Work on past tense.", "weekStart": "2025-01-13"},
        headers=auth_headers(alice),
    ).json()

    assert [a["action_text"] for a in data["actions"]] == ["already there"]
    assert gateway.calls == []


def test_generate_without_valid_actions_fails(client, session, gateway, alice):
    gateway.queue({"actions": [{"category": "Grammar"}]})

    response = client.post(
        "/api/recommendations",
        json={"insightText": "Work on past tense.", "weekStart": "2025-01-13"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 500
    assert session.exec(select(RecommendedAction)).all() == []
