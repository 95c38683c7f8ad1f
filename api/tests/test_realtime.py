from coach_api.models import Target
from coach_api.services.completion_service import REPLY_FALLBACK
from conftest import auth_headers


def test_realtime_session_config(client, session, alice):
    for phrase in ["first", "second", "third", "fourth"]:
        client.post("/api/targets/add", json={"userId": alice.id, "phrase": phrase}, headers=auth_headers(alice))
    session.add(Target(user_id=alice.id, phrase="old news", status="mastered"))
    session.commit()

    response = client.post("/api/realtime-session", headers=auth_headers(alice))

    assert response.status_code == 200
    data = response.json()
    assert data["activeTargets"] == ["fourth", "third", "second"]
    assert data["model"] == "gpt-realtime-mini-2025-10-06"
    assert data["voice"] == "alloy"
    assert "CEFR: B1" in data["instructions"]
    assert "fourth, third, second" in data["instructions"]
    assert [f["name"] for f in data["functions"]] == ["mark_target_used", "add_correction", "end_session", "navigate"]
    navigate = data["functions"][3]
    assert navigate["parameters"]["properties"]["destination"]["enum"] == ["/home", "/profile", "/free_conversation"]


def test_realtime_session_without_targets(client, alice):
    data = client.post("/api/realtime-session", headers=auth_headers(alice)).json()
    assert data["activeTargets"] == []
    assert "(none yet)" in data["instructions"]


def test_realtime_reply_uses_last_ten_turns(client, gateway, alice):
    gateway.queue("That sounds fun! What did you eat?")
    messages = [
        {"role": "user" if i % 2 == 0 else "tutor", "text": f"turn {i}"}
        for i in range(14)
    ]

    response = client.post(
        "/api/realtime",
        json={"input": "I went to a festival", "focusAreas": ["past tense"], "level": "A2", "messages": messages},
        headers=auth_headers(alice),
    )

    assert response.status_code == 200
    assert response.json() == {"reply": "That sounds fun! What did you eat?"}

    call = gateway.calls[0]
    assert call["temperature"] == 0.8
    assert call["max_tokens"] == 200
    sent = call["messages"]
    assert len(sent) == 12
    assert sent[0]["role"] == "system"
    assert "past tense" in sent[0]["content"]
    assert "CEFR A2" in sent[0]["content"]
    assert sent[1] == {"role": "user", "content": "turn 4"}
    assert sent[2] == {"role": "assistant", "content": "turn 5"}
    assert sent[-1] == {"role": "user", "content": "I went to a festival"}


def test_realtime_empty_reply_uses_fallback(client, gateway, alice):
    gateway.queue("")
    response = client.post(
        "/api/realtime",
        json={"input": "hello", "focusAreas": ["greetings"], "level": "A1"},
        headers=auth_headers(alice),
    )
    assert response.json() == {"reply": REPLY_FALLBACK}


def test_realtime_requires_focus_areas(client, gateway, alice):
    response = client.post(
        "/api/realtime",
        json={"input": "hello", "focusAreas": [], "level": "A1"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 400
    assert gateway.calls == []


def test_realtime_rejects_unknown_level(client, alice):
    response = client.post(
        "/api/realtime",
        json={"input": "hello", "focusAreas": ["greetings"], "level": "Z9"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 400


def test_session_targets_surface_as_active_targets(client, alice):
    client.post(
        "/api/session/create",
        json={"userId": alice.id, "targets": [{"phrase": "alpha"}, {"phrase": "beta"}, {"phrase": "gamma"}]},
        headers=auth_headers(alice),
    )

    data = client.post("/api/realtime-session", headers=auth_headers(alice)).json()

    assert data["activeTargets"] == ["gamma", "beta", "alpha"]
