from datetime import date

import pytest
from sqlmodel import select

from coach_api.models import ConversationSession, ErrorRecord, PracticeSession, RecommendedAction, Target
from conftest import auth_headers, make_token

WRITE_TABLES = (Target, PracticeSession, ConversationSession, ErrorRecord, RecommendedAction)


def _row_counts(session):
    return {table.__name__: len(session.exec(select(table)).all()) for table in WRITE_TABLES}


def test_missing_token_is_unauthorized(client, alice):
    response = client.post("/api/realtime-session")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_missing_token_rejected_before_body_validation(client, session):
    response = client.post("/api/session/create", json={"bogus": True})
    assert response.status_code == 401


def test_bad_signature_is_unauthorized(client, alice):
    token = make_token(alice.auth_user_id, secret="some-other-secret")
    response = client.get("/api/user-errors", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_expired_token_is_unauthorized(client, alice):
    token = make_token(alice.auth_user_id, expires_in=-60)
    response = client.get("/api/user-errors", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_wrong_audience_is_unauthorized(client, alice):
    token = make_token(alice.auth_user_id, audience="anon")
    response = client.get("/api/user-errors", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_without_subject_is_unauthorized(client, alice):
    token = make_token(None)
    response = client.get("/api/user-errors", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_from_cookie_is_accepted(client, alice):
    client.cookies.set("sb-access-token", make_token(alice.auth_user_id))
    response = client.get("/api/user-errors")
    assert response.status_code == 200


def test_unknown_profile_is_not_found(client, session):
    token = make_token("auth-nobody")
    response = client.get("/api/user-errors", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404
    assert response.json()["error"] == "User profile not found"


def test_acting_for_another_user_is_forbidden(client, alice, bob):
    response = client.post(
        "/api/session/create",
        json={"userId": bob.id, "targets": []},
        headers=auth_headers(alice),
    )
    assert response.status_code == 403


def test_cross_site_referer_is_rejected(client, alice):
    headers = {**auth_headers(alice), "Referer": "https://evil.example.com/page"}
    response = client.post("/api/session/create", json={"userId": alice.id, "targets": []}, headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid request origin"}


def test_malformed_referer_is_rejected(client, alice):
    headers = {**auth_headers(alice), "Referer": "not a url"}
    response = client.delete("/api/recommendations/clear", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid referer header"}


def test_same_origin_referer_is_allowed(client, alice):
    headers = {**auth_headers(alice), "Referer": "http://testserver/home"}
    response = client.post("/api/session/create", json={"userId": alice.id, "targets": []}, headers=headers)
    assert response.status_code == 200


def test_referer_ignored_for_reads(client, alice):
    headers = {**auth_headers(alice), "Referer": "https://evil.example.com/page"}
    response = client.get("/api/user-errors", headers=headers)
    assert response.status_code == 200


@pytest.mark.parametrize("method, path, body", [
    ("post", "/api/targets/add", {"phrase": "Nice to meet you"}),
    ("post", "/api/session/create", {"userId": 1, "targets": [{"phrase": "Nice to meet you"}]}),
    ("post", "/api/session/live", {"transcript": [{"role": "user", "text": "Hello"}]}),
    ("post", "/api/summarize", {
        "sessionId": 1,
        "usedTargets": ["Excuse me"],
        "corrections": [{"type": "grammar", "example": "I go", "correction": "I went"}],
    }),
    ("post", "/api/recommendations/complete", {"id": 1}),
    ("delete", "/api/recommendations/clear", None),
])
def test_write_without_token_changes_nothing(client, session, gateway, alice, method, path, body):
    session.add(Target(user_id=alice.id, phrase="Excuse me", cefr="B1"))
    session.add(PracticeSession(user_id=alice.id))
    session.add(RecommendedAction(
        user_id=alice.id, week_start=date(2024, 1, 1), category="fluency", action_text="Shadow a podcast"
    ))
    session.commit()
    before = _row_counts(session)

    if body is None:
        response = client.request(method.upper(), path)
    else:
        response = client.request(method.upper(), path, json=body)

    assert response.status_code == 401
    assert gateway.calls == []
    session.expire_all()
    assert _row_counts(session) == before
    assert session.exec(select(Target)).one().status == "planned"
    assert session.exec(select(PracticeSession)).one().ended_at is None
    assert session.exec(select(RecommendedAction)).one().completed is False
