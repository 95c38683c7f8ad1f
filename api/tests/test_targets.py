from sqlmodel import select

from coach_api.models import Target
from conftest import auth_headers


def _add(client, user, phrase, cefr=None, strict=False):
    body = {"userId": user.id, "phrase": phrase}
    if cefr:
        body["cefr"] = cefr
    url = "/api/targets/add?strict=true" if strict else "/api/targets/add"
    return client.post(url, json=body, headers=auth_headers(user))


def test_add_target_trims_and_defaults_to_profile_level(client, session, bob):
    response = _add(client, bob, "  From my perspective...  ")
    assert response.status_code == 200
    data = response.json()
    assert data["phrase"] == "From my perspective..."
    assert data["status"] == "planned"
    assert data["alreadyExists"] is False

    target = session.get(Target, data["targetId"])
    assert target.cefr == "B2"


def test_add_target_uses_given_level(client, session, alice):
    data = _add(client, alice, "I beg to differ", cefr="C1").json()
    assert session.get(Target, data["targetId"]).cefr == "C1"


def test_add_existing_target_is_idempotent(client, session, alice):
    first = _add(client, alice, "That sounds good").json()
    second = _add(client, alice, "That sounds good")

    assert second.status_code == 200
    assert second.json()["alreadyExists"] is True
    assert second.json()["targetId"] == first["targetId"]
    rows = session.exec(select(Target).where(Target.user_id == alice.id)).all()
    assert len(rows) == 1


def test_add_existing_target_strict_conflicts(client, alice):
    _add(client, alice, "That sounds good")
    response = _add(client, alice, "That sounds good", strict=True)
    assert response.status_code == 409


def test_same_phrase_for_two_users(client, alice, bob):
    assert _add(client, alice, "Excuse me").json()["alreadyExists"] is False
    assert _add(client, bob, "Excuse me").json()["alreadyExists"] is False


def test_blank_phrase_is_bad_request(client, alice):
    response = _add(client, alice, "   ")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_overlong_phrase_is_bad_request(client, alice):
    response = _add(client, alice, "x" * 201)
    assert response.status_code == 400


def test_invalid_cefr_is_bad_request(client, alice):
    response = _add(client, alice, "Hello", cefr="D1")
    assert response.status_code == 400


def test_add_for_another_user_is_forbidden(client, session, alice, bob):
    response = client.post(
        "/api/targets/add",
        json={"userId": bob.id, "phrase": "Hello"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 403
    assert session.exec(select(Target)).all() == []
