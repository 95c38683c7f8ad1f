from datetime import datetime, timedelta, timezone

from coach_api.models import ErrorRecord
from conftest import auth_headers


def _error(user, example, count, minutes_ago):
    return ErrorRecord(
        user_id=user.id,
        type="grammar",
        example=example,
        correction=example + "!",
        count=count,
        last_seen_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


def test_user_errors_ordered_by_count_then_recency(client, session, alice, bob):
    session.add_all([
        _error(alice, "rare", 1, 0),
        _error(alice, "common old", 5, 60),
        _error(alice, "common new", 5, 1),
        _error(bob, "not mine", 9, 0),
    ])
    session.commit()

    response = client.get("/api/user-errors", headers=auth_headers(alice))

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    assert [e["example"] for e in data["errors"]] == ["common new", "common old", "rare"]


def test_user_errors_limit(client, session, alice):
    session.add_all([_error(alice, f"e{i}", i, i) for i in range(1, 15)])
    session.commit()

    default = client.get("/api/user-errors", headers=auth_headers(alice)).json()
    limited = client.get("/api/user-errors?limit=2", headers=auth_headers(alice)).json()

    assert default["count"] == 10
    assert [e["example"] for e in limited["errors"]] == ["e14", "e13"]


def test_user_errors_limit_out_of_range(client, alice):
    for limit in ("0", "101", "abc"):
        response = client.get(f"/api/user-errors?limit={limit}", headers=auth_headers(alice))
        assert response.status_code == 400
