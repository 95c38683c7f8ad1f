import json
import os
import time

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from coach_api.core.database import get_session
from coach_api.core.exceptions import ExternalServiceError
from coach_api.main import app
from coach_api.models import User
from coach_api.services.completion_service import get_completion_gateway

TEST_JWT_SECRET = "test-jwt-secret"


class FakeGateway:
    """Stands in for CompletionGateway: returns queued outputs and records every call."""

    def __init__(self):
        self.outputs = []
        self.calls = []

    def queue(self, *outputs):
        self.outputs.extend(outputs)

    def _next(self, messages, kwargs):
        self.calls.append({"messages": messages, **kwargs})
        if not self.outputs:
            return ""
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return output

    def complete(self, messages, **kwargs):
        return self._next(messages, kwargs)

    def complete_json(self, messages, **kwargs):
        output = self._next(messages, {"json_mode": True, **kwargs})
        if isinstance(output, dict):
            return output
        if not output:
            raise ExternalServiceError("Completion request failed", details="Empty response from model")
        return json.loads(output)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(session, gateway):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_completion_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(sub, secret=TEST_JWT_SECRET, audience="authenticated", expires_in=3600):
    claims = {"aud": audience, "exp": int(time.time()) + expires_in}
    if sub is not None:
        claims["sub"] = sub
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user):
    return {"Authorization": f"Bearer {make_token(user.auth_user_id)}"}


def _create_user(session, auth_user_id, cefr_level="B1"):
    user = User(auth_user_id=auth_user_id, display_name=auth_user_id, cefr_level=cefr_level)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def alice(session):
    return _create_user(session, "auth-alice", "B1")


@pytest.fixture
def bob(session):
    return _create_user(session, "auth-bob", "B2")
