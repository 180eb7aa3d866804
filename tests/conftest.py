# tests/conftest.py
"""
Pytest configuration and shared fixtures.
"""

import json
import os
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before chatplatform.config is imported
os.environ["JWT_SECRET"] = "test-signing-key"
os.environ["ADMIN_SECRET_KEY"] = "test-admin-secret"
os.environ["OPENROUTER_API_KEY"] = "test-upstream-key"
os.environ["CHATPLATFORM_CONFIG"] = str(PROJECT_ROOT / "tests" / "no-config.json")

API_URL = "https://upstream.test/api/v1/chat/completions"
MODELS_URL = "https://upstream.test/api/v1/models"


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture(scope="session", autouse=True)
def fast_hashing():
    """Minimum bcrypt cost keeps the suite fast."""
    from chatplatform.config import config

    original = config.get("security", "bcrypt_rounds")
    config.set("security", "bcrypt_rounds", 4)
    yield
    config.set("security", "bcrypt_rounds", original)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point file storage at a temporary directory."""
    from chatplatform.config import UPLOADS

    path = tmp_path / "uploads"
    monkeypatch.setattr(UPLOADS, "upload_dir", str(path))
    return path


@pytest.fixture
def db_session(tmp_path):
    """Fresh SQLite database per test."""
    from chatplatform.db.init_db import init_database
    from chatplatform.db.session import init_db_engine, get_engine
    from chatplatform.db import session as session_module

    init_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_database()

    db = session_module.SessionLocal()
    yield db
    db.close()
    get_engine().dispose()


# =============================================================================
# Upstream Fixtures
# =============================================================================

class BrokenStream(httpx.AsyncByteStream):
    """Body that delivers some bytes, then drops the connection."""

    def __init__(self, head: bytes):
        self.head = head

    async def __aiter__(self):
        yield self.head
        raise httpx.ReadError("connection reset by peer")


class UpstreamStub:
    """
    Scripted stand-in for the chat-completion API, served through
    httpx.MockTransport so the real client code runs end to end.
    """

    def __init__(self):
        self.reply = "Hello from the model"
        self.chunks = ["Hel", "lo ", "there", "!"]
        self.status = 200
        # Drop the stream after this many chunks (None streams to completion)
        self.fail_after = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and str(request.url) == MODELS_URL:
            return httpx.Response(200, json={"data": [{"id": "test/model", "name": "Test Model"}]})

        payload = json.loads(request.content)
        self.requests.append({"headers": dict(request.headers), "payload": payload})

        if self.status >= 400:
            return httpx.Response(self.status, json={"error": {"message": "upstream unavailable"}})

        if payload.get("stream"):
            lines = [": OPENROUTER PROCESSING", ""]
            if self.fail_after is not None:
                for chunk in self.chunks[:self.fail_after]:
                    lines.append("data: " + json.dumps({"choices": [{"delta": {"content": chunk}}]}))
                    lines.append("")
                return httpx.Response(
                    200,
                    stream=BrokenStream("\n".join(lines).encode("utf-8")),
                    headers={"content-type": "text/event-stream"},
                )

            for chunk in self.chunks:
                lines.append("data: " + json.dumps({"choices": [{"delta": {"content": chunk}}]}))
                lines.append("")
            lines.append("data: {not json")
            lines.append("")
            lines.append("data: [DONE]")
            lines.append("")
            return httpx.Response(
                200,
                content="\n".join(lines).encode("utf-8"),
                headers={"content-type": "text/event-stream"},
            )

        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": self.reply}}]})

    @property
    def last_payload(self):
        return self.requests[-1]["payload"]


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def llm_client(upstream):
    from chatplatform.config.schema import LLMSettings
    from chatplatform.llm.client import ChatCompletionClient

    settings = LLMSettings(api_url=API_URL, models_url=MODELS_URL, api_key="test-upstream-key")
    return ChatCompletionClient(settings=settings, transport=httpx.MockTransport(upstream.handler))


# =============================================================================
# Server Fixtures
# =============================================================================

@pytest.fixture
def test_client(db_session, upload_dir, llm_client):
    """FastAPI test client over a fresh database with the upstream stubbed."""
    from fastapi.testclient import TestClient
    from chatplatform.llm.client import get_llm_client
    from chatplatform.main import app

    app.dependency_overrides[get_llm_client] = lambda: llm_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def register(test_client):
    """Factory: register a user through the API and return (headers, user)."""
    counter = {"n": 0}

    def _register(email=None, password="secret123", name="Test User"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        response = test_client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register


@pytest.fixture
def auth_headers(register):
    headers, _ = register(email="owner@example.com")
    return headers


@pytest.fixture
def other_headers(register):
    headers, _ = register(email="intruder@example.com", name="Intruder")
    return headers


@pytest.fixture
def admin_headers(test_client):
    response = test_client.post(
        "/api/auth/create-admin",
        json={
            "email": "admin@example.com",
            "password": "adminpass",
            "name": "Admin",
            "secretKey": "test-admin-secret",
        },
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def project(test_client, auth_headers):
    """A project owned by the auth_headers user."""
    response = test_client.post(
        "/api/projects",
        json={"name": "Support Bot", "description": "Answers tickets", "systemPrompt": "You are support."},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["project"]


def _parse_sse(body: str):
    events = []
    for line in body.splitlines():
        if line.startswith("data: "):
            events.append(json.loads(line[len("data: "):]))
    return events


@pytest.fixture
def parse_sse():
    """Decode a text/event-stream body into a list of event dicts."""
    return _parse_sse
