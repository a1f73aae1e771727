"""Pytest configuration and fixtures."""
import json
import os

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["MONGODB_TRANSACTIONS"] = "false"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from app.database import database, ensure_indexes
from app.main import app
from app.services.llm_client import get_completion_client
from app.utils.auth import create_access_token


class FakeCompletionClient:
    """Completion client returning queued responses and recording calls."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, response) -> None:
        """Queue a raw string, or an object that is dumped as JSON."""
        self.responses.append(response if isinstance(response, str) else json.dumps(response))

    async def complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        self.calls.append(
            {"system": system_prompt, "user": user_prompt, "temperature": temperature}
        )
        return self.responses.pop(0) if self.responses else ""


def make_auth_headers(user_id: str = "user-1") -> dict:
    """Bearer header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


SMART = {
    "specific": "Run 5 km without stopping.",
    "measurable": "Track distance with a running app.",
    "achievable": "Three short runs a week build up endurance.",
    "relevant": "Improves fitness and mood.",
    "timeBased": "Within 10 weeks.",
}


def make_suggestions(count: int, prefix: str = "Step") -> dict:
    return {
        "actions": [
            {
                "title": f"{prefix} {index}",
                "description": f"Description for {prefix.lower()} {index}.",
                "frequency": "weekly" if index % 2 else "daily",
                "repeatConfig": {"onDays": ["mon", "thu"]} if index % 2 else None,
            }
            for index in range(1, count + 1)
        ]
    }


@pytest.fixture
def fake_llm():
    return FakeCompletionClient()


@pytest.fixture
def auth_headers():
    return make_auth_headers


@pytest.fixture
def smart():
    return dict(SMART)


@pytest.fixture
def suggestions():
    return make_suggestions


@pytest_asyncio.fixture
async def test_db():
    """In-memory database with the production indexes."""
    client = AsyncMongoMockClient()
    db = client["goal_wizard_test"]
    await ensure_indexes(db)
    yield db

    # Cleanup: drop test database
    await client.drop_database("goal_wizard_test")


@pytest_asyncio.fixture
async def app_client(test_db, fake_llm):
    """
    Create a test client with a clean in-memory database.

    This fixture:
    - Points the database dependency at an in-memory database
    - Replaces the completion client with a fake
    - Yields an async HTTP client for testing
    """
    original_db = database.db
    database.db = test_db
    app.dependency_overrides[get_completion_client] = lambda: fake_llm

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    database.db = original_db


def default_actions() -> list[dict]:
    return [
        {
            "title": "Run 2 km",
            "description": "Easy pace, no stopping.",
            "frequency": "daily",
            "userDeadline": "2030-06-01",
        },
        {
            "title": "Long run",
            "description": "Add 500 m each week.",
            "frequency": "weekly",
            "repeatConfig": {"onDays": ["sun"]},
            "userDeadline": "2030-06-15",
        },
        {
            "title": "Buy running shoes",
            "description": "Get fitted at a store.",
            "frequency": "once",
            "userDeadline": "2030-05-20",
        },
    ]


@pytest.fixture
def save_goal(app_client):
    """Save a goal through the API and return its target id."""

    async def save(user_id: str = "user-1", actions=None, goal_title: str = "Run a 5k") -> str:
        payload = {
            "userId": user_id,
            "goalTitle": goal_title,
            "smart": dict(SMART),
            "actions": default_actions() if actions is None else actions,
        }
        response = await app_client.post(
            "/api/save-goal-data", json=payload, headers=make_auth_headers(user_id)
        )
        assert response.status_code == 200, response.text
        return response.json()["targetId"]

    return save
