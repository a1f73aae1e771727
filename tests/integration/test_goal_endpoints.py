"""Integration tests for saving a goal."""
from datetime import datetime

import pytest


@pytest.mark.asyncio
class TestWizardFlow:
    """A full wizard run: questions, SMART, actions, save, list."""

    async def test_run_a_5k(self, app_client, fake_llm, auth_headers, smart, suggestions):
        fake_llm.queue({"questions": ["How far can you run?", "How often?", "By when?"]})
        fake_llm.queue({"goalTitle": "Run a 5k without stopping by June", "smart": smart})
        fake_llm.queue(suggestions(6))

        questions = await app_client.post("/api/generate-questions", json={"userInput": "Run a 5k"})
        assert len(questions.json()["questions"]) == 3

        smart_response = await app_client.post(
            "/api/generate-smart",
            json={"userInput": "Run a 5k", "answers": ["1 km", "Twice a week", "June"]},
        )
        goal_title = smart_response.json()["goalTitle"]

        actions_response = await app_client.post(
            "/api/generate-actions",
            json={"goalTitle": goal_title, "smart": smart_response.json()["smart"]},
        )
        wizard_actions = [
            {
                "actionId": action["actionId"],
                "title": action["title"],
                "description": action.get("description", ""),
                "frequency": action["frequency"],
                "repeatConfig": action.get("repeatConfig"),
                "userDeadline": f"2030-06-{index + 1:02d}",
            }
            for index, action in enumerate(actions_response.json()["actions"])
        ]

        saved = await app_client.post(
            "/api/save-goal-data",
            json={
                "userId": "user-1",
                "goalTitle": goal_title,
                "smart": smart,
                "actions": wizard_actions,
            },
            headers=auth_headers("user-1"),
        )

        assert saved.status_code == 200
        target_id = saved.json()["targetId"]
        assert saved.json()["success"] is True

        listed = await app_client.post(
            "/api/actions/list", json={"targetId": target_id}, headers=auth_headers("user-1")
        )
        actions = listed.json()["actions"]
        assert len(actions) == 6
        assert all(action["goalTitle"] == goal_title for action in actions)
        assert all(action["status"] == "pending" for action in actions)
        assert [action["deadline"][:10] for action in actions] == [
            f"2030-06-{day:02d}" for day in range(1, 7)
        ]

        targets = await app_client.get("/api/targets", headers=auth_headers("user-1"))
        target = targets.json()["targets"][0]
        assert target["id"] == target_id
        assert target["smart"] == smart
        assert target["status"] == "active"


@pytest.mark.asyncio
class TestSaveGoal:
    async def test_documents_written(self, save_goal, test_db):
        target_id = await save_goal()

        target = await test_db["targets"].find_one({"_id": target_id})
        assert target["userId"] == "user-1"
        assert target["archived"] is False

        actions = await test_db["actions"].find({"targetId": target_id}).to_list(length=None)
        assert len(actions) == 3
        assert {action["userId"] for action in actions} == {"user-1"}
        assert all(action["completedDates"] == [] for action in actions)
        assert all(isinstance(action["deadline"], datetime) for action in actions)

    async def test_save_is_not_idempotent(self, save_goal, app_client, auth_headers):
        first = await save_goal()
        second = await save_goal()

        assert first != second
        targets = await app_client.get("/api/targets", headers=auth_headers())
        assert len(targets.json()["targets"]) == 2
        listed = await app_client.post("/api/actions/list", json={}, headers=auth_headers())
        assert len(listed.json()["actions"]) == 6

    async def test_requires_token(self, app_client, smart):
        response = await app_client.post(
            "/api/save-goal-data",
            json={"goalTitle": "Run a 5k", "smart": smart, "actions": []},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    async def test_user_context_mismatch(self, app_client, auth_headers, smart):
        response = await app_client.post(
            "/api/save-goal-data",
            json={"userId": "user-2", "goalTitle": "Run a 5k", "smart": smart, "actions": []},
            headers=auth_headers("user-1"),
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Unauthorized user context."}

    async def test_invalid_deadline(self, app_client, auth_headers, smart, test_db):
        response = await app_client.post(
            "/api/save-goal-data",
            json={
                "goalTitle": "Run a 5k",
                "smart": smart,
                "actions": [{"title": "Run", "userDeadline": "tomorrow-ish"}],
            },
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json() == {"error": "actions[0].userDeadline must be a valid date."}
        assert await test_db["targets"].count_documents({}) == 0

    async def test_smart_in_ui_vocabulary_is_rejected(self, app_client, auth_headers, smart):
        smart["timebound"] = smart.pop("timeBased")

        response = await app_client.post(
            "/api/save-goal-data",
            json={
                "goalTitle": "Run a 5k",
                "smart": smart,
                "actions": [{"title": "Run", "userDeadline": "2030-01-01"}],
            },
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json() == {"error": "SMART field 'timeBased' missing."}
