"""Tests for the goal wizard controller."""
import asyncio
from unittest.mock import AsyncMock

import pytest

from app.models.smart import WizardSmart
from app.wizard.client import GenerationClientError
from app.wizard.controller import SAVED_MESSAGE, GoalWizard
from app.wizard.session import WizardAction, WizardSession

COMPLETE_SMART = WizardSmart(
    specific="Run 5 km.",
    measurable="Use an app.",
    achievable="Three runs a week.",
    relevant="Fitness.",
    timebound="In 10 weeks.",
)


def ready_session(**overrides) -> WizardSession:
    session = WizardSession(
        step=4,
        user_id="user-1",
        goal_title="Run a 5k",
        smart=COMPLETE_SMART.model_copy(),
        actions=[
            WizardAction(title="Buy shoes", description="Get fitted.", user_deadline="2024-06-01"),
            WizardAction(title="Run", description="Easy pace.", user_deadline="2024-06-08"),
        ],
    )
    return session.model_copy(update=overrides)


class TestNavigation:
    def test_steps_are_clamped(self):
        wizard = GoalWizard(AsyncMock())

        assert wizard.prev_step() == 1
        assert [wizard.next_step() for _ in range(5)] == [2, 3, 4, 4, 4]
        assert wizard.prev_step() == 3

    def test_setters(self):
        wizard = GoalWizard(AsyncMock())

        wizard.set_goal_title("Learn piano")
        wizard.set_answer(2, "Evenings")
        wizard.set_smart_field("timebound", "By June")

        assert wizard.session.goal_title == "Learn piano"
        assert wizard.session.answers == ["", "", "Evenings"]
        assert wizard.session.smart.timebound == "By June"

    def test_unknown_smart_field(self):
        wizard = GoalWizard(AsyncMock())

        with pytest.raises(ValueError):
            wizard.set_smart_field("timeBased", "By June")

    def test_update_and_remove_action(self):
        wizard = GoalWizard(AsyncMock(), ready_session())

        wizard.update_action(0, title="Buy trail shoes", user_deadline="2024-06-02")
        wizard.remove_action(1)

        assert len(wizard.session.actions) == 1
        assert wizard.session.actions[0].title == "Buy trail shoes"
        assert wizard.session.actions[0].description == "Get fitted."


@pytest.mark.asyncio
class TestRequests:
    async def test_request_questions(self):
        client = AsyncMock()
        client.generate_questions.return_value = ["A?", "B?", "C?"]
        wizard = GoalWizard(client, WizardSession(goal_title="  Run a 5k ", answers=["stale"]))

        assert await wizard.request_questions() is True

        client.generate_questions.assert_awaited_once_with("Run a 5k")
        assert wizard.step == 2
        assert wizard.session.questions == ["A?", "B?", "C?"]
        assert wizard.session.answers == ["", "", ""]
        assert wizard.error is None

    async def test_request_questions_needs_title(self):
        client = AsyncMock()
        wizard = GoalWizard(client)

        assert await wizard.request_questions() is False

        assert wizard.error == "Please enter a goal first."
        client.generate_questions.assert_not_awaited()

    async def test_failure_keeps_step(self):
        client = AsyncMock()
        client.generate_questions.side_effect = GenerationClientError("Request failed.")
        wizard = GoalWizard(client, WizardSession(goal_title="Run a 5k"))

        assert await wizard.request_questions() is False

        assert wizard.step == 1
        assert wizard.error == "Request failed."
        assert wizard.busy is False

    async def test_request_smart_replaces_title(self):
        client = AsyncMock()
        client.generate_smart.return_value = ("Run my first 5k by June", COMPLETE_SMART)
        wizard = GoalWizard(
            client,
            WizardSession(step=2, goal_title="Run a 5k", answers=[" Beginner ", "", "Mornings"]),
        )

        assert await wizard.request_smart() is True

        client.generate_smart.assert_awaited_once_with("Run a 5k", ["Beginner", "", "Mornings"])
        assert wizard.step == 3
        assert wizard.session.goal_title == "Run my first 5k by June"
        assert wizard.session.smart == COMPLETE_SMART

    async def test_request_actions(self):
        client = AsyncMock()
        client.generate_actions.return_value = [WizardAction(title="Buy shoes")]
        wizard = GoalWizard(client, WizardSession(step=3, goal_title="Run a 5k", smart=COMPLETE_SMART))

        assert await wizard.request_actions() is True

        assert wizard.step == 4
        assert [action.title for action in wizard.session.actions] == ["Buy shoes"]

    async def test_request_more_actions_skips_existing_titles(self):
        client = AsyncMock()
        client.generate_more_actions.return_value = [
            WizardAction(title="buy shoes"),
            WizardAction(title="Join a club"),
            WizardAction(title="Join a Club"),
        ]
        wizard = GoalWizard(client, ready_session())

        assert await wizard.request_more_actions() is True

        assert [action.title for action in wizard.session.actions] == [
            "Buy shoes",
            "Run",
            "Join a club",
        ]
        assert wizard.step == 4

    async def test_request_more_actions_nothing_new(self):
        client = AsyncMock()
        client.generate_more_actions.return_value = [WizardAction(title="RUN")]
        wizard = GoalWizard(client, ready_session())

        assert await wizard.request_more_actions() is False

        assert wizard.error == "No new actions were suggested."
        assert len(wizard.session.actions) == 2

    async def test_busy_refuses_second_request(self):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_questions(title):
            started.set()
            await release.wait()
            return ["A?", "B?", "C?"]

        client = AsyncMock()
        client.generate_questions.side_effect = slow_questions
        wizard = GoalWizard(client, WizardSession(goal_title="Run a 5k"))

        first = asyncio.create_task(wizard.request_questions())
        await started.wait()
        assert wizard.busy is True
        assert await wizard.request_questions() is False

        release.set()
        assert await first is True
        assert client.generate_questions.await_count == 1
        assert wizard.busy is False


class TestValidateForSave:
    def test_valid(self):
        assert GoalWizard(AsyncMock(), ready_session()).validate_for_save() is None

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"user_id": ""}, "Please sign in again before saving your goal."),
            ({"goal_title": "  "}, "Goal title is required before saving."),
            ({"smart": WizardSmart(specific="only")}, "Please complete your SMART details before saving."),
            ({"actions": []}, "Generate actions before saving."),
            (
                {"actions": [WizardAction(title=" ", description="d", user_deadline="2024-06-01")]},
                "Please add a title for each action before saving.",
            ),
            (
                {"actions": [WizardAction(title="t", description="", user_deadline="2024-06-01")]},
                "Please add a description for each action before saving.",
            ),
            (
                {"actions": [WizardAction(title="t", description="d", user_deadline="next week")]},
                "Please add a calendar date for each action.",
            ),
        ],
    )
    def test_invalid(self, overrides, message):
        wizard = GoalWizard(AsyncMock(), ready_session(**overrides))

        assert wizard.validate_for_save() == message


@pytest.mark.asyncio
class TestSave:
    async def test_save(self):
        client = AsyncMock()
        client.save_goal.return_value = "target-1"
        session = ready_session()
        session.actions[0].title = "  Buy shoes  "
        wizard = GoalWizard(client, session)

        assert await wizard.save() is True

        assert wizard.saved_target_id == "target-1"
        assert wizard.status_message == SAVED_MESSAGE
        assert wizard.step == 4
        user_id, title, smart, actions = client.save_goal.await_args.args
        assert user_id == "user-1"
        assert title == "Run a 5k"
        assert smart == COMPLETE_SMART
        assert actions[0].title == "Buy shoes"

    async def test_invalid_draft_is_not_sent(self):
        client = AsyncMock()
        wizard = GoalWizard(client, ready_session(actions=[]))

        assert await wizard.save() is False

        assert wizard.error == "Generate actions before saving."
        client.save_goal.assert_not_awaited()

    async def test_server_rejection(self):
        client = AsyncMock()
        client.save_goal.side_effect = GenerationClientError("Unauthorized user context.")
        wizard = GoalWizard(client, ready_session())

        assert await wizard.save() is False

        assert wizard.error == "Unauthorized user context."
        assert wizard.status_message is None
        assert wizard.saved_target_id is None

    async def test_reset_keeps_user(self):
        wizard = GoalWizard(AsyncMock(), ready_session())

        wizard.reset()

        assert wizard.step == 1
        assert wizard.session.user_id == "user-1"
        assert wizard.session.actions == []
