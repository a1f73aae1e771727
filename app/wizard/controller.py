"""Four-step goal wizard state controller."""
import logging
from typing import Any, Awaitable, Callable, Optional

from app.utils.sanitizers import parse_timestamp
from app.wizard.client import GenerationClient, GenerationClientError
from app.wizard.session import FIRST_STEP, WizardAction, WizardSession, clamp_step

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Your goal plan has been saved. You can revisit it anytime in your dashboard."
GENERIC_ERROR = "Something went wrong. Please try again."


class GoalWizard:
    """
    Drives a ``WizardSession`` through questions, SMART, actions and save.

    Only one request runs at a time; while one is in flight ``busy`` is set
    and further requests are refused. A failed request sets ``error`` and
    leaves the step where it was.
    """

    def __init__(self, client: GenerationClient, session: Optional[WizardSession] = None):
        self.client = client
        self.session = session or WizardSession()
        self.busy = False
        self.error: Optional[str] = None
        self.status_message: Optional[str] = None
        self.saved_target_id: Optional[str] = None

    @property
    def step(self) -> int:
        return self.session.step

    def next_step(self) -> int:
        self.session.step = clamp_step(self.session.step + 1)
        return self.session.step

    def prev_step(self) -> int:
        self.session.step = clamp_step(self.session.step - 1)
        return self.session.step

    # Setters

    def set_goal_title(self, title: str) -> None:
        self.session.goal_title = title

    def set_answer(self, index: int, answer: str) -> None:
        answers = self.session.answers
        while len(answers) <= index:
            answers.append("")
        answers[index] = answer

    def set_smart_field(self, field: str, value: str) -> None:
        if field not in type(self.session.smart).model_fields:
            raise ValueError(f"Unknown SMART field: {field}")
        setattr(self.session.smart, field, value)

    def update_action(self, index: int, **changes: Any) -> WizardAction:
        action = self.session.actions[index]
        updated = action.model_copy(update=changes)
        self.session.actions[index] = updated
        return updated

    def remove_action(self, index: int) -> None:
        del self.session.actions[index]

    # Requests

    async def _run(self, request: Callable[[], Awaitable[None]]) -> bool:
        if self.busy:
            return False

        self.busy = True
        self.error = None
        self.status_message = None
        try:
            await request()
            return True
        except GenerationClientError as e:
            self.error = str(e) or GENERIC_ERROR
            logger.warning("Wizard request failed: %s", self.error)
            return False
        finally:
            self.busy = False

    async def request_questions(self) -> bool:
        """Generate clarifying questions and move to step 2."""

        async def request():
            title = self.session.goal_title.strip()
            if not title:
                raise GenerationClientError("Please enter a goal first.")
            questions = await self.client.generate_questions(title)
            self.session.questions = questions
            self.session.answers = ["" for _ in questions]
            self.session.step = 2

        return await self._run(request)

    async def request_smart(self) -> bool:
        """Generate the SMART breakdown from the answers and move to step 3."""

        async def request():
            title, smart = await self.client.generate_smart(
                self.session.goal_title.strip(),
                [answer.strip() for answer in self.session.answers],
            )
            self.session.goal_title = title
            self.session.smart = smart
            self.session.step = 3

        return await self._run(request)

    async def request_actions(self) -> bool:
        """Generate actions for the SMART goal and move to step 4."""

        async def request():
            actions = await self.client.generate_actions(
                self.session.goal_title.strip(),
                self.session.smart.trimmed(),
            )
            self.session.actions = actions
            self.session.step = 4

        return await self._run(request)

    async def request_more_actions(self) -> bool:
        """Append further suggestions, skipping titles already in the list."""

        async def request():
            actions = await self.client.generate_more_actions(
                self.session.goal_title.strip(),
                self.session.smart.trimmed(),
                self.session.actions,
            )
            seen = {action.title.strip().lower() for action in self.session.actions}
            added = 0
            for action in actions:
                key = action.title.strip().lower()
                if key and key not in seen:
                    seen.add(key)
                    self.session.actions.append(action)
                    added += 1
            if not added:
                raise GenerationClientError("No new actions were suggested.")

        return await self._run(request)

    def validate_for_save(self) -> Optional[str]:
        """
        Check the draft before saving.

        Returns:
            The first problem as a user-facing message, or None when valid
        """
        session = self.session
        if not session.user_id.strip():
            return "Please sign in again before saving your goal."
        if not session.goal_title.strip():
            return "Goal title is required before saving."
        if not session.smart.is_complete():
            return "Please complete your SMART details before saving."
        if not session.actions:
            return "Generate actions before saving."
        if any(not action.title.strip() for action in session.actions):
            return "Please add a title for each action before saving."
        if any(not action.description.strip() for action in session.actions):
            return "Please add a description for each action before saving."
        if any(parse_timestamp(action.user_deadline) is None for action in session.actions):
            return "Please add a calendar date for each action."
        return None

    async def save(self) -> bool:
        """Validate and save the goal; the step stays at 4 either way."""

        async def request():
            problem = self.validate_for_save()
            if problem:
                raise GenerationClientError(problem)
            self.saved_target_id = await self.client.save_goal(
                self.session.user_id.strip(),
                self.session.goal_title.strip(),
                self.session.smart.trimmed(),
                [
                    action.model_copy(
                        update={
                            "title": action.title.strip(),
                            "description": action.description.strip(),
                        }
                    )
                    for action in self.session.actions
                ],
            )
            self.status_message = SAVED_MESSAGE

        return await self._run(request)

    def reset(self) -> None:
        """Start over, keeping the signed-in user."""
        self.session = WizardSession(user_id=self.session.user_id, step=FIRST_STEP)
        self.error = None
        self.status_message = None
        self.saved_target_id = None
