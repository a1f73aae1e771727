"""HTTP client for the wizard endpoints."""
import logging
from typing import Any, Optional, Sequence

import httpx

from app.models.smart import SmartBreakdown, WizardSmart, from_external, to_external
from app.wizard.session import WizardAction

logger = logging.getLogger(__name__)


class GenerationClientError(Exception):
    """Raised when a wizard request fails; the message is shown to the user."""

    pass


def _action_payload(action: WizardAction) -> dict[str, Any]:
    payload = {
        "title": action.title,
        "description": action.description,
        "frequency": action.frequency,
        "userDeadline": action.user_deadline,
    }
    if action.action_id:
        payload["actionId"] = action.action_id
    if action.repeat_config:
        payload["repeatConfig"] = action.repeat_config
    return payload


def _suggestion_to_action(suggestion: dict[str, Any]) -> WizardAction:
    return WizardAction(
        action_id=suggestion.get("actionId"),
        title=str(suggestion.get("title") or ""),
        description=str(suggestion.get("description") or ""),
        frequency=str(suggestion.get("frequency") or "once"),
        repeat_config=suggestion.get("repeatConfig"),
        user_deadline=str(suggestion.get("recommendedDeadline") or ""),
    )


class GenerationClient:
    """
    Typed wrappers around the generation and save endpoints.

    SMART data is exchanged in wizard vocabulary (``timebound``) and converted
    at this boundary.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.headers = headers

    async def close(self) -> None:
        await self.http.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.http.post(path, json=payload, headers=self.headers)
        except httpx.RequestError as e:
            logger.error("Request to %s failed: %s", path, e)
            raise GenerationClientError("Request failed.") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            error = data.get("error")
            raise GenerationClientError(error if isinstance(error, str) and error else "Request failed.")
        return data

    async def generate_questions(self, goal_title: str) -> list[str]:
        data = await self._post("/api/generate-questions", {"userInput": goal_title})
        questions = data.get("questions")
        questions = [q.strip() for q in questions if isinstance(q, str)] if isinstance(questions, list) else []
        if not questions:
            raise GenerationClientError("No questions were returned.")
        return questions

    async def generate_smart(self, goal_title: str, answers: Sequence[str]) -> tuple[str, WizardSmart]:
        """
        Request the SMART breakdown.

        Returns:
            The generated goal title and SMART fields in wizard vocabulary
        """
        data = await self._post(
            "/api/generate-smart", {"userInput": goal_title, "answers": list(answers)}
        )
        smart = data.get("smart") if isinstance(data.get("smart"), dict) else {}
        fields = {
            "specific": smart.get("specific"),
            "measurable": smart.get("measurable"),
            "achievable": smart.get("achievable"),
            "relevant": smart.get("relevant"),
            "timeBased": smart.get("timeBased") or smart.get("timebound"),
        }
        title = data.get("goalTitle")
        if not title or not all(isinstance(v, str) and v for v in fields.values()):
            raise GenerationClientError("SMART data is incomplete.")
        return title, to_external(SmartBreakdown.model_validate(fields))

    def _smart_payload(self, smart: WizardSmart) -> dict[str, str]:
        return from_external(smart).model_dump(by_alias=True)

    async def generate_actions(self, goal_title: str, smart: WizardSmart) -> list[WizardAction]:
        data = await self._post(
            "/api/generate-actions",
            {"goalTitle": goal_title, "smart": self._smart_payload(smart)},
        )
        actions = data.get("actions")
        if not isinstance(actions, list) or not actions:
            raise GenerationClientError("No actions were returned.")
        return [_suggestion_to_action(item) for item in actions if isinstance(item, dict)]

    async def generate_more_actions(
        self,
        goal_title: str,
        smart: WizardSmart,
        previous_actions: Sequence[WizardAction],
    ) -> list[WizardAction]:
        data = await self._post(
            "/api/generate-more-actions",
            {
                "goalTitle": goal_title,
                "smart": self._smart_payload(smart),
                "previousActions": [
                    {"title": a.title, "description": a.description, "frequency": a.frequency}
                    for a in previous_actions
                ],
            },
        )
        actions = data.get("actions")
        if not isinstance(actions, list) or not actions:
            raise GenerationClientError("No actions were returned.")
        return [_suggestion_to_action(item) for item in actions if isinstance(item, dict)]

    async def save_goal(
        self,
        user_id: str,
        goal_title: str,
        smart: WizardSmart,
        actions: Sequence[WizardAction],
    ) -> str:
        """
        Save the finished wizard.

        Returns:
            ID of the created target
        """
        data = await self._post(
            "/api/save-goal-data",
            {
                "userId": user_id,
                "goalTitle": goal_title,
                "smart": self._smart_payload(smart),
                "actions": [_action_payload(action) for action in actions],
            },
        )
        if not data.get("success"):
            raise GenerationClientError(data.get("error") or "Unable to save your goal.")
        return str(data.get("targetId") or "")
