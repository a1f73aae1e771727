"""Generation service - turns LLM completions into validated wizard data."""
import logging
from datetime import datetime
from typing import Any, Optional

import openai

from app.exceptions import DuplicateSuggestionsError, GenerationError, InvalidRequestError
from app.services import prompts
from app.utils.llm_json import (
    ParseError,
    ParseOk,
    ParseResult,
    parse_direct,
    parse_embedded_object,
    parse_question_marks,
    run_parsers,
)
from app.utils.sanitizers import (
    clean_action_suggestion,
    clean_answers,
    clean_questions,
    clean_smart,
    clean_text,
)

logger = logging.getLogger(__name__)

QUESTION_COUNT = 3
ACTIONS_RANGE = (6, 10)
MORE_ACTIONS_RANGE = (4, 8)

JSON_PARSERS = (parse_direct, parse_embedded_object)


def shape_questions(payload: dict[str, Any]) -> ParseResult:
    questions = clean_questions(payload.get("questions"), limit=QUESTION_COUNT)
    if len(questions) != QUESTION_COUNT:
        return ParseError(f"expected {QUESTION_COUNT} questions, got {len(questions)}")
    return ParseOk(questions)


def shape_smart(payload: dict[str, Any]) -> ParseResult:
    goal_title = clean_text(payload.get("goalTitle"))
    smart = clean_smart(payload.get("smart"))
    if not goal_title or smart is None:
        return ParseError("goalTitle or SMART fields missing")
    return ParseOk({"goalTitle": goal_title, "smart": smart})


def action_shape(fallback_target_id: str, minimum: int, maximum: int):
    """
    Build a shape function accepting between ``minimum`` and ``maximum`` actions.

    Suggestions without a title are dropped and the list is truncated to
    ``maximum`` before the lower bound is checked.
    """

    def shape(payload: dict[str, Any]) -> ParseResult:
        raw_actions = payload.get("actions")
        if not isinstance(raw_actions, list):
            return ParseError("actions is not a list")

        now = datetime.utcnow()
        actions = []
        for index, raw in enumerate(raw_actions):
            suggestion = clean_action_suggestion(raw, index, fallback_target_id, now)
            if suggestion is not None:
                actions.append(suggestion)
        actions = actions[:maximum]

        if len(actions) < minimum:
            return ParseError(f"expected {minimum}-{maximum} actions, got {len(actions)}")
        return ParseOk(actions)

    return shape


def require_goal_and_smart(goal_title: Any, smart: Any) -> tuple[str, dict]:
    title = clean_text(goal_title)
    cleaned = clean_smart(smart)
    if not title or cleaned is None:
        raise InvalidRequestError("goalTitle and SMART fields are required.", field="smart")
    return title, cleaned


class GenerationService:
    """Service for the four LLM-backed wizard steps."""

    def __init__(self, llm):
        """Initialize service with a completion client."""
        self.llm = llm

    async def _generate(self, system_prompt, user_prompt, temperature, shape, failure, fallback=None):
        try:
            text = await self.llm.complete(system_prompt, user_prompt, temperature)
        except openai.OpenAIError as e:
            logger.error("%s: completion request failed: %s", failure, e)
            raise GenerationError(failure, {"reason": str(e)}) from e

        result = run_parsers(text, JSON_PARSERS, shape, fallback=fallback)
        if isinstance(result, ParseError):
            logger.error("%s: %s", failure, result.reason)
            raise GenerationError(failure, {"reason": result.reason})
        return result.value

    async def generate_questions(self, user_input: Any) -> list[str]:
        """
        Generate three clarifying questions for a goal.

        Raises:
            InvalidRequestError: If userInput is empty
            GenerationError: If three questions cannot be extracted
        """
        user_input = clean_text(user_input)
        if not user_input:
            raise InvalidRequestError("userInput is required.", field="userInput")

        return await self._generate(
            prompts.QUESTIONS_SYSTEM_PROMPT,
            prompts.questions_user_prompt(user_input),
            0.7,
            shape_questions,
            "Failed to generate clarifying questions.",
            fallback=parse_question_marks,
        )

    async def generate_smart(self, user_input: Any, answers: Any = None) -> dict:
        """
        Generate a goal title and SMART breakdown.

        Returns:
            ``{"goalTitle": str, "smart": {...}}`` with every field non-empty
        """
        user_input = clean_text(user_input)
        if not user_input:
            raise InvalidRequestError("userInput is required.", field="userInput")

        return await self._generate(
            prompts.SMART_SYSTEM_PROMPT,
            prompts.smart_user_prompt(user_input, clean_answers(answers)),
            0.7,
            shape_smart,
            "Failed to generate SMART breakdown.",
        )

    async def generate_actions(
        self,
        goal_title: Any,
        smart: Any,
        target_id: Any = None,
    ) -> list[dict]:
        """Generate 6-10 action suggestions for a SMART goal."""
        title, cleaned_smart = require_goal_and_smart(goal_title, smart)

        return await self._generate(
            prompts.ACTIONS_SYSTEM_PROMPT,
            prompts.actions_user_prompt(title, cleaned_smart),
            0.7,
            action_shape(clean_text(target_id), *ACTIONS_RANGE),
            "Failed to generate actions.",
        )

    async def generate_more_actions(
        self,
        goal_title: Any,
        smart: Any,
        previous_actions: Optional[list] = None,
        target_id: Any = None,
    ) -> list[dict]:
        """
        Generate 4-8 further suggestions that differ from previous ones.

        Suggestions whose title matches a previous title (ignoring case) are
        removed after the count check.

        Raises:
            DuplicateSuggestionsError: If every suggestion was a duplicate
        """
        title, cleaned_smart = require_goal_and_smart(goal_title, smart)

        previous = []
        for item in previous_actions or []:
            item = item if isinstance(item, dict) else {}
            previous_title = clean_text(item.get("title"))
            if previous_title:
                previous.append(
                    {"title": previous_title, "description": clean_text(item.get("description"))}
                )

        actions = await self._generate(
            prompts.MORE_ACTIONS_SYSTEM_PROMPT,
            prompts.more_actions_user_prompt(title, cleaned_smart, previous),
            0.8,
            action_shape(clean_text(target_id), *MORE_ACTIONS_RANGE),
            "Failed to generate additional actions.",
        )

        seen = {item["title"].lower() for item in previous}
        fresh = [action for action in actions if action["title"].lower() not in seen]
        if not fresh:
            raise DuplicateSuggestionsError("Generated actions duplicated previous suggestions.")
        return fresh
