"""Goal service - persists a finished wizard run as a target and its actions."""
import logging
import uuid
from datetime import datetime
from typing import Any

from app.database import write_session
from app.exceptions import InvalidRequestError
from app.models.action import ActionStatus
from app.models.target import TargetStatus
from app.utils.sanitizers import (
    SMART_FIELDS,
    clean_frequency,
    clean_repeat_config,
    clean_smart,
    clean_text,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


class GoalService:
    """Service for saving wizard output."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.targets = db["targets"]
        self.actions = db["actions"]

    def _build_action_doc(
        self,
        raw: Any,
        index: int,
        target_id: str,
        user_id: str,
        now: datetime,
    ) -> dict:
        """
        Validate one wizard action and convert it to a document.

        Raises:
            InvalidRequestError: If the title or deadline is missing/invalid
        """
        if not isinstance(raw, dict):
            raise InvalidRequestError(f"actions[{index}] must be an object.", field=f"actions[{index}]")

        title = clean_text(raw.get("title"))
        if not title:
            raise InvalidRequestError(
                f"actions[{index}].title is required.", field=f"actions[{index}].title"
            )

        deadline = parse_timestamp(raw.get("userDeadline") or raw.get("deadline"))
        if deadline is None:
            raise InvalidRequestError(
                f"actions[{index}].userDeadline must be a valid date.",
                field=f"actions[{index}].userDeadline",
            )

        completed_dates = []
        if isinstance(raw.get("completedDates"), list):
            completed_dates = [
                parsed
                for parsed in (parse_timestamp(item) for item in raw["completedDates"])
                if parsed is not None
            ]

        order = raw.get("order")
        action_id = str(uuid.uuid4())
        action_doc = {
            "_id": action_id,
            "actionId": action_id,
            "targetId": target_id,
            "userId": user_id,
            "title": title,
            "description": clean_text(raw.get("description")),
            "frequency": clean_frequency(raw.get("frequency")),
            "order": order if isinstance(order, (int, float)) and not isinstance(order, bool) else index + 1,
            "deadline": deadline,
            "completedDates": completed_dates,
            "isArchived": False,
            "status": ActionStatus.PENDING.value,
            "createdAt": parse_timestamp(raw.get("createdAt")) or now,
            "updatedAt": now,
        }

        repeat_config = clean_repeat_config(raw.get("repeatConfig"))
        if repeat_config:
            action_doc["repeatConfig"] = repeat_config

        return action_doc

    async def save_goal(
        self,
        user_id: str,
        goal_title: Any,
        smart: Any,
        actions: Any,
    ) -> str:
        """
        Save a target and its actions in one write.

        Saving is not idempotent: repeating the same payload creates a new
        target with new actions.

        Args:
            user_id: Authenticated owner
            goal_title: Goal title from the wizard
            smart: SMART breakdown (``timeBased`` vocabulary)
            actions: Wizard actions; each needs a title and a deadline

        Returns:
            ID of the created target

        Raises:
            InvalidRequestError: If any required field is missing or invalid
        """
        title = clean_text(goal_title)
        if not title:
            raise InvalidRequestError("goalTitle is required.", field="goalTitle")

        cleaned_smart = clean_smart(smart)
        if cleaned_smart is None:
            missing = next(
                (
                    field
                    for field in SMART_FIELDS
                    if not isinstance(smart, dict) or not clean_text(smart.get(field))
                ),
                "smart",
            )
            raise InvalidRequestError(f"SMART field '{missing}' missing.", field=f"smart.{missing}")

        if not isinstance(actions, list) or not actions:
            raise InvalidRequestError("At least one action is required.", field="actions")

        now = datetime.utcnow()
        target_id = str(uuid.uuid4())
        action_docs = [
            self._build_action_doc(raw, index, target_id, user_id, now)
            for index, raw in enumerate(actions)
        ]

        target_doc = {
            "_id": target_id,
            "targetId": target_id,
            "userId": user_id,
            "title": title,
            "status": TargetStatus.ACTIVE.value,
            "archived": False,
            "smart": cleaned_smart,
            "createdAt": now,
            "updatedAt": now,
        }

        async with write_session(self.db) as session:
            await self.targets.insert_one(target_doc, session=session)
            await self.actions.insert_many(action_docs, session=session)

        logger.info(
            "Saved target %s with %d actions for user %s", target_id, len(action_docs), user_id
        )
        return target_id
