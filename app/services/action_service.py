"""Action service - business logic for action management and check-ins."""
import asyncio
import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from app.config import settings
from app.exceptions import InvalidRequestError, NotFoundError, OwnershipError
from app.models.action import (
    Action,
    ActionStatus,
    DashboardAction,
    DeleteMode,
    Frequency,
)
from app.utils.sanitizers import (
    clean_frequency,
    clean_repeat_config,
    clean_text,
    parse_timestamp,
    to_iso,
)
from app.utils.streaks import (
    STREAK_FREQUENCIES,
    calculate_streak,
    is_completed_today,
    today_midnight,
)

logger = logging.getLogger(__name__)

ALREADY_CHECKED_IN = "Action already checked in for today."
CHECKED_IN = "Action checked in successfully."


def _require_action_id(action_id: Any) -> str:
    action_id = clean_text(action_id)
    if not action_id:
        raise InvalidRequestError("actionId is required.", field="actionId")
    return action_id


class ActionService:
    """Service for handling action operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.actions = db["actions"]
        self.targets = db["targets"]
        self.completions = db["completions"]

    def _doc_to_action(self, doc: dict, goal_title: str = "") -> Action:
        """
        Convert database document to Action model.

        Older documents keep the deadline under ``userDeadline``.
        """
        deadline = parse_timestamp(doc.get("deadline") or doc.get("userDeadline"))
        completed_dates = [
            to_iso(parsed)
            for parsed in (parse_timestamp(item) for item in doc.get("completedDates") or [])
            if parsed is not None
        ]
        return Action(
            action_id=doc.get("actionId") or str(doc["_id"]),
            target_id=doc.get("targetId") or "",
            goal_title=goal_title,
            title=doc.get("title") or "",
            description=doc.get("description") or "",
            frequency=clean_frequency(doc.get("frequency")),
            repeat_config=clean_repeat_config(doc.get("repeatConfig")),
            deadline=to_iso(deadline),
            status=ActionStatus.DONE if doc.get("status") == ActionStatus.DONE.value else ActionStatus.PENDING,
            is_archived=doc.get("isArchived") is True,
            order=doc.get("order"),
            completed_dates=completed_dates,
            created_at=to_iso(parse_timestamp(doc.get("createdAt"))),
            updated_at=to_iso(parse_timestamp(doc.get("updatedAt"))),
        )

    async def _get_owned(self, user_id: str, action_id: str) -> dict:
        """
        Load an action and verify the caller owns it.

        Raises:
            NotFoundError: If action not found
            OwnershipError: If the action belongs to another user
        """
        action_doc = await self.actions.find_one({"_id": action_id})
        if not action_doc:
            raise NotFoundError("Action not found")
        if action_doc.get("userId") != user_id:
            raise OwnershipError("Unauthorized")
        return action_doc

    async def list_actions(
        self,
        user_id: str,
        target_id: Any = None,
        include_archived: bool = True,
    ) -> list[Action]:
        """
        List actions for a user, earliest deadline first.

        Each action carries its target's title as ``goalTitle``.

        Args:
            user_id: User ID
            target_id: Optional target filter
            include_archived: Also return archived actions
        """
        query = {"userId": user_id}
        target_id = clean_text(target_id)
        if target_id:
            query["targetId"] = target_id
        if not include_archived:
            query["isArchived"] = {"$ne": True}

        cursor = self.actions.find(query, sort=[("deadline", ASCENDING)])
        action_docs = await cursor.to_list(length=None)

        target_ids = sorted({doc["targetId"] for doc in action_docs if doc.get("targetId")})
        titles = {}
        if target_ids:
            target_cursor = self.targets.find({"_id": {"$in": target_ids}}, {"title": 1})
            for target_doc in await target_cursor.to_list(length=None):
                title = target_doc.get("title")
                titles[target_doc["_id"]] = title if isinstance(title, str) else ""

        return [
            self._doc_to_action(doc, titles.get(doc.get("targetId"), ""))
            for doc in action_docs
        ]

    async def update_status(self, user_id: str, action_id: Any, status: Any) -> None:
        """
        Set an action's status to pending or done.

        Raises:
            InvalidRequestError: If actionId or status is invalid
            NotFoundError: If action not found
            OwnershipError: If the action belongs to another user
        """
        action_id = _require_action_id(action_id)
        if status not in (ActionStatus.PENDING.value, ActionStatus.DONE.value):
            raise InvalidRequestError("Invalid status", field="status")

        await self._get_owned(user_id, action_id)

        await self.actions.update_one(
            {"_id": action_id, "userId": user_id},
            {"$set": {"status": status, "updatedAt": datetime.utcnow()}},
        )

    async def delete_action(self, user_id: str, action_id: Any, mode: Any = None) -> DeleteMode:
        """
        Delete an action.

        Soft delete (the default) sets ``isArchived``; hard delete removes the
        action and its completions.

        Returns:
            The mode that was applied
        """
        action_id = _require_action_id(action_id)
        mode = DeleteMode.HARD if mode == DeleteMode.HARD.value else DeleteMode.SOFT

        await self._get_owned(user_id, action_id)

        if mode == DeleteMode.HARD:
            await self.actions.delete_one({"_id": action_id, "userId": user_id})
            await self.completions.delete_many({"actionId": action_id})
        else:
            await self.actions.update_one(
                {"_id": action_id, "userId": user_id},
                {"$set": {"isArchived": True, "updatedAt": datetime.utcnow()}},
            )

        return mode

    async def complete_action(self, user_id: str, action_id: Any) -> str:
        """
        Record today's check-in for an action.

        At most one completion per action per local day is stored; repeated
        check-ins report success without writing.

        Returns:
            Message describing the outcome

        Raises:
            InvalidRequestError: If the action is inactive
            NotFoundError: If action not found
            OwnershipError: If the action belongs to another user
        """
        action_id = _require_action_id(action_id)
        action_doc = await self._get_owned(user_id, action_id)

        if action_doc.get("isActive") is False:
            raise InvalidRequestError("Action is not active.", field="actionId")

        today = today_midnight()
        existing = await self.completions.find_one({
            "actionId": action_id,
            "completionDate": {"$gte": today, "$lt": today + timedelta(days=1)},
        })
        if existing:
            return ALREADY_CHECKED_IN

        try:
            await self.completions.insert_one({
                "_id": str(uuid.uuid4()),
                "actionId": action_id,
                "userId": user_id,
                "completionDate": today,
                "timestamp": datetime.utcnow(),
            })
        except DuplicateKeyError:
            logger.info("Concurrent check-in for action %s already stored", action_id)
            return ALREADY_CHECKED_IN

        return CHECKED_IN

    async def _completion_dates(self, action_id: str, limit: int) -> list[datetime]:
        cursor = self.completions.find(
            {"actionId": action_id},
            sort=[("completionDate", DESCENDING)],
            limit=limit,
        )
        docs = await cursor.to_list(length=None)
        return [doc["completionDate"] for doc in docs if isinstance(doc.get("completionDate"), datetime)]

    async def dashboard(self, user_id: str, today: Optional[date] = None) -> list[DashboardAction]:
        """
        Compute today's check-in state and current streak for each action.

        Args:
            user_id: User ID
            today: Local date to evaluate against (defaults to today)

        Returns:
            Active actions only; actions with ``isActive`` false are skipped
        """
        today = today or date.today()
        limit = settings.dashboard_completion_limit

        cursor = self.actions.find({"userId": user_id})
        action_docs = await cursor.to_list(length=None)

        completion_lists = await asyncio.gather(
            *(self._completion_dates(str(doc["_id"]), limit) for doc in action_docs)
        )

        dashboard = []
        for doc, completion_dates in zip(action_docs, completion_lists):
            frequency = doc.get("frequency")
            if frequency not in STREAK_FREQUENCIES:
                frequency = Frequency.DAILY.value

            item = DashboardAction(
                id=str(doc["_id"]),
                title=doc.get("title") or "",
                description=doc.get("description") if isinstance(doc.get("description"), str) else "",
                frequency=frequency,
                start_date=to_iso(parse_timestamp(doc.get("startDate"))),
                end_date=to_iso(parse_timestamp(doc.get("endDate"))),
                is_active=doc.get("isActive") is not False,
                is_completed_today=is_completed_today(completion_dates, today),
                streak=calculate_streak(frequency, completion_dates, today),
            )
            if item.is_active:
                dashboard.append(item)

        return dashboard
