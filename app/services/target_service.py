"""Target service - listing, archiving and deleting goals."""
import logging
from datetime import datetime
from typing import Optional

from pymongo import DESCENDING

from app.database import write_session
from app.exceptions import NotFoundError, OwnershipError
from app.models.action import DeleteMode
from app.models.target import Target, TargetStatus
from app.utils.sanitizers import to_iso

logger = logging.getLogger(__name__)


class TargetService:
    """Service for handling target operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.targets = db["targets"]
        self.actions = db["actions"]
        self.completions = db["completions"]

    def _doc_to_target(self, doc: dict) -> Target:
        archived = doc.get("archived") is True
        return Target(
            _id=str(doc["_id"]),
            target_id=doc.get("targetId") or str(doc["_id"]),
            title=doc.get("title") or "",
            status=TargetStatus.ARCHIVED if archived else TargetStatus.ACTIVE,
            archived=archived,
            smart=doc.get("smart") or {},
            user_id=doc["userId"],
            created_at=to_iso(doc.get("createdAt")),
            updated_at=to_iso(doc.get("updatedAt")),
        )

    async def _get_owned(self, user_id: str, target_id: str) -> dict:
        target_doc = await self.targets.find_one({"_id": target_id})
        if not target_doc:
            raise NotFoundError("Target not found")
        if target_doc.get("userId") != user_id:
            raise OwnershipError("Unauthorized")
        return target_doc

    async def list_targets(self, user_id: str, include_archived: bool = False) -> list[Target]:
        """
        List a user's targets, newest first.

        Args:
            user_id: Owner
            include_archived: Also return archived targets
        """
        query = {"userId": user_id}
        if not include_archived:
            query["archived"] = {"$ne": True}

        cursor = self.targets.find(query, sort=[("createdAt", DESCENDING)])
        target_docs = await cursor.to_list(length=None)
        return [self._doc_to_target(doc) for doc in target_docs]

    async def set_archived(self, user_id: str, target_id: str, archived: Optional[bool] = True) -> dict:
        """
        Archive or unarchive a target and every action under it.

        Raises:
            NotFoundError: If the target does not exist
            OwnershipError: If the target belongs to another user
        """
        archived = archived is not False
        await self._get_owned(user_id, target_id)

        now = datetime.utcnow()
        async with write_session(self.db) as session:
            await self.targets.update_one(
                {"_id": target_id},
                {
                    "$set": {
                        "archived": archived,
                        "status": (TargetStatus.ARCHIVED if archived else TargetStatus.ACTIVE).value,
                        "updatedAt": now,
                    }
                },
                session=session,
            )
            result = await self.actions.update_many(
                {"targetId": target_id},
                {"$set": {"isArchived": archived, "updatedAt": now}},
                session=session,
            )

        return {
            "success": True,
            "target_id": target_id,
            "archived": archived,
            "actions_updated": result.matched_count,
        }

    async def delete_target(self, user_id: str, target_id: str, mode: DeleteMode = DeleteMode.SOFT) -> dict:
        """
        Delete a target.

        Soft mode archives the target and its actions. Hard mode removes the
        target, its actions and their completions permanently.

        Returns:
            Dictionary with the mode used and the number of affected actions
        """
        if mode != DeleteMode.HARD:
            result = await self.set_archived(user_id, target_id, archived=True)
            return {
                "success": True,
                "target_id": target_id,
                "mode": DeleteMode.SOFT,
                "deleted_actions": result["actions_updated"],
            }

        await self._get_owned(user_id, target_id)

        cursor = self.actions.find({"targetId": target_id}, {"_id": 1})
        action_ids = [doc["_id"] for doc in await cursor.to_list(length=None)]

        async with write_session(self.db) as session:
            await self.targets.delete_one({"_id": target_id}, session=session)
            result = await self.actions.delete_many({"targetId": target_id}, session=session)
            if action_ids:
                await self.completions.delete_many(
                    {"actionId": {"$in": action_ids}}, session=session
                )

        logger.info("Hard deleted target %s and %d actions", target_id, result.deleted_count)
        return {
            "success": True,
            "target_id": target_id,
            "mode": DeleteMode.HARD,
            "deleted_actions": result.deleted_count,
        }
