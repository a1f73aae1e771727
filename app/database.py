"""MongoDB database connection using Motor (async driver)."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING

from app.config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure indexes exist."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        await ensure_indexes(self.db)
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db


async def ensure_indexes(db) -> None:
    """
    Create the indexes the queries rely on.

    The unique (actionId, completionDate) index keeps check-ins at one per
    action per day even when two requests race past the existence query.
    """
    await db["targets"].create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
    await db["actions"].create_index([("userId", ASCENDING), ("deadline", ASCENDING)])
    await db["actions"].create_index("targetId")
    await db["completions"].create_index(
        [("actionId", ASCENDING), ("completionDate", ASCENDING)],
        unique=True,
    )


@asynccontextmanager
async def write_session(db) -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
    """
    Group multi-document writes into one transaction.

    Yields ``None`` when transactions are disabled (standalone servers);
    callers pass the yielded value straight through as ``session=``.
    """
    if not settings.mongodb_transactions:
        yield None
        return

    async with await db.client.start_session() as session:
        async with session.start_transaction():
            yield session
