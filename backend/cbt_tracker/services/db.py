# async mongodb client for the backend api
# uses motor for non-blocking operations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from cbt_tracker.config import settings

logger = logging.getLogger(__name__)


class Database:
    """async mongodb connection manager"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """establish connection to mongodb"""
        if self.client is not None:
            return

        logger.info(f"Connecting to MongoDB database: {settings.MONGODB_DATABASE}")
        self.client = AsyncIOMotorClient(settings.MONGODB_URI)
        self.db = self.client[settings.MONGODB_DATABASE]

        # verify connection
        await self.client.admin.command("ping")
        logger.info("MongoDB connection established")

    async def close(self):
        """close mongodb connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    async def ensure_indexes(self):
        """unique emails and sessions, per-owner ordering for both record collections"""
        await self.users.create_index("email", unique=True)
        await self.sessions.create_index("session_id", unique=True)
        await self.entries.create_index([("user_id", 1), ("created_at", 1)])
        await self.worksheets.create_index([("user_id", 1), ("type", 1), ("created_at", 1)])
        logger.info("Indexes ensured on users, sessions, entries, worksheets")

    # collection accessors

    @property
    def users(self):
        return self.db["users"]

    @property
    def sessions(self):
        return self.db["sessions"]

    @property
    def entries(self):
        return self.db["entries"]

    @property
    def worksheets(self):
        return self.db["worksheets"]


# singleton instance
db = Database()


async def get_db() -> Database:
    """dependency injection for database access"""
    return db
