"""
MongoDB connection holder for the service directory
"""
import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from swarseva.config import settings

logger = logging.getLogger(__name__)


class MongoDB:
    client: Optional[AsyncIOMotorClient] = None
    database: Optional[AsyncIOMotorDatabase] = None


db = MongoDB()


async def connect_to_mongo():
    """Open the shared client; services live in ``settings.mongodb_db_name``"""
    db.client = AsyncIOMotorClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True
    )
    db.database = db.client[settings.mongodb_db_name]
    logger.info(f"MongoDB client created for database '{settings.mongodb_db_name}'")


async def close_mongo_connection():
    if db.client is None:
        return
    db.client.close()
    db.client = None
    db.database = None
    logger.info("MongoDB client closed")


def get_client() -> Optional[AsyncIOMotorClient]:
    return db.client


def get_database() -> Optional[AsyncIOMotorDatabase]:
    return db.database
