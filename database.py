# database.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from config import MONGODB_URL, DATABASE_NAME

logger = logging.getLogger(__name__)

class MongoDB:
    client: Optional[AsyncIOMotorClient] = None

mongodb = MongoDB()

async def get_database() -> AsyncIOMotorDatabase:
    if mongodb.client is None:
        logger.info("🔗 Connecting to MongoDB at %s", MONGODB_URL.split("@")[-1])
        mongodb.client = AsyncIOMotorClient(
            MONGODB_URL,
            serverSelectionTimeoutMS=15000,
            connectTimeoutMS=15000,
            maxPoolSize=10,
            retryWrites=True
        )
    return mongodb.client[DATABASE_NAME]

async def ping() -> bool:
    """Check that the store answers"""
    try:
        db = await get_database()
        await db.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", e)
        return False

async def close_mongo_connection():
    if mongodb.client:
        mongodb.client.close()
        mongodb.client = None
        logger.info("🔌 MongoDB connection closed")

async def create_indexes():
    if not await ping():
        logger.warning("⚠️  Could not create indexes - no active connection")
        return

    db = await get_database()
    try:
        # Profile indexes
        await db.profiles.create_index([("email", ASCENDING)], unique=True)

        # Course indexes
        await db.courses.create_index([("title", ASCENDING)])
        await db.courses.create_index([("subject", ASCENDING)])

        # Enrollment indexes - one enrollment per (user, course)
        await db.enrollments.create_index([("user_id", ASCENDING), ("course_id", ASCENDING)], unique=True)
        await db.enrollments.create_index([("user_id", ASCENDING), ("enrolled_at", DESCENDING)])

        # Tutoring session indexes
        await db.tutoring_sessions.create_index([("student_id", ASCENDING), ("scheduled_at", ASCENDING)])
        await db.tutoring_sessions.create_index([("teacher_id", ASCENDING), ("scheduled_at", ASCENDING)])

        logger.info("✅ Database indexes created")
    except PyMongoError as e:
        logger.error("⚠️  Error in index creation: %s", e)
