import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from lms.config import MONGO_URL, MONGO_DB_NAME

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return db

# ==================== HELPERS ====================

def utc_now() -> datetime:
    """Naive UTC timestamp, the form Mongo hands back"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def generate_id(prefix: str) -> str:
    """Generate unique ID with prefix"""
    return f"{prefix}_{uuid.uuid4().hex[:12].upper()}"

def serialize_mongo(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    doc.pop("_id", None)
    return doc

def serialize_many(docs: list[dict]) -> list[dict]:
    return [serialize_mongo(doc) for doc in docs]

# ==================== DATABASE INDEXES ====================

async def create_indexes(database: AsyncIOMotorDatabase):
    """
    Create database indexes
    Called during application startup; unique indexes back the
    one-enrollment-per-batch and one-submission-per-assignment rules
    """
    # Users
    await database.users.create_index("user_id", unique=True)
    await database.users.create_index("email", unique=True)

    # Hierarchy
    await database.verticals.create_index("vertical_id", unique=True)
    await database.batches.create_index("batch_id", unique=True)
    await database.batches.create_index("vertical_id")
    await database.modules.create_index("module_id", unique=True)
    await database.modules.create_index([("batch_id", 1), ("module_order", 1)])
    await database.weeks.create_index("week_id", unique=True)
    await database.weeks.create_index([("module_id", 1), ("week_number", 1)])
    await database.lectures.create_index("lecture_id", unique=True)
    await database.lectures.create_index([("week_id", 1), ("lecture_number", 1)])
    await database.lectures.create_index("scheduled_at")

    # Enrollments
    await database.enrollments.create_index("enrollment_id", unique=True)
    await database.enrollments.create_index([("user_id", 1), ("batch_id", 1)], unique=True)
    await database.enrollments.create_index([("user_id", 1), ("status", 1), ("is_active", 1)])

    # Assignments
    await database.assignments.create_index("assignment_id", unique=True)
    await database.assignments.create_index([("batch_id", 1), ("status", 1)])

    # Submissions
    await database.submissions.create_index("submission_id", unique=True)
    await database.submissions.create_index([("user_id", 1), ("assignment_id", 1)], unique=True)
    await database.submissions.create_index([("user_id", 1), ("submitted_at", -1)])

    logger.info("LMS indexes created")
