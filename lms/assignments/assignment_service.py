import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from lms.assignments.assignment_models import Assignment, AssignmentStatus
from lms.database import generate_id, serialize_mongo, serialize_many, utc_now
from lms.errors import NotFoundError, ConflictError

logger = logging.getLogger(__name__)

# ==================== HELPERS ====================

async def _ensure_batch(db: AsyncIOMotorDatabase, batch_id: str):
    if not await db.batches.find_one({"batch_id": batch_id}):
        raise NotFoundError(f"Batch with ID {batch_id} not found")

async def _with_batch(db: AsyncIOMotorDatabase, assignment: dict) -> dict:
    """Embed batch, and the batch's vertical, into an assignment"""
    batch = serialize_mongo(await db.batches.find_one({"batch_id": assignment["batch_id"]}))
    if batch:
        batch["vertical"] = serialize_mongo(
            await db.verticals.find_one({"vertical_id": batch["vertical_id"]})
        )
    assignment["batch"] = batch
    return assignment

async def _find_many(db: AsyncIOMotorDatabase, query: dict, sort_field: str, direction: int) -> List[dict]:
    cursor = db.assignments.find(query).sort(sort_field, direction)
    assignments = serialize_many(await cursor.to_list(length=None))
    return [await _with_batch(db, a) for a in assignments]

async def _set(db: AsyncIOMotorDatabase, assignment_id: str, updates: dict) -> dict:
    updates["updated_at"] = utc_now()
    await db.assignments.update_one({"assignment_id": assignment_id}, {"$set": updates})
    return await find_one(db, assignment_id)

# ==================== CRUD ====================

async def create(db: AsyncIOMotorDatabase, data: dict) -> dict:
    """
    Create an assignment under an existing batch

    Raises:
        404: Batch not found
    """
    await _ensure_batch(db, data["batch_id"])

    assignment = Assignment(
        assignment_id=generate_id("ASG"),
        **data
    ).dict()

    await db.assignments.insert_one(assignment)
    logger.info("Assignment %s created in batch %s", assignment["assignment_id"], assignment["batch_id"])

    return await _with_batch(db, serialize_mongo(assignment))

async def find_all(db: AsyncIOMotorDatabase) -> List[dict]:
    return await _find_many(db, {}, "created_at", -1)

async def find_by_batch(db: AsyncIOMotorDatabase, batch_id: str) -> List[dict]:
    await _ensure_batch(db, batch_id)
    return await _find_many(db, {"batch_id": batch_id}, "due_date", 1)

async def find_published(db: AsyncIOMotorDatabase, batch_id: Optional[str] = None) -> List[dict]:
    query = {"status": AssignmentStatus.PUBLISHED.value}
    if batch_id:
        query["batch_id"] = batch_id
    return await _find_many(db, query, "due_date", 1)

async def find_one(db: AsyncIOMotorDatabase, assignment_id: str) -> dict:
    assignment = await db.assignments.find_one({"assignment_id": assignment_id})

    if not assignment:
        raise NotFoundError(f"Assignment with ID {assignment_id} not found")

    return await _with_batch(db, serialize_mongo(assignment))

async def update(db: AsyncIOMotorDatabase, assignment_id: str, updates: dict) -> dict:
    await find_one(db, assignment_id)

    if updates.get("batch_id"):
        await _ensure_batch(db, updates["batch_id"])

    return await _set(db, assignment_id, updates)

async def remove(db: AsyncIOMotorDatabase, assignment_id: str) -> dict:
    """
    Hard delete an assignment

    Raises:
        404: Assignment not found
        409: Submissions exist for it
    """
    assignment = await find_one(db, assignment_id)

    if await db.submissions.count_documents({"assignment_id": assignment_id}) > 0:
        raise ConflictError(
            f"Assignment with ID {assignment_id} still has submissions; unpublish it instead"
        )

    await db.assignments.delete_one({"assignment_id": assignment_id})
    logger.info("Assignment %s deleted", assignment_id)
    return assignment

# ==================== PUBLISHING ====================

async def publish(db: AsyncIOMotorDatabase, assignment_id: str) -> dict:
    await find_one(db, assignment_id)
    logger.info("Assignment %s published", assignment_id)
    return await _set(db, assignment_id, {
        "status": AssignmentStatus.PUBLISHED.value,
        "published_at": utc_now()
    })

async def unpublish(db: AsyncIOMotorDatabase, assignment_id: str) -> dict:
    await find_one(db, assignment_id)
    logger.info("Assignment %s unpublished", assignment_id)
    return await _set(db, assignment_id, {
        "status": AssignmentStatus.DRAFT.value,
        "published_at": None
    })
