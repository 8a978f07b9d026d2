import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from lms.assignments.assignment_models import AssignmentStatus
from lms.database import generate_id, serialize_mongo, serialize_many, utc_now
from lms.enrollments.enrollment_models import Enrollment, EnrollmentStatus
from lms.errors import NotFoundError, BadRequestError, ConflictError

logger = logging.getLogger(__name__)

USER_SUMMARY = {"_id": 0, "user_id": 1, "email": 1, "first_name": 1, "last_name": 1, "role": 1}


class EnrollmentService:
    """
    Enrollment state machine and batch access checks

    States: PENDING -> APPROVED -> ACTIVE -> COMPLETED. Enrolling
    auto-approves, and admins may set any state from any other.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    # ==================== HELPERS ====================

    async def _batch_with_vertical(self, batch_id: str) -> Optional[dict]:
        batch = await self.db.batches.find_one({"batch_id": batch_id})
        if not batch:
            return None
        batch = serialize_mongo(batch)
        vertical = await self.db.verticals.find_one({"vertical_id": batch["vertical_id"]})
        batch["vertical"] = serialize_mongo(vertical)
        return batch

    async def _with_relations(self, enrollment: dict, include_user: bool = True) -> dict:
        enrollment = serialize_mongo(enrollment)
        enrollment["batch"] = await self._batch_with_vertical(enrollment["batch_id"])
        if include_user:
            enrollment["user"] = await self.db.users.find_one({"user_id": enrollment["user_id"]}, USER_SUMMARY)
        return enrollment

    async def _access_query(self, user_id: str, batch_id: str) -> dict:
        return await self.db.enrollments.find_one({
            "user_id": user_id,
            "batch_id": batch_id,
            "status": EnrollmentStatus.APPROVED.value,
            "is_active": True
        })

    # ==================== TRANSITIONS ====================

    async def enroll(self, user_id: str, batch_id: str) -> dict:
        """
        Enroll a student in a batch (auto-approved)

        Raises:
            404: Batch not found
            400: Batch not active
            409: Already enrolled
        """
        batch = await self.db.batches.find_one({"batch_id": batch_id})

        if not batch:
            raise NotFoundError(f"Batch with ID {batch_id} not found")

        if not batch.get("is_active", False):
            raise BadRequestError("This batch is not currently active")

        existing = await self.db.enrollments.find_one({"user_id": user_id, "batch_id": batch_id})
        if existing:
            raise ConflictError("You are already enrolled in this batch")

        enrollment = Enrollment(
            enrollment_id=generate_id("ENR"),
            user_id=user_id,
            batch_id=batch_id,
            status=EnrollmentStatus.APPROVED,
        ).dict()

        try:
            await self.db.enrollments.insert_one(enrollment)
        except DuplicateKeyError:
            # Lost a race with a concurrent enroll for the same pair
            raise ConflictError("You are already enrolled in this batch")

        logger.info("User %s enrolled in batch %s (%s)", user_id, batch_id, enrollment["enrollment_id"])
        return await self._with_relations(enrollment)

    async def update_status(self, enrollment_id: str, status: EnrollmentStatus) -> dict:
        """
        Set an enrollment's status
        APPROVED stamps approved_at, COMPLETED stamps completed_at

        Raises:
            404: Enrollment not found
        """
        enrollment = await self.db.enrollments.find_one({"enrollment_id": enrollment_id})

        if not enrollment:
            raise NotFoundError(f"Enrollment with ID {enrollment_id} not found")

        status = EnrollmentStatus(status)
        now = utc_now()
        updates = {"status": status.value, "updated_at": now}

        if status == EnrollmentStatus.APPROVED:
            updates["approved_at"] = now
        elif status == EnrollmentStatus.COMPLETED:
            updates["completed_at"] = now

        await self.db.enrollments.update_one({"enrollment_id": enrollment_id}, {"$set": updates})
        logger.info("Enrollment %s status %s -> %s", enrollment_id, enrollment.get("status"), status.value)

        updated = await self.db.enrollments.find_one({"enrollment_id": enrollment_id})
        return await self._with_relations(updated)

    async def deactivate(self, enrollment_id: str) -> dict:
        """Soft-deactivate; the row stays so the pair cannot enroll again"""
        enrollment = await self.db.enrollments.find_one({"enrollment_id": enrollment_id})

        if not enrollment:
            raise NotFoundError(f"Enrollment with ID {enrollment_id} not found")

        await self.db.enrollments.update_one(
            {"enrollment_id": enrollment_id},
            {"$set": {"is_active": False, "updated_at": utc_now()}}
        )
        logger.info("Enrollment %s deactivated", enrollment_id)

        updated = await self.db.enrollments.find_one({"enrollment_id": enrollment_id})
        return await self._with_relations(updated)

    async def verify_access(self, user_id: str, batch_id: str) -> bool:
        """True iff the pair has an APPROVED and active enrollment"""
        return await self._access_query(user_id, batch_id) is not None

    # ==================== QUERIES ====================

    async def get_student_enrollments(self, user_id: str) -> List[dict]:
        cursor = self.db.enrollments.find({
            "user_id": user_id,
            "is_active": True
        }).sort("created_at", -1)

        enrollments = await cursor.to_list(length=None)
        return [await self._with_relations(e, include_user=False) for e in enrollments]

    async def get_available_batches(self) -> List[dict]:
        """Active batches that have not ended, with their approved/active enrollment count"""
        cursor = self.db.batches.find({
            "is_active": True,
            "end_date": {"$gte": utc_now()}
        }).sort("start_date", 1)

        batches = serialize_many(await cursor.to_list(length=None))
        for batch in batches:
            vertical = await self.db.verticals.find_one({"vertical_id": batch["vertical_id"]})
            batch["vertical"] = serialize_mongo(vertical)
            batch["enrollment_count"] = await self.db.enrollments.count_documents({
                "batch_id": batch["batch_id"],
                "status": {"$in": [EnrollmentStatus.APPROVED.value, EnrollmentStatus.ACTIVE.value]}
            })

        return batches

    async def get_all_enrollments(
        self,
        status: Optional[EnrollmentStatus] = None,
        batch_id: Optional[str] = None
    ) -> List[dict]:
        query = {"is_active": True}
        if status:
            query["status"] = EnrollmentStatus(status).value
        if batch_id:
            query["batch_id"] = batch_id

        cursor = self.db.enrollments.find(query).sort("created_at", -1)
        enrollments = await cursor.to_list(length=None)
        return [await self._with_relations(e) for e in enrollments]

    async def get_enrolled_batch_content(self, user_id: str, batch_id: str) -> dict:
        """
        Batch with active modules -> weeks -> lectures, for enrolled students only

        Raises:
            404: Not enrolled or enrollment not approved
        """
        if not await self.verify_access(user_id, batch_id):
            raise NotFoundError(
                "You are not enrolled in this batch or your enrollment is not approved"
            )

        batch = await self._batch_with_vertical(batch_id)
        if not batch:
            raise NotFoundError(f"Batch with ID {batch_id} not found")

        modules = await self.db.modules.find(
            {"batch_id": batch_id, "is_active": True}
        ).sort("module_order", 1).to_list(length=None)

        for module in modules:
            weeks = await self.db.weeks.find(
                {"module_id": module["module_id"], "is_active": True}
            ).sort("week_number", 1).to_list(length=None)

            for week in weeks:
                lectures = await self.db.lectures.find(
                    {"week_id": week["week_id"], "is_active": True}
                ).sort("lecture_number", 1).to_list(length=None)
                week["lectures"] = serialize_many(lectures)

            module["weeks"] = serialize_many(weeks)

        batch["modules"] = serialize_many(modules)
        return batch

    async def get_student_assignment_details(self, user_id: str, assignment_id: str) -> dict:
        """
        Raises:
            404: Assignment missing, unpublished, or student not enrolled in its batch
        """
        assignment = await self.db.assignments.find_one({
            "assignment_id": assignment_id,
            "status": AssignmentStatus.PUBLISHED.value,
            "is_active": True
        })

        if not assignment:
            raise NotFoundError("Assignment not found or not published")

        if not await self.verify_access(user_id, assignment["batch_id"]):
            raise NotFoundError("Assignment not found or you are not enrolled in this batch")

        assignment = serialize_mongo(assignment)
        assignment["batch"] = await self._batch_with_vertical(assignment["batch_id"])
        return assignment
