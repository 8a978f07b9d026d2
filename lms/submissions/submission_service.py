import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from lms.assignments.assignment_models import AssignmentStatus
from lms.database import generate_id, serialize_mongo, serialize_many, utc_now
from lms.enrollments.enrollment_service import EnrollmentService
from lms.errors import NotFoundError, BadRequestError, ForbiddenError
from lms.submissions.submission_models import Submission, SubmissionType

logger = logging.getLogger(__name__)

ASSIGNMENT_SUMMARY = {"_id": 0, "assignment_id": 1, "title": 1, "due_date": 1, "max_score": 1}


def deadline_passed(assignment: dict, now) -> bool:
    due_date = assignment.get("due_date")
    return due_date is not None and now > due_date


class SubmissionService:
    """
    Student submission lifecycle: create, edit, withdraw
    Every mutation is closed once the assignment's due date has passed
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def _with_assignment(self, submission: dict) -> dict:
        submission = serialize_mongo(submission)
        submission["assignment"] = await self.db.assignments.find_one(
            {"assignment_id": submission["assignment_id"]},
            ASSIGNMENT_SUMMARY
        )
        return submission

    async def _owned_active(self, user_id: str, submission_id: str) -> dict:
        submission = await self.db.submissions.find_one({
            "submission_id": submission_id,
            "user_id": user_id,
            "is_active": True
        })

        if not submission:
            raise NotFoundError("Submission not found")

        return submission

    async def _assignment_of(self, submission: dict) -> dict:
        assignment = await self.db.assignments.find_one({"assignment_id": submission["assignment_id"]})
        if not assignment:
            raise NotFoundError(f"Assignment with ID {submission['assignment_id']} not found")
        return assignment

    # ==================== STUDENT ====================

    async def create(self, user_id: str, data: dict) -> dict:
        """
        Submit against a published assignment

        Raises:
            404: Assignment missing, unpublished or inactive
            403: Not enrolled in the assignment's batch
            400: Deadline passed, already submitted, or LINK without link_url
        """
        assignment_id = data["assignment_id"]

        assignment = await self.db.assignments.find_one({
            "assignment_id": assignment_id,
            "status": AssignmentStatus.PUBLISHED.value,
            "is_active": True
        })

        if not assignment:
            raise NotFoundError("Assignment not found or not published")

        if not await EnrollmentService(self.db).verify_access(user_id, assignment["batch_id"]):
            raise ForbiddenError("You are not enrolled in this batch")

        now = utc_now()
        if deadline_passed(assignment, now):
            raise BadRequestError("Assignment submission deadline has passed")

        existing = await self.db.submissions.find_one({"user_id": user_id, "assignment_id": assignment_id})

        if existing and existing.get("is_active"):
            raise BadRequestError("You have already submitted this assignment")

        submission_type = SubmissionType(data["type"])
        if submission_type == SubmissionType.LINK and not data.get("link_url"):
            raise BadRequestError("Link URL is required for link submissions")

        fields = {
            "type": submission_type.value,
            "link_url": data.get("link_url"),
            "link_title": data.get("link_title"),
            "content": data.get("content"),
        }

        if existing:
            await self.db.submissions.update_one(
                {"submission_id": existing["submission_id"]},
                {"$set": {
                    **fields,
                    "is_active": True,
                    "submitted_at": now,
                    "score": None,
                    "feedback": None,
                    "graded_at": None,
                    "updated_at": now,
                }}
            )
            logger.info("Submission %s reactivated by %s", existing["submission_id"], user_id)
            submission = await self.db.submissions.find_one({"submission_id": existing["submission_id"]})
            return await self._with_assignment(submission)

        submission = Submission(
            submission_id=generate_id("SUB"),
            user_id=user_id,
            assignment_id=assignment_id,
            submitted_at=now,
            **fields
        ).dict()

        try:
            await self.db.submissions.insert_one(submission)
        except DuplicateKeyError:
            raise BadRequestError("You have already submitted this assignment")

        logger.info("Submission %s created by %s for %s", submission["submission_id"], user_id, assignment_id)
        return await self._with_assignment(submission)

    async def update(self, user_id: str, submission_id: str, updates: dict) -> dict:
        """
        Partial edit of an active submission before the deadline

        Raises:
            404: Not found, not owned or withdrawn
            400: Deadline passed, or the result is a LINK without link_url
        """
        submission = await self._owned_active(user_id, submission_id)
        assignment = await self._assignment_of(submission)

        if deadline_passed(assignment, utc_now()):
            raise BadRequestError("Cannot edit submission after assignment deadline")

        if "type" in updates:
            updates["type"] = SubmissionType(updates["type"]).value

        submission_type = updates.get("type", submission.get("type"))
        link_url = updates.get("link_url") or submission.get("link_url")
        if submission_type == SubmissionType.LINK.value and not link_url:
            raise BadRequestError("Link URL is required for link submissions")

        updates["updated_at"] = utc_now()
        await self.db.submissions.update_one({"submission_id": submission_id}, {"$set": updates})

        updated = await self.db.submissions.find_one({"submission_id": submission_id})
        return await self._with_assignment(updated)

    async def delete(self, user_id: str, submission_id: str) -> dict:
        """
        Withdraw (soft delete) a submission before the deadline

        Raises:
            404: Not found, not owned or already withdrawn
            400: Deadline passed
        """
        submission = await self._owned_active(user_id, submission_id)
        assignment = await self._assignment_of(submission)

        if deadline_passed(assignment, utc_now()):
            raise BadRequestError("Cannot delete submission after assignment deadline")

        await self.db.submissions.update_one(
            {"submission_id": submission_id},
            {"$set": {"is_active": False, "updated_at": utc_now()}}
        )
        logger.info("Submission %s withdrawn by %s", submission_id, user_id)

        return serialize_mongo(await self.db.submissions.find_one({"submission_id": submission_id}))

    async def get_my_submissions(self, user_id: str, assignment_id: Optional[str] = None) -> List[dict]:
        query = {"user_id": user_id, "is_active": True}
        if assignment_id:
            query["assignment_id"] = assignment_id

        cursor = self.db.submissions.find(query).sort("submitted_at", -1)
        submissions = serialize_many(await cursor.to_list(length=None))
        return [await self._with_assignment(s) for s in submissions]

    async def get_submission(self, user_id: str, submission_id: str) -> dict:
        return await self._with_assignment(await self._owned_active(user_id, submission_id))

    # ==================== ADMIN ====================

    async def grade(self, submission_id: str, score: float, feedback: Optional[str] = None) -> dict:
        """
        Record a score (and optional feedback) on an active submission

        Raises:
            404: Submission not found
            400: Score exceeds the assignment's max_score
        """
        submission = await self.db.submissions.find_one({"submission_id": submission_id, "is_active": True})

        if not submission:
            raise NotFoundError("Submission not found")

        assignment = await self._assignment_of(submission)
        max_score = assignment.get("max_score", 100)

        if score > max_score:
            raise BadRequestError(f"Score cannot exceed the assignment's max score of {max_score:g}")

        now = utc_now()
        await self.db.submissions.update_one(
            {"submission_id": submission_id},
            {"$set": {"score": score, "feedback": feedback, "graded_at": now, "updated_at": now}}
        )
        logger.info("Submission %s graded %s/%s", submission_id, score, max_score)

        updated = await self.db.submissions.find_one({"submission_id": submission_id})
        return await self._with_assignment(updated)
