"""
Assignment progress derivation for students

A student's view of an assignment is derived, never stored:
submission presence decides graded/submitted, the due date decides
overdue/pending only when nothing was submitted.
"""

import math
from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from lms.assignments.assignment_models import AssignmentStatus
from lms.database import serialize_many, serialize_mongo, utc_now
from lms.enrollments.enrollment_models import EnrollmentStatus

SECONDS_PER_DAY = 24 * 60 * 60


def summarize_submission(submission: Optional[dict]) -> Optional[dict]:
    if not submission:
        return None
    return {
        "submission_id": submission["submission_id"],
        "submitted_at": submission["submitted_at"],
        "score": submission.get("score"),
        "feedback": submission.get("feedback"),
    }


def calculate_progress(assignment: dict, submission: Optional[dict], now: datetime) -> dict:
    """
    Derive submission, progress_status, is_overdue and days_until_due

    progress_status:
        graded    - a submission exists and carries a score
        submitted - a submission exists without a score
        overdue   - nothing submitted and now is past the due date
        pending   - otherwise
    """
    due_date = assignment.get("due_date")

    is_overdue = False
    days_until_due = None
    if due_date:
        is_overdue = now > due_date
        days_until_due = math.ceil((due_date - now).total_seconds() / SECONDS_PER_DAY)

    if submission:
        progress_status = "graded" if submission.get("score") is not None else "submitted"
    elif is_overdue:
        progress_status = "overdue"
    else:
        progress_status = "pending"

    return {
        "submission": summarize_submission(submission),
        "progress_status": progress_status,
        "is_overdue": is_overdue,
        "days_until_due": days_until_due,
    }


class AssignmentProgressCalculator:
    """
    Builds the per-student assignment list with progress for every
    batch the student can access
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def accessible_batch_ids(self, user_id: str, batch_id: Optional[str] = None) -> List[str]:
        query = {
            "user_id": user_id,
            "status": EnrollmentStatus.APPROVED.value,
            "is_active": True
        }
        if batch_id:
            query["batch_id"] = batch_id

        cursor = self.db.enrollments.find(query, {"batch_id": 1})
        enrollments = await cursor.to_list(length=None)

        batch_ids = []
        for enrollment in enrollments:
            if enrollment["batch_id"] not in batch_ids:
                batch_ids.append(enrollment["batch_id"])
        return batch_ids

    async def published_assignments(self, batch_ids: List[str]) -> List[dict]:
        cursor = self.db.assignments.find({
            "batch_id": {"$in": batch_ids},
            "status": AssignmentStatus.PUBLISHED.value,
            "is_active": True
        }).sort("due_date", 1)
        return serialize_many(await cursor.to_list(length=None))

    async def for_student(
        self,
        user_id: str,
        batch_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[dict]:
        """
        Published assignments of the student's batches, each augmented
        with submission, progress_status, is_overdue and days_until_due
        """
        batch_ids = await self.accessible_batch_ids(user_id, batch_id)
        if not batch_ids:
            return []

        now = now or utc_now()
        assignments = await self.published_assignments(batch_ids)

        results = []
        for assignment in assignments:
            submission = await self.db.submissions.find_one({
                "user_id": user_id,
                "assignment_id": assignment["assignment_id"],
                "is_active": True
            })

            batch = await self.db.batches.find_one({"batch_id": assignment["batch_id"]})
            if batch:
                batch = serialize_mongo(batch)
                vertical = await self.db.verticals.find_one({"vertical_id": batch["vertical_id"]})
                batch["vertical"] = serialize_mongo(vertical)

            results.append({
                **assignment,
                "batch": batch,
                **calculate_progress(assignment, submission, now),
            })

        return results
