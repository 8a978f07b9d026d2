from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional

from lms.auth.auth_permissions import Identity, get_current_admin, get_current_student
from lms.database import get_db
from lms.submissions.submission_schemas import SubmissionCreate, SubmissionUpdate, SubmissionGrade
from lms.submissions.submission_service import SubmissionService

router = APIRouter(prefix="/submissions", tags=["submissions"])

# ==================== STUDENT ====================

@router.post("", status_code=201)
async def create_submission(
    data: SubmissionCreate,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Submit an assignment

    - 404 if the assignment is missing or not published
    - 403 if not enrolled in its batch
    - 400 after the deadline, on a second submission, or LINK without link_url
    """
    return await SubmissionService(db).create(student.user_id, data.dict())

@router.get("")
async def my_submissions(
    assignment_id: Optional[str] = None,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await SubmissionService(db).get_my_submissions(student.user_id, assignment_id)

@router.get("/{submission_id}")
async def get_submission(
    submission_id: str,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await SubmissionService(db).get_submission(student.user_id, submission_id)

@router.patch("/{submission_id}")
async def update_submission(
    submission_id: str,
    data: SubmissionUpdate,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await SubmissionService(db).update(student.user_id, submission_id, data.dict(exclude_none=True))

@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: str,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await SubmissionService(db).delete(student.user_id, submission_id)

# ==================== ADMIN ====================

@router.patch("/{submission_id}/grade", dependencies=[Depends(get_current_admin)])
async def grade_submission(
    submission_id: str,
    data: SubmissionGrade,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await SubmissionService(db).grade(submission_id, data.score, data.feedback)
